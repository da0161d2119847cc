"""
Round configuration: board size, timer periods, spawn point and scoring.

Values are plain YAML, e.g. ``config/game.yaml``::

    board_width: 10
    board_height: 22
    gravity_period: 30
    lock_delay: 100
"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import yaml

DEFAULT_SCORE_TABLE: tuple[int, ...] = (0, 100, 200, 400, 800)


@dataclass(frozen=True)
class GameConfig:
    """Fixed tunables for one round.

    Attributes:
        board_width: Number of board columns.
        board_height: Number of board rows.
        gravity_period: Ticks between automatic one-row drops.
        lock_delay: Ticks a resting piece may still be moved before it locks.
        spawn_x: Column offset of a new piece's 5x5 mask.
        spawn_y: Row offset of a new piece's 5x5 mask.
        score_table: Points per placement, indexed by lines cleared (0-4).
        score_digits: Zero-padded width of the displayed score.
        seed: Seed for the piece randomizer, or None for a random round.
    """

    board_width: int = 10
    board_height: int = 22
    gravity_period: int = 30
    lock_delay: int = 100
    spawn_x: int = 2
    spawn_y: int = 0
    score_table: tuple[int, ...] = field(default=DEFAULT_SCORE_TABLE)
    score_digits: int = 10
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "score_table", tuple(int(s) for s in self.score_table))
        for name in ("board_width", "board_height", "gravity_period", "lock_delay", "score_digits"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if len(self.score_table) < len(DEFAULT_SCORE_TABLE):
            raise ValueError(
                f"score_table needs an entry for 0-4 cleared lines, got {list(self.score_table)}"
            )
        if any(s < 0 for s in self.score_table):
            raise ValueError(f"score_table entries must be non-negative, got {list(self.score_table)}")

    @classmethod
    def from_dict(cls, config: Mapping[str, Any] | None) -> GameConfig:
        """Build a config from a loaded mapping; missing keys use defaults."""
        config = config or {}
        defaults = cls()
        return cls(
            board_width=config.get("board_width", defaults.board_width),
            board_height=config.get("board_height", defaults.board_height),
            gravity_period=config.get("gravity_period", defaults.gravity_period),
            lock_delay=config.get("lock_delay", defaults.lock_delay),
            spawn_x=config.get("spawn_x", defaults.spawn_x),
            spawn_y=config.get("spawn_y", defaults.spawn_y),
            score_table=config.get("score_table", defaults.score_table),
            score_digits=config.get("score_digits", defaults.score_digits),
            seed=config.get("seed", defaults.seed),
        )


def load_config(config_path: str | pathlib.Path) -> dict:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Dict of configuration key-value pairs (empty for an empty file).

    Raises:
        FileNotFoundError: If the config file does not exist.
    """
    config_path = pathlib.Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}
