"""
Entry point for the Clonetris rules engine.

Runs a headless round and prints the final frame. Input is scripted: each
character of --commands is applied on its own tick, then the round keeps
ticking with no input until --ticks frames have passed or the game ends.

Command characters:
  h: move left      l: move right     j: soft drop
  x: rotate CW      z: rotate CCW     c: hold
  (space): hard drop                  .: no input this tick

Usage:
    python main.py
    python main.py --config config/game.yaml --seed 7 --ticks 2000
    python main.py --seed 1 --commands "hhx j  ..lll "
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from clonetris.config import GameConfig, load_config
from clonetris.frame import render_frame
from clonetris.game.tetris import Command, TetrisGame, TickOutcome

logger = logging.getLogger(__name__)

KEY_MAP: dict[str, Command] = {
    "h": Command.MOVE_LEFT,
    "l": Command.MOVE_RIGHT,
    "j": Command.SOFT_DROP,
    "x": Command.ROTATE_CW,
    "z": Command.ROTATE_CCW,
    "c": Command.HOLD,
    " ": Command.HARD_DROP,
}
NO_INPUT = "."


def parse_commands(script: str) -> list[Command | None]:
    """Translate a command script into one entry per tick.

    Raises:
        ValueError: On a character that is not a known command.
    """
    commands: list[Command | None] = []
    for ch in script:
        if ch == NO_INPUT:
            commands.append(None)
        elif ch in KEY_MAP:
            commands.append(KEY_MAP[ch])
        else:
            raise ValueError(f"Unknown command character: {ch!r}")
    return commands


def run_round(game: TetrisGame, commands: list[Command | None], ticks: int) -> TickOutcome:
    """Drive ``game`` for up to ``ticks`` frames (at least one per command)."""
    outcome = TickOutcome.GAME_OVER if game.game_over else TickOutcome.RUNNING
    frames = 0
    while outcome is TickOutcome.RUNNING and frames < max(ticks, len(commands)):
        command = commands[frames] if frames < len(commands) else None
        outcome = game.step(command) if command is not None else game.step()
        frames += 1
    logger.info("Stopped after %d ticks: score %d, lines %d", frames, game.score, game.lines)
    return outcome


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Namespace with config, seed, ticks, commands and log_level attributes.
    """
    parser = argparse.ArgumentParser(
        description="Clonetris: run a headless round of the rules engine.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML configuration file (default: built-in tunables).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the piece randomizer (overrides the config file).",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=600,
        help="Number of frames to run (default: 600).",
    )
    parser.add_argument(
        "--commands",
        type=str,
        default="",
        help="Scripted input, one character per tick (see module docs).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Parse args, load config, run the round and print the final frame."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        raw = load_config(args.config) if args.config else {}
        config = GameConfig.from_dict(raw)
        if args.seed is not None:
            config = dataclasses.replace(config, seed=args.seed)
        commands = parse_commands(args.commands)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    game = TetrisGame(config)
    run_round(game, commands, args.ticks)
    print(render_frame(game.get_state()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
