from __future__ import annotations

import pathlib

import pytest

from clonetris.config import DEFAULT_SCORE_TABLE, GameConfig, load_config

ROOT = pathlib.Path(__file__).resolve().parents[1]


def test_defaults_match_reference_tunables() -> None:
    config = GameConfig()
    assert (config.board_width, config.board_height) == (10, 22)
    assert config.gravity_period == 30
    assert config.lock_delay == 100
    assert (config.spawn_x, config.spawn_y) == (2, 0)
    assert config.score_table == (0, 100, 200, 400, 800)
    assert config.score_digits == 10
    assert config.seed is None


def test_shipped_yaml_matches_defaults() -> None:
    config = GameConfig.from_dict(load_config(ROOT / "config" / "game.yaml"))
    assert config == GameConfig()


def test_from_dict_fills_missing_keys_and_ignores_unknown() -> None:
    config = GameConfig.from_dict({"board_height": 20, "lock_delay": 50, "fps": 60})
    assert config.board_height == 20
    assert config.lock_delay == 50
    assert config.board_width == 10
    assert config.score_table == DEFAULT_SCORE_TABLE


def test_from_dict_accepts_none() -> None:
    assert GameConfig.from_dict(None) == GameConfig()


def test_score_table_list_becomes_tuple() -> None:
    config = GameConfig.from_dict({"score_table": [0, 1, 2, 3, 4]})
    assert config.score_table == (0, 1, 2, 3, 4)


@pytest.mark.parametrize(
    "overrides",
    [
        {"board_width": 0},
        {"board_height": -3},
        {"gravity_period": 0},
        {"lock_delay": 0},
        {"score_digits": 0},
        {"score_table": (0, 100, 200)},
        {"score_table": (0, -100, 200, 400, 800)},
    ],
)
def test_invalid_values_raise(overrides: dict) -> None:
    with pytest.raises(ValueError):
        GameConfig(**overrides)


def test_load_config_reads_yaml(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "round.yaml"
    path.write_text("board_width: 8\nseed: 3\n")
    assert load_config(path) == {"board_width": 8, "seed": 3}


def test_load_config_empty_file_is_empty_dict(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == {}


def test_load_config_missing_file(tmp_path: pathlib.Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")
