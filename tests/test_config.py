"""Tests for the JSON config loader."""

from digital_matrix.config import GameConfig, load_config, save_config


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "config.json") == GameConfig()


def test_malformed_json_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{tick_interval: ", encoding="utf-8")
    assert load_config(path) == GameConfig()


def test_unknown_keys_give_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"tick_interval": 0.5, "warp_drive": true}', encoding="utf-8")
    assert load_config(path) == GameConfig()


def test_round_trip(tmp_path):
    path = tmp_path / "nested" / "config.json"
    config = GameConfig(tick_interval=0.25, event_chance=0.5, save_path=str(tmp_path / "s.json"))
    save_config(config, path)
    loaded = load_config(path)
    assert loaded == config
    assert loaded.save_file() == tmp_path / "s.json"
