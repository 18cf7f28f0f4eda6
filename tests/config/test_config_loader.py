"""Tests for pacgraph.config."""

import pytest

from pacgraph.config.config_loader import DEFAULT_CONFIG, ConfigLoader
from pacgraph.config.config_utils import get_nested, recursive_update
from pacgraph.core.console import LogLevel, get_log_level


class TestDefaults:
    def test_defaults_without_file(self) -> None:
        loader = ConfigLoader()
        assert loader.get("pathfinding", "stale_policy") == "skip"
        assert loader.get("agents", "dead_end_penalty") == 999
        assert loader.get("grid", "wall_char") == "#"

    def test_defaults_are_not_shared(self) -> None:
        loader = ConfigLoader()
        loader.config_data["agents"]["dead_end_penalty"] = 5
        assert DEFAULT_CONFIG["agents"]["dead_end_penalty"] == 999

    def test_missing_key_returns_default(self) -> None:
        assert ConfigLoader().get("nope", "deeper", default=3) == 3


class TestYamlFiles:
    def test_file_overrides_defaults(self, tmp_path) -> None:
        path = tmp_path / "game.yml"
        path.write_text("pathfinding:\n  stale_policy: abort\nlogging:\n  level: debug\n")
        loader = ConfigLoader(path)
        assert loader.get("pathfinding", "stale_policy") == "abort"
        assert loader.get("agents", "dead_end_penalty") == 999

    def test_missing_file_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            ConfigLoader(tmp_path / "absent.yml")

    def test_invalid_policy_in_file(self, tmp_path) -> None:
        path = tmp_path / "game.yml"
        path.write_text("pathfinding:\n  stale_policy: sometimes\n")
        with pytest.raises(ValueError):
            ConfigLoader(path)

    def test_non_mapping_file(self, tmp_path) -> None:
        path = tmp_path / "game.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            ConfigLoader(path)

    def test_extra_definitions_without_force(self, tmp_path) -> None:
        path = tmp_path / "extra.yml"
        path.write_text("agents:\n  dead_end_penalty: 10\n  speed: 2\n")
        loader = ConfigLoader()
        loader.load_extra_definitions(path, force=False)
        assert loader.get("agents", "dead_end_penalty") == 999
        assert loader.get("agents", "speed") == 2


class TestValidation:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"grid": {"wall_char": "##"}},
            {"agents": {"dead_end_penalty": 0}},
            {"logging": {"level": "loud"}},
        ],
    )
    def test_invalid_values(self, overrides: dict) -> None:
        with pytest.raises(ValueError):
            ConfigLoader.from_dict(overrides)

    def test_apply_log_level(self) -> None:
        loader = ConfigLoader.from_dict({"logging": {"level": "debug"}})
        assert loader.apply_log_level() == LogLevel.DEBUG
        assert get_log_level() == LogLevel.DEBUG


class TestConfigUtils:
    def test_recursive_update_force(self) -> None:
        merged = recursive_update({"a": {"b": 1, "c": 2}}, {"a": {"b": 3}}, force=True)
        assert merged == {"a": {"b": 3, "c": 2}}

    def test_recursive_update_fills_none_only(self) -> None:
        merged = recursive_update({"a": None, "b": 1}, {"a": 5, "b": 2, "c": 3}, force=False)
        assert merged == {"a": 5, "b": 1, "c": 3}

    def test_get_nested(self) -> None:
        assert get_nested({"a": {"b": {"c": 1}}}, "a", "b", "c") == 1
        assert get_nested({"a": 1}, "a", "b", default="x") == "x"
