from copy import deepcopy
from typing import Dict, Any, Optional, Union
from typeguard import typechecked
from pathlib import Path
import yaml

from pacgraph.core.console import *
from pacgraph.config.config_utils import recursive_update, get_nested


DEFAULT_CONFIG: Dict[str, Any] = {
    "grid": {
        "wall_char": "#",
    },
    "pathfinding": {
        "stale_policy": "skip",
    },
    "agents": {
        "dead_end_penalty": 999,
    },
    "logging": {
        "level": "WARNING",
        "record_turns": False,
        "path": "",
        "log_name": "pacgraph",
    },
}

STALE_POLICIES = ("skip", "abort")


@typechecked
class ConfigLoader:
    def __init__(self, input_path: Optional[Union[str, Path]] = None):
        """
        Build a configuration from the built-in defaults, optionally merged
        with a YAML file.

        Args:
            input_path: Path to a YAML file overriding the defaults. None keeps the defaults.

        Raises:
            FileNotFoundError: If input_path is given but does not exist.
            ValueError: If the merged configuration holds invalid values.
        """
        self.input_path = Path(input_path) if input_path is not None else None
        self.config_data: Dict[str, Any] = deepcopy(DEFAULT_CONFIG)

        if self.input_path is not None:
            if not self.input_path.exists():
                error(f"Config file '{self.input_path}' does not exist.")
                raise FileNotFoundError(f"Config file '{self.input_path}' not found")
            info(f"Loading config from {self.input_path}")
            self.load_extra_definitions(self.input_path, force=True)

        self.validate()

    @classmethod
    def from_dict(cls, overrides: Dict[str, Any]) -> "ConfigLoader":
        """Build a loader from defaults plus an in-memory override dictionary."""
        loader = cls()
        loader.config_data = recursive_update(loader.config_data, overrides, force=True)
        loader.validate()
        return loader

    def load_extra_definitions(self, extra_file_path: Union[str, Path], force: bool = True) -> None:
        """
        Load another YAML file and merge its content into the current config_data.

        Args:
            extra_file_path: Path to the extra YAML file to load
            force: If True, override existing entries; if False, only add missing/null entries
        """
        extra_file_path = Path(extra_file_path)
        try:
            with open(extra_file_path, "r") as f:
                extra_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            error(f"Failed to load config file '{extra_file_path}': {e}")
            raise

        if not isinstance(extra_data, dict):
            raise ValueError(f"Config file '{extra_file_path}' must contain a mapping at the top level")

        self.config_data = recursive_update(self.config_data, extra_data, force=force)
        success(f"Merged config definitions from {extra_file_path}")

    def validate(self) -> None:
        """Check the values the rest of the package relies on."""
        policy = self.get("pathfinding", "stale_policy")
        if policy not in STALE_POLICIES:
            raise ValueError(f"Invalid pathfinding.stale_policy '{policy}'. Expected one of {STALE_POLICIES}")

        wall_char = self.get("grid", "wall_char")
        if not isinstance(wall_char, str) or len(wall_char) != 1:
            raise ValueError(f"grid.wall_char must be a single character, got {wall_char!r}")

        penalty = self.get("agents", "dead_end_penalty")
        if not isinstance(penalty, int) or penalty < 1:
            raise ValueError(f"agents.dead_end_penalty must be a positive integer, got {penalty!r}")

        parse_log_level(str(self.get("logging", "level")))

    def get(self, *keys, default=None):
        """
        Access nested config data with multiple keys.

        Examples:
            loader.get('pathfinding', 'stale_policy')
            loader.get('agents', 'dead_end_penalty')
        """
        return get_nested(self.config_data, *keys, default=default)

    def apply_log_level(self) -> LogLevel:
        """Set the console log level from logging.level and return it."""
        level = parse_log_level(str(self.get("logging", "level")))
        set_log_level(level)
        return level

    def __str__(self) -> str:
        source = self.input_path.name if self.input_path is not None else "defaults"
        lines = [f"ConfigLoader({source})"]
        for category in sorted(self.config_data.keys()):
            value = self.config_data[category]
            if isinstance(value, dict):
                lines.append(f"  {category}: {{{', '.join(f'{k}={v}' for k, v in value.items())}}}")
            else:
                lines.append(f"  {category}: {value}")
        return "\n".join(lines)
