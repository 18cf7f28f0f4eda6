from copy import deepcopy
from typing import Any, Dict
from typeguard import typechecked

from pacgraph.core.console import *


@typechecked
def recursive_update(default: Dict, override: Dict, force: bool) -> Dict:
    """
    Recursively updates the 'default' dictionary with the 'override' dictionary.

    For each key in the override dictionary:
      - If force is True, the override value always wins.
      - If force is False, the override value is only used when the key is
        missing from default or its current value is None.

    If both values are dictionaries, the function updates them recursively.

    Parameters:
    -----------
    default : Dict
        The original configuration dictionary.
    override : Dict
        The extra (override) dictionary.
    force : bool
        Whether to force overriding keys that already have a value.

    Returns:
    --------
    Dict
        The updated dictionary.
    """
    for key, value in override.items():
        if key in default and isinstance(default[key], dict) and isinstance(value, dict):
            default[key] = recursive_update(default[key], value, force)
        elif key not in default:
            debug(f"Key '{key}' not found in original config. Adding with value: {value}")
            default[key] = deepcopy(value)
        elif force or default[key] is None:
            if default[key] != value:
                debug(f"Overriding key '{key}': {default[key]} -> {value}")
            default[key] = deepcopy(value)
    return default


@typechecked
def get_nested(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Traverse nested dictionaries, returning default when any key is missing."""
    current: Any = data
    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return default
    return current
