# linepick/utils/utils.py
"""
linepick.utils.utils.py
=======================

Core utility functions for the linepick line picker.

Key functionalities include:
- Robust Configuration Loading: an embedded default configuration is
  recursively merged with user settings read from a TOML file
  (`$LINEPICK_CONFIG` or `~/.config/linepick/config.toml`).
- Colour Resolution: turns colour names, integer indices and `#rrggbb`
  strings from the config into curses colour numbers.
- Helper Utilities: deep-merging dictionaries and hex-to-xterm conversion.

The picker is always runnable: a missing or broken user config file only
costs the user their overrides, never the session.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml

logger = logging.getLogger("linepick")

# --- Constants ---
WHITE_FG_IDX = 255
CONFIG_ENV_VAR = "LINEPICK_CONFIG"

# curses colour numbers; kept here so resolving does not require initscr()
NAMED_COLORS: Dict[str, int] = {
    "default": -1,
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
}

# The ultimate fallback; the picker can ALWAYS start with this.
DEFAULT_CONFIG: Dict[str, Any] = {
    "picker": {
        "initial_mode": "literal",
        "prompt": "QUERY> ",
        "pattern_prompt": "REGEX> ",
        "show_counter": True,
        "tab_size": 4,
    },
    "colors": {
        "text": "white", "prompt": "white", "query": "white", "counter": "#808080",
        "selected_fg": "red", "selected_bg": "cyan",
    },
    "keybindings": {
        "cancel": ["esc"],
        "confirm": ["enter"],
        "backspace": ["backspace"],
        "move_up": ["up", "ctrl+p"],
        "move_down": ["down", "ctrl+n"],
        "toggle_mode": ["ctrl+r"],
    },
    "logging": {
        "file_level": "INFO",
        "log_file": "~/.cache/linepick/linepick.log",
        "log_to_console": False,
        "console_level": "WARNING",
        "separate_error_log": False,
    },
}


# --- Helper Functions ---

def default_config_path() -> Path:
    """Location of the user config file, honouring `$LINEPICK_CONFIG`."""
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "linepick" / "config.toml"


# value types accepted per section, beyond the type of the default value
EXTRA_VALUE_TYPES: Dict[str, tuple] = {
    "colors": (str, int),
    "keybindings": (list, str, int),
}


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Puts back the default for every known setting whose value has the wrong type.

    Sections that are not tables, and values whose type does not match the
    default, are logged at ERROR. Unknown keys are left alone.
    """
    for section, defaults in DEFAULT_CONFIG.items():
        values = config.get(section)
        if not isinstance(values, dict):
            logger.error(f"Config section [{section}] must be a table, got {values!r}. Using defaults.")
            config[section] = copy.deepcopy(defaults)
            continue
        for key, default in defaults.items():
            if key not in values:
                continue
            value = values[key]
            accepted = EXTRA_VALUE_TYPES.get(section, (type(default),))
            # bool is an int subclass; only accept it where the default is one
            if isinstance(value, bool) and not isinstance(default, bool):
                valid = False
            else:
                valid = isinstance(value, accepted)
            if not valid:
                logger.error(
                    f"Config value {section}.{key} = {value!r} has the wrong type "
                    f"(expected {type(default).__name__}). Using {default!r}."
                )
                values[key] = copy.deepcopy(default)
    return config


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges the user's TOML file over them.

    An unreadable or malformed user file is logged and ignored; values of
    the wrong type fall back to their defaults (see `validate_config`).
    """
    final_config = copy.deepcopy(DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    user_config_path = Path(path).expanduser() if path else default_config_path()
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except (OSError, toml.TomlDecodeError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")
    elif path:
        logger.warning(f"Config file '{user_config_path}' does not exist. Using defaults.")

    return validate_config(final_config)


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hexadecimal color string to the nearest xterm-256 color index.
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8: return 16
        if r > 248: return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )


def resolve_color(spec: Union[str, int, None], max_colors: int, fallback: int = 7) -> int:
    """
    Maps a colour spec from the config to a curses colour number.

    Accepts curses colour names (plus "default" for the terminal colour),
    integer indices and `#rrggbb` strings. Hex values need a 256-colour
    terminal; on smaller palettes, and for anything unrecognised or out of
    range, `fallback` is returned.
    """
    if isinstance(spec, bool) or spec is None:
        return fallback
    if isinstance(spec, int):
        return spec if -1 <= spec < max_colors else fallback

    name = str(spec).strip().lower()
    if name in NAMED_COLORS:
        return NAMED_COLORS[name]
    if name.startswith("#"):
        if max_colors >= 256:
            return hex_to_xterm(name)
        logger.debug(f"Hex colour {name!r} needs 256 colours, terminal has {max_colors}.")
        return fallback
    if name.isdigit():
        return resolve_color(int(name), max_colors, fallback)

    logger.warning(f"Unknown colour {spec!r} in config, using {fallback}.")
    return fallback
