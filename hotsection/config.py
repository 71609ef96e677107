"""Configuration discovery and loading."""
import copy
import os
import sys
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

CONFIG_FILENAME = "config.toml"
APP_DIRNAME = "hotsection"

DEFAULT_CONFIG: Dict[str, Any] = {
    "watch": {
        "path": "assets/hotloadedfile.txt",
        "delimiter": ":",
        "parser": "uint",
    },
    "poll": {
        "interval_s": 0.5,
    },
}


def get_platform_config_dir() -> Path:
    """Per-user config directory for the current platform."""
    if os.name == "nt":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / APP_DIRNAME
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIRNAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIRNAME
    return Path.home() / ".config" / APP_DIRNAME


def _config_dirs() -> List[Path]:
    return [Path.cwd(), get_platform_config_dir()]


def _find_config_path() -> Optional[Path]:
    for directory in _config_dirs():
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def get_config_path() -> Optional[Path]:
    """Return the config file that load_config() would read, if any."""
    return _find_config_path()


def _merge_configs(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_configs(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    path: Optional[Path] = None,
    quiet: bool = False,
    raise_on_error: bool = False,
) -> Dict[str, Any]:
    """Load config.toml merged over the defaults.

    Args:
        path: Explicit config file; searched for when omitted
        quiet: Suppress status output
        raise_on_error: Propagate read/parse errors instead of using defaults

    Returns:
        Complete configuration dict
    """
    config_path = Path(path) if path is not None else _find_config_path()
    if config_path is None:
        if not quiet:
            print(f"[INFO] No {CONFIG_FILENAME} found, using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_path, "rb") as f:
            user_config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if raise_on_error:
            raise
        if not quiet:
            print(f"[WARN] Failed to read {config_path}: {e}")
            print("[INFO] Using default configuration")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not quiet:
        print(f"[OK] Loaded config from {config_path}")
    return _merge_configs(DEFAULT_CONFIG, user_config)
