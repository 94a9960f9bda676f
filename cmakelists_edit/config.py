"""
Configuration — loads settings from .cmakelists-edit.yaml, environment
variables, and built-in defaults (in that priority order: CLI args > env >
YAML > defaults).
"""

import os

import yaml


_DEFAULTS = {
    "sort": False,
    "create_blocks": True,
    "default_section": "PRIVATE",
    "default_separator": "\n    ",
    "default_target": None,
    "section_hints": {},
}

_SECTION_NAMES = ("PRIVATE", "PUBLIC", "INTERFACE")

# Config file search locations
_CONFIG_FILENAMES = [".cmakelists-edit.yaml", ".cmakelists-edit.yml"]

_ENV_PREFIX = "CMAKELISTS_EDIT_"


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    # Search CWD first, then home directory
    search_dirs = [os.getcwd(), os.path.expanduser("~")]
    for d in search_dirs:
        for name in _CONFIG_FILENAMES:
            path = os.path.join(d, name)
            if os.path.isfile(path):
                return path
    return None


def _load_yaml(path: str) -> dict:
    """Load YAML file, returns empty dict on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


class Config:
    """Editor configuration.

    Settings are resolved in priority order:
    1. CLI arguments (handled by caller)
    2. Environment variables (``CMAKELISTS_EDIT_*``)
    3. .cmakelists-edit.yaml config file
    4. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(key: str, default, cast=str):
            env_val = os.getenv(_ENV_PREFIX + key.upper())
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(key)
            if yaml_val is not None:
                return cast(yaml_val)
            return default

        def _get_bool(key: str, default: bool) -> bool:
            env_val = os.getenv(_ENV_PREFIX + key.upper())
            if env_val is not None:
                return env_val.lower() in ("1", "true", "yes", "on")
            yaml_val = yd.get(key)
            if yaml_val is not None:
                return bool(yaml_val)
            return default

        self.SORT = _get_bool("sort", _DEFAULTS["sort"])
        self.CREATE_BLOCKS = _get_bool("create_blocks",
                                       _DEFAULTS["create_blocks"])

        section = _get("default_section", _DEFAULTS["default_section"]).upper()
        if section not in _SECTION_NAMES:
            section = _DEFAULTS["default_section"]
        self.DEFAULT_SECTION = section

        self.DEFAULT_SEPARATOR = _get("default_separator",
                                      _DEFAULTS["default_separator"])
        self.DEFAULT_TARGET: str | None = _get("default_target",
                                               _DEFAULTS["default_target"])

        # File kind → section name, e.g. {"header": "PUBLIC"}
        self.SECTION_HINTS: dict[str, str] = {}
        hints_section = yd.get("section_hints", _DEFAULTS["section_hints"])
        if isinstance(hints_section, dict):
            for kind, name in hints_section.items():
                if str(name).upper() in _SECTION_NAMES:
                    self.SECTION_HINTS[str(kind)] = str(name).upper()

    def section_for_kind(self, kind: str | None) -> str | None:
        """Return the preferred section name for a file kind, if any."""
        if kind is None:
            return None
        return self.SECTION_HINTS.get(kind)

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
