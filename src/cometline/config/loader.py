"""Configuration and theme file loading and saving."""

import os
import re

from pathlib import Path
from typing import Any, Optional

import yaml

from ..types import ConfigError
from .defaults import get_starter_layer
from .schema import EffectiveTheme
from .themes import get_builtin_theme, list_builtin_themes

_THEME_NAME = re.compile(r"^[\w.-]+$")


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.getenv("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "cometline"


def get_config_path() -> Path:
    """Get the full configuration file path."""
    return get_config_dir() / "config.yaml"


def get_themes_dir() -> Path:
    """Get the directory user theme files are loaded from."""
    return get_config_dir() / "themes"


def _read_yaml(path: Path, source: str) -> tuple[dict[str, Any], list[ConfigError]]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        return {}, [ConfigError(source, "", f"failed to load {path}: {e}")]

    if data is None:
        return {}, []
    if not isinstance(data, dict):
        return {}, [ConfigError(source, "", "top level must be a mapping")]
    return data, []


def load_config_layer(
    config_path: Optional[Path] = None,
) -> tuple[dict[str, Any], list[ConfigError]]:
    """Load the raw user configuration layer.

    A missing file is not an error: it is simply an empty layer. Validation of
    individual fields happens later, during the merge.
    """
    path = config_path or get_config_path()
    if not path.exists():
        return {}, []
    return _read_yaml(path, "config")


def load_theme_layer(
    name: str, themes_dir: Optional[Path] = None
) -> tuple[Optional[dict[str, Any]], list[ConfigError]]:
    """Load a theme layer by name.

    A theme file in the themes directory takes precedence over the built-in
    preset of the same name.
    """
    source = f"theme '{name}'"
    if not _THEME_NAME.match(name):
        return None, [ConfigError(source, "theme", "invalid theme name")]

    theme_path = (themes_dir or get_themes_dir()) / f"{name}.yaml"
    if theme_path.is_file():
        layer, errors = _read_yaml(theme_path, source)
        return layer, errors

    builtin = get_builtin_theme(name)
    if builtin is None:
        return None, [ConfigError(source, "theme", "unknown theme")]
    return builtin, []


def _dump_yaml(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def save_config(theme: EffectiveTheme, config_path: Optional[Path] = None) -> Path:
    """Save a full configuration to YAML."""
    path = config_path or get_config_path()
    _dump_yaml(path, theme.model_dump(mode="json"))
    return path


def init_config(force: bool = False) -> list[Path]:
    """Write the default config and the built-in theme files.

    Existing files are left alone unless force is set.

    Returns:
        Paths that were written
    """
    written = []

    config_path = get_config_path()
    if force or not config_path.exists():
        _dump_yaml(config_path, get_starter_layer())
        written.append(config_path)

    themes_dir = get_themes_dir()
    for name in list_builtin_themes():
        theme_path = themes_dir / f"{name}.yaml"
        if force or not theme_path.exists():
            _dump_yaml(theme_path, get_builtin_theme(name) or {})
            written.append(theme_path)

    return written
