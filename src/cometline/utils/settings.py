"""Utilities for managing Claude Code settings.json file."""

import os
import shutil
import time

from pathlib import Path
from typing import Any, Optional

from ..cache.storage import atomic_write_json, read_json

__all__ = [
    "STATUSLINE_COMMAND",
    "get_settings_path",
    "read_settings",
    "write_settings",
    "is_cometline_entry",
    "configure_statusline",
    "remove_statusline",
]

STATUSLINE_COMMAND = {
    "type": "command",
    "command": "cometline",
    "padding": 0,
}


def get_settings_path() -> Path:
    """Get path to Claude Code settings file.

    Returns:
        $CLAUDE_CONFIG_DIR/settings.json, else ~/.claude/settings.json
    """
    config_dir = os.getenv("CLAUDE_CONFIG_DIR")
    if config_dir:
        return Path(config_dir) / "settings.json"
    return Path.home() / ".claude" / "settings.json"


def read_settings() -> dict[str, Any]:
    """Read Claude Code settings.

    Returns:
        Dictionary with settings, or empty dict if missing or unreadable
    """
    return read_json(get_settings_path()) or {}


def write_settings(data: dict[str, Any], backup: bool = True) -> Optional[Path]:
    """Write Claude Code settings, replacing the file atomically.

    Args:
        data: Settings dictionary to write
        backup: If True, create timestamped backup before writing

    Returns:
        Path to backup file if created, None otherwise

    Raises:
        OSError: If file operations fail
    """
    settings_path = get_settings_path()

    backup_path = None
    if backup and settings_path.exists():
        timestamp = int(time.time())
        backup_path = settings_path.parent / f"settings.json.backup.{timestamp}"
        shutil.copy2(settings_path, backup_path)

    atomic_write_json(settings_path, data, indent=2)
    return backup_path


def is_cometline_entry(entry: Any) -> bool:
    """Whether a statusLine entry runs cometline."""
    if not isinstance(entry, dict):
        return False
    command = entry.get("command")
    return isinstance(command, str) and command.split()[:1] == ["cometline"]


def configure_statusline() -> tuple[bool, str]:
    """Point Claude Code's statusLine at cometline.

    Other keys in settings.json are preserved. A backup is only taken when an
    existing statusLine entry is replaced.

    Returns:
        Tuple of (success: bool, message: str)
    """
    settings = read_settings()
    existing = settings.get("statusLine")

    if existing == STATUSLINE_COMMAND:
        return True, "cometline is already configured"

    settings["statusLine"] = dict(STATUSLINE_COMMAND)

    try:
        backup_path = write_settings(settings, backup=existing is not None)
    except OSError as e:
        return False, f"Failed to write settings: {e}"

    if backup_path:
        return True, f"Existing statusLine configuration backed up to {backup_path}"

    return True, "Claude Code configured successfully"


def remove_statusline() -> tuple[bool, str]:
    """Remove cometline's statusLine entry from Claude Code settings.

    An entry that runs some other command is left in place.

    Returns:
        Tuple of (success: bool, message: str)
    """
    settings = read_settings()

    if "statusLine" not in settings:
        return True, "No statusLine configuration found"

    if not is_cometline_entry(settings["statusLine"]):
        return False, "statusLine is configured for a different command; left unchanged"

    del settings["statusLine"]

    try:
        write_settings(settings, backup=True)
    except OSError as e:
        return False, f"Failed to write settings: {e}"

    return True, "statusLine configuration removed"
