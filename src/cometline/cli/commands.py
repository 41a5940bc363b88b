"""CLI commands for installation and configuration maintenance."""

import json
import sys

from typing import Optional

import yaml

from ..config.loader import get_config_path, init_config, load_config_layer
from ..config.resolver import resolve_effective_theme
from ..utils.settings import (
    STATUSLINE_COMMAND,
    configure_statusline,
    get_settings_path,
    read_settings,
    remove_statusline,
)


def cmd_install(force: bool = False) -> int:
    """Configure Claude Code to use cometline.

    Args:
        force: If True, skip confirmation prompt for existing config

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    settings_path = get_settings_path()
    settings = read_settings()

    print(f"Configuring Claude Code at {settings_path}...")

    if "statusLine" in settings and not force:
        existing = settings["statusLine"]

        print("\nExisting statusLine configuration detected:\n")
        print("  Current:")
        for line in json.dumps(existing, indent=2).split("\n"):
            print(f"    {line}")
        print("\n  New:")
        for line in json.dumps(STATUSLINE_COMMAND, indent=2).split("\n"):
            print(f"    {line}")
        print("\nA backup will be created before making changes.")

        try:
            response = input("Proceed? [y/N]: ").strip().lower()
            if response not in ("y", "yes"):
                print("Aborted.")
                return 1
        except (EOFError, KeyboardInterrupt):
            print("\nAborted.")
            return 1

    success, message = configure_statusline()

    if success:
        print(f"✓ {message}")
        print("\nNext steps:")
        print("1. Restart Claude Code or start a new session")
        print("2. Run 'cometline --init' to write an editable config")
        print(f"3. Customize via {get_config_path()}")
        return 0

    print(f"✗ {message}", file=sys.stderr)
    return 1


def cmd_uninstall() -> int:
    """Remove cometline from Claude Code configuration.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    settings_path = get_settings_path()

    print(f"Removing statusLine configuration from {settings_path}...")

    success, message = remove_statusline()

    if success:
        print(f"✓ {message}")
        print("\nNote: This only removes the statusLine configuration.")
        print("To uninstall the package, run: uv tool uninstall cometline")
        print("                          or: pipx uninstall cometline")
        return 0

    print(f"✗ {message}", file=sys.stderr)
    return 1


def cmd_init(force: bool = False) -> int:
    """Write the default config and the built-in theme files."""
    try:
        written = init_config(force=force)
    except OSError as e:
        print(f"✗ Failed to write configuration: {e}", file=sys.stderr)
        return 1

    if not written:
        print(f"Configuration already exists at {get_config_path()} (use --force to overwrite)")
        return 0

    for path in written:
        print(f"✓ Wrote {path}")
    return 0


def cmd_check(cli_theme: Optional[str] = None) -> int:
    """Validate the configuration and report every malformed field.

    Returns:
        Exit code (0 if valid, 1 if errors were found)
    """
    config_path = get_config_path()
    print(f"Checking {config_path}")

    user_layer, errors = load_config_layer()
    _, merge_errors = resolve_effective_theme(user_layer, cli_theme)
    errors.extend(merge_errors)

    if not errors:
        print("✓ Configuration is valid")
        return 0

    for error in errors:
        print(f"✗ {error}")
    print(f"\n⚠ Found {len(errors)} issue(s); affected fields fall back to defaults")
    return 1


def cmd_print(cli_theme: Optional[str] = None) -> int:
    """Print the effective configuration as YAML."""
    user_layer, errors = load_config_layer()
    theme, merge_errors = resolve_effective_theme(user_layer, cli_theme)
    for error in errors + merge_errors:
        print(f"Warning: {error}", file=sys.stderr)

    print(
        yaml.dump(
            theme.model_dump(mode="json"),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        ),
        end="",
    )
    return 0
