"""CLI commands for cometline."""

from .commands import cmd_check, cmd_init, cmd_install, cmd_print, cmd_uninstall

__all__ = ["cmd_install", "cmd_uninstall", "cmd_init", "cmd_check", "cmd_print"]
