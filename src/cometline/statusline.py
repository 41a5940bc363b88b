#!/usr/bin/env python3

import argparse
import functools
import json
import os
import sys

from typing import Any, Optional, cast

from .cache.usage_cache import UsageCacheFile, UsageCacheStore
from .cli.commands import cmd_check, cmd_init, cmd_install, cmd_print, cmd_uninstall
from .config.defaults import (
    DEFAULT_API_BASE_URL,
    DEFAULT_CACHE_DURATION,
    DEFAULT_USAGE_TIMEOUT,
)
from .config.loader import load_config_layer
from .config.resolver import resolve_effective_theme
from .config.schema import USAGE_SEGMENTS, EffectiveTheme
from .renderer import render_status_line
from .types import ConfigError, InvocationContext, RenderContext
from .utils.credentials import account_fingerprint, get_oauth_token
from .utils.debug import debug_log, set_debug_session
from .utils.usage_api import fetch_usage


def parse_input_data() -> dict[str, Any]:
    """Parse JSON input from stdin and return as dict.

    Returns:
        Dictionary with Claude Code JSON payload
    """
    try:
        input_data = sys.stdin.read()
        data = json.loads(input_data)
    except (json.JSONDecodeError, ValueError):
        return {}
    return cast(dict[str, Any], data) if isinstance(data, dict) else {}


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _workspace_dir(data: dict[str, Any]) -> str:
    current_dir = _section(data, "workspace").get("current_dir") or data.get("cwd") or ""
    return current_dir if isinstance(current_dir, str) else ""


def find_transcript_path(data: dict[str, Any]) -> str:
    """Find transcript path, with fallback to construct from session_id.

    Args:
        data: JSON input data

    Returns:
        Path to transcript file, or empty string if not found
    """
    transcript_path = data.get("transcript_path") or ""
    if not isinstance(transcript_path, str):
        transcript_path = ""
    if transcript_path and os.path.isfile(transcript_path):
        return transcript_path

    session_id = data.get("session_id", "")
    workspace = _workspace_dir(data)

    if session_id and workspace:
        # Claude Code stores transcripts in ~/.claude/projects/{encoded_path}/{session_id}.jsonl
        encoded_path = workspace.replace("/", "-").lstrip("-")
        potential_path = os.path.expanduser(
            f"~/.claude/projects/-{encoded_path}/{session_id}.jsonl"
        )
        if os.path.isfile(potential_path):
            return potential_path

    return transcript_path


def extract_session_id(data: dict[str, Any], transcript_path: str) -> str:
    """Extract session ID from data or transcript filename.

    Args:
        data: JSON input data
        transcript_path: Path to transcript file

    Returns:
        Session ID or empty string
    """
    session_id = data.get("session_id", "")
    if session_id and isinstance(session_id, str):
        return session_id

    if transcript_path:
        filename = os.path.basename(transcript_path)
        if filename.endswith(".jsonl"):
            potential_id = filename[:-6]
            if len(potential_id) == 36 and potential_id.count("-") == 4:
                return potential_id

    return ""


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _count(value: Any) -> Optional[int]:
    number = _number(value)
    return int(number) if number is not None else None


def _current_context_tokens(context_window: dict[str, Any]) -> Optional[int]:
    current_usage = context_window.get("current_usage")
    if not isinstance(current_usage, dict):
        return None
    return (
        (_count(current_usage.get("input_tokens")) or 0)
        + (_count(current_usage.get("cache_creation_input_tokens")) or 0)
        + (_count(current_usage.get("cache_read_input_tokens")) or 0)
    )


def build_invocation_context(data: dict[str, Any]) -> InvocationContext:
    """Snapshot the host payload into an immutable invocation context.

    Missing or mistyped fields become empty values; nothing here raises.
    """
    model = _section(data, "model")
    cost = _section(data, "cost")
    context_window = _section(data, "context_window")
    transcript_path = find_transcript_path(data)

    return InvocationContext(
        model_id=str(model.get("id") or ""),
        model_display_name=str(model.get("display_name") or ""),
        workspace_dir=_workspace_dir(data),
        transcript_path=transcript_path,
        session_id=extract_session_id(data, transcript_path),
        output_style=str(_section(data, "output_style").get("name") or ""),
        total_cost_usd=_number(cost.get("total_cost_usd")),
        total_duration_ms=_count(cost.get("total_duration_ms")),
        lines_added=_count(cost.get("total_lines_added")) or 0,
        lines_removed=_count(cost.get("total_lines_removed")) or 0,
        current_context_tokens=_current_context_tokens(context_window),
        context_window_size=_count(context_window.get("context_window_size")) or None,
    )


def usage_settings(theme: EffectiveTheme) -> Optional[tuple[str, float, float]]:
    """Usage API settings from the first enabled usage segment.

    Returns:
        Tuple of (api_base_url, cache_duration, timeout), or None when no
        usage segment is enabled
    """
    for segment in theme.enabled_segments():
        if segment.id not in USAGE_SEGMENTS:
            continue
        options = segment.options
        base_url = options.get("api_base_url")
        cache_duration = _number(options.get("cache_duration"))
        timeout = _number(options.get("timeout"))
        return (
            base_url if isinstance(base_url, str) and base_url else DEFAULT_API_BASE_URL,
            cache_duration if cache_duration is not None and cache_duration >= 0 else DEFAULT_CACHE_DURATION,
            timeout if timeout is not None and timeout > 0 else DEFAULT_USAGE_TIMEOUT,
        )
    return None


def report_config_errors(errors: list[ConfigError]) -> None:
    for error in errors:
        print(f"Warning: {error}", file=sys.stderr)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured argument parser
    """
    from . import __version__

    parser = argparse.ArgumentParser(
        prog="cometline",
        description="cometline - a themeable status line for Claude Code",
        epilog="When no arguments are provided, reads JSON from stdin and outputs the status line.",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("--theme", "-t", help="Theme to apply on top of the config file")
    parser.add_argument(
        "--init",
        action="store_true",
        help="Write the default config and built-in theme files",
    )
    parser.add_argument(
        "--check", action="store_true", help="Validate the configuration and report errors"
    )
    parser.add_argument(
        "--print", action="store_true", help="Print the effective configuration as YAML"
    )
    parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="Overwrite existing files (--init) or settings (install) without asking",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["install", "uninstall"],
        help="Add or remove cometline in Claude Code's settings.json",
    )
    return parser


def render(data: dict[str, Any], cli_theme: Optional[str] = None) -> str:
    """Compute the status line for one host payload."""
    invocation = build_invocation_context(data)
    set_debug_session(invocation.session_id)

    debug_log("=== SESSION START ===")
    debug_log(f"Working Directory: {invocation.workspace_dir}")
    debug_log(f"Model ID: {invocation.model_id}")
    debug_log(f"Transcript Path: {invocation.transcript_path}")

    user_layer, errors = load_config_layer()
    theme, merge_errors = resolve_effective_theme(user_layer, cli_theme)
    errors.extend(merge_errors)
    report_config_errors(errors)
    debug_log(f"Theme: {theme.theme}, mode: {theme.style.mode}")

    context = RenderContext(invocation=invocation)

    settings = usage_settings(theme)
    token = get_oauth_token() if settings else None
    if settings is None or token is None:
        if settings is not None:
            debug_log("No OAuth credentials, usage segments skipped")
        return render_status_line(theme, context)

    base_url, cache_duration, timeout = settings
    with UsageCacheFile() as cache:
        context.usage_store = UsageCacheStore(
            cache, functools.partial(fetch_usage, token, base_url, timeout)
        )
        context.usage_fingerprint = account_fingerprint(token, base_url)
        context.usage_ttl = cache_duration
        output = render_status_line(theme, context)
        debug_log(f"Usage fetches this run: {context.usage_store.fetch_count}")
    return output


def main() -> None:
    """Main entry point: one status line per invocation, always exit 0."""
    parser = create_argument_parser()
    args = parser.parse_args()

    if args.command == "install":
        sys.exit(cmd_install(force=args.force))
    if args.command == "uninstall":
        sys.exit(cmd_uninstall())
    if args.init:
        sys.exit(cmd_init(force=args.force))
    if args.check:
        sys.exit(cmd_check(args.theme))
    if args.print:
        sys.exit(cmd_print(args.theme))

    data = parse_input_data()
    output = render(data, args.theme)
    debug_log("=" * 25)
    print(output, end="")


if __name__ == "__main__":
    main()
