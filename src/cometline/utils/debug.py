"""Debug logging utilities."""

import os
import sys
import time

DEBUG_ENV = "COMETLINE_DEBUG"

_session_id = ""


def set_debug_session(session_id: str) -> None:
    """Route subsequent debug messages to this session's log file."""
    global _session_id
    _session_id = session_id


def get_logs_dir() -> str:
    cache_home = os.getenv("XDG_CACHE_HOME", os.path.expanduser("~/.cache"))
    return os.path.join(cache_home, "cometline", "logs")


def debug_log(message: str, session_id: str = "") -> None:
    """Log debug messages to per-session debug log files if debug mode is enabled.

    Args:
        message: Debug message to log
        session_id: Optional session identifier; defaults to the current session
    """
    if not os.getenv(DEBUG_ENV):
        return

    effective_session_id = session_id or _session_id or "unknown"

    logs_dir = get_logs_dir()
    log_file = os.path.join(logs_dir, f"debug_{effective_session_id}.log")
    timestamp = time.strftime("%Y-%m-%d %H:%M:%S")

    session_prefix = f"[{effective_session_id}] " if effective_session_id != "unknown" else ""
    log_message = f"[{timestamp}] {session_prefix}{message}\n"

    try:
        os.makedirs(logs_dir, exist_ok=True)
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(log_message)
    except OSError:
        print(
            f"DEBUG (couldn't write to {log_file}): {session_prefix}{message}",
            file=sys.stderr,
        )
