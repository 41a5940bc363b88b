"""Release check for the update segment."""

import http.client
import json
import re
import time
import urllib.error
import urllib.request

from pathlib import Path
from typing import Callable, Optional

from ..cache.storage import atomic_write_json, get_cache_dir, read_json
from .debug import debug_log

PYPI_URL = "https://pypi.org/pypi/cometline/json"
UPDATE_CACHE_FILE_NAME = "update_check.json"
UPDATE_CHECK_TTL = 86400  # 1 day
UPDATE_CHECK_TIMEOUT = 1  # seconds


def get_update_cache_path() -> Path:
    return get_cache_dir() / UPDATE_CACHE_FILE_NAME


def parse_version(version: str) -> Optional[tuple[int, ...]]:
    """Parse a plain dotted release version; pre-releases and junk give None."""
    if not re.fullmatch(r"\d+(\.\d+)*", version.strip()):
        return None
    return tuple(int(part) for part in version.strip().split("."))


def is_newer(latest: str, current: str) -> bool:
    latest_parts = parse_version(latest)
    current_parts = parse_version(current)
    if latest_parts is None or current_parts is None:
        return False
    return latest_parts > current_parts


def fetch_latest_version(timeout: float = UPDATE_CHECK_TIMEOUT) -> Optional[str]:
    """Ask PyPI for the latest released version."""
    try:
        with urllib.request.urlopen(PYPI_URL, timeout=timeout) as response:
            data = json.loads(response.read().decode("utf-8"))
    except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as e:
        debug_log(f"Update check failed: {e}")
        return None
    info = data.get("info") if isinstance(data, dict) else None
    version = info.get("version") if isinstance(info, dict) else None
    return version if isinstance(version, str) else None


def get_latest_version(
    cache_path: Optional[Path] = None,
    fetcher: Callable[[], Optional[str]] = fetch_latest_version,
    clock: Callable[[], float] = time.time,
) -> Optional[str]:
    """Latest released version, checked at most once per day.

    A failed check is recorded too, so an offline machine does not retry on
    every redraw; the previously known version is kept in that case.
    """
    path = cache_path or get_update_cache_path()
    cached = read_json(path) or {}
    checked_at = cached.get("checked_at")
    latest = cached.get("latest_version")
    if not isinstance(latest, str):
        latest = None

    if isinstance(checked_at, (int, float)) and 0 <= clock() - checked_at < UPDATE_CHECK_TTL:
        return latest

    fetched = fetcher()
    try:
        atomic_write_json(path, {"checked_at": clock(), "latest_version": fetched or latest})
    except OSError as e:
        debug_log(f"Update cache write failed: {e}")
    return fetched or latest
