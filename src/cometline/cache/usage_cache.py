"""Persistent, TTL-bound cache for usage snapshots.

The status line is re-executed on every redraw, so the only state that
survives between runs is the cache file. Within one run the store memoizes
its result, which keeps the network call to at most one per run no matter how
many usage segments ask for the snapshot.
"""

import time
import traceback

from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from ..types import Failure, UsageCacheEntry, UsageResult, UsageSnapshot
from ..utils.debug import debug_log
from ..utils.usage_api import parse_usage_payload
from .storage import atomic_write_json, get_cache_dir, read_json

CACHE_FILE_NAME = "usage_cache.json"
CACHE_FORMAT_VERSION = 1
USAGE_RESOURCE = "oauth_usage"


def get_usage_cache_path() -> Path:
    return get_cache_dir() / CACHE_FILE_NAME


class UsageCacheHandle(Protocol):
    """Scoped access to persisted cache entries."""

    def get(self, fingerprint: str, resource: str) -> Optional[UsageCacheEntry]: ...

    def put(self, entry: UsageCacheEntry, resource: str) -> None: ...

    def commit(self) -> None: ...

    def close(self) -> None: ...


def _entry_key(fingerprint: str, resource: str) -> str:
    return f"{resource}:{fingerprint}"


def _encode_entry(entry: UsageCacheEntry) -> dict[str, Any]:
    return {
        "fingerprint": entry.fingerprint,
        "fetched_at": entry.fetched_at,
        "payload": entry.snapshot.raw,
    }


def _decode_entry(data: Any) -> Optional[UsageCacheEntry]:
    if not isinstance(data, dict):
        return None
    fingerprint = data.get("fingerprint")
    fetched_at = data.get("fetched_at")
    if not isinstance(fingerprint, str) or not isinstance(fetched_at, (int, float)):
        return None
    snapshot = parse_usage_payload(data.get("payload"))
    if isinstance(snapshot, Failure):
        return None
    return UsageCacheEntry(snapshot=snapshot, fetched_at=float(fetched_at), fingerprint=fingerprint)


class UsageCacheFile:
    """On-disk cache handle: open, read/write, atomic commit, close.

    Usage:
        with UsageCacheFile(path) as cache:
            store = UsageCacheStore(cache, fetcher)
            ...
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path or get_usage_cache_path()
        self._entries: Optional[dict[str, Any]] = None
        self._dirty = False

    def __enter__(self) -> "UsageCacheFile":
        self.open()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def open(self) -> dict[str, Any]:
        document = read_json(self.path) or {}
        entries = document.get("entries")
        if document.get("version") != CACHE_FORMAT_VERSION or not isinstance(entries, dict):
            entries = {}
        self._entries = entries
        self._dirty = False
        return entries

    def _loaded(self) -> dict[str, Any]:
        if self._entries is None:
            return self.open()
        return self._entries

    def get(self, fingerprint: str, resource: str) -> Optional[UsageCacheEntry]:
        entry = _decode_entry(self._loaded().get(_entry_key(fingerprint, resource)))
        if entry is None or entry.fingerprint != fingerprint:
            return None
        return entry

    def put(self, entry: UsageCacheEntry, resource: str) -> None:
        self._loaded()[_entry_key(entry.fingerprint, resource)] = _encode_entry(entry)
        self._dirty = True

    def commit(self) -> None:
        if not self._dirty:
            return
        document = {"version": CACHE_FORMAT_VERSION, "entries": self._loaded()}
        try:
            atomic_write_json(self.path, document)
        except OSError as e:
            debug_log(f"Usage cache write failed: {e}")
            return
        self._dirty = False

    def close(self) -> None:
        self.commit()
        self._entries = None


class MemoryUsageCache:
    """In-memory cache handle with the same contract as UsageCacheFile."""

    def __init__(self, entries: Optional[list[UsageCacheEntry]] = None):
        self._entries: dict[str, UsageCacheEntry] = {}
        self.commits = 0
        for entry in entries or []:
            self._entries[_entry_key(entry.fingerprint, USAGE_RESOURCE)] = entry

    def get(self, fingerprint: str, resource: str) -> Optional[UsageCacheEntry]:
        entry = self._entries.get(_entry_key(fingerprint, resource))
        if entry is None or entry.fingerprint != fingerprint:
            return None
        return entry

    def put(self, entry: UsageCacheEntry, resource: str) -> None:
        self._entries[_entry_key(entry.fingerprint, resource)] = entry

    def commit(self) -> None:
        self.commits += 1

    def close(self) -> None:
        pass


class UsageCacheStore:
    """Memoizing get-or-fetch over a cache handle.

    Args:
        cache: Cache handle (file-backed or in-memory)
        fetcher: Performs the network call for the active account
        clock: Returns the current time in epoch seconds
    """

    def __init__(
        self,
        cache: UsageCacheHandle,
        fetcher: Callable[[], UsageResult],
        clock: Callable[[], float] = time.time,
    ):
        self._cache = cache
        self._fetcher = fetcher
        self._clock = clock
        self._memo: dict[tuple[str, str], UsageResult] = {}
        self.fetch_count = 0

    def get_or_fetch(self, fingerprint: str, ttl: float) -> UsageResult:
        """Return the snapshot for an account, fetching only when needed.

        A persisted entry for the same fingerprint that is younger than ttl is
        returned as is. Otherwise the fetcher runs; on success the new entry is
        persisted, on failure the last entry for this fingerprint is returned
        regardless of age, else the failure.
        """
        key = (fingerprint, USAGE_RESOURCE)
        if key not in self._memo:
            self._memo[key] = self._resolve(fingerprint, ttl)
        return self._memo[key]

    def _resolve(self, fingerprint: str, ttl: float) -> UsageResult:
        entry = self._cache.get(fingerprint, USAGE_RESOURCE)
        now = self._clock()

        if entry is not None:
            age = now - entry.fetched_at
            if 0 <= age < ttl:
                debug_log(f"Usage cache hit (age {age:.0f}s)")
                return entry.snapshot

        self.fetch_count += 1
        try:
            fetched = self._fetcher()
        except Exception as e:
            debug_log(f"Usage fetcher raised:\n{traceback.format_exc()}")
            fetched = Failure.unavailable(repr(e))

        if isinstance(fetched, UsageSnapshot):
            self._cache.put(
                UsageCacheEntry(snapshot=fetched, fetched_at=now, fingerprint=fingerprint),
                USAGE_RESOURCE,
            )
            self._cache.commit()
            return fetched

        debug_log(f"Usage fetch failed ({fetched.kind.value}: {fetched.detail})")
        if entry is not None:
            return entry.snapshot
        return fetched
