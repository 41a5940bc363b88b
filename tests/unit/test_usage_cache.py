"""Unit tests for the usage cache store and cache handles."""

import io
import json

from functools import partial

import pytest

from cometline.cache.usage_cache import (
    USAGE_RESOURCE,
    MemoryUsageCache,
    UsageCacheFile,
    UsageCacheStore,
)
from cometline.config.resolver import resolve_effective_theme
from cometline.config.schema import SegmentId
from cometline.renderer import render_status_line
from cometline.types import Failure, InvocationContext, RenderContext, UsageSnapshot
from cometline.utils.usage_api import fetch_usage


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class CountingFetcher:
    """Fake fetcher that records how often it was called."""

    def __init__(self, result):
        self.result = result
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.result


@pytest.mark.unit
class TestUsageCacheStore:
    """Get-or-fetch behavior of the store."""

    def test_fresh_entry_is_returned_without_fetching(self, cache_entry):
        entry = cache_entry(fetched_at=1000.0, five_hour=42.0)
        fetcher = CountingFetcher(Failure.timeout())
        store = UsageCacheStore(MemoryUsageCache([entry]), fetcher, clock=lambda: 1100.0)

        result = store.get_or_fetch("acct-a", ttl=180)

        assert isinstance(result, UsageSnapshot)
        assert result.five_hour.utilization == 42.0
        assert fetcher.calls == 0
        assert store.fetch_count == 0

    def test_expired_entry_is_refetched_and_persisted(self, cache_entry, usage_snapshot):
        cache = MemoryUsageCache([cache_entry(fetched_at=1000.0, five_hour=10.0)])
        fetcher = CountingFetcher(usage_snapshot(five_hour=55.0))
        store = UsageCacheStore(cache, fetcher, clock=lambda: 1180.0)

        result = store.get_or_fetch("acct-a", ttl=180)

        assert result.five_hour.utilization == 55.0
        assert fetcher.calls == 1
        stored = cache.get("acct-a", USAGE_RESOURCE)
        assert stored.fetched_at == 1180.0
        assert stored.snapshot.five_hour.utilization == 55.0
        assert cache.commits == 1

    def test_memoizes_within_one_run(self, usage_snapshot):
        fetcher = CountingFetcher(usage_snapshot())
        store = UsageCacheStore(MemoryUsageCache(), fetcher, clock=lambda: 5000.0)

        first = store.get_or_fetch("acct-a", ttl=180)
        second = store.get_or_fetch("acct-a", ttl=180)

        assert first is second
        assert fetcher.calls == 1
        assert store.fetch_count == 1

    def test_failure_falls_back_to_stale_entry(self, cache_entry):
        """An entry ten minutes old with a five-minute ttl still beats a timeout."""
        now = 10_000.0
        cache = MemoryUsageCache([cache_entry(fetched_at=now - 600, five_hour=33.0)])
        fetcher = CountingFetcher(Failure.timeout("timed out"))
        store = UsageCacheStore(cache, fetcher, clock=lambda: now)

        result = store.get_or_fetch("acct-a", ttl=300)

        assert isinstance(result, UsageSnapshot)
        assert result.five_hour.utilization == 33.0
        assert fetcher.calls == 1
        assert cache.commits == 0

    def test_failure_without_entry_is_returned(self):
        fetcher = CountingFetcher(Failure.unavailable("HTTP 401"))
        store = UsageCacheStore(MemoryUsageCache(), fetcher, clock=lambda: 0.0)

        result = store.get_or_fetch("acct-a", ttl=180)

        assert isinstance(result, Failure)
        assert result.kind.value == "unavailable"

    def test_other_accounts_entry_is_never_used(self, cache_entry):
        cache = MemoryUsageCache([cache_entry(fingerprint="acct-a", fetched_at=1000.0)])
        fetcher = CountingFetcher(Failure.timeout())
        store = UsageCacheStore(cache, fetcher, clock=lambda: 1001.0)

        result = store.get_or_fetch("acct-b", ttl=180)

        assert isinstance(result, Failure)
        assert fetcher.calls == 1

    def test_entry_from_the_future_is_refetched(self, cache_entry, usage_snapshot):
        cache = MemoryUsageCache([cache_entry(fetched_at=2000.0)])
        fetcher = CountingFetcher(usage_snapshot())
        store = UsageCacheStore(cache, fetcher, clock=lambda: 1000.0)

        store.get_or_fetch("acct-a", ttl=180)

        assert fetcher.calls == 1

    def test_zero_ttl_always_fetches(self, cache_entry, usage_snapshot):
        cache = MemoryUsageCache([cache_entry(fetched_at=1000.0)])
        fetcher = CountingFetcher(usage_snapshot())
        store = UsageCacheStore(cache, fetcher, clock=lambda: 1000.0)

        store.get_or_fetch("acct-a", ttl=0)

        assert fetcher.calls == 1


@pytest.mark.unit
class TestSingleFetchPerRun:
    """All usage segments share one fetch."""

    def test_three_usage_segments_fetch_once(self, usage_snapshot):
        theme, errors = resolve_effective_theme(
            {
                "segments": [
                    {"id": "usage", "enabled": True},
                    {"id": "usage_5hour", "enabled": True},
                    {"id": "usage_7day", "enabled": True},
                ]
            }
        )
        assert errors == []

        fetcher = CountingFetcher(usage_snapshot(five_hour=20.0, seven_day=40.0))
        store = UsageCacheStore(MemoryUsageCache(), fetcher, clock=lambda: 0.0)
        context = RenderContext(
            invocation=InvocationContext(),
            usage_store=store,
            usage_fingerprint="acct-a",
        )

        output = render_status_line(theme, context)

        assert fetcher.calls == 1
        assert store.fetch_count == 1
        assert output.count("20%") == 2
        assert "40%" in output
        assert {s.id for s in theme.enabled_segments()} >= {
            SegmentId.USAGE,
            SegmentId.USAGE_5HOUR,
            SegmentId.USAGE_7DAY,
        }


@pytest.mark.unit
class TestUsageCacheFile:
    """On-disk handle."""

    def test_commit_writes_and_reopen_reads(self, tmp_path, cache_entry):
        path = tmp_path / "cache" / "usage_cache.json"
        entry = cache_entry(fingerprint="acct-a", fetched_at=1234.5, five_hour=61.0)

        with UsageCacheFile(path) as cache:
            cache.put(entry, USAGE_RESOURCE)

        assert path.exists()
        assert list(path.parent.glob("*.tmp")) == []

        with UsageCacheFile(path) as cache:
            loaded = cache.get("acct-a", USAGE_RESOURCE)

        assert loaded.fetched_at == 1234.5
        assert loaded.snapshot.five_hour.utilization == 61.0
        assert loaded.snapshot.five_hour.resets_at == entry.snapshot.five_hour.resets_at

    def test_loads_on_first_use_without_context_manager(self, tmp_path, cache_entry):
        path = tmp_path / "usage_cache.json"
        with UsageCacheFile(path) as cache:
            cache.put(cache_entry(fingerprint="acct-a", five_hour=33.0), USAGE_RESOURCE)

        cache = UsageCacheFile(path)
        loaded = cache.get("acct-a", USAGE_RESOURCE)
        cache.close()

        assert loaded.snapshot.five_hour.utilization == 33.0

    def test_token_is_not_persisted(self, tmp_path, cache_entry):
        path = tmp_path / "usage_cache.json"
        with UsageCacheFile(path) as cache:
            cache.put(cache_entry(fingerprint="abc123"), USAGE_RESOURCE)

        document = json.loads(path.read_text())
        assert document["version"] == 1
        assert list(document["entries"]) == [f"{USAGE_RESOURCE}:abc123"]

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "usage_cache.json"
        path.write_text("{not json")

        with UsageCacheFile(path) as cache:
            assert cache.get("acct-a", USAGE_RESOURCE) is None

    def test_malformed_entry_is_ignored(self, tmp_path):
        path = tmp_path / "usage_cache.json"
        path.write_text(
            json.dumps(
                {
                    "version": 1,
                    "entries": {
                        f"{USAGE_RESOURCE}:acct-a": {
                            "fingerprint": "acct-a",
                            "fetched_at": "yesterday",
                            "payload": {},
                        }
                    },
                }
            )
        )

        with UsageCacheFile(path) as cache:
            assert cache.get("acct-a", USAGE_RESOURCE) is None

    def test_nothing_written_without_changes(self, tmp_path):
        path = tmp_path / "usage_cache.json"

        with UsageCacheFile(path):
            pass

        assert not path.exists()


@pytest.mark.unit
class TestFetcherErrors:
    """A fetch that blows up still counts as the run's one fetch."""

    def test_raising_fetcher_is_memoized_and_uses_stale_entry(self, cache_entry):
        cache = MemoryUsageCache([cache_entry(fetched_at=0.0, five_hour=12.0)])
        calls = []

        def fetcher():
            calls.append(1)
            raise RuntimeError("socket closed")

        store = UsageCacheStore(cache, fetcher, clock=lambda: 10_000.0)

        results = [store.get_or_fetch("acct-a", ttl=300) for _ in range(3)]

        assert len(calls) == 1
        assert store.fetch_count == 1
        assert all(r.five_hour.utilization == 12.0 for r in results)

    def test_undecodable_body_fetches_once(self, monkeypatch, cache_entry):
        requests = []

        def fake_urlopen(request, timeout):
            requests.append(request.full_url)
            return FakeResponse(b"\xff\xfe{}")

        monkeypatch.setattr("cometline.utils.usage_api.urllib.request.urlopen", fake_urlopen)
        cache = MemoryUsageCache([cache_entry(fetched_at=0.0, five_hour=12.0)])
        store = UsageCacheStore(
            cache, partial(fetch_usage, "tok", "https://api.example.com", 2), clock=lambda: 10_000.0
        )

        results = [store.get_or_fetch("acct-a", ttl=300) for _ in range(3)]

        assert len(requests) == 1
        assert all(isinstance(r, UsageSnapshot) for r in results)
        assert results[0].five_hour.utilization == 12.0
