import json

from datetime import datetime, timezone

import pytest

from cometline.types import UsageCacheEntry, UsageSnapshot, UsageWindow


def pytest_configure(config):
    """Register custom test markers."""
    config.addinivalue_line("markers", "unit: Unit tests that do not perform real I/O")
    config.addinivalue_line("markers", "integration: Integration tests with mocked I/O")
    config.addinivalue_line("markers", "performance: Benchmarks of the hot paths")


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep every test away from the real config, cache and Claude directories."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.delenv("CLAUDE_CONFIG_DIR", raising=False)
    monkeypatch.delenv("COMETLINE_DEBUG", raising=False)


@pytest.fixture
def mock_stdin(monkeypatch):
    """Factory fixture to mock stdin with custom content."""
    import io
    import sys

    def _mock_stdin(content: str):
        monkeypatch.setattr(sys, "stdin", io.StringIO(content))

    return _mock_stdin


@pytest.fixture
def sample_input_payload():
    """Sample statusline input payload."""
    return {
        "session_id": "abc123-def456",
        "workspace": {"current_dir": "/path/to/project"},
        "transcript_path": "/path/to/transcript.jsonl",
        "model": {"id": "claude-sonnet-4-5-20250929", "display_name": "Sonnet 4.5"},
        "output_style": {"name": "default"},
        "cost": {
            "total_cost_usd": 1.50,
            "total_duration_ms": 225000,
            "total_lines_added": 100,
            "total_lines_removed": 25,
        },
        "version": "2.0.53",
    }


@pytest.fixture
def write_transcript(tmp_path):
    """Factory fixture writing JSONL records to a transcript file."""

    def _write(records, name="transcript.jsonl"):
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            for record in records:
                f.write(record if isinstance(record, str) else json.dumps(record))
                f.write("\n")
        return path

    return _write


@pytest.fixture
def usage_snapshot():
    """Factory fixture for snapshots with given utilizations."""

    def _snapshot(five_hour=23.0, seven_day=45.0, resets_at="2025-10-09T18:00:00+00:00"):
        raw = {
            "five_hour": {"utilization": five_hour, "resets_at": resets_at},
            "seven_day": {"utilization": seven_day, "resets_at": resets_at},
        }
        resets = datetime.fromisoformat(resets_at).astimezone(timezone.utc)
        return UsageSnapshot(
            five_hour=UsageWindow(utilization=five_hour, resets_at=resets),
            seven_day=UsageWindow(utilization=seven_day, resets_at=resets),
            raw=raw,
        )

    return _snapshot


@pytest.fixture
def cache_entry(usage_snapshot):
    """Factory fixture for persisted cache entries."""

    def _entry(fingerprint="acct-a", fetched_at=1000.0, **kwargs):
        return UsageCacheEntry(
            snapshot=usage_snapshot(**kwargs), fetched_at=fetched_at, fingerprint=fingerprint
        )

    return _entry
