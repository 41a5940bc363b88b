"""Unit tests for formatting helpers and the model table."""

from datetime import datetime, timedelta, timezone

import pytest

from cometline.utils.formatting import (
    format_5hour_reset,
    format_7day_reset,
    format_compact_reset,
    format_duration,
    format_percentage,
    format_tokens,
    to_local_hour,
)
from cometline.utils.models import (
    DEFAULT_CONTEXT_LIMIT,
    get_context_limit,
    get_display_name,
)

TOKYO = timezone(timedelta(hours=9))


@pytest.mark.unit
class TestNumbers:
    @pytest.mark.parametrize(
        "num,expected",
        [(0, "0"), (850, "850"), (1000, "1k"), (40000, "40k"), (156400, "156.4k"), (1_200_000, "1.2M")],
    )
    def test_format_tokens(self, num, expected):
        assert format_tokens(num) == expected

    @pytest.mark.parametrize(
        "percentage,expected", [(20.0, "20%"), (78.24, "78.2%"), (0, "0%"), (99.96, "100%")]
    )
    def test_format_percentage(self, percentage, expected):
        assert format_percentage(percentage) == expected

    @pytest.mark.parametrize(
        "duration_ms,expected",
        [(0, "0s"), (45_000, "45s"), (225_000, "3m45s"), (3_720_000, "1h2m"), (-5, "0s")],
    )
    def test_format_duration(self, duration_ms, expected):
        assert format_duration(duration_ms) == expected


@pytest.mark.unit
class TestResetTimes:
    """Reset timestamps are shown in local time, rounded to the hour."""

    def test_five_hour_reset_in_other_timezone(self):
        resets_at = datetime(2025, 10, 8, 18, 0, tzinfo=timezone.utc)

        assert format_5hour_reset(resets_at, TOKYO) == "3am"

    def test_rounds_to_nearest_hour(self):
        assert to_local_hour(datetime(2025, 10, 8, 13, 29, tzinfo=timezone.utc), timezone.utc).hour == 13
        assert to_local_hour(datetime(2025, 10, 8, 13, 30, tzinfo=timezone.utc), timezone.utc).hour == 14

    def test_noon_and_midnight(self):
        assert format_5hour_reset(datetime(2025, 1, 1, 12, tzinfo=timezone.utc), timezone.utc) == "12pm"
        assert format_5hour_reset(datetime(2025, 1, 1, 0, tzinfo=timezone.utc), timezone.utc) == "12am"

    def test_seven_day_reset(self):
        resets_at = datetime(2025, 10, 8, 20, 0, tzinfo=timezone.utc)

        assert format_7day_reset(resets_at, TOKYO) == "Oct 9:5am"

    def test_compact_reset(self):
        resets_at = datetime(2025, 10, 7, 1, 40, tzinfo=timezone.utc)

        assert format_compact_reset(resets_at, timezone.utc) == "10-7-2"

    def test_rounding_crosses_day_boundary(self):
        resets_at = datetime(2025, 10, 7, 23, 45, tzinfo=timezone.utc)

        assert format_compact_reset(resets_at, timezone.utc) == "10-8-0"

    def test_missing_reset(self):
        assert format_5hour_reset(None) == "?"
        assert format_7day_reset(None) == "?"
        assert format_compact_reset(None) == "?"


@pytest.mark.unit
class TestModels:
    def test_known_model(self):
        assert get_display_name("claude-3-5-sonnet") == "Sonnet 3.5"
        assert get_context_limit("claude-3-5-sonnet") == 200000

    def test_unknown_model_passes_through(self):
        assert get_display_name("gpt-experimental") == "gpt-experimental"
        assert get_context_limit("gpt-experimental") == DEFAULT_CONTEXT_LIMIT

    def test_extended_context_marker(self):
        assert get_context_limit("claude-sonnet-4-5-20250929[1m]") == 1000000
        assert get_context_limit("claude-future-9[1m]") == 1000000
