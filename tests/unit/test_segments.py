"""Unit tests for segment providers, presentation and the registry."""

import pytest

from cometline.config.defaults import get_default_theme
from cometline.config.schema import Color16, SegmentConfig, SegmentId
from cometline.segments import builtin  # noqa: F401
from cometline.segments.base import Segment
from cometline.segments.builtin.context import get_context_window_state
from cometline.segments.builtin.usage import CIRCLE_SLICES, circle_icon, format_utilization
from cometline.segments.presentation import build_fragment
from cometline.segments.registry import (
    evaluate,
    get_all_segments,
    get_segment,
    register_segment,
)
from cometline.types import (
    InvocationContext,
    RenderContext,
    SegmentData,
    TranscriptUsage,
)


def _context(**invocation):
    return RenderContext(invocation=InvocationContext(**invocation))


def _config(segment_id):
    return get_default_theme().segment(segment_id)


@pytest.mark.unit
class TestRegistry:
    def test_every_segment_kind_has_a_provider(self):
        assert set(get_all_segments()) == set(SegmentId)

    def test_decorator_sets_metadata(self):
        segment = get_segment(SegmentId.MODEL)

        assert segment.segment_id is SegmentId.MODEL
        assert segment.description

    def test_provider_error_skips_segment(self):
        class Broken(Segment):
            def render(self, config, context):
                raise RuntimeError("boom")

        original = get_segment(SegmentId.COST)
        try:
            register_segment(SegmentId.COST)(Broken)
            assert evaluate(SegmentId.COST, _context(total_cost_usd=1.0), _config(SegmentId.COST)) is None
        finally:
            register_segment(SegmentId.COST, original.description)(type(original))

    def test_provider_returning_none_skips_segment(self):
        assert evaluate(SegmentId.DIRECTORY, _context(), _config(SegmentId.DIRECTORY)) is None


@pytest.mark.unit
class TestPresentation:
    """Icons, threshold colors and weight."""

    def test_plain_icon_and_default_color(self):
        config = _config(SegmentId.MODEL)
        fragment = build_fragment(config, SegmentData(primary="Sonnet 4.5"), "plain")

        assert fragment.icon == config.icon.plain
        assert fragment.color == config.colors.text
        assert fragment.bold is False

    def test_nerd_font_prefers_dynamic_icon(self):
        config = _config(SegmentId.USAGE_5HOUR)
        data = SegmentData(primary="50%", utilization=10, dynamic_icon="X")

        assert build_fragment(config, data, "nerd_font").icon == "X"
        assert build_fragment(config, data, "plain").icon == config.icon.plain

    def test_warning_tier_color(self):
        config = _config(SegmentId.CONTEXT_WINDOW)
        fragment = build_fragment(config, SegmentData(primary="60%", utilization=60.0))

        assert fragment.color == Color16(c16=11)
        assert fragment.bold is False

    def test_critical_tier_color_and_bold(self):
        config = _config(SegmentId.CONTEXT_WINDOW)
        fragment = build_fragment(config, SegmentData(primary="80%", utilization=80.0))

        assert fragment.color == Color16(c16=9)
        assert fragment.bold is True

    def test_below_warning_keeps_text_color(self):
        config = _config(SegmentId.CONTEXT_WINDOW)
        fragment = build_fragment(config, SegmentData(primary="59%", utilization=59.0))

        assert fragment.color == config.colors.text

    def test_disabled_thresholds(self):
        config = SegmentConfig(
            id=SegmentId.USAGE,
            colors={"text": {"c16": 2}},
            options={"warning_threshold": None, "critical_threshold": False},
        )
        fragment = build_fragment(config, SegmentData(primary="99%", utilization=99.0))

        assert fragment.color == Color16(c16=2)

    def test_color_override_wins(self):
        config = _config(SegmentId.UPDATE)
        fragment = build_fragment(
            config, SegmentData(primary="v1", color_override=Color16(c16=11))
        )

        assert fragment.color == Color16(c16=11)


@pytest.mark.unit
class TestInvocationSegments:
    """Segments computed from the host payload alone."""

    def test_directory_basename(self):
        data = get_segment(SegmentId.DIRECTORY).render(
            _config(SegmentId.DIRECTORY), _context(workspace_dir="/home/me/project/")
        )

        assert data.text == "project"

    def test_model_uses_short_name(self):
        data = get_segment(SegmentId.MODEL).render(
            _config(SegmentId.MODEL), _context(model_id="claude-3-5-sonnet")
        )

        assert data.text == "Sonnet 3.5"

    def test_model_falls_back_to_display_name(self):
        data = get_segment(SegmentId.MODEL).render(
            _config(SegmentId.MODEL), _context(model_display_name="Mystery")
        )

        assert data.text == "Mystery"

    def test_cost(self):
        data = get_segment(SegmentId.COST).render(
            _config(SegmentId.COST), _context(total_cost_usd=0.0195)
        )

        assert data.text == "$0.02"

    def test_session_duration_and_lines(self):
        data = get_segment(SegmentId.SESSION).render(
            _config(SegmentId.SESSION),
            _context(total_duration_ms=225_000, lines_added=156, lines_removed=23),
        )

        assert data.text == "3m45s +156 -23"

    def test_session_without_data_is_skipped(self):
        segment = get_segment(SegmentId.SESSION)

        assert segment.render(_config(SegmentId.SESSION), _context()) is None

    def test_output_style(self):
        segment = get_segment(SegmentId.OUTPUT_STYLE)

        assert segment.render(_config(SegmentId.OUTPUT_STYLE), _context(output_style="Explanatory")).text == "Explanatory"
        assert segment.render(_config(SegmentId.OUTPUT_STYLE), _context()) is None


@pytest.mark.unit
class TestContextWindow:
    def test_payload_usage_wins_over_transcript(self):
        context = _context(current_context_tokens=50_000, context_window_size=100_000)
        context.transcript = TranscriptUsage(context_tokens=1)

        state = get_context_window_state(context)

        assert state.consumed_tokens == 50_000
        assert state.percentage == 50.0

    def test_transcript_estimate_with_table_limit(self):
        context = _context(model_id="claude-3-5-sonnet")
        context.transcript = TranscriptUsage(context_tokens=40_000)

        data = get_segment(SegmentId.CONTEXT_WINDOW).render(_config(SegmentId.CONTEXT_WINDOW), context)

        assert data.text == "20% · 40k"
        assert data.utilization == 20.0

    def test_percentage_is_clamped(self):
        context = _context(current_context_tokens=500_000, context_window_size=200_000)

        assert get_context_window_state(context).percentage == 100.0

    def test_no_transcript_skips(self):
        assert get_context_window_state(_context(transcript_path="/nonexistent.jsonl")) is None


@pytest.mark.unit
class TestUsageHelpers:
    def test_circle_icon_bounds(self):
        assert circle_icon(0) == CIRCLE_SLICES[0]
        assert circle_icon(12.5) == CIRCLE_SLICES[0]
        assert circle_icon(50) == CIRCLE_SLICES[3]
        assert circle_icon(100) == CIRCLE_SLICES[-1]
        assert circle_icon(130) == CIRCLE_SLICES[-1]

    def test_format_utilization_rounds_half_up(self):
        assert format_utilization(74.5) == "75%"
        assert format_utilization(23.4) == "23%"

    def test_usage_segments_skip_without_store(self):
        for segment_id in (SegmentId.USAGE, SegmentId.USAGE_5HOUR, SegmentId.USAGE_7DAY):
            assert get_segment(segment_id).render(_config(segment_id), _context()) is None


@pytest.mark.unit
class TestUpdateSegment:
    def test_newer_release_is_flagged(self, monkeypatch):
        monkeypatch.setattr(
            "cometline.segments.builtin.update.get_latest_version", lambda: "99.0.0"
        )

        data = get_segment(SegmentId.UPDATE).render(_config(SegmentId.UPDATE), _context())

        assert data.secondary == "↑ v99.0.0"
        assert data.color_override == Color16(c16=11)

    def test_up_to_date(self, monkeypatch):
        monkeypatch.setattr(
            "cometline.segments.builtin.update.get_latest_version", lambda: None
        )

        data = get_segment(SegmentId.UPDATE).render(_config(SegmentId.UPDATE), _context())

        assert data.secondary == ""
        assert data.primary.startswith("v")
