"""Git segment."""

from typing import Optional

from ...config.schema import SegmentConfig, SegmentId
from ...types import GitState, GitTreeStatus, RenderContext, SegmentData
from ..base import Segment
from ..registry import register_segment
from ..sources import get_or_fetch_git_state

STATUS_GLYPHS = {
    GitTreeStatus.CLEAN: "✓",
    GitTreeStatus.DIRTY: "●",
    GitTreeStatus.CONFLICTED: "⚠",
}


def format_git_state(state: GitState, show_dirty_count: bool = False) -> str:
    """Render branch, tracking counts and working tree status.

    Ahead/behind counts appear only with a remote tracking branch and only
    when nonzero.
    """
    parts = [state.branch]

    if state.sha:
        parts.append(state.sha)

    if state.has_remote:
        if state.ahead > 0:
            parts.append(f"↑{state.ahead}")
        if state.behind > 0:
            parts.append(f"↓{state.behind}")

    glyph = STATUS_GLYPHS[state.status]
    if show_dirty_count and state.status is not GitTreeStatus.CLEAN and state.changed_paths:
        glyph = f"{glyph}{state.changed_paths}"
    parts.append(glyph)

    return " ".join(parts)


@register_segment(SegmentId.GIT, description="Branch, tracking counts and tree status")
class GitSegment(Segment):
    """Display git branch and status; skipped outside a repository."""

    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        options = config.options
        state = get_or_fetch_git_state(context, with_sha=options.get("show_sha") is True)
        if state is None:
            return None

        return SegmentData(
            primary=format_git_state(state, options.get("show_dirty_count") is True)
        )
