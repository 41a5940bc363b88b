"""Lazy access to adapter results shared between segments."""

from typing import Optional

from ..parsers.transcript import parse_transcript
from ..types import Failure, GitState, RenderContext, TranscriptUsage, UsageSnapshot
from ..utils.debug import debug_log
from ..utils.git import get_git_state


def get_or_fetch_git_state(context: RenderContext, with_sha: bool = False) -> Optional[GitState]:
    """Get git state from context or run git once for this render."""
    if context.git_state is None:
        context.git_state = get_git_state(context.invocation.workspace_dir, with_sha=with_sha)
        if isinstance(context.git_state, Failure):
            debug_log(f"Git unavailable ({context.git_state.kind.value}): {context.git_state.detail}")

    state = context.git_state
    return state if isinstance(state, GitState) else None


def get_or_parse_transcript(context: RenderContext) -> Optional[TranscriptUsage]:
    """Get transcript usage from context or scan the transcript once."""
    if context.transcript is None:
        context.transcript = parse_transcript(context.invocation.transcript_path)
        if isinstance(context.transcript, Failure):
            debug_log(
                f"Transcript unavailable ({context.transcript.kind.value}): {context.transcript.detail}"
            )

    transcript = context.transcript
    return transcript if isinstance(transcript, TranscriptUsage) else None


def get_usage_snapshot(context: RenderContext) -> Optional[UsageSnapshot]:
    """Get the shared usage snapshot through the cache store."""
    if context.usage_store is None or not context.usage_fingerprint:
        return None

    result = context.usage_store.get_or_fetch(context.usage_fingerprint, context.usage_ttl)
    return result if isinstance(result, UsageSnapshot) else None
