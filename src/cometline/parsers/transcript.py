"""Token usage extraction from the JSONL transcript."""

import json
import os

from datetime import datetime, timezone
from typing import Any, Optional, Union

from ..types import Failure, TranscriptUsage


def is_real_compact_boundary(data: dict[str, Any]) -> bool:
    """Check if this is a real compact boundary set by Claude Code.

    Args:
        data: Parsed JSON line from transcript

    Returns:
        True if this line is a valid compact boundary marker
    """
    return (
        data.get("type") == "system"
        and data.get("subtype") == "compact_boundary"
        and isinstance(data.get("compactMetadata"), dict)
        and "trigger" in data["compactMetadata"]
    )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _int(usage: dict[str, Any], key: str) -> int:
    value = usage.get(key, 0)
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def parse_transcript(transcript_path: str) -> Union[TranscriptUsage, Failure]:
    """Accumulate token usage from one pass over the transcript.

    The context estimate is taken from the most recent main-chain assistant
    usage record (input + cache read + cache creation). A compact boundary
    resets the accumulated totals. Malformed or unrecognized lines are skipped.

    Args:
        transcript_path: Path to the JSONL transcript file

    Returns:
        TranscriptUsage, or Failure when the file is missing or has no
        readable records at all
    """
    if not transcript_path or not os.path.isfile(transcript_path):
        return Failure.unavailable("transcript not found")

    input_tokens = 0
    output_tokens = 0
    cached_tokens = 0

    most_recent_time: Optional[datetime] = None
    most_recent_usage: Optional[dict[str, Any]] = None

    first_timestamp: Optional[datetime] = None
    last_timestamp: Optional[datetime] = None

    session_id = ""
    records = 0
    malformed = 0

    try:
        with open(transcript_path, encoding="utf-8", errors="replace") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue

                try:
                    data = json.loads(line)
                except ValueError:
                    malformed += 1
                    continue
                if not isinstance(data, dict):
                    malformed += 1
                    continue
                records += 1

                if isinstance(data.get("sessionId"), str) and data["sessionId"]:
                    session_id = data["sessionId"]

                if is_real_compact_boundary(data):
                    input_tokens = 0
                    output_tokens = 0
                    cached_tokens = 0
                    most_recent_time = None
                    most_recent_usage = None
                    first_timestamp = None
                    continue

                timestamp = _parse_timestamp(data.get("timestamp"))
                if timestamp is not None:
                    if first_timestamp is None:
                        first_timestamp = timestamp
                    last_timestamp = timestamp

                message = data.get("message")
                usage = message.get("usage") if isinstance(message, dict) else None
                if not isinstance(usage, dict):
                    continue

                input_tokens += _int(usage, "input_tokens")
                output_tokens += _int(usage, "output_tokens")
                cached_tokens += _int(usage, "cache_read_input_tokens")
                cached_tokens += _int(usage, "cache_creation_input_tokens")

                if data.get("isSidechain") or data.get("isApiErrorMessage"):
                    continue

                # Lines without a timestamp still count, in file order
                if (
                    most_recent_time is None
                    or timestamp is None
                    or timestamp >= most_recent_time
                ):
                    most_recent_time = timestamp or most_recent_time
                    most_recent_usage = usage

    except OSError as e:
        return Failure.unavailable(str(e))

    if records == 0 and malformed > 0:
        return Failure.parse_error(f"{malformed} malformed lines, no records")

    context_tokens = 0
    if most_recent_usage:
        context_tokens = (
            _int(most_recent_usage, "input_tokens")
            + _int(most_recent_usage, "cache_read_input_tokens")
            + _int(most_recent_usage, "cache_creation_input_tokens")
        )

    return TranscriptUsage(
        context_tokens=context_tokens,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cached_tokens=cached_tokens,
        session_id=session_id,
        start_time=first_timestamp,
        last_activity=last_timestamp,
    )
