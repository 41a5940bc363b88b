"""Formatting utilities for numbers, durations and reset times."""

from datetime import datetime, timedelta, tzinfo
from typing import Optional


def format_tokens(num: int) -> str:
    """Format a token count with a k/M suffix.

    Args:
        num: Number to format

    Returns:
        Formatted string (e.g., "850", "156.4k", "1.2M")
    """
    if num < 1000:
        return str(num)
    if num < 1_000_000:
        return f"{num / 1000:.1f}".rstrip("0").rstrip(".") + "k"
    return f"{num / 1_000_000:.1f}".rstrip("0").rstrip(".") + "M"


def format_percentage(percentage: float) -> str:
    """Format a percentage with one decimal, dropping a trailing ".0".

    Returns:
        Formatted percentage string (e.g., "20%", "78.2%")
    """
    text = f"{percentage:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text}%"


def format_duration(duration_ms: int) -> str:
    """Format a duration in milliseconds.

    Returns:
        Formatted string like "45s", "3m45s" or "1h2m"
    """
    total_seconds = max(0, duration_ms) // 1000
    if total_seconds < 60:
        return f"{total_seconds}s"

    minutes, seconds = divmod(total_seconds, 60)
    if minutes < 60:
        return f"{minutes}m{seconds}s"

    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes}m"


def to_local_hour(resets_at: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Convert a UTC reset time to local time, rounded to the nearest hour.

    Args:
        resets_at: Timezone-aware reset timestamp
        tz: Target timezone; None means the host's local timezone
    """
    local = resets_at.astimezone(tz)
    return (local + timedelta(minutes=30)).replace(minute=0, second=0, microsecond=0)


def _hour_12(local: datetime) -> str:
    hour = local.hour % 12 or 12
    suffix = "am" if local.hour < 12 else "pm"
    return f"{hour}{suffix}"


def format_5hour_reset(resets_at: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    """Format the five-hour window reset (e.g., "3am")."""
    if resets_at is None:
        return "?"
    return _hour_12(to_local_hour(resets_at, tz))


def format_7day_reset(resets_at: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    """Format the seven-day window reset (e.g., "Oct 9:5am")."""
    if resets_at is None:
        return "?"
    local = to_local_hour(resets_at, tz)
    return f"{local.strftime('%b')} {local.day}:{_hour_12(local)}"


def format_compact_reset(resets_at: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    """Format a reset as month-day-hour (e.g., "10-7-2")."""
    if resets_at is None:
        return "?"
    local = to_local_hour(resets_at, tz)
    return f"{local.month}-{local.day}-{local.hour}"
