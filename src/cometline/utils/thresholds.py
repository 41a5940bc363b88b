"""Threshold-based color tiers for utilization percentages."""

import math

from enum import Enum
from typing import Any, Optional, TypeVar

from ..config.defaults import DEFAULT_CRITICAL_THRESHOLD, DEFAULT_WARNING_THRESHOLD

T = TypeVar("T")


class Tier(str, Enum):
    DEFAULT = "default"
    WARNING = "warning"
    CRITICAL = "critical"


def resolve_tier(
    percentage: float,
    warning_threshold: Optional[float],
    critical_threshold: Optional[float],
) -> Tier:
    """Pick the tier for a percentage; a None threshold is unreachable.

    Boundaries are inclusive: exactly at a threshold selects the higher tier.
    """
    warning = math.inf if warning_threshold is None else warning_threshold
    critical = math.inf if critical_threshold is None else critical_threshold

    if percentage >= critical:
        return Tier.CRITICAL
    if percentage >= warning:
        return Tier.WARNING
    return Tier.DEFAULT


def resolve(
    percentage: float,
    warning_threshold: Optional[float],
    critical_threshold: Optional[float],
    default_color: T,
    warning_color: T,
    critical_color: T,
) -> T:
    """Choose among default/warning/critical colors for a percentage."""
    tier = resolve_tier(percentage, warning_threshold, critical_threshold)
    if tier is Tier.CRITICAL:
        return critical_color
    if tier is Tier.WARNING:
        return warning_color
    return default_color


def threshold_option(options: dict[str, Any], key: str, default: float) -> Optional[float]:
    """Read a threshold from segment options.

    A missing key uses the default. null, false or a negative number disables
    the threshold, and so does any value that is not a number.
    """
    if key not in options:
        return default
    value = options[key]
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if value >= 0 else None
    return None


def thresholds_for(options: dict[str, Any]) -> tuple[Optional[float], Optional[float]]:
    return (
        threshold_option(options, "warning_threshold", DEFAULT_WARNING_THRESHOLD),
        threshold_option(options, "critical_threshold", DEFAULT_CRITICAL_THRESHOLD),
    )
