"""Client for the remote usage-quota endpoint."""

import http.client
import json
import socket
import urllib.error
import urllib.request

from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from .. import __version__
from ..types import (
    FIVE_HOUR_WINDOW,
    SEVEN_DAY_WINDOW,
    Failure,
    UsageSnapshot,
    UsageWindow,
)

USAGE_PATH = "/api/oauth/usage"
OAUTH_BETA = "oauth-2025-04-20"


def _parse_time(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_window(raw: Any, length: timedelta) -> Optional[UsageWindow]:
    if not isinstance(raw, dict):
        return None
    utilization = raw.get("utilization")
    if isinstance(utilization, bool) or not isinstance(utilization, (int, float)):
        raise ValueError("utilization is not a number")
    resets_at = _parse_time(raw.get("resets_at"))
    return UsageWindow(
        utilization=float(utilization),
        resets_at=resets_at,
        window_start=resets_at - length if resets_at else None,
    )


def parse_usage_payload(payload: Any) -> Union[UsageSnapshot, Failure]:
    """Turn the endpoint's JSON body into a snapshot.

    Expected shape: {"five_hour": {"utilization": 23.0, "resets_at": "..."},
    "seven_day": {...}}. A window may be null.
    """
    if not isinstance(payload, dict):
        return Failure.parse_error("usage payload is not an object")
    try:
        five_hour = _parse_window(payload.get("five_hour"), FIVE_HOUR_WINDOW)
        seven_day = _parse_window(payload.get("seven_day"), SEVEN_DAY_WINDOW)
    except ValueError as e:
        return Failure.parse_error(str(e))
    if five_hour is None and seven_day is None:
        return Failure.parse_error("usage payload has no windows")
    return UsageSnapshot(five_hour=five_hour, seven_day=seven_day, raw=payload)


def fetch_usage(
    token: str, api_base_url: str, timeout: float
) -> Union[UsageSnapshot, Failure]:
    """Perform one authenticated request to the usage endpoint.

    Args:
        token: OAuth access token
        api_base_url: Base URL of the API (e.g., "https://api.anthropic.com")
        timeout: Client-side timeout in seconds

    Returns:
        UsageSnapshot, or Failure (timeout, unavailable or parse error)
    """
    request = urllib.request.Request(
        api_base_url.rstrip("/") + USAGE_PATH,
        headers={
            "Authorization": f"Bearer {token}",
            "anthropic-beta": OAUTH_BETA,
            "Accept": "application/json",
            "User-Agent": f"cometline/{__version__}",
        },
    )
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            raw_body = response.read()
    except urllib.error.HTTPError as e:
        return Failure.unavailable(f"HTTP {e.code}")
    except urllib.error.URLError as e:
        if isinstance(e.reason, (TimeoutError, socket.timeout)):
            return Failure.timeout(str(e.reason))
        return Failure.unavailable(str(e.reason))
    except (TimeoutError, socket.timeout) as e:
        return Failure.timeout(str(e))
    except http.client.HTTPException as e:
        return Failure.unavailable(f"bad response: {e!r}")
    except OSError as e:
        return Failure.unavailable(str(e))

    try:
        payload = json.loads(raw_body.decode("utf-8"))
    except ValueError as e:
        return Failure.parse_error(str(e))
    return parse_usage_payload(payload)
