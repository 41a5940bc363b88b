"""Utilities for reading the Claude OAuth token and deriving a fingerprint."""

import hashlib
import json
import os
import subprocess
import sys

from pathlib import Path
from typing import Any, Optional

__all__ = ["get_credentials_path", "get_oauth_token", "account_fingerprint"]

KEYCHAIN_SERVICE = "Claude Code-credentials"


def get_credentials_path() -> Path:
    """Get path to Claude credentials file."""
    config_dir = os.getenv("CLAUDE_CONFIG_DIR")
    if config_dir:
        return Path(config_dir) / ".credentials.json"
    return Path.home() / ".claude" / ".credentials.json"


def _token_from_json(text: str) -> Optional[str]:
    try:
        data: Any = json.loads(text)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    oauth = data.get("claudeAiOauth")
    if isinstance(oauth, dict) and isinstance(oauth.get("accessToken"), str):
        return oauth["accessToken"] or None
    return None


def _token_from_keychain() -> Optional[str]:
    try:
        result = subprocess.run(
            [
                "security",
                "find-generic-password",
                "-a",
                os.getenv("USER", "user"),
                "-w",
                "-s",
                KEYCHAIN_SERVICE,
            ],
            capture_output=True,
            text=True,
            timeout=2,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return None
    if result.returncode != 0 or not result.stdout.strip():
        return None
    return _token_from_json(result.stdout.strip())


def _token_from_file(path: Path) -> Optional[str]:
    if not path.is_file():
        return None
    try:
        return _token_from_json(path.read_text(encoding="utf-8"))
    except OSError:
        return None


def get_oauth_token() -> Optional[str]:
    """Read the OAuth access token.

    On macOS the login keychain is tried first. Otherwise (or when that
    fails) $CLAUDE_CONFIG_DIR/.credentials.json, then
    ~/.claude/.credentials.json.

    Returns:
        Access token, or None if no credentials are available
    """
    if sys.platform == "darwin":
        token = _token_from_keychain()
        if token:
            return token

    token = _token_from_file(get_credentials_path())
    if token:
        return token

    if os.getenv("CLAUDE_CONFIG_DIR"):
        return _token_from_file(Path.home() / ".claude" / ".credentials.json")
    return None


def account_fingerprint(token: str, api_base_url: str) -> str:
    """Identify the account a cached usage snapshot belongs to.

    The token itself is never persisted, only this digest.
    """
    digest = hashlib.sha256(f"{api_base_url}\n{token}".encode()).hexdigest()
    return digest[:16]
