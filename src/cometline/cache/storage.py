"""Cache directory location and atomic JSON persistence."""

import json
import os
import tempfile

from pathlib import Path
from typing import Any, Optional


def get_cache_dir() -> Path:
    """Get the per-user cache directory."""
    cache_home = os.getenv("XDG_CACHE_HOME", os.path.expanduser("~/.cache"))
    return Path(cache_home) / "cometline"


def read_json(path: Path) -> Optional[dict[str, Any]]:
    """Read a JSON object, or None if missing, unreadable or not an object."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def atomic_write_json(path: Path, data: dict[str, Any], indent: Optional[int] = None) -> None:
    """Write JSON so that concurrent readers see either the old or new file.

    The document is written to a temporary file in the same directory and
    moved into place with os.replace.

    Raises:
        OSError: If the directory or file cannot be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            if indent is not None:
                f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
