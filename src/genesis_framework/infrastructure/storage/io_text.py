"""Text and JSON file utilities.

Soul documents are rewritten as a whole on every save; the temp-file +
``os.replace`` dance keeps a crash from leaving a half-written document.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict


def _fsync_enabled() -> bool:
    """Check if fsync is enabled for atomic writes."""
    value = os.environ.get("GENESIS_IO_FSYNC", "strict").strip().lower()
    return value not in ("0", "false", "no", "off", "relaxed", "skip", "disabled")


def ensure_parent_dir(path: str | Path) -> None:
    """Ensure parent directory exists."""
    parent = os.path.dirname(str(path))
    if parent:
        os.makedirs(parent, exist_ok=True)


def write_text_atomic(path: str | Path, text: str) -> None:
    """Write text file atomically using temp file and replace."""
    target = str(path)
    ensure_parent_dir(target)
    tmp_path = f"{target}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as handle:
        handle.write(text or "")
        handle.flush()
        if _fsync_enabled():
            os.fsync(handle.fileno())
    os.replace(tmp_path, target)


def write_json_atomic(path: str | Path, data: Dict[str, Any]) -> None:
    """Write JSON file atomically, human-readable."""
    payload = json.dumps(data, ensure_ascii=False, indent=2)
    write_text_atomic(path, payload + "\n")


def read_text(path: str | Path) -> str:
    """Read a UTF-8 (optionally BOM-prefixed) text file.

    Raises:
        OSError: when the file cannot be read.
        UnicodeDecodeError: when the bytes are not UTF-8.
    """
    with open(path, "rb") as handle:
        data = handle.read()
    return data.decode("utf-8-sig")
