"""Storage infrastructure: atomic document writes and path guards."""

from .io_text import read_text, write_json_atomic, write_text_atomic
from .path_guard import (
    InvalidArtifactPathError,
    ensure_within_root,
    normalize_path,
    safe_join,
    validate_agent_name,
)

__all__ = [
    "read_text",
    "write_json_atomic",
    "write_text_atomic",
    "InvalidArtifactPathError",
    "ensure_within_root",
    "normalize_path",
    "safe_join",
    "validate_agent_name",
]
