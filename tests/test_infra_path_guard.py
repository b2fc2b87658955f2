"""Tests for storage path guardrails."""

import pytest

from genesis_framework.infrastructure.storage.path_guard import (
    InvalidArtifactPathError,
    ensure_within_root,
    normalize_path,
    safe_join,
    validate_agent_name,
)


def test_ensure_within_root_accepts_child(tmp_path):
    root = tmp_path / ".genesis"
    child = root / "souls" / "Echo.json"
    resolved = ensure_within_root(root, child)
    assert str(resolved).startswith(str(root))


def test_ensure_within_root_rejects_sibling(tmp_path):
    with pytest.raises(InvalidArtifactPathError):
        ensure_within_root(tmp_path / ".genesis", tmp_path / "elsewhere" / "soul.json")


def test_safe_join_blocks_escape(tmp_path):
    root = tmp_path / ".genesis"
    with pytest.raises(InvalidArtifactPathError):
        safe_join(root, "..", "outside")


def test_normalize_path_rejects_blank():
    with pytest.raises(InvalidArtifactPathError):
        normalize_path("  ")


def test_validate_agent_name():
    assert validate_agent_name("Echo") == "Echo"
    assert validate_agent_name("child-1.gen_2") == "child-1.gen_2"
    with pytest.raises(ValueError):
        validate_agent_name("../bad")
    with pytest.raises(ValueError):
        validate_agent_name("a/b")
    with pytest.raises(ValueError):
        validate_agent_name("")
