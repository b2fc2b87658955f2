"""Law records and the results of checking an action against them."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

_LAW_KEYS = ("id", "priority", "text")


def _freeze(value: Any) -> Any:
    """Read-only copy: dicts become mapping proxies, lists and sets tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class Law:
    """A single named, prioritized rule. Lower priority is evaluated first."""

    id: str
    priority: int = 0
    text: str = ""
    # Additional source keys (e.g. "severity"), frozen all the way down
    extra: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}),
        compare=False,
        hash=False,
        repr=False,
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", _freeze(self.extra))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = _thaw(self.extra)
        data.update({"id": self.id, "priority": self.priority, "text": self.text})
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Law":
        return cls(
            id=str(data["id"]),
            priority=int(data.get("priority", 0) or 0),
            text=str(data.get("text", "")),
            extra={k: v for k, v in data.items() if k not in _LAW_KEYS},
        )


@dataclass(frozen=True)
class Verdict:
    """What a single evaluator says about an action."""

    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "Verdict":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Verdict":
        return cls(allowed=False, reason=reason)


@dataclass(frozen=True)
class CheckResult:
    """Aggregate outcome of checking an action against every law."""

    allowed: bool
    violations: Tuple[Law, ...] = ()
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allowed": self.allowed,
            "violations": [law.to_dict() for law in self.violations],
            "reasons": list(self.reasons),
        }
