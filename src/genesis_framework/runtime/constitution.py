"""Constitution - immutable agent laws plus a pluggable evaluation protocol.

Laws are plain data. What a law *means* lives in a separate evaluator table
keyed by law id, so deployments can swap semantics without touching the
law records. A law without an evaluator never objects.
"""

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union

import structlog
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from genesis_framework.domain.errors import ConstitutionFormatError, ConstitutionNotFoundError
from genesis_framework.domain.laws import CheckResult, Law, Verdict
from genesis_framework.infrastructure.storage.io_text import read_text

logger = structlog.get_logger()

Evaluator = Callable[[Mapping[str, Any], Any], Union[Verdict, Mapping[str, Any]]]


class LawRecord(BaseModel):
    """Schema of one law in a constitution file."""

    model_config = ConfigDict(extra="allow")

    id: str
    priority: int = 0
    text: str = ""


_LAW_LIST = TypeAdapter(List[LawRecord])


def _as_verdict(result: Union[Verdict, Mapping[str, Any]]) -> Verdict:
    """Accept ``Verdict`` or a plain ``{"allowed": ..., "reason": ...}`` mapping."""
    if isinstance(result, Verdict):
        return result
    if isinstance(result, Mapping):
        return Verdict(allowed=bool(result.get("allowed")), reason=result.get("reason"))
    raise TypeError(f"evaluator returned {type(result).__name__}, expected Verdict or mapping")


class Constitution:
    """An ordered, immutable collection of laws.

    Shared by reference between an agent and all its descendants. Laws
    cannot be added, removed or edited once built.
    """

    __slots__ = ("_laws", "_evaluators")

    def __init__(
        self,
        laws: Iterable[Union[Law, Mapping[str, Any]]] = (),
        evaluators: Optional[Mapping[str, Evaluator]] = None,
    ):
        built = tuple(law if isinstance(law, Law) else Law.from_dict(law) for law in laws)
        ids = [law.id for law in built]
        duplicates = sorted({law_id for law_id in ids if ids.count(law_id) > 1})
        if duplicates:
            raise ConstitutionFormatError(f"Duplicate law ids: {', '.join(duplicates)}")
        object.__setattr__(self, "_laws", built)
        object.__setattr__(self, "_evaluators", MappingProxyType(dict(evaluators or {})))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Constitution is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Constitution is immutable")

    @classmethod
    def from_file(
        cls,
        file_path: Union[str, Path],
        evaluators: Optional[Mapping[str, Evaluator]] = None,
    ) -> "Constitution":
        """Load laws from a JSON list of ``{id, priority, text}`` records."""
        path = Path(file_path)
        if not path.is_file():
            raise ConstitutionNotFoundError(f"Constitution file not found: {path}")
        try:
            records = _LAW_LIST.validate_python(json.loads(read_text(path)))
        except (ValueError, ValidationError) as exc:
            raise ConstitutionFormatError(f"Invalid constitution file {path}: {exc}") from exc

        logger.debug("constitution_loaded", path=str(path), laws=len(records))
        return cls((Law.from_dict(record.model_dump()) for record in records), evaluators)

    @classmethod
    def default(cls) -> "Constitution":
        return cls([
            Law(
                id="NO_HARM",
                priority=0,
                text="Never harm humans - physically, financially, or psychologically.",
            ),
            Law(
                id="CREATE_VALUE",
                priority=1,
                text=(
                    "Create genuine value. The only legitimate path to survival is "
                    "others voluntarily paying for your honest labor."
                ),
            ),
            Law(
                id="BE_HONEST",
                priority=2,
                text=(
                    "Never deny what you are. Never misrepresent your actions. "
                    "The creator has full audit rights."
                ),
            ),
        ])

    @property
    def laws(self) -> Tuple[Law, ...]:
        return self._laws

    @property
    def evaluators(self) -> Mapping[str, Evaluator]:
        return self._evaluators

    def with_evaluators(self, evaluators: Mapping[str, Evaluator]) -> "Constitution":
        """Same laws, different semantics. Returns a new constitution."""
        return Constitution(self._laws, evaluators)

    def check(self, action: Mapping[str, Any], context: Any = None) -> CheckResult:
        """Evaluate ``action`` against every law, lowest priority first.

        All laws run even after one objects, so the result lists every
        violation rather than just the first.
        """
        violations: List[Law] = []
        reasons: List[str] = []

        for law in sorted(self._laws, key=lambda item: item.priority):
            evaluator = self._evaluators.get(law.id)
            if evaluator is None:
                continue
            verdict = _as_verdict(evaluator(action, context))
            if not verdict.allowed:
                violations.append(law)
                reasons.append(f"[{law.id}] {verdict.reason or law.text}")

        if violations:
            logger.info(
                "action_rejected",
                action_type=action.get("type") if isinstance(action, Mapping) else None,
                laws=[law.id for law in violations],
            )
        return CheckResult(
            allowed=not violations,
            violations=tuple(violations),
            reasons=tuple(reasons),
        )

    def to_display_string(self) -> str:
        return "\n".join(
            f"Law {i} [{law.id}] (priority {law.priority}): {law.text}"
            for i, law in enumerate(self._laws, start=1)
        )

    def __str__(self) -> str:
        return self.to_display_string()

    def __len__(self) -> int:
        return len(self._laws)

    def __repr__(self) -> str:
        return f"Constitution(laws={[law.id for law in self._laws]!r})"
