"""The six fixed phases of a life cycle."""

from enum import Enum
from typing import Tuple, Union

from genesis_framework.domain.errors import UnknownPhaseError


class Phase(str, Enum):
    """A stage of one cycle. Order of declaration is execution order."""

    WAKE = "wake"
    THINK = "think"
    ACT = "act"
    OBSERVE = "observe"
    REFLECT = "reflect"
    EVOLVE = "evolve"

    @classmethod
    def parse(cls, value: Union["Phase", str]) -> "Phase":
        """Coerce a Phase or its name, rejecting anything else."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise UnknownPhaseError(
                f"Unknown phase: {value!r}. Valid phases: {valid}"
            ) from None


PHASE_ORDER: Tuple[Phase, ...] = tuple(Phase)
