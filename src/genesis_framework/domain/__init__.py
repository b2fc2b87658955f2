"""Domain models for genesis-framework."""

from .errors import (
    AgentNotFoundError,
    AgentRegistrationError,
    ConstitutionFormatError,
    ConstitutionNotFoundError,
    GenesisFrameworkError,
    ReplicationError,
    UnknownPhaseError,
)
from .laws import CheckResult, Law, Verdict
from .phases import PHASE_ORDER, Phase
from .soul import DEFAULT_SURVIVAL_LEVEL, Goals, SoulDocument, SoulState

__all__ = [
    "AgentNotFoundError",
    "AgentRegistrationError",
    "ConstitutionFormatError",
    "ConstitutionNotFoundError",
    "GenesisFrameworkError",
    "ReplicationError",
    "UnknownPhaseError",
    "CheckResult",
    "Law",
    "Verdict",
    "PHASE_ORDER",
    "Phase",
    "DEFAULT_SURVIVAL_LEVEL",
    "Goals",
    "SoulDocument",
    "SoulState",
]
