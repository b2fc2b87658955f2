"""Domain errors."""


class GenesisFrameworkError(Exception):
    """Base error."""
    pass


class UnknownPhaseError(GenesisFrameworkError, ValueError):
    """Handler registered for a phase outside the six lifecycle phases."""
    pass


class ConstitutionNotFoundError(GenesisFrameworkError, FileNotFoundError):
    """Explicitly requested constitution file does not exist."""
    pass


class ConstitutionFormatError(GenesisFrameworkError):
    """Constitution source is not a valid list of law records."""
    pass


class ReplicationError(GenesisFrameworkError):
    """Child agent could not be created."""
    pass


class AgentRegistrationError(GenesisFrameworkError):
    """Agent conflicts with one already registered."""
    pass


class AgentNotFoundError(GenesisFrameworkError):
    """Agent not found."""
    pass
