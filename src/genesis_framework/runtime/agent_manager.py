"""Agent Manager - registry of live agents in this process.

Enforces that no two live agents write to the same soul file.
"""

from typing import Dict, List, Optional

import structlog

from genesis_framework.domain.errors import AgentNotFoundError, AgentRegistrationError
from genesis_framework.infrastructure.storage.path_guard import normalize_path
from genesis_framework.runtime.agent import Agent

logger = structlog.get_logger()


class AgentManager:
    """Keeps live Agent instances by name."""

    def __init__(self):
        self._agents: Dict[str, Agent] = {}

    def register(self, agent: Agent) -> Agent:
        """Track ``agent``.

        Raises:
            AgentRegistrationError: name taken by another agent, or soul
                file already owned by a registered agent.
        """
        existing = self._agents.get(agent.name)
        if existing is agent:
            return agent
        if existing is not None:
            raise AgentRegistrationError(f"Agent {agent.name!r} is already registered")

        soul_path = normalize_path(agent.soul.path)
        for other in self._agents.values():
            if normalize_path(other.soul.path) == soul_path:
                raise AgentRegistrationError(
                    f"Soul {soul_path} is already owned by agent {other.name!r}"
                )

        self._agents[agent.name] = agent
        logger.debug("agent_registered", agent=agent.name, soul_path=str(soul_path))
        return agent

    def get(self, name: str) -> Agent:
        agent = self._agents.get(name)
        if agent is None:
            raise AgentNotFoundError(f"Agent {name!r} not found")
        return agent

    def release(self, name: str) -> None:
        """Stop tracking an agent. Its soul is left untouched."""
        if name in self._agents:
            del self._agents[name]
            logger.debug("agent_released", agent=name)

    def clear(self) -> None:
        self._agents.clear()
        logger.debug("agent_registry_cleared")

    def list_names(self) -> List[str]:
        return list(self._agents.keys())


# Process-wide default manager
_manager: Optional[AgentManager] = None


def get_agent_manager() -> AgentManager:
    """Get the process-wide agent manager."""
    global _manager
    if _manager is None:
        _manager = AgentManager()
    return _manager
