"""FastAPI dependencies."""

from typing import AsyncGenerator

from genesis_framework.runtime.agent_manager import AgentManager, get_agent_manager


async def get_agent_manager_dep() -> AsyncGenerator[AgentManager, None]:
    """Dependency for AgentManager."""
    yield get_agent_manager()
