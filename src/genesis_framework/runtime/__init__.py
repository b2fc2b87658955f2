"""Runtime layer - soul, constitution, skills, life cycle and agents."""

from .agent import Agent
from .agent_manager import AgentManager, get_agent_manager
from .constitution import Constitution
from .lifecycle import CycleContext, LifeCycle
from .skills import Skill, SkillRegistry
from .soul import Soul
from .validators import DEFAULT_VALIDATORS, earning_agent_constitution

__all__ = [
    "Agent",
    "AgentManager",
    "get_agent_manager",
    "Constitution",
    "CycleContext",
    "LifeCycle",
    "Skill",
    "SkillRegistry",
    "Soul",
    "DEFAULT_VALIDATORS",
    "earning_agent_constitution",
]
