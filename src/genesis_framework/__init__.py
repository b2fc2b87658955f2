"""genesis-framework - runtime for long-lived, self-evolving agents.

An Agent is composed of:
- Soul: persistent memory carried across cycles
- Constitution: immutable, prioritized laws the agent is checked against
- Skills: named async capabilities the agent can invoke
- LifeCycle: wake -> think -> act -> observe -> reflect -> evolve

Agents can replicate, passing their constitution, lessons and skills on
to a descendant with a fresh soul.
"""

__version__ = "0.1.0"

from genesis_framework.domain.laws import CheckResult, Law, Verdict
from genesis_framework.domain.phases import PHASE_ORDER, Phase
from genesis_framework.runtime.agent import Agent
from genesis_framework.runtime.constitution import Constitution
from genesis_framework.runtime.lifecycle import CycleContext, LifeCycle
from genesis_framework.runtime.skills import Skill, SkillRegistry
from genesis_framework.runtime.soul import Soul

__all__ = [
    "Agent",
    "CheckResult",
    "Constitution",
    "CycleContext",
    "Law",
    "LifeCycle",
    "PHASE_ORDER",
    "Phase",
    "Skill",
    "SkillRegistry",
    "Soul",
    "Verdict",
]
