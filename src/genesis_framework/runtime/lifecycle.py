"""LifeCycle - the agent's heartbeat.

Every cycle walks the six phases in fixed order:
wake -> think -> act -> observe -> reflect -> evolve

Handlers for a phase run one at a time in registration order. A failing
handler is recorded in the soul's memory and the cycle moves on.
"""

import inspect
import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

import structlog

from genesis_framework.domain.phases import PHASE_ORDER, Phase
from genesis_framework.runtime.constitution import Constitution
from genesis_framework.runtime.skills import SkillRegistry
from genesis_framework.runtime.soul import Soul

if TYPE_CHECKING:
    from genesis_framework.runtime.agent import Agent

logger = structlog.get_logger()

PhaseHandler = Callable[["CycleContext"], Union[Any, Awaitable[Any]]]


@dataclass
class CycleContext:
    """Shared by every handler of one cycle.

    ``results`` is keyed by phase name; ``services`` holds dependencies
    injected into the agent (notifiers, LLM clients, usage counters...).
    """

    agent: "Agent"
    soul: Soul
    constitution: Constitution
    skills: SkillRegistry
    cycle: int
    results: Dict[str, Any] = field(default_factory=dict)
    services: Mapping[str, Any] = field(default_factory=dict)


def _is_empty(result: Any) -> bool:
    if result is None:
        return True
    try:
        return len(result) == 0
    except TypeError:
        return False


class LifeCycle:
    """Six-phase state machine bound to one agent."""

    def __init__(self, agent: "Agent"):
        self.agent = agent
        self.phases: Tuple[Phase, ...] = PHASE_ORDER
        self._hooks: Dict[Phase, List[PhaseHandler]] = {phase: [] for phase in PHASE_ORDER}
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def on(self, phase: Union[Phase, str], handler: PhaseHandler) -> "LifeCycle":
        """Append ``handler`` to ``phase``. Unknown phases raise immediately."""
        resolved = Phase.parse(phase)
        if not callable(handler):
            raise TypeError(f"handler for {resolved.value} must be callable")
        self._hooks[resolved].append(handler)
        return self

    def handlers(self, phase: Union[Phase, str]) -> Tuple[PhaseHandler, ...]:
        return tuple(self._hooks[Phase.parse(phase)])

    async def run_cycle(self) -> Optional[Dict[str, Any]]:
        """Run one full cycle and return the per-phase results.

        Returns None without doing anything when a cycle is already in
        flight on this lifecycle.
        """
        if self._running:
            logger.warning("cycle_already_running", agent=self.agent.name, action="skipping")
            return None

        self._running = True
        try:
            soul = self.agent.soul
            soul.cycle += 1
            cycle_num = soul.cycle

            with structlog.contextvars.bound_contextvars(agent=self.agent.name, cycle=cycle_num):
                logger.info("cycle_started")

                context = CycleContext(
                    agent=self.agent,
                    soul=soul,
                    constitution=self.agent.constitution,
                    skills=self.agent.skills,
                    cycle=cycle_num,
                    services=self.agent.services,
                )

                for phase in self.phases:
                    await self._run_phase(phase, context)

                soul.log_evolution(
                    f"Cycle {cycle_num} completed",
                    json.dumps(list(context.results)),
                )
                soul.save()

                logger.info("cycle_completed", phases_with_results=list(context.results))
            return context.results
        finally:
            self._running = False

    async def _run_phase(self, phase: Phase, context: CycleContext) -> None:
        handlers = self._hooks[phase]
        logger.debug("phase_started", phase=phase.value, handlers=len(handlers))

        for handler in handlers:
            try:
                result = handler(context)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as exc:
                logger.error("phase_handler_failed", phase=phase.value, error=str(exc))
                context.soul.remember(f"Error in {phase.value}: {exc}")
                continue
            if not _is_empty(result):
                context.results[phase.value] = result
