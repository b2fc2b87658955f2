"""Agent - the composed runtime unit.

An Agent owns one Soul and one LifeCycle, keeps a SkillRegistry, and
references a Constitution that may be shared with its whole lineage.
"""

import asyncio
import copy
import signal
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import structlog

from genesis_framework.config import settings
from genesis_framework.domain.errors import ReplicationError
from genesis_framework.domain.laws import CheckResult
from genesis_framework.domain.phases import Phase
from genesis_framework.infrastructure.storage.path_guard import normalize_path, safe_join, validate_agent_name
from genesis_framework.infrastructure.time_utils import utc_now_iso
from genesis_framework.runtime.constitution import Constitution
from genesis_framework.runtime.lifecycle import LifeCycle, PhaseHandler
from genesis_framework.runtime.skills import Skill, SkillRegistry
from genesis_framework.runtime.soul import Soul

logger = structlog.get_logger()

STATUS_MEMORY_WINDOW = 3


def default_soul_path(name: str) -> Path:
    """Soul location for ``name`` under the configured souls directory."""
    return safe_join(settings.souls_path, f"{validate_agent_name(name)}.json")


class Agent:
    """A digital life form: soul + constitution + skills + life cycle."""

    def __init__(
        self,
        name: str = "Agent",
        soul_path: Optional[Union[str, Path]] = None,
        constitution_path: Optional[Union[str, Path]] = None,
        constitution: Optional[Constitution] = None,
        identity: Optional[Mapping[str, Any]] = None,
        services: Optional[Mapping[str, Any]] = None,
    ):
        self.name = name
        self.soul = Soul(soul_path if soul_path is not None else default_soul_path(name))
        self.constitution = self._resolve_constitution(constitution, constitution_path)
        self.skills = SkillRegistry()
        self.services: Dict[str, Any] = dict(services or {})
        self.lifecycle = LifeCycle(self)
        # Created per start_loop call, bound to that call's event loop
        self._stop_event: Optional[asyncio.Event] = None

        # Seed identity on first run only
        if not self.soul.identity.get("name"):
            self.soul.data.identity = {"name": name, **dict(identity or {})}

    @staticmethod
    def _resolve_constitution(
        constitution: Optional[Constitution],
        constitution_path: Optional[Union[str, Path]],
    ) -> Constitution:
        if constitution is not None:
            return constitution
        if constitution_path is not None:
            return Constitution.from_file(constitution_path)
        if settings.constitution_path is not None:
            return Constitution.from_file(settings.constitution_path)
        return Constitution.default()

    @property
    def generation(self) -> int:
        return int(self.soul.identity.get("generation", 0) or 0)

    def add_skill(self, skill: Union[Skill, Mapping[str, Any]]) -> "Agent":
        self.skills.register(skill)
        return self

    def get_skill(self, name: str) -> Optional[Skill]:
        return self.skills.get(name)

    def on(self, phase: Union[Phase, str], handler: PhaseHandler) -> "Agent":
        self.lifecycle.on(phase, handler)
        return self

    def provide(self, name: str, service: Any) -> "Agent":
        """Inject a dependency handlers can reach through ``context.services``."""
        self.services[name] = service
        return self

    def check(self, action: Mapping[str, Any]) -> CheckResult:
        """Check ``action`` against this agent's constitution."""
        return self.constitution.check(action, {"agent": self, "soul": self.soul})

    async def run_cycle(self) -> Optional[Dict[str, Any]]:
        return await self.lifecycle.run_cycle()

    async def start_loop(
        self,
        interval_seconds: Optional[float] = None,
        install_signal_handlers: bool = True,
    ) -> int:
        """Run a cycle now, then one per interval until ``stop()`` is called.

        Stopping takes effect between cycles. The soul is saved once more
        on the way out. Returns the number of cycles run.
        """
        interval = settings.loop_interval_seconds if interval_seconds is None else float(interval_seconds)
        loop = asyncio.get_running_loop()
        stop_event = asyncio.Event()
        self._stop_event = stop_event

        installed = []
        if install_signal_handlers:
            for sig in (signal.SIGINT, signal.SIGTERM):
                try:
                    loop.add_signal_handler(sig, self.stop)
                    installed.append(sig)
                except (NotImplementedError, RuntimeError) as exc:
                    logger.debug("signal_handler_unavailable", signal=str(sig), error=str(exc))

        logger.info("life_loop_started", agent=self.name, interval_seconds=interval)
        cycles = 0
        next_tick = loop.time()
        try:
            while True:
                await self.run_cycle()
                cycles += 1
                if stop_event.is_set():
                    break
                next_tick += interval
                try:
                    await asyncio.wait_for(
                        stop_event.wait(),
                        timeout=max(0.0, next_tick - loop.time()),
                    )
                    break
                except asyncio.TimeoutError:
                    continue
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
            self._stop_event = None
            self.soul.save()
            logger.info("life_loop_stopped", agent=self.name, cycles=cycles)
        return cycles

    def stop(self) -> None:
        """Ask a running life loop to finish after the current cycle.

        A no-op when no loop is running.
        """
        logger.info("life_loop_stop_requested", agent=self.name, running=self._stop_event is not None)
        if self._stop_event is not None:
            self._stop_event.set()

    def replicate(
        self,
        name: str,
        soul_path: Optional[Union[str, Path]] = None,
        seed: str = "",
    ) -> "Agent":
        """Create a child agent.

        The child shares this agent's constitution (same object), gets a
        copy of its lessons and fresh copies of its skills, and starts
        from a new, empty soul. Both souls are saved before returning.
        """
        child_path = Path(soul_path) if soul_path is not None else default_soul_path(name)
        if normalize_path(child_path) == normalize_path(self.soul.path):
            raise ReplicationError(f"Child {name!r} cannot share the parent's soul at {child_path}")
        if child_path.exists():
            raise ReplicationError(f"Soul already exists at {child_path}; a child needs a fresh soul")

        if self.soul.cycle < settings.replication_min_cycles:
            logger.warning(
                "replication_premature",
                agent=self.name,
                cycles_lived=self.soul.cycle,
                recommended=settings.replication_min_cycles,
            )

        child_generation = self.generation + 1
        child = Agent(
            name=name,
            soul_path=child_path,
            constitution=self.constitution,
            identity={
                "parent": self.name,
                "generation": child_generation,
                "seed": seed,
                "born": utc_now_iso(),
            },
        )

        # Wisdom transfers by value
        child.soul.data.lessons = copy.deepcopy(self.soul.lessons)

        for skill in self.skills.values():
            child.add_skill(skill.clone())

        self.soul.remember(f'Replicated child: "{name}" (Gen-{child_generation})')
        self.soul.log_evolution("REPLICATE", f'Created child "{name}" with seed: "{seed}"')
        child.soul.remember(f'Born from parent "{self.name}". Seed: "{seed}"')

        self.soul.save()
        child.soul.save()

        logger.info(
            "agent_replicated",
            parent=self.name,
            child=name,
            generation=child_generation,
            skills=len(child.skills),
            lessons=len(child.soul.lessons),
        )
        return child

    def status(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "cycle": self.soul.cycle,
            "generation": self.generation,
            "skills": [skill.to_dict() for skill in self.skills.values()],
            "memories": self.soul.recent_memories(STATUS_MEMORY_WINDOW),
            "laws": len(self.constitution.laws),
        }
