"""Soul - persistent agent memory.

One JSON document per agent, loaded leniently and rewritten whole on save.
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Union

import structlog

from genesis_framework.domain.soul import KNOWN_SECTIONS, SoulDocument
from genesis_framework.infrastructure.storage.io_text import read_text, write_json_atomic
from genesis_framework.infrastructure.time_utils import utc_now_iso

logger = structlog.get_logger()


class Soul:
    """Persistent state of one agent, bound to a single file location."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.data = SoulDocument()
        self.load()

    def load(self) -> None:
        """(Re)load the document; a missing or broken file yields a fresh one."""
        self.data = SoulDocument()
        if not self.path.exists():
            return
        try:
            raw = read_text(self.path)
            self.data = SoulDocument.from_dict(json.loads(raw))
        except (OSError, ValueError, TypeError) as exc:
            logger.warning(
                "soul_load_failed",
                path=str(self.path),
                error=str(exc),
                action="starting_fresh",
            )
            self.data = SoulDocument()

    def save(self) -> None:
        """Overwrite the stored document. I/O errors propagate."""
        write_json_atomic(self.path, self.data.to_dict())
        logger.debug("soul_saved", path=str(self.path), cycle=self.cycle)

    @property
    def cycle(self) -> int:
        return self.data.state.cycle

    @cycle.setter
    def cycle(self, value: int) -> None:
        self.data.state.cycle = int(value)

    @property
    def survival_level(self) -> str:
        return self.data.state.survival_level

    @survival_level.setter
    def survival_level(self, value: str) -> None:
        self.data.state.survival_level = str(value)

    @property
    def identity(self) -> Dict[str, Any]:
        return self.data.identity

    @property
    def lessons(self) -> List[Dict[str, Any]]:
        return self.data.lessons

    @property
    def memory(self) -> List[Dict[str, Any]]:
        return self.data.memory

    def remember(self, event: str) -> None:
        self.data.memory.append({
            "event": event,
            "cycle": self.cycle,
            "timestamp": utc_now_iso(),
        })

    def learn_lesson(self, lesson: str) -> None:
        self.data.lessons.append({
            "lesson": lesson,
            "cycle": self.cycle,
            "timestamp": utc_now_iso(),
        })

    def log_evolution(self, action: str, result: str) -> None:
        self.data.evolution_log.append({
            "action": action,
            "result": result,
            "cycle": self.cycle,
            "timestamp": utc_now_iso(),
        })

    def recent_memories(self, n: int = 10) -> List[Dict[str, Any]]:
        """Last ``n`` memories, oldest first. Copies, never views."""
        if n <= 0:
            return []
        return copy.deepcopy(self.data.memory[-n:])

    def section(self, name: str) -> Dict[str, Any]:
        """Return the named collaborator section, creating it if absent.

        Raises:
            ValueError: ``name`` is one of the runtime-owned sections, or
                an existing section by that name is not an object.
        """
        if name in KNOWN_SECTIONS:
            raise ValueError(f"{name!r} is a runtime-owned section, not a collaborator section")
        section = self.data.extras.get(name)
        if section is None:
            section = {}
            self.data.extras[name] = section
        elif not isinstance(section, dict):
            raise ValueError(f"soul section {name!r} holds {type(section).__name__}, not an object")
        return section

    def to_context(self) -> Dict[str, Any]:
        """Read-only summary, e.g. to hand to a generation step."""
        return copy.deepcopy({
            "identity": self.data.identity,
            "cycle": self.cycle,
            "survival_level": self.survival_level,
            "recent_memories": self.data.memory[-5:],
            "lessons": self.data.lessons,
            "goals": self.data.goals.to_dict(),
        })

    summary = to_context
