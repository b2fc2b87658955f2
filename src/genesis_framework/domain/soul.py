"""Soul document - the durable memory of one agent."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

DEFAULT_SURVIVAL_LEVEL = "CRITICAL"

KNOWN_SECTIONS = ("identity", "state", "memory", "lessons", "goals", "evolution_log")
_STATE_KEYS = ("cycle", "survival_level")
_GOAL_KEYS = ("short", "mid", "long")


def _list_of_dicts(value: Any, key: str) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ValueError(f"soul section {key!r} must be a list of objects")
    return list(value)


def _str_list(value: Any, key: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"goal horizon {key!r} must be a list")
    return list(value)


@dataclass
class SoulState:
    """Counters the runtime owns (cycle) or only carries (survival level)."""

    cycle: int = 0
    survival_level: str = DEFAULT_SURVIVAL_LEVEL
    # Keys written by collaborators, e.g. "mode"
    extras: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extras)
        data.update({"cycle": self.cycle, "survival_level": self.survival_level})
        return data


@dataclass
class Goals:
    """Short/mid/long horizon goals; not interpreted by the runtime."""

    short: List[Any] = field(default_factory=list)
    mid: List[Any] = field(default_factory=list)
    long: List[Any] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extras)
        data.update({"short": self.short, "mid": self.mid, "long": self.long})
        return data


@dataclass
class SoulDocument:
    """The whole persisted document.

    ``memory``, ``lessons`` and ``evolution_log`` are append-only and grow
    without bound. ``extras`` carries any other top-level section a
    collaborator stores (finances, published content, topic lists...).
    """

    identity: Dict[str, Any] = field(default_factory=dict)
    state: SoulState = field(default_factory=SoulState)
    memory: List[Dict[str, Any]] = field(default_factory=list)
    lessons: List[Dict[str, Any]] = field(default_factory=list)
    goals: Goals = field(default_factory=Goals)
    evolution_log: List[Dict[str, Any]] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict."""
        data: Dict[str, Any] = dict(self.extras)
        data.update({
            "identity": self.identity,
            "state": self.state.to_dict(),
            "memory": self.memory,
            "lessons": self.lessons,
            "goals": self.goals.to_dict(),
            "evolution_log": self.evolution_log,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SoulDocument":
        """Deserialize from dict.

        Raises:
            ValueError: when the payload is not shaped like a soul document.
        """
        if not isinstance(data, dict):
            raise ValueError("soul document must be a JSON object")

        identity = data.get("identity") or {}
        if not isinstance(identity, dict):
            raise ValueError("soul section 'identity' must be an object")

        state_data = data.get("state") or {}
        if not isinstance(state_data, dict):
            raise ValueError("soul section 'state' must be an object")
        cycle = int(state_data.get("cycle", 0) or 0)
        if cycle < 0:
            raise ValueError("soul cycle must be non-negative")
        state = SoulState(
            cycle=cycle,
            survival_level=str(state_data.get("survival_level", DEFAULT_SURVIVAL_LEVEL)),
            extras={k: v for k, v in state_data.items() if k not in _STATE_KEYS},
        )

        goals_data = data.get("goals") or {}
        if not isinstance(goals_data, dict):
            raise ValueError("soul section 'goals' must be an object")
        goals = Goals(
            short=_str_list(goals_data.get("short"), "short"),
            mid=_str_list(goals_data.get("mid"), "mid"),
            long=_str_list(goals_data.get("long"), "long"),
            extras={k: v for k, v in goals_data.items() if k not in _GOAL_KEYS},
        )

        return cls(
            identity=dict(identity),
            state=state,
            memory=_list_of_dicts(data.get("memory"), "memory"),
            lessons=_list_of_dicts(data.get("lessons"), "lessons"),
            goals=goals,
            evolution_log=_list_of_dicts(data.get("evolution_log"), "evolution_log"),
            extras={k: v for k, v in data.items() if k not in KNOWN_SECTIONS},
        )
