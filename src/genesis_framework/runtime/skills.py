"""Skills - named async capabilities an agent can invoke."""

import inspect
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

SkillBody = Callable[[Any], Union[Any, Awaitable[Any]]]


class Skill:
    """Metadata plus one callable.

    ``proficiency`` is self-reported (1-5) and informational only; nothing in
    the runtime schedules or selects skills by it.
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        execute: Optional[SkillBody] = None,
        priority: int = 5,
    ):
        if not name:
            raise ValueError("skill name is required")
        if execute is None or not callable(execute):
            raise TypeError(f"skill {name!r} needs a callable execute(context)")
        self.name = name
        self.description = description
        self.execute = execute
        self.priority = priority
        self.proficiency = 1
        self.usage_count = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Skill":
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            execute=data.get("execute"),
            priority=data.get("priority", 5),
        )

    async def run(self, context: Any) -> Any:
        """Invoke the body. Failures propagate untouched; no retry, no timeout."""
        self.usage_count += 1
        result = self.execute(context)
        if inspect.isawaitable(result):
            result = await result
        return result

    def clone(self) -> "Skill":
        """Same body and metadata, fresh counters."""
        return Skill(
            name=self.name,
            description=self.description,
            execute=self.execute,
            priority=self.priority,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "priority": self.priority,
            "proficiency": self.proficiency,
            "usage_count": self.usage_count,
        }

    def __repr__(self) -> str:
        return f"Skill(name={self.name!r}, priority={self.priority}, usage_count={self.usage_count})"


class SkillRegistry:
    """Skills keyed by name; registering an existing name replaces it."""

    def __init__(self) -> None:
        self._skills: Dict[str, Skill] = {}

    def register(self, skill: Union[Skill, Mapping[str, Any]]) -> Skill:
        if not isinstance(skill, Skill):
            skill = Skill.from_mapping(skill)
        self._skills[skill.name] = skill
        return skill

    def get(self, name: str) -> Optional[Skill]:
        return self._skills.get(name)

    def names(self) -> List[str]:
        return list(self._skills)

    def values(self) -> List[Skill]:
        return list(self._skills.values())

    def items(self) -> List[Tuple[str, Skill]]:
        return list(self._skills.items())

    def __contains__(self, name: object) -> bool:
        return name in self._skills

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._skills))

    def __len__(self) -> int:
        return len(self._skills)
