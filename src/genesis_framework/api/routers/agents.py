"""Agents router - status, constitution, memories, cycles and replication."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field, field_validator

from genesis_framework.api.dependencies import get_agent_manager_dep
from genesis_framework.domain.errors import AgentRegistrationError
from genesis_framework.infrastructure.storage.path_guard import validate_agent_name
from genesis_framework.runtime.agent import Agent
from genesis_framework.runtime.agent_manager import AgentManager

router = APIRouter(prefix="/agents", tags=["agents"])

ERROR_404_AGENT = {
    "description": "No live agent is registered under this name.",
    "content": {
        "application/json": {
            "example": {
                "detail": "Agent 'Echo' not found"
            }
        }
    },
}
ERROR_409_REPLICATE = {
    "description": "The child name is taken or its soul file already exists.",
    "content": {
        "application/json": {
            "example": {
                "detail": "Agent 'Scout' is already registered",
                "error_type": "AgentRegistrationError",
            }
        }
    },
}
ERROR_409_CYCLE = {
    "description": "A cycle is already in flight for this agent.",
    "content": {
        "application/json": {
            "example": {
                "detail": "Cycle already running for agent 'Echo'"
            }
        }
    },
}


class AgentSummary(BaseModel):
    """Summary of a live agent."""

    name: str
    cycle: int
    generation: int = 0
    laws: int
    skills: int


class SkillInfo(BaseModel):
    name: str
    description: str = ""
    priority: int = 5
    proficiency: int = 1
    usage_count: int = 0


class AgentStatus(BaseModel):
    """Snapshot returned by ``Agent.status()``."""

    name: str
    cycle: int
    generation: int = 0
    skills: List[SkillInfo] = Field(default_factory=list)
    memories: List[Dict[str, Any]] = Field(default_factory=list)
    laws: int


class LawInfo(BaseModel):
    id: str
    priority: int
    text: str


class ConstitutionView(BaseModel):
    laws: List[LawInfo]
    display: str


class CycleResponse(BaseModel):
    cycle: int
    results: Dict[str, Any] = Field(default_factory=dict)


class ActionCheckRequest(BaseModel):
    """An intended action, e.g. ``{"type": "spend", "amount": 3.5}``."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., min_length=1)
    amount: Optional[float] = None
    title: Optional[str] = None
    content: Optional[str] = None
    description: Optional[str] = None


class ReplicateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    seed: str = ""

    @field_validator("name")
    @classmethod
    def _valid_agent_name(cls, value: str) -> str:
        return validate_agent_name(value)


class ActionCheckResponse(BaseModel):
    allowed: bool
    violations: List[LawInfo] = Field(default_factory=list)
    reasons: List[str] = Field(default_factory=list)


def _to_json_safe(value: Any) -> Any:
    """Convert nested handler results into JSON-safe structures."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {str(k): _to_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_json_safe(v) for v in value]
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return _to_json_safe(to_dict())
    return str(value)


def _summary(agent: Agent) -> AgentSummary:
    return AgentSummary(
        name=agent.name,
        cycle=agent.soul.cycle,
        generation=agent.generation,
        laws=len(agent.constitution.laws),
        skills=len(agent.skills),
    )


@router.get("", response_model=List[AgentSummary])
async def list_agents(manager: AgentManager = Depends(get_agent_manager_dep)):
    """List live agents."""
    return [_summary(manager.get(name)) for name in manager.list_names()]


@router.get("/{name}/status", response_model=AgentStatus, responses={404: ERROR_404_AGENT})
async def get_status(name: str, manager: AgentManager = Depends(get_agent_manager_dep)):
    """Current status snapshot of an agent."""
    agent = manager.get(name)
    return AgentStatus(**agent.status())


@router.get(
    "/{name}/constitution",
    response_model=ConstitutionView,
    responses={404: ERROR_404_AGENT},
)
async def get_constitution(name: str, manager: AgentManager = Depends(get_agent_manager_dep)):
    """Laws in effect for an agent, in stored order."""
    agent = manager.get(name)
    return ConstitutionView(
        laws=[LawInfo(id=law.id, priority=law.priority, text=law.text) for law in agent.constitution.laws],
        display=agent.constitution.to_display_string(),
    )


@router.get("/{name}/memories", responses={404: ERROR_404_AGENT})
async def get_memories(
    name: str,
    limit: int = Query(default=10, ge=1, le=500),
    manager: AgentManager = Depends(get_agent_manager_dep),
) -> List[Dict[str, Any]]:
    """Most recent memories, oldest first."""
    agent = manager.get(name)
    return agent.soul.recent_memories(limit)


@router.post(
    "/{name}/cycles",
    response_model=CycleResponse,
    responses={404: ERROR_404_AGENT, 409: ERROR_409_CYCLE},
)
async def run_cycle(name: str, manager: AgentManager = Depends(get_agent_manager_dep)):
    """Run one cycle now."""
    agent = manager.get(name)
    if agent.lifecycle.is_running:
        raise HTTPException(status_code=409, detail=f"Cycle already running for agent {name!r}")
    results = await agent.run_cycle()
    if results is None:
        raise HTTPException(status_code=409, detail=f"Cycle already running for agent {name!r}")
    return CycleResponse(cycle=agent.soul.cycle, results=_to_json_safe(results))


@router.post(
    "/{name}/check",
    response_model=ActionCheckResponse,
    responses={404: ERROR_404_AGENT},
)
async def check_action(
    name: str,
    request: ActionCheckRequest,
    manager: AgentManager = Depends(get_agent_manager_dep),
):
    """Evaluate an intended action against the agent's constitution."""
    agent = manager.get(name)
    result = agent.check(request.model_dump(exclude_none=True))
    return ActionCheckResponse(
        allowed=result.allowed,
        violations=[LawInfo(id=law.id, priority=law.priority, text=law.text) for law in result.violations],
        reasons=list(result.reasons),
    )


@router.post(
    "/{name}/replicate",
    response_model=AgentSummary,
    status_code=201,
    responses={404: ERROR_404_AGENT, 409: ERROR_409_REPLICATE},
)
async def replicate_agent(
    name: str,
    request: ReplicateRequest,
    manager: AgentManager = Depends(get_agent_manager_dep),
):
    """Create a child of ``name`` and register it as a live agent."""
    parent = manager.get(name)
    if request.name in manager.list_names():
        raise AgentRegistrationError(f"Agent {request.name!r} is already registered")
    child = parent.replicate(name=request.name, seed=request.seed)
    manager.register(child)
    return _summary(child)
