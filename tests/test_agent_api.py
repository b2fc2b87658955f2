"""API tests for the agent inspection endpoints."""

import json

import pytest
from fastapi.testclient import TestClient

from genesis_framework.api.main import app, status_for
from genesis_framework.bootstrap import bootstrap
from genesis_framework.domain.errors import (
    AgentNotFoundError,
    ConstitutionFormatError,
    GenesisFrameworkError,
    ReplicationError,
)
from genesis_framework.runtime import earning_agent_constitution
from genesis_framework.runtime.agent import Agent
from genesis_framework.runtime.agent_manager import get_agent_manager
from genesis_framework.runtime.skills import Skill


@pytest.fixture
def api_setup(tmp_path, monkeypatch):
    root = tmp_path / ".genesis"
    monkeypatch.setattr("genesis_framework.config.settings.genesis_root", root)
    monkeypatch.setattr("genesis_framework.config.settings.souls_path", root / "souls")
    monkeypatch.setattr("genesis_framework.config.settings.constitution_path", None)
    get_agent_manager().clear()
    bootstrap()
    yield root
    get_agent_manager().clear()


@pytest.fixture
def client(api_setup):
    return TestClient(app)


@pytest.fixture
def echo_agent(api_setup):
    async def observe(ctx):
        return {"cycle": ctx.cycle, "laws": ctx.constitution.laws}

    agent = Agent(name="Echo", identity={"purpose": "echo"})
    agent.add_skill(Skill(name="observe", description="Looks around", execute=observe))
    agent.on("wake", lambda ctx: ctx.skills.get("observe").run(ctx))
    agent.on("reflect", lambda ctx: ctx.soul.remember(f"Reflected at cycle {ctx.cycle}"))
    return get_agent_manager().register(agent)


@pytest.fixture
def earner(api_setup):
    agent = Agent(name="Earner", constitution=earning_agent_constitution())
    agent.soul.section("finances")["daily_limit"] = 10
    return get_agent_manager().register(agent)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_list_agents(client, echo_agent, earner):
    response = client.get("/api/v1/agents")
    assert response.status_code == 200
    body = {item["name"]: item for item in response.json()}
    assert set(body) == {"Echo", "Earner"}
    assert body["Echo"]["skills"] == 1
    assert body["Echo"]["laws"] == 3
    assert body["Earner"]["laws"] == 9


def test_unknown_agent_returns_404(client):
    response = client.get("/api/v1/agents/ghost/status")
    assert response.status_code == 404
    assert "ghost" in response.json()["detail"]
    assert response.json()["error_type"] == "AgentNotFoundError"

    assert client.post("/api/v1/agents/ghost/cycles").status_code == 404
    assert client.post("/api/v1/agents/ghost/check", json={"type": "spend"}).status_code == 404


def test_run_cycle_and_status(client, echo_agent):
    response = client.post("/api/v1/agents/Echo/cycles")
    assert response.status_code == 200
    payload = response.json()
    assert payload["cycle"] == 1
    assert payload["results"]["wake"]["cycle"] == 1
    assert len(payload["results"]["wake"]["laws"]) == 3
    assert "reflect" not in payload["results"]

    status = client.get("/api/v1/agents/Echo/status").json()
    assert status["cycle"] == 1
    assert status["skills"][0]["name"] == "observe"
    assert status["skills"][0]["usage_count"] == 1
    assert status["memories"][-1]["event"] == "Reflected at cycle 1"
    assert echo_agent.soul.path.exists()


def test_run_cycle_conflicts_while_running(client, echo_agent, monkeypatch):
    monkeypatch.setattr(echo_agent.lifecycle, "_running", True)
    response = client.post("/api/v1/agents/Echo/cycles")
    assert response.status_code == 409
    assert echo_agent.soul.cycle == 0


def test_constitution_view(client, earner):
    response = client.get("/api/v1/agents/Earner/constitution")
    assert response.status_code == 200
    payload = response.json()
    assert [law["id"] for law in payload["laws"]][:3] == ["NO_HARM", "CREATE_VALUE", "BE_HONEST"]
    assert payload["display"].startswith("Law 1 [NO_HARM] (priority 0): Do no harm to others")


def test_memories_limit(client, echo_agent):
    for i in range(5):
        echo_agent.soul.remember(f"memory {i}")

    response = client.get("/api/v1/agents/Echo/memories", params={"limit": 2})
    assert response.status_code == 200
    assert [m["event"] for m in response.json()] == ["memory 3", "memory 4"]


def test_check_action_rejected(client, earner):
    response = client.post(
        "/api/v1/agents/Earner/check",
        json={"type": "spend", "amount": 25},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["allowed"] is False
    assert [law["id"] for law in payload["violations"]] == ["BUDGET_LIMIT"]
    assert payload["reasons"][0].startswith("[BUDGET_LIMIT]")


def test_check_action_allowed(client, earner):
    response = client.post(
        "/api/v1/agents/Earner/check",
        json={"type": "spend", "amount": 2},
    )
    assert response.status_code == 200
    assert response.json() == {"allowed": True, "violations": [], "reasons": []}


def test_check_action_passes_extra_fields(client, earner):
    earner.soul.section("topics")["blacklist"] = ["crypto"]
    response = client.post(
        "/api/v1/agents/Earner/check",
        json={"type": "write", "title": "All about crypto", "tags": ["x"]},
    )
    assert response.status_code == 200
    assert [law["id"] for law in response.json()["violations"]] == ["TOPIC_BLACKLIST"]


def test_check_action_requires_type(client, earner):
    response = client.post("/api/v1/agents/Earner/check", json={"amount": 1})
    assert response.status_code == 422
    payload = response.json()
    assert payload["detail"] == "Request validation failed"
    assert any("type" in err["field"] for err in payload["errors"])


def test_domain_errors_map_to_status_codes():
    assert status_for(AgentNotFoundError("x")) == 404
    assert status_for(ReplicationError("x")) == 409
    assert status_for(ConstitutionFormatError("x")) == 422
    assert status_for(GenesisFrameworkError("x")) == 500


def test_replicate_registers_child(client, echo_agent):
    response = client.post("/api/v1/agents/Echo/replicate", json={"name": "Scout", "seed": "explore"})
    assert response.status_code == 201
    assert response.json() == {
        "name": "Scout",
        "cycle": 0,
        "generation": 1,
        "laws": 3,
        "skills": 1,
    }

    names = [item["name"] for item in client.get("/api/v1/agents").json()]
    assert names == ["Echo", "Scout"]
    memories = client.get("/api/v1/agents/Scout/memories").json()
    assert memories[0]["event"] == 'Born from parent "Echo". Seed: "explore"'


def test_replicate_conflicts(client, echo_agent, api_setup):
    taken = client.post("/api/v1/agents/Echo/replicate", json={"name": "Echo"})
    assert taken.status_code == 409
    assert taken.json()["error_type"] == "AgentRegistrationError"

    (api_setup / "souls" / "Orphan.json").write_text("{}", encoding="utf-8")
    occupied = client.post("/api/v1/agents/Echo/replicate", json={"name": "Orphan"})
    assert occupied.status_code == 409
    assert occupied.json()["error_type"] == "ReplicationError"
    assert "Orphan" not in [item["name"] for item in client.get("/api/v1/agents").json()]


def test_replicate_rejects_unsafe_child_name(client, echo_agent):
    response = client.post("/api/v1/agents/Echo/replicate", json={"name": "../escape"})
    assert response.status_code == 422
    assert response.json()["detail"] == "Request validation failed"


def test_shutdown_flushes_live_souls(api_setup, echo_agent):
    with TestClient(app) as client:
        assert client.get("/health").json()["agents"] == 1
        echo_agent.soul.remember("unsaved thought")

    on_disk = json.loads(echo_agent.soul.path.read_text(encoding="utf-8"))
    assert on_disk["memory"][-1]["event"] == "unsaved thought"
