import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from agent_service import get_agent_client
from main import app

GROCERY_ITEMS = [
    {"id": "e1", "amount": 100, "category": "Groceries", "date": "2024-01-05", "description": ""},
    {"id": "e2", "amount": 50, "category": "Groceries", "date": "2024-02-05", "description": ""},
]

AGENT_ADVICE = {
    "suggestions": ["From the agent."],
    "envelopes": [],
    "stats": {"total": 1.0, "topCategories": [], "months": []},
    "narrative": "Agent narrative.",
}


def _agent_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://agent.test")


@pytest.fixture
def client():
    app.dependency_overrides[get_agent_client] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def agent(client):
    """Installs a mock agent service; tests set `agent.handler` and read `agent.requests`."""
    class MockAgent:
        handler = None
        requests = []

        def __call__(self, request):
            self.requests.append(request)
            return self.handler(request)

    mock = MockAgent()
    mock.requests = []
    agent_client = _agent_client(mock)
    app.dependency_overrides[get_agent_client] = lambda: agent_client
    yield mock
    asyncio.run(agent_client.aclose())


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["documentation"] == "/docs"


def test_unknown_type_is_rejected(client):
    response = client.post("/api/mesh", json={"type": "tasks.delete", "payload": {}})
    assert response.status_code == 400
    assert response.json() == {"detail": "Unknown type"}


def test_expense_add_is_acknowledged(client):
    response = client.post("/api/mesh", json={"type": "expense.add", "payload": GROCERY_ITEMS[0]})
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_expense_advise_locally(client):
    response = client.post("/api/mesh", json={"type": "expense.advise", "payload": {"items": GROCERY_ITEMS, "seed": 1}})
    assert response.status_code == 200
    data = response.json()

    assert data["stats"]["total"] == 150
    assert data["stats"]["topCategories"] == [{"category": "Groceries", "amount": 150}]
    assert data["stats"]["months"] == [{"month": "2024-01", "total": 100}, {"month": "2024-02", "total": 50}]
    assert data["envelopes"] == [{"category": "Groceries", "weeklyCap": 40, "targetCutPct": 12, "currency": "CAD"}]
    assert 1 <= len(data["suggestions"]) <= 6


def test_expense_advise_is_reproducible(client):
    body = {"type": "expense.advise", "payload": {"items": GROCERY_ITEMS, "seed": 9, "maxSuggestions": 3}}
    first = client.post("/api/mesh", json=body).json()
    second = client.post("/api/mesh", json=body).json()
    assert first == second
    assert len(first["suggestions"]) == 3


def test_expense_advise_coerces_malformed_numbers(client):
    items = GROCERY_ITEMS + [{"id": "e3", "amount": "lots", "category": "Groceries", "date": "2024-02-06"}]
    payload = {"items": items, "seed": "not-a-seed", "maxSuggestions": "many"}
    response = client.post("/api/mesh", json={"type": "expense.advise", "payload": payload})

    assert response.status_code == 200
    data = response.json()
    assert data["stats"]["total"] == 150
    assert 1 <= len(data["suggestions"]) <= 6


def test_expense_advise_empty_payload(client):
    response = client.post("/api/mesh", json={"type": "expense.advise"})
    assert response.status_code == 200
    data = response.json()
    assert len(data["suggestions"]) == 1
    assert data["envelopes"] == []
    assert data["stats"]["total"] == 0


def test_tasks_plan_locally(client):
    tasks = [
        {"id": "1", "title": "Write", "notes": "", "priority": "high", "tags": ["deep-work"], "completed": False, "createdAt": 1},
        {"id": "2", "title": "Done", "notes": "", "priority": "low", "tags": [], "completed": True, "createdAt": 2, "completedAt": 3},
        {"id": "3", "title": "Call bank", "notes": "blocked: hold music", "priority": "low", "tags": [], "completed": False, "createdAt": 4},
    ]
    response = client.post("/api/mesh", json={"type": "tasks.plan", "payload": {"tasks": tasks, "seed": 7}})
    assert response.status_code == 200
    data = response.json()

    assert [block["id"] for block in data["plan"]] == ["1", "3"]
    assert "blocked" not in data["plan"][0]
    assert data["plan"][1]["blocked"] is True
    assert data["blocked"] == ["Call bank"]
    assert data["buckets"] == {"deep-work": ["Write"], "general": ["Call bank"]}
    assert len(data["nudges"]) == 4
    assert data["planText"].count("- [ ] ") == 2


def test_tasks_plan_tolerates_unknown_priority_and_missing_id(client):
    tasks = [{"id": "1", "title": "Write", "priority": "urgent"}, {"title": "Untracked"}]
    response = client.post("/api/mesh", json={"type": "tasks.plan", "payload": {"tasks": tasks, "seed": 5}})
    assert response.status_code == 200

    plan = response.json()["plan"]
    assert sorted(block["title"] for block in plan) == ["Untracked", "Write"]
    assert all(block["estimateMin"] in (20, 25) for block in plan)


def test_tasks_plan_rejects_non_list_tasks(client):
    response = client.post("/api/mesh", json={"type": "tasks.plan", "payload": {"tasks": "not a list"}})
    assert response.status_code == 422


def test_tasks_streak(client):
    payload = {"streak": 3, "lastCompletionDate": "2024-03-09", "today": "2024-03-10"}
    response = client.post("/api/mesh", json={"type": "tasks.streak", "payload": payload})
    assert response.status_code == 200
    assert response.json() == {"streak": 4, "lastCompletionDate": "2024-03-10"}


def test_agent_answer_is_returned(agent, client):
    agent.handler = lambda request: httpx.Response(200, json=AGENT_ADVICE)
    response = client.post("/api/mesh", json={"type": "expense.advise", "payload": {"items": GROCERY_ITEMS}})

    assert response.status_code == 200
    assert response.json() == AGENT_ADVICE
    assert len(agent.requests) == 1
    assert agent.requests[0].url.path == "/api/v1/message:send"


@pytest.mark.parametrize("handler", [
    lambda request: httpx.Response(503, json={"error": "down"}),
    lambda request: httpx.Response(200, content=b"<html>not json</html>"),
    lambda request: httpx.Response(200, json={"unexpected": True}),
])
def test_agent_failure_falls_back_to_local_advice(agent, client, handler):
    agent.handler = handler
    response = client.post("/api/mesh", json={"type": "expense.advise", "payload": {"items": GROCERY_ITEMS, "seed": 1}})

    assert response.status_code == 200
    assert response.json()["stats"]["total"] == 150
    assert len(agent.requests) == 1


def test_agent_network_error_falls_back_to_local_plan(agent, client):
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    agent.handler = unreachable
    tasks = [{"id": "1", "title": "Write", "priority": "high"}]
    response = client.post("/api/mesh", json={"type": "tasks.plan", "payload": {"tasks": tasks, "seed": 2}})

    assert response.status_code == 200
    assert [block["title"] for block in response.json()["plan"]] == ["Write"]


def test_expense_add_is_never_forwarded(agent, client):
    agent.handler = lambda request: httpx.Response(200, json={"ok": False})
    response = client.post("/api/mesh", json={"type": "expense.add", "payload": GROCERY_ITEMS[1]})

    assert response.json() == {"ok": True}
    assert agent.requests == []


def test_agent_client_is_reused_across_requests(agent, client):
    agent.handler = lambda request: httpx.Response(200, json=AGENT_ADVICE)
    body = {"type": "expense.advise", "payload": {"items": GROCERY_ITEMS}}
    assert client.post("/api/mesh", json=body).json() == AGENT_ADVICE
    assert client.post("/api/mesh", json=body).json() == AGENT_ADVICE
    assert len(agent.requests) == 2
