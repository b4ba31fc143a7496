"""
Session API Tests

Drives the full relay over HTTP with the local transport and a scripted
model client.
"""

import time

import pytest
from fastapi.testclient import TestClient

from app.dependencies import build_relay, get_session_registry
from app.main import app
from tests.helpers import FakeModelClient
from transport.local import LocalTransport


@pytest.fixture
def relay():
    model = FakeModelClient(replies=["Bonjour!"])
    registry = build_relay(model_client=model, transport_factory=LocalTransport)
    app.dependency_overrides[get_session_registry] = lambda: registry
    with TestClient(app) as client:
        yield client, model
    app.dependency_overrides.clear()


def poll(client: TestClient, url: str, ready, attempts: int = 50):
    """Poll `url` until `ready(response)` holds."""
    for _ in range(attempts):
        response = client.get(url)
        if ready(response):
            return response
        time.sleep(0.02)
    raise AssertionError(f"{url} never became ready")


def create_paired_session(client: TestClient) -> str:
    session_id = client.get("/session/new").json()["session_id"]
    poll(client, f"/qr/{session_id}", lambda r: r.status_code == 200)
    assert client.post(f"/local/{session_id}/pair").status_code == 200
    return session_id


def test_health_check(relay):
    client, _ = relay
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_session_and_fetch_pairing_code(relay):
    client, _ = relay

    response = client.get("/session/new")

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    session_id = body["session_id"]

    qr = poll(client, f"/qr/{session_id}", lambda r: r.status_code == 200)
    assert qr.json()["payload"].startswith(f"local-pair:{session_id}:")

    summary = client.get(f"/session/{session_id}").json()
    assert summary["has_pairing_artifact"] is True
    assert summary["prompt"] == "You are a helpful assistant."


def test_pairing_code_is_gone_once_ready(relay):
    client, _ = relay
    session_id = create_paired_session(client)

    response = client.get(f"/qr/{session_id}")

    assert response.status_code == 404
    assert response.json() == {"detail": "QR not found"}
    assert client.get(f"/session/{session_id}").json()["status"] == "ready"


def test_unknown_session_returns_404(relay):
    client, _ = relay

    assert client.get("/qr/missing").status_code == 404
    assert client.get("/session/missing").status_code == 404
    assert client.delete("/session/missing").status_code == 404

    response = client.post("/session/missing/set-prompt", json={"prompt": "x"})
    assert response.status_code == 404
    assert response.json() == {"detail": "Session not found"}


def test_message_round_trip_with_custom_prompt(relay):
    client, model = relay
    session_id = create_paired_session(client)

    response = client.post(f"/session/{session_id}/set-prompt", json={"prompt": "Reply in French."})
    assert response.json() == {"message": "Prompt updated"}

    accepted = client.post(f"/local/{session_id}/messages", json={"sender_id": "alice", "text": "hello"})
    assert accepted.status_code == 202

    outbox = poll(client, f"/local/{session_id}/outbox", lambda r: len(r.json()["messages"]) == 1)
    assert outbox.json()["messages"] == [{"recipient_id": "alice", "text": "Bonjour!"}]
    assert model.calls[0][0] == {"role": "system", "content": "Reply in French."}

    history = client.get(f"/session/{session_id}/history/alice").json()
    assert history["turns"] == [
        {"role": "user", "content": "hello"},
        {"role": "assistant", "content": "Bonjour!"},
    ]


def test_clear_history(relay):
    client, _ = relay
    session_id = create_paired_session(client)

    missing = client.post(f"/session/{session_id}/clear-history/unknownUser")
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Session or user not found"}

    client.post(f"/local/{session_id}/messages", json={"sender_id": "alice", "text": "hi"})
    poll(client, f"/local/{session_id}/outbox", lambda r: len(r.json()["messages"]) == 1)

    response = client.post(f"/session/{session_id}/clear-history/alice")

    assert response.json() == {"message": "User history cleared"}
    assert client.get(f"/session/{session_id}/history/alice").json()["turns"] == []


def test_group_messages_are_ignored(relay):
    client, model = relay
    session_id = create_paired_session(client)

    client.post(f"/local/{session_id}/messages", json={"sender_id": "g1", "text": "hi", "is_group_chat": True})
    time.sleep(0.05)

    assert client.get(f"/local/{session_id}/outbox").json()["messages"] == []
    assert model.calls == []


def test_messages_before_pairing_are_rejected(relay):
    client, _ = relay
    session_id = client.get("/session/new").json()["session_id"]

    response = client.post(f"/local/{session_id}/messages", json={"sender_id": "alice", "text": "hi"})

    assert response.status_code == 409


def test_delete_session(relay):
    client, _ = relay
    session_id = create_paired_session(client)

    assert client.delete(f"/session/{session_id}").json() == {"message": "Session disconnected"}
    assert client.get(f"/session/{session_id}").status_code == 404
    assert session_id not in [s["session_id"] for s in client.get("/sessions").json()]
