"""
Tests for the chat API.
"""

import pytest
from fastapi.testclient import TestClient

import neon_assistant.app as app_module
from neon_assistant.engine import NeonChatEngine
from neon_assistant.responders import FIRST_RESPONSE_GREETING, GREETING_REPLIES


@pytest.fixture
def client(monkeypatch, store):
    """Create a test client backed by a fresh rules-only engine."""
    monkeypatch.setattr(app_module, "engine", NeonChatEngine(state_store=store))
    return TestClient(app_module.app)


def test_chat_first_message(client):
    """Test the first greeting."""
    response = client.post("/api/chat", json={"user_id": "u1", "message": "hi"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["response"] == FIRST_RESPONSE_GREETING
    assert data["meta"] == {"source": "friendly_chat"}


def test_chat_history_sets_turn(client):
    """Test that history makes the turn a later one."""
    history = [
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": FIRST_RESPONSE_GREETING},
    ]
    response = client.post("/api/chat", json={"user_id": "u2", "message": "hello", "chat_history": history})
    assert response.json()["response"] == GREETING_REPLIES[0]


def test_chat_invalid_history_is_ignored(client):
    """Test a non-list history."""
    response = client.post("/api/chat", json={"user_id": "u3", "message": "hi", "chat_history": "oops"})
    assert response.status_code == 200
    assert response.json()["response"] == FIRST_RESPONSE_GREETING


def test_chat_audience_hint(client):
    """Test the audience hint field."""
    response = client.post(
        "/api/chat",
        json={"user_id": "u4", "message": "suggest shirts", "audience_hint": "Men"},
    )
    assert response.json()["meta"]["source"] == "fashion_suggestion"
    assert "• Audience: Men" in response.json()["response"]


def test_chat_blank_message(client):
    """Test a blank message."""
    response = client.post("/api/chat", json={"message": "   "})
    assert response.status_code == 400


def test_chat_missing_message(client):
    """Test a missing message field."""
    response = client.post("/api/chat", json={"user_id": "u5"})
    assert response.status_code == 422


def test_chat_cooldown_by_forwarded_ip(client):
    """Test cooldown keyed on the forwarded address."""
    headers = {"x-forwarded-for": "10.0.0.1, 10.0.0.2"}
    first = client.post("/api/chat", json={"message": "hi"}, headers=headers)
    second = client.post("/api/chat", json={"message": "suggest a dress"}, headers=headers)
    assert first.json()["meta"]["source"] == "friendly_chat"
    assert second.json()["meta"]["source"] == "cooldown"


def test_health(client):
    """Test health endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "ai_enabled": False, "model": None}


def test_stats(client):
    """Test stats endpoint."""
    client.post("/api/chat", json={"user_id": "u6", "message": "tell me a joke"})
    response = client.get("/api/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["cached_responses"] == 1
    assert data["tracked_identities"] == 1
    assert data["cooldown_seconds"] == 3


def test_run_serves_app_with_uvicorn(monkeypatch):
    """Test the server entry point."""
    calls = []
    monkeypatch.setattr(app_module.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9001")
    app_module.run()
    assert calls[0][0] is app_module.app
    assert calls[0][1]["host"] == "127.0.0.1"
    assert calls[0][1]["port"] == 9001
