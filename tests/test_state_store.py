"""
Tests for the response cache and cooldown records.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from neon_assistant.state_store import COOLDOWN_REPLY, ChatStateStore


def test_cooldown_blocks_inside_window(store, clock):
    """Test a burst from one identity."""
    assert store.check_cooldown("user:a") is None
    clock.advance(1)
    assert store.check_cooldown("user:a") == COOLDOWN_REPLY
    assert store.check_cooldown("user:b") is None


def test_blocked_request_extends_window(store, clock):
    """Test that a blocked request still refreshes the timestamp."""
    store.check_cooldown("user:a")
    clock.advance(2)
    assert store.check_cooldown("user:a") == COOLDOWN_REPLY
    clock.advance(2)
    assert store.check_cooldown("user:a") == COOLDOWN_REPLY
    clock.advance(3)
    assert store.check_cooldown("user:a") is None


def test_cache_ttl(store, clock):
    """Test cache expiry."""
    store.put_response("k", "reply")
    clock.advance(86400)
    assert store.get_response("k") == "reply"
    clock.advance(1)
    assert store.get_response("k") is None
    assert store.get_stats()["cached_responses"] == 0


def test_sweep_removes_expired_and_stale(store, clock):
    """Test sweeping both maps."""
    store.put_response("k", "reply")
    store.check_cooldown("user:a")
    clock.advance(3601)
    assert store.sweep() == {"responses": 0, "identities": 1}
    clock.advance(86400)
    assert store.sweep() == {"responses": 1, "identities": 0}
    stats = store.get_stats()
    assert stats["cached_responses"] == 0
    assert stats["tracked_identities"] == 0


def test_clear(store):
    """Test clearing the store."""
    store.put_response("k", "reply")
    store.check_cooldown("user:a")
    store.clear()
    assert store.get_response("k") is None
    assert store.check_cooldown("user:a") is None


def test_invalid_windows():
    """Test non-positive windows."""
    with pytest.raises(ValueError):
        ChatStateStore(cooldown_seconds=0, cache_ttl_seconds=1, identity_stale_seconds=1)


def test_concurrent_access():
    """Test the shared maps under concurrent requests."""
    store = ChatStateStore(cooldown_seconds=3, cache_ttl_seconds=86400, identity_stale_seconds=3600)
    identities = [f"user:{n}" for n in range(10)]

    def request(i):
        identity = identities[i % len(identities)]
        store.check_cooldown(identity)
        store.put_response(f"key-{i}", f"reply {i}")
        store.sweep()
        return store.get_response(f"key-{i}")

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(request, range(200)))

    assert results == [f"reply {i}" for i in range(200)]
    stats = store.get_stats()
    assert stats["tracked_identities"] == len(identities)
    assert stats["cached_responses"] == 200
