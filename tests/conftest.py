"""
Shared fixtures for the Neon assistant tests.
"""

import pytest

from neon_assistant.engine import NeonChatEngine
from neon_assistant.state_store import ChatStateStore


class FakeClock:
    """Manually advanced clock for TTL and cooldown tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def store(clock):
    """Create a state store with the default windows and a fake clock."""
    return ChatStateStore(
        cooldown_seconds=3,
        cache_ttl_seconds=86400,
        identity_stale_seconds=3600,
        clock=clock,
    )


@pytest.fixture
def engine(store):
    """Create a rules-only engine."""
    return NeonChatEngine(state_store=store)
