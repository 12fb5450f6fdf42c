from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from .domain import Audience


class ChatRequest(BaseModel):
    """Request payload for chat API."""
    user_id: Optional[str] = Field(default=None)
    message: str
    chat_history: Any = Field(default=None)
    audience_hint: Optional[Audience] = Field(default=None)


class ChatMeta(BaseModel):
    """Which path produced the reply."""
    source: str


class ChatResponse(BaseModel):
    """Response payload returned by the chat API."""
    response: str
    success: bool = True
    meta: ChatMeta


class HealthResponse(BaseModel):
    status: str
    ai_enabled: bool
    model: Optional[str] = None


class StatsResponse(BaseModel):
    """Live state store sizes and configured windows."""
    cached_responses: int
    tracked_identities: int
    cooldown_seconds: float
    cache_ttl_seconds: float
    identity_stale_seconds: float
