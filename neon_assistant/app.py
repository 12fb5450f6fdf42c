from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request

from .config import load_settings
from .domain import IncomingMessage
from .engine import NeonChatEngine
from .gemini_client import GeminiClient
from .history import derive_requestor_identity, optimize_chat_history
from .models import ChatMeta, ChatRequest, ChatResponse, HealthResponse, StatsResponse
from .prompt_loader import load_master_prompt
from .state_store import ChatStateStore
from .vocabulary import load_vocabulary, vocabulary_summary

BASE_DIR = Path(__file__).resolve().parent

log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
log_level = getattr(logging, log_level_name, logging.INFO)
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

logging.getLogger("neon").setLevel(log_level)
logger = logging.getLogger("neon.app")

ENV_PATH = BASE_DIR / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH, override=True)

app = FastAPI(title="Neon AI Shopping Assistant")

settings = load_settings()
vocabulary = load_vocabulary(settings.vocabulary_path)
state_store = ChatStateStore(
    cooldown_seconds=settings.cooldown_seconds,
    cache_ttl_seconds=settings.cache_ttl_seconds,
    identity_stale_seconds=settings.identity_stale_seconds,
)

gemini: Optional[GeminiClient] = None
if settings.ai_enabled:
    gemini = GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        system_instruction=load_master_prompt(settings.prompts_dir),
    )
engine = NeonChatEngine(state_store=state_store, vocabulary=vocabulary, gemini=gemini)
logger.info("engine ready ai_enabled=%s vocabulary=%s", engine.ai_enabled, vocabulary_summary(vocabulary))


@app.post("/api/chat", response_model=ChatResponse)
def chat(payload: ChatRequest, request: Request) -> ChatResponse:
    """Purpose: Handle one chat message and return Neon's reply.
    Inputs/Outputs: Input is ChatRequest plus request headers; output is ChatResponse with meta.source.
    Side Effects / State: Updates cooldown records and the response cache in ChatStateStore.
    Dependencies: Uses NeonChatEngine, optimize_chat_history and derive_requestor_identity.
    Failure Modes: Blank message -> HTTP 400. Engine faults become a safe greeting reply, never a 500.
    If Removed: Core chat functionality is unavailable.
    Testing Notes: Send "hi" with no history and verify the canonical greeting and source.
    """
    # Validate, derive identity and turn index, then run the engine.
    text = (payload.message or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Message cannot be empty")
    history = optimize_chat_history(
        payload.chat_history,
        max_messages=settings.max_history_messages,
        max_chars=settings.max_message_chars,
    )
    identity = derive_requestor_identity(
        payload.user_id,
        forwarded_for=request.headers.get("x-forwarded-for"),
        real_ip=request.headers.get("x-real-ip"),
        client_host=request.client.host if request.client else None,
    )
    message = IncomingMessage(
        text=text,
        requestor_identity=identity,
        conversation_turn_index=len(history),
        audience_hint=payload.audience_hint,
    )
    reply = engine.handle_message(message, history=history)
    return ChatResponse(response=reply.response, success=True, meta=ChatMeta(source=reply.source))


@app.get("/api/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        ai_enabled=engine.ai_enabled,
        model=engine.ai_model,
    )


@app.get("/api/stats", response_model=StatsResponse)
def stats() -> StatsResponse:
    """Purpose: Report state store sizes for operators.
    Inputs/Outputs: No inputs; output is StatsResponse.
    Side Effects / State: Runs a sweep first so counts reflect live entries only.
    Dependencies: ChatStateStore.sweep/get_stats.
    Failure Modes: None.
    If Removed: Cache growth is invisible without reading logs.
    Testing Notes: After one chat request, cached_responses and tracked_identities are 1.
    """
    # Sweep, then snapshot.
    engine.state_store.sweep()
    return StatsResponse(**engine.state_store.get_stats())


def run() -> None:
    """Serve the app with uvicorn on HOST/PORT (defaults 0.0.0.0:8000)."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info("serving host=%s port=%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level=log_level_name.lower())


if __name__ == "__main__":
    run()
