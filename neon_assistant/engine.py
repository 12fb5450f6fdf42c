"""Neon chat engine: gate, cache, classify, render, greet.

Role:
    Turns one IncomingMessage into one ChatReply. The engine owns the request
    context and the step order; every decision inside a step is delegated to the
    pure modules (intent, audience, responders, greeting).

Step contracts:
    Cooldown Gate:
        Always runs first; a blocked identity gets the cooldown reply and every
        later step is skipped.
    Sweep:
        Evicts expired cache entries and stale cooldown records.
    Intent Detection:
        Sets mode and the cache key (turn phase + mode + audience hint + normalized text).
    Cache Lookup:
        A live entry becomes the reply with source "cache".
    Audience & Language:
        Resolves the audience hint and language style.
    AI Reply:
        Only when a Gemini client is configured; failures fall through to rules.
    Rule Reply:
        Renders the builder for the detected mode when no AI body exists.
    Finalize:
        Applies the first-turn greeting, stores the reply in the cache.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .audience import detect_audience_hint, infer_language_style
from .domain import (
    SOURCE_AI,
    SOURCE_CACHE,
    SOURCE_COOLDOWN,
    SOURCE_SAFE_FALLBACK,
    Audience,
    ChatReply,
    IncomingMessage,
    IntentMode,
    LanguageStyle,
)
from .gemini_client import GeminiClient
from .greeting import apply_first_turn_greeting
from .intent import classify_intent
from .responders import build_friendly_chat_reply, build_mode_response
from .state_store import ChatStateStore
from .step_runner import PipelineStep, StepRunner
from .utils import hash_cache_key, mask_identity
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger("neon.engine")


@dataclass
class ChatTurnContext:
    """Mutable context passed through each pipeline step."""
    message: IncomingMessage
    history: List[Dict[str, str]] = field(default_factory=list)
    mode: Optional[IntentMode] = None
    cache_key: str = ""
    audience: Audience = Audience.GENERAL
    language: LanguageStyle = LanguageStyle.ENGLISH
    body: str = ""
    body_source: str = ""
    reply: Optional[str] = None
    source: str = ""

    @property
    def answered(self) -> bool:
        return self.reply is not None


def build_safe_reply() -> str:
    """Generic first-turn friendly reply used when anything inside the engine fails."""
    return apply_first_turn_greeting(build_friendly_chat_reply("hello", Audience.GENERAL, LanguageStyle.ENGLISH), True)


class NeonChatEngine:
    def __init__(
        self,
        state_store: ChatStateStore,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        gemini: Optional[GeminiClient] = None,
    ) -> None:
        """Purpose: Wire the shared state store, vocabularies and optional AI client into a step runner.
        Inputs/Outputs: Inputs are a ChatStateStore, a Vocabulary and an optional GeminiClient.
        Side Effects / State: Builds the StepRunner; holds references to shared state only.
        Dependencies: StepRunner/PipelineStep and the step methods on this class.
        Failure Modes: None at init.
        If Removed: The chat endpoint has nothing to call.
        Testing Notes: Construct with a fake-clock ChatStateStore and no Gemini client.
        """
        # Store dependencies and build the ordered step list.
        self._state = state_store
        self._vocabulary = vocabulary
        self._gemini = gemini
        skip_when_answered = _is_answered
        self._runner: StepRunner[ChatTurnContext] = StepRunner(
            steps=[
                PipelineStep("cooldown_gate", self._step_cooldown_gate, always_run=True),
                PipelineStep("sweep", self._step_sweep, skip_if=skip_when_answered),
                PipelineStep("intent_detection", self._step_intent_detection, skip_if=skip_when_answered),
                PipelineStep("cache_lookup", self._step_cache_lookup, skip_if=skip_when_answered),
                PipelineStep("audience_language", self._step_audience_language, skip_if=skip_when_answered),
                PipelineStep("ai_reply", self._step_ai_reply, skip_if=self._skip_ai),
                PipelineStep("rule_reply", self._step_rule_reply, skip_if=_has_body_or_answer),
                PipelineStep("finalize", self._step_finalize, skip_if=skip_when_answered),
            ]
        )

    @property
    def ai_enabled(self) -> bool:
        return self._gemini is not None

    @property
    def ai_model(self) -> Optional[str]:
        return self._gemini.model_name if self._gemini else None

    @property
    def state_store(self) -> ChatStateStore:
        return self._state

    def handle_message(self, message: IncomingMessage, history: Optional[List[Dict[str, str]]] = None) -> ChatReply:
        """Purpose: Produce the reply for one inbound message.
        Inputs/Outputs: Inputs are the IncomingMessage and optional optimized history; output is ChatReply.
        Side Effects / State: Updates the cooldown record; may read, evict and write cache entries.
        Dependencies: StepRunner and ChatStateStore.
        Failure Modes: Raises ValueError for empty text (callers validate first). Any other
            exception is logged and converted to the safe greeting reply.
        If Removed: No chat replies are produced.
        Testing Notes: "hi" on a first turn -> canonical greeting with source friendly_chat.
        """
        # Validate, run the pipeline, and degrade to the safe reply on any internal fault.
        if not message.text or not message.text.strip():
            raise ValueError("Message cannot be empty")
        context = ChatTurnContext(message=message, history=list(history or []))
        logger.info(
            "identity=%s turn=%s question=%s",
            mask_identity(message.requestor_identity),
            message.conversation_turn_index,
            message.text,
        )
        try:
            self._runner.run(context)
        except Exception:
            logger.exception("identity=%s status=safe_fallback", mask_identity(message.requestor_identity))
            return ChatReply(response=build_safe_reply(), source=SOURCE_SAFE_FALLBACK)
        if context.reply is None:
            logger.error("identity=%s status=no_reply", mask_identity(message.requestor_identity))
            return ChatReply(response=build_safe_reply(), source=SOURCE_SAFE_FALLBACK)
        logger.info("identity=%s source=%s", mask_identity(message.requestor_identity), context.source)
        return ChatReply(response=context.reply, source=context.source)

    def _step_cooldown_gate(self, context: ChatTurnContext) -> None:
        # Blocked identities are answered here; the timestamp is overwritten either way.
        cooldown_reply = self._state.check_cooldown(context.message.requestor_identity)
        if cooldown_reply:
            context.reply = cooldown_reply
            context.source = SOURCE_COOLDOWN

    def _step_sweep(self, context: ChatTurnContext) -> None:
        self._state.sweep()

    def _step_intent_detection(self, context: ChatTurnContext) -> None:
        """Purpose: Classify the message and derive its cache key.
        Inputs/Outputs: Input is ChatTurnContext; sets mode and cache_key.
        Side Effects / State: None beyond the context.
        Dependencies: classify_intent and hash_cache_key.
        Failure Modes: None; classification is total.
        If Removed: No builder can be chosen and nothing can be cached.
        Testing Notes: Same text on first and later turns, or with another hint, yields different keys.
        """
        # Phase, mode and the caller hint are all part of the key.
        message = context.message
        hint = message.audience_hint.value if message.audience_hint else ""
        context.mode = classify_intent(message.text, self._vocabulary)
        context.cache_key = hash_cache_key(message.turn_phase, context.mode.value, message.text, hint)
        logger.info(
            "identity=%s intent=%s phase=%s",
            mask_identity(message.requestor_identity),
            context.mode.value,
            message.turn_phase,
        )

    def _step_cache_lookup(self, context: ChatTurnContext) -> None:
        cached = self._state.get_response(context.cache_key)
        if cached is not None:
            context.reply = cached
            context.source = SOURCE_CACHE
            logger.debug("cache hit key=%s", context.cache_key[:12])

    def _step_audience_language(self, context: ChatTurnContext) -> None:
        # The caller's hint wins over the broad guess; explicit words are resolved by the builders.
        text = context.message.text
        context.audience = context.message.audience_hint or detect_audience_hint(text)
        context.language = infer_language_style(text)
        logger.debug("audience=%s language=%s", context.audience.value, context.language.value)

    def _skip_ai(self, context: ChatTurnContext) -> bool:
        return self._gemini is None or context.answered

    def _step_ai_reply(self, context: ChatTurnContext) -> None:
        """Purpose: Ask the AI collaborator once for the reply body.
        Inputs/Outputs: Input is ChatTurnContext; sets body/body_source on success.
        Side Effects / State: One outbound Gemini call.
        Dependencies: GeminiClient.generate_reply.
        Failure Modes: Any SDK or network error, or an empty answer, leaves the body empty
            so the rule builder answers instead.
        If Removed: Configured deployments answer with rules only.
        Testing Notes: A stub client that raises must still produce a rule-based reply.
        """
        # No retries; a failed call just falls through.
        if self._gemini is None or context.mode is None:
            raise RuntimeError("ai_reply needs a Gemini client and a detected intent mode")
        try:
            text = self._gemini.generate_reply(context.history, context.message.text, context.mode.value)
        except Exception as exc:
            logger.warning("ai_reply failed model=%s error=%s", self._gemini.model_name, exc)
            return
        if not text:
            logger.warning("ai_reply empty model=%s", self._gemini.model_name)
            return
        context.body = text
        context.body_source = SOURCE_AI

    def _step_rule_reply(self, context: ChatTurnContext) -> None:
        if context.mode is None:
            raise RuntimeError("rule_reply needs a detected intent mode")
        context.body = build_mode_response(
            context.mode,
            context.message.text,
            context.audience,
            context.language,
            self._vocabulary,
        )
        context.body_source = context.mode.value

    def _step_finalize(self, context: ChatTurnContext) -> None:
        # Greet, then cache the final text so hits are byte-identical.
        final = apply_first_turn_greeting(context.body, context.message.is_first_turn)
        self._state.put_response(context.cache_key, final)
        context.reply = final
        context.source = context.body_source


def _is_answered(context: ChatTurnContext) -> bool:
    return context.answered


def _has_body_or_answer(context: ChatTurnContext) -> bool:
    return context.answered or bool(context.body)
