from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IntentMode(str, Enum):
    """Classified purpose of a user message."""
    PRODUCT_LINK = "product_link"
    FASHION_SUGGESTION = "fashion_suggestion"
    EDUCATION = "education"
    FRIENDLY_CHAT = "friendly_chat"


class Audience(str, Enum):
    """Shopper segment a reply is written for."""
    WOMEN = "Women"
    MEN = "Men"
    KIDS = "Kids"
    GENERAL = "General"


class LanguageStyle(str, Enum):
    """Register the user writes in."""
    ENGLISH = "english"
    HINGLISH = "hinglish"
    HINDI = "hindi"


SOURCE_COOLDOWN = "cooldown"
SOURCE_CACHE = "cache"
SOURCE_AI = "ai"
SOURCE_SAFE_FALLBACK = "safe-fallback"


@dataclass(frozen=True)
class IncomingMessage:
    """One inbound chat message as seen by the engine."""
    text: str
    requestor_identity: str
    conversation_turn_index: int = 0
    audience_hint: Optional[Audience] = None

    @property
    def is_first_turn(self) -> bool:
        return self.conversation_turn_index == 0

    @property
    def turn_phase(self) -> str:
        return "first" if self.is_first_turn else "next"


@dataclass(frozen=True)
class ChatReply:
    """Rendered reply plus the tag of the path that produced it."""
    response: str
    source: str
