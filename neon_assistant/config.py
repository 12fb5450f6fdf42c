from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

BASE_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class Settings:
    """Configuration container for the AI collaborator, throttling windows, and history limits."""
    gemini_api_key: str
    gemini_model: str
    prompts_dir: Path
    vocabulary_path: Optional[Path]
    cooldown_seconds: float
    cache_ttl_seconds: float
    identity_stale_seconds: float
    max_history_messages: int
    max_message_chars: int

    @property
    def ai_enabled(self) -> bool:
        """True when a Gemini key is configured."""
        return bool(self.gemini_api_key)


def _positive_number(name: str, default: str) -> float:
    # Parse a positive float env value or fail loudly at startup.
    raw = os.getenv(name, default)
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be greater than 0, got {raw!r}")
    return value


def load_settings() -> Settings:
    """Purpose: Load configuration from environment variables and defaults.
    Inputs/Outputs: No inputs; returns a Settings instance.
    Side Effects / State: Reads environment variables and filesystem paths.
    Dependencies: Uses os.getenv and BASE_DIR for the prompts directory.
    Failure Modes: Non-numeric or non-positive window/limit values raise ValueError.
    If Removed: The engine cannot size its cache, cooldown, or history limits.
    Testing Notes: Verify defaults and overrides via monkeypatched environment variables.
    """
    # Resolve optional paths, then build Settings.
    vocabulary_path = os.getenv("VOCABULARY_PATH")

    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY", "").strip(),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        prompts_dir=(BASE_DIR / "prompts").resolve(),
        vocabulary_path=Path(vocabulary_path) if vocabulary_path else None,
        cooldown_seconds=_positive_number("USER_COOLDOWN_SECONDS", "3"),
        cache_ttl_seconds=_positive_number("CACHE_TTL_SECONDS", "86400"),
        identity_stale_seconds=_positive_number("IDENTITY_STALE_SECONDS", "3600"),
        max_history_messages=int(_positive_number("MAX_HISTORY_MESSAGES", "6")),
        max_message_chars=int(_positive_number("MAX_MESSAGE_CHARS", "500")),
    )
