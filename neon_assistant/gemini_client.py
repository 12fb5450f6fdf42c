from __future__ import annotations

import logging
from typing import Dict, List, Optional

import google.generativeai as genai
from google.generativeai import types as genai_types

logger = logging.getLogger("neon.gemini")

DEFAULT_SAFETY_SETTINGS = [
    {
        "category": genai_types.HarmCategory.HARM_CATEGORY_HARASSMENT,
        "threshold": genai_types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    },
    {
        "category": genai_types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
        "threshold": genai_types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    },
    {
        "category": genai_types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
        "threshold": genai_types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    },
    {
        "category": genai_types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
        "threshold": genai_types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    },
]


class GeminiClient:
    """Thin wrapper around the Gemini SDK for one-shot chat replies."""

    def __init__(
        self,
        api_key: str,
        model: str,
        system_instruction: str,
        temperature: float = 0.4,
        max_output_tokens: int = 800,
    ) -> None:
        """Purpose: Configure the Gemini SDK and build the chat model.
        Inputs/Outputs: Inputs are API key, model name, system prompt and generation limits.
        Side Effects / State: Configures the SDK global API key.
        Dependencies: google.generativeai.
        Failure Modes: Raises ValueError if the API key or model name is missing.
        If Removed: Configured deployments fall back to rule-based replies only.
        Testing Notes: Validate missing key raises ValueError.
        """
        # Configure API key and build the model once.
        if not api_key:
            raise ValueError("GEMINI_API_KEY is required")
        model_name = _normalize_model_name(model)
        if not model_name:
            raise ValueError("Gemini model name is required")
        genai.configure(api_key=api_key)
        self._model_name = model_name
        self._generation_config = {
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        }
        self._model = genai.GenerativeModel(model_name, system_instruction=system_instruction or None)

    @property
    def model_name(self) -> str:
        return self._model_name

    def generate_reply(self, history: List[Dict[str, str]], message: str, mode_hint: Optional[str] = None) -> str:
        """Purpose: Ask Gemini for one reply given trimmed history and the new message.
        Inputs/Outputs: Inputs: {"role","content"} history, user message, optional intent hint.
            Output: stripped reply text (may be empty).
        Side Effects / State: One network call; no retries.
        Dependencies: genai.GenerativeModel.generate_content and build_contents.
        Failure Modes: SDK and network errors propagate to the caller.
        If Removed: The engine cannot use the AI collaborator.
        Testing Notes: Patch the model and verify contents alternate user/model roles.
        """
        # Build role-tagged contents and request a single candidate.
        contents = build_contents(history, message, mode_hint)
        response = self._model.generate_content(
            contents,
            generation_config=self._generation_config,
            safety_settings=DEFAULT_SAFETY_SETTINGS,
        )
        text: Optional[str] = getattr(response, "text", None)
        return (text or "").strip()


def build_contents(history: List[Dict[str, str]], message: str, mode_hint: Optional[str] = None) -> list:
    """Purpose: Convert chat history into Gemini role-tagged contents.
    Inputs/Outputs: Inputs: history dicts, current message, optional intent hint. Output: contents list.
    Side Effects / State: None.
    Dependencies: None; "assistant" maps to Gemini's "model" role.
    Failure Modes: Items without content are skipped.
    If Removed: History cannot be forwarded to the model.
    Testing Notes: Last entry is always the user message, prefixed with the mode hint when given.
    """
    # Map roles and append the new user turn.
    contents = []
    for item in history:
        content = item.get("content", "")
        if not content:
            continue
        role = "model" if item.get("role") == "assistant" else "user"
        contents.append({"role": role, "parts": [{"text": content}]})
    text = f"[Detected mode: {mode_hint}]\n{message}" if mode_hint else message
    contents.append({"role": "user", "parts": [{"text": text}]})
    return contents


def _normalize_model_name(name: Optional[str]) -> str:
    # Strip "models/" prefix and whitespace.
    if not name:
        return ""
    cleaned = name.strip()
    if cleaned.startswith("models/"):
        return cleaned.split("/", 1)[1]
    return cleaned
