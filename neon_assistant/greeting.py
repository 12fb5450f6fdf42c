from __future__ import annotations

from typing import Tuple

from .responders import FIRST_RESPONSE_GREETING, GREETING_REPLIES, SHORT_HEADER

# Openers the canonical greeting replaces on a first turn: the card header and
# the friendly-chat greeting lines.
ABSORBED_OPENERS: Tuple[str, ...] = (SHORT_HEADER,) + tuple(GREETING_REPLIES)


def apply_first_turn_greeting(response: str, is_first_turn: bool) -> str:
    """Purpose: Make the canonical greeting open every first-turn reply exactly once.
    Inputs/Outputs: Inputs: builder output and first-turn flag. Output: trimmed reply.
    Side Effects / State: None; applying it twice equals applying it once.
    Dependencies: FIRST_RESPONSE_GREETING and ABSORBED_OPENERS from responders.
    Failure Modes: None; an empty body yields the bare greeting.
    If Removed: First replies either miss the welcome line or repeat a second header.
    Testing Notes: "hi" on a first turn -> exactly FIRST_RESPONSE_GREETING;
        product card -> greeting, blank line, then "🔍 Product Analysis".
    """
    # Later turns are only trimmed.
    trimmed = (response or "").strip()
    if not is_first_turn:
        return trimmed
    if trimmed.startswith(FIRST_RESPONSE_GREETING):
        return trimmed

    body = trimmed
    for opener in ABSORBED_OPENERS:
        if body.startswith(opener):
            body = body[len(opener):].lstrip()
            break

    if not body:
        return FIRST_RESPONSE_GREETING
    return f"{FIRST_RESPONSE_GREETING}\n\n{body}"
