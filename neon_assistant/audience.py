from __future__ import annotations

from typing import Callable, List, Optional

from .domain import Audience, LanguageStyle
from .signals import detect_language_style, has_any_term, scan_gender_tokens
from .vocabulary import KIDS_HINT_TOKENS, MEN_HINT_TOKENS, WOMEN_HINT_TOKENS

AudienceRule = Callable[[str, Optional[Audience]], Optional[Audience]]


def _explicit_token(text: str, hint: Optional[Audience]) -> Optional[Audience]:
    # Kids > women > men, as ordered in signals.GENDER_TOKEN_PRIORITY.
    return scan_gender_tokens(text)


def _caller_hint(text: str, hint: Optional[Audience]) -> Optional[Audience]:
    return hint if hint and hint != Audience.GENERAL else None


AUDIENCE_PRIORITY: List[AudienceRule] = [
    _explicit_token,
    _caller_hint,
]


def resolve_audience(text: str, hint: Optional[Audience] = None) -> Audience:
    """Purpose: Decide which shopper segment a reply is written for.
    Inputs/Outputs: Inputs: message text and an optional default audience hint. Output: Audience.
    Side Effects / State: None.
    Dependencies: AUDIENCE_PRIORITY (explicit token, then caller hint), General default.
    Failure Modes: None; the resolver is total.
    If Removed: Builders lose the audience label and category prefix.
    Testing Notes: "outfit for kids and women" -> Kids; "shirt" with hint Men -> Men.
    """
    # Walk the priority list; General when nothing resolves.
    for rule in AUDIENCE_PRIORITY:
        audience = rule(text, hint)
        if audience is not None:
            return audience
    return Audience.GENERAL


def detect_audience_hint(text: str) -> Audience:
    """Purpose: Broad audience guess used as the default hint when the caller sends none.
    Inputs/Outputs: Input is message text; output is an Audience (General when unclear).
    Side Effects / State: None.
    Dependencies: the *_HINT_TOKENS vocabularies, which also cover child/toddler/baby/woman/man.
    Failure Modes: None.
    If Removed: "baby clothes" would no longer target Kids.
    Testing Notes: "gift for my baby" -> Kids; "for a man" -> Men.
    """
    # Same kids > women > men precedence as the explicit scan.
    if has_any_term(text, KIDS_HINT_TOKENS):
        return Audience.KIDS
    if has_any_term(text, WOMEN_HINT_TOKENS):
        return Audience.WOMEN
    if has_any_term(text, MEN_HINT_TOKENS):
        return Audience.MEN
    return Audience.GENERAL


def infer_language_style(text: str) -> LanguageStyle:
    """Devanagari > Hinglish words (with or without English commerce words) > English."""
    return detect_language_style(text)
