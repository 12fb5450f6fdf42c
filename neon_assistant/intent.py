"""Rule-based intent classification.

The cascade is an ordered list of (mode, predicate) pairs. The first predicate
that accepts the message decides the mode; friendly_chat is the total default.
Education outranks product_link ("how to promote this https://...") and
product_link outranks fashion_suggestion.
"""

from __future__ import annotations

from typing import Callable, List, Tuple

from .domain import IntentMode
from .signals import contains_brand_and_product, extract_urls, has_any_term
from .vocabulary import (
    DEFAULT_VOCABULARY,
    EDUCATION_TERMS,
    EVALUATION_PHRASES,
    FASHION_ITEM_TERMS,
    SUGGESTION_PHRASES,
    Vocabulary,
)

IntentPredicate = Callable[[str, Vocabulary], bool]


def is_education_intent(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    """Affiliate, growth and monetization questions."""
    return has_any_term(text, EDUCATION_TERMS)


def is_product_link_intent(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    """Purpose: Detect a request to evaluate one specific product.
    Inputs/Outputs: Input is the message; output is True for a URL, an evaluation phrase,
        or a brand+product mention.
    Side Effects / State: None.
    Dependencies: extract_urls, EVALUATION_PHRASES, contains_brand_and_product.
    Failure Modes: Product names without a brand or link fall through to suggestions.
    If Removed: Product links would be answered with generic outfit ideas.
    Testing Notes: "zara" -> False; "zara shirt" -> True; "is this worth it" -> True.
    """
    # Any one of the three signals is enough.
    if extract_urls(text):
        return True
    if has_any_term(text, EVALUATION_PHRASES):
        return True
    return contains_brand_and_product(text, vocabulary)


def is_fashion_suggestion_intent(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    """Outfit requests or any fashion item mention."""
    return has_any_term(text, SUGGESTION_PHRASES) or has_any_term(text, FASHION_ITEM_TERMS, plural=True)


INTENT_CASCADE: List[Tuple[IntentMode, IntentPredicate]] = [
    (IntentMode.EDUCATION, is_education_intent),
    (IntentMode.PRODUCT_LINK, is_product_link_intent),
    (IntentMode.FASHION_SUGGESTION, is_fashion_suggestion_intent),
]
DEFAULT_INTENT = IntentMode.FRIENDLY_CHAT


def classify_intent(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> IntentMode:
    """Purpose: Classify a message into exactly one IntentMode.
    Inputs/Outputs: Input is the raw message; output is an IntentMode (never None).
    Side Effects / State: None; identical input always gives identical output.
    Dependencies: INTENT_CASCADE order, DEFAULT_INTENT.
    Failure Modes: None; unmatched text resolves to friendly_chat.
    If Removed: The engine cannot pick a response builder.
    Testing Notes: "how do I earn money promoting this https://amazon.in/x" -> education.
    """
    # First matching predicate wins.
    for mode, predicate in INTENT_CASCADE:
        if predicate(text, vocabulary):
            return mode
    return DEFAULT_INTENT
