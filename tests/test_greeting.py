"""
Tests for the first-turn greeting wrapper.
"""

from neon_assistant.greeting import apply_first_turn_greeting
from neon_assistant.responders import (
    FIRST_RESPONSE_GREETING,
    GREETING_REPLIES,
    build_education_reply,
    build_product_link_reply,
)
from neon_assistant.domain import Audience


def test_first_turn_greeting_replaces_greeting_line():
    """Test that "hi" collapses to the canonical greeting."""
    assert apply_first_turn_greeting(GREETING_REPLIES[0], True) == FIRST_RESPONSE_GREETING


def test_first_turn_greeting_replaces_card_header():
    """Test the card header swap."""
    card = build_product_link_reply("zara shirt", Audience.GENERAL)
    wrapped = apply_first_turn_greeting(card, True)
    assert wrapped.startswith(FIRST_RESPONSE_GREETING + "\n\n\U0001F50D Product Analysis")
    assert wrapped.count("Neon") == card.count("Neon")


def test_first_turn_greeting_prepends_to_plain_body():
    """Test a body without an opener."""
    body = build_education_reply("pinterest")
    assert apply_first_turn_greeting(body, True) == f"{FIRST_RESPONSE_GREETING}\n\n{body}"


def test_greeting_is_idempotent():
    """Test applying the wrapper twice."""
    body = build_education_reply("affiliate")
    once = apply_first_turn_greeting(body, True)
    assert apply_first_turn_greeting(once, True) == once


def test_later_turns_are_only_trimmed():
    """Test non-first turns."""
    assert apply_first_turn_greeting("  hello  ", False) == "hello"


def test_empty_body_gets_bare_greeting():
    """Test an empty body."""
    assert apply_first_turn_greeting("   ", True) == FIRST_RESPONSE_GREETING
