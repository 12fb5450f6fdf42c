"""
Tests for intent classification.
"""

import pytest

from neon_assistant.domain import IntentMode
from neon_assistant.intent import INTENT_CASCADE, classify_intent, is_product_link_intent


@pytest.mark.parametrize(
    "message,expected",
    [
        ("https://www.zara.com/in/en/linen-shirt-p123.html", IntentMode.PRODUCT_LINK),
        ("zara shirt", IntentMode.PRODUCT_LINK),
        ("is this worth it?", IntentMode.PRODUCT_LINK),
        ("suggest summer outfits for women under 999", IntentMode.FASHION_SUGGESTION),
        ("kurtas", IntentMode.FASHION_SUGGESTION),
        ("How do I use Pinterest for affiliate marketing?", IntentMode.EDUCATION),
        ("hi", IntentMode.FRIENDLY_CHAT),
        ("tell me a joke", IntentMode.FRIENDLY_CHAT),
        ("zara", IntentMode.FRIENDLY_CHAT),
    ],
)
def test_classify_intent(message, expected):
    """Test the classification of representative messages."""
    assert classify_intent(message) == expected


def test_education_beats_product_link():
    """Test cascade priority when several predicates match."""
    message = "how do I earn money promoting this https://amazon.in/x"
    assert is_product_link_intent(message)
    assert classify_intent(message) == IntentMode.EDUCATION


def test_product_link_beats_suggestion():
    """Test that a URL wins over fashion words."""
    assert classify_intent("suggest something like https://myntra.com/dress") == IntentMode.PRODUCT_LINK


def test_cascade_order():
    """Test the declared cascade order."""
    assert [mode for mode, _ in INTENT_CASCADE] == [
        IntentMode.EDUCATION,
        IntentMode.PRODUCT_LINK,
        IntentMode.FASHION_SUGGESTION,
    ]


def test_classification_is_deterministic():
    """Test repeated classification."""
    results = {classify_intent("Suggest a party dress") for _ in range(5)}
    assert results == {IntentMode.FASHION_SUGGESTION}
