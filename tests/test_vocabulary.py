"""
Tests for vocabulary loading.
"""

import json

import pytest

from neon_assistant.domain import IntentMode
from neon_assistant.intent import classify_intent
from neon_assistant.signals import infer_platform
from neon_assistant.vocabulary import DEFAULT_VOCABULARY, load_vocabulary, vocabulary_summary


def test_load_vocabulary_default():
    """Test the built-in tables."""
    assert load_vocabulary(None) is DEFAULT_VOCABULARY


def test_load_vocabulary_extends_tables(tmp_path):
    """Test extending brands, products and platforms."""
    path = tmp_path / "vocab.json"
    path.write_text(
        json.dumps(
            {
                "brands": ["Bewakoof", "zara"],
                "products": ["joggers"],
                "platforms": [["tatacliq", "Tata CLiQ"]],
                "unknown": True,
            }
        ),
        encoding="utf-8",
    )
    vocabulary = load_vocabulary(path)
    assert vocabulary.brands[: len(DEFAULT_VOCABULARY.brands)] == DEFAULT_VOCABULARY.brands
    assert vocabulary.brands.count("zara") == 1
    assert classify_intent("bewakoof joggers", vocabulary) == IntentMode.PRODUCT_LINK
    assert classify_intent("bewakoof joggers") != IntentMode.PRODUCT_LINK
    assert infer_platform("https://www.tatacliq.com/p/1", "", vocabulary) == "Tata CLiQ"
    summary = vocabulary_summary(vocabulary)
    assert summary["platforms"] == len(DEFAULT_VOCABULARY.platforms) + 1


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[1, 2]",
        json.dumps({"brands": "zara"}),
        json.dumps({"platforms": [["only-needle"]]}),
        json.dumps({"products": [3]}),
    ],
)
def test_load_vocabulary_malformed(tmp_path, content):
    """Test malformed files."""
    path = tmp_path / "vocab.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        load_vocabulary(path)


def test_load_vocabulary_missing_file(tmp_path):
    """Test a missing file."""
    with pytest.raises(ValueError):
        load_vocabulary(tmp_path / "missing.json")
