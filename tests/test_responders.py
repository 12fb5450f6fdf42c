"""
Tests for the templated reply builders.
"""

from neon_assistant.domain import Audience, IntentMode, LanguageStyle
from neon_assistant.responders import (
    FOLLOW_UP_BUDGET,
    FOLLOW_UP_COLOR,
    FOLLOW_UP_FIT,
    FOLLOW_UP_OCCASION,
    GREETING_REPLIES,
    HELP_REPLIES,
    JOKE_REPLIES,
    RESPONSE_BUILDERS,
    SHORT_HEADER,
    WELLBEING_REPLIES,
    build_education_reply,
    build_fashion_suggestion_reply,
    build_friendly_chat_reply,
    build_product_link_reply,
    format_value_stars,
    infer_follow_up,
    infer_value_rating,
    infer_verdict,
    is_greeting_opener,
)


def _index(lines, prefix):
    return next(i for i, line in enumerate(lines) if line.startswith(prefix))


def test_format_value_stars_clamps():
    """Test star rendering and clamping."""
    assert format_value_stars(3) == "★★★☆☆"
    assert format_value_stars(0) == "★☆☆☆☆"
    assert format_value_stars(10) == "★★★★★"


def test_infer_value_rating():
    """Test pricing words."""
    assert infer_value_rating("this is overpriced") == 2
    assert infer_value_rating("on sale today") == 4
    assert infer_value_rating("shirts under 999") == 4
    assert infer_value_rating("luxury kurta") == 3
    assert infer_value_rating("plain kurta") == 3


def test_infer_verdict():
    """Test verdict labels."""
    assert infer_verdict(2, "")[0] == "Skip"
    assert infer_verdict(4, "bad quality stitching")[0] == "Skip"
    assert infer_verdict(4, "")[0] == "Worth it"
    assert infer_verdict(3, "")[0] == "Good option"


def test_product_link_reply_sections():
    """Test the product analysis layout."""
    reply = build_product_link_reply(
        "https://www.zara.com/in/en/linen-shirt-p123.html", Audience.GENERAL, LanguageStyle.ENGLISH
    )
    lines = reply.split("\n")
    assert lines[0] == SHORT_HEADER
    assert "• Platform: Other" in lines
    assert "• Category: Shirt" in lines
    assert "• Value for Money: ★★★☆☆" in lines
    order = [
        _index(lines, "\U0001F50D Product Analysis"),
        _index(lines, "\U0001F4A1 Styling Tip"),
        _index(lines, "\U0001F3AF Neon Verdict"),
        _index(lines, "\U0001F6D2 Quick Action"),
    ]
    assert order == sorted(order)
    assert lines[_index(lines, "\U0001F3AF Neon Verdict") + 1].startswith("Good option")


def test_product_link_reply_audience_category():
    """Test the audience prefix on the category."""
    reply = build_product_link_reply("myntra womens dress on sale", Audience.GENERAL)
    assert "• Platform: Myntra" in reply
    assert "• Category: Women Dress" in reply
    assert "Worth it —" in reply


def test_fashion_suggestion_reply():
    """Test trend lines, pairing tips and the single question."""
    reply = build_fashion_suggestion_reply("suggest summer outfits for women under 999", Audience.GENERAL)
    lines = reply.split("\n")
    assert lines[0] == SHORT_HEADER
    assert "• Audience: Women" in lines
    assert "• Budget Focus: Around INR 999" in lines
    trend_lines = [line for line in lines if line.endswith("under INR 999")]
    assert 1 <= len(trend_lines) <= 3
    assert lines[-1] == FOLLOW_UP_OCCASION
    assert lines[-2] == "❓ One Smart Question"


def test_fashion_suggestion_uses_category_ideas():
    """Test category ideas before audience ideas."""
    reply = build_fashion_suggestion_reply("suggest shirts", Audience.MEN)
    assert "• Audience: Men" in reply
    assert "• Oversized cotton shirts in budget-friendly ranges" in reply
    assert "Budget can be tailored to your range" in reply


def test_follow_up_priority():
    """Test the follow-up slot order."""
    assert infer_follow_up("shirts", None) == FOLLOW_UP_BUDGET
    assert infer_follow_up("shirts", 999) == FOLLOW_UP_OCCASION
    assert infer_follow_up("office shirts", 999) == FOLLOW_UP_COLOR
    assert infer_follow_up("office shirts in a dark color", 999) == FOLLOW_UP_FIT


def test_education_reply_full_plan():
    """Test affiliate basics enable every block."""
    lines = build_education_reply("How do I use Pinterest for affiliate marketing?").split("\n")
    numbered = [line for line in lines if line[:1].isdigit()]
    assert [line.split(".")[0] for line in numbered] == ["1", "2", "3", "4", "5", "6", "7"]
    assert numbered[5].endswith("Pinterest system for fashion growth:")
    assert numbered[6].startswith("7. Track what converts")
    assert sum(1 for line in lines if line.startswith("• ")) == 4


def test_education_reply_numbering_stays_continuous():
    """Test numbering when the Linktree block is skipped."""
    lines = build_education_reply("pinterest tips").split("\n")
    numbered = [line for line in lines if line[:1].isdigit()]
    assert [line.split(".")[0] for line in numbered] == ["1", "2", "3", "4", "5"]
    assert numbered[3] == "4. Pinterest system for fashion growth:"
    assert not any("Linktree for conversion" in line for line in lines)


def test_friendly_chat_replies():
    """Test friendly chat triggers."""
    assert build_friendly_chat_reply("tell me a joke") == JOKE_REPLIES[0]
    assert build_friendly_chat_reply("hi") == GREETING_REPLIES[0]
    assert build_friendly_chat_reply("Hello, Neon!") == GREETING_REPLIES[0]
    assert build_friendly_chat_reply("how are you") == WELLBEING_REPLIES[0]
    assert build_friendly_chat_reply("thanks") == HELP_REPLIES[0]


def test_friendly_chat_hinglish_variants():
    """Test Hinglish and Hindi replies."""
    assert build_friendly_chat_reply("kaise ho", language=LanguageStyle.HINGLISH) == WELLBEING_REPLIES[1]
    assert build_friendly_chat_reply("मदद", language=LanguageStyle.HINDI) == HELP_REPLIES[1]


def test_is_greeting_opener():
    """Test greeting detection on the first word only."""
    assert is_greeting_opener("hey there")
    assert not is_greeting_opener("they said hi")


def test_every_mode_has_a_builder():
    """Test builder registration."""
    assert set(RESPONSE_BUILDERS) == set(IntentMode)


def test_module_docstrings():
    """Test that table and builder modules expose their docs."""
    import neon_assistant.responders as responders
    import neon_assistant.vocabulary as vocabulary

    assert responders.__doc__.startswith("Templated reply builders")
    assert vocabulary.__doc__.startswith("Declarative keyword and phrase tables")
