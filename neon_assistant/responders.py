"""Templated reply builders, one per intent mode.

Each builder is a pure function (message, audience, language) -> str with a
fixed section layout. The section order and bullet markers are part of the
output contract: the chat UI renders these replies line by line.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .audience import resolve_audience
from .domain import Audience, IntentMode, LanguageStyle
from .signals import (
    BUDGET_UNDER_RE,
    extract_budget,
    extract_urls,
    first_rule_label,
    has_any_term,
    infer_platform,
)
from .utils import normalize_message
from .vocabulary import (
    BEST_FOR_RULES,
    COLOR_TERMS,
    DEAL_TERMS,
    DEFAULT_BEST_FOR,
    DEFAULT_FABRIC_NOTE,
    DEFAULT_PRODUCT_TYPE,
    DEFAULT_SEASON,
    DEFAULT_STYLE_TYPE,
    DEFAULT_VOCABULARY,
    DEFAULT_WEATHER_FIT,
    FABRIC_RULES,
    GREETING_OPENERS,
    JOKE_TERMS,
    OCCASION_TERMS,
    OVERPRICED_TERMS,
    POOR_QUALITY_TERMS,
    PREMIUM_TERMS,
    PRODUCT_TYPE_RULES,
    SEASON_RULES,
    STYLE_TYPE_RULES,
    WEATHER_FIT_RULES,
    WELLBEING_PHRASES,
    Vocabulary,
)

logger = logging.getLogger("neon.responders")

ICONS = {
    "sparkles": "✨",
    "search": "\U0001F50D",
    "style": "\U0001F4A1",
    "verdict": "\U0001F3AF",
    "cart": "\U0001F6D2",
    "palette": "\U0001F3A8",
    "growth": "\U0001F4E2",
    "question": "❓",
    "point": "\U0001F449",
}
BULLET = "•"
STAR_FILLED = "★"
STAR_EMPTY = "☆"

SHORT_HEADER = f"{ICONS['sparkles']} Hello, I’m Neon — your AI Shopping Assistant"
FIRST_RESPONSE_GREETING = (
    f"{ICONS['sparkles']} Hey! I’m Neon — your AI Shopping Assistant. "
    "Send me a fashion product link or tell me what you're looking for, "
    "and I’ll help you pick the best option."
)
AFFILIATE_PLACEHOLDER = f"{ICONS['point']} Buy here: [affiliate link placeholder]"

VERDICT_SKIP = "Skip"
VERDICT_WORTH_IT = "Worth it"
VERDICT_GOOD_OPTION = "Good option"

DEFAULT_VALUE_RATING = 3

# (english, hinglish) pairs for friendly chat.
JOKE_REPLIES = (
    "Style joke: my fashion advice is instant, but your cart still needs your final approval.",
    "Style joke: main outfit turant suggest kar deta hoon, par cart ko final approval tumhe hi dena padega.",
)
GREETING_REPLIES = (
    "Hi! I’m Neon. Want fashion picks, outfit ideas, or affiliate growth help?",
    "Hi! Main Neon hoon. Fashion picks, outfit styling, ya affiliate growth help chahiye?",
)
WELLBEING_REPLIES = (
    "I'm doing well. Want style advice or a quick chat?",
    "Main great hoon. Tum batao, style advice chahiye ya casual chat?",
)
HELP_REPLIES = (
    "I can help with fashion shopping, styling, and affiliate growth. Tell me what you're looking for.",
    "Main fashion shopping, styling, aur affiliate growth mein help karta hoon. Batao kis cheez se start karein?",
)

PAIRING_TIP_RULES: List[Tuple[List[str], str]] = [
    (["shirt"], "straight-fit jeans or chinos with clean sneakers"),
    (["t-shirt", "tshirt", "tee"], "blue denim or cargos with minimal sneakers"),
    (["kurta", "ethnic"], "solid bottoms and loafers for a polished ethnic look"),
    (["dress"], "a light shrug and neutral footwear"),
]
DEFAULT_PAIRING_TIP = "neutral bottoms and simple footwear for repeat styling"

# Category tables first, then audience tables, then the generic fallback.
TREND_CATEGORY_RULES: List[Tuple[List[str], List[str]]] = [
    (["shirt"], ["Oversized cotton shirts", "Pastel striped shirts", "Solid relaxed-fit shirts"]),
    (["t-shirt", "tshirt", "tee"], ["Minimal logo tees", "Graphic tees", "Textured basics"]),
    (["dress"], ["Floral midi dresses", "Solid A-line dresses", "Co-ord dress sets"]),
    (
        ["kurta", "ethnic", "saree", "lehenga"],
        ["Cotton kurta sets", "Printed ethnic sets", "Festive-ready lightweight options"],
    ),
]
TREND_AUDIENCE_IDEAS: Dict[Audience, List[str]] = {
    Audience.MEN: [
        "Smart-casual shirts",
        "Cargo and clean tee combinations",
        "Breathable summer polos",
    ],
    Audience.WOMEN: [
        "Co-ord sets",
        "Relaxed shirts with straight jeans",
        "Soft pastel everyday outfits",
    ],
    Audience.KIDS: [
        "Soft cotton playwear",
        "Easy-wash daily sets",
        "Lightweight festive kidswear",
    ],
}
TREND_FALLBACK_IDEAS = ["Breathable basics", "Trend-led casual outfits", "Daily repeat-friendly styles"]

PAIRING_CATEGORY_RULES: List[Tuple[List[str], List[str]]] = [
    (
        ["shirt", "t-shirt", "tshirt", "tee", "top"],
        [
            "Pair with straight-fit denim and white sneakers for a clean daily look.",
            "Add a lightweight overshirt for evenings without losing comfort.",
        ],
    ),
    (
        ["dress"],
        [
            "Use neutral sandals and a compact sling bag for balanced styling.",
            "Add subtle jewelry and a light layer for day-to-evening transition.",
        ],
    ),
    (
        ["kurta", "ethnic", "saree", "lehenga"],
        [
            "Pair with comfortable footwear first, then build accessories around one accent color.",
            "Use breathable inner layers to stay comfortable in humid weather.",
        ],
    ),
]
PAIRING_AUDIENCE_IDEAS: Dict[Audience, List[str]] = {
    Audience.MEN: [
        "Build with a breathable top, dark denim, and clean sneakers.",
        "Use one statement piece only, then keep the rest neutral for a sharper look.",
    ],
    Audience.WOMEN: [
        "Start with breathable fabrics and add one trend-forward layer like an overshirt.",
        "Balance colors: one pop shade with neutral base tones for a premium look.",
    ],
}
PAIRING_FALLBACK_IDEAS = [
    "Choose breathable cotton or linen first, then style with neutral bottoms.",
    "Keep footwear simple and repeatable to maximize wardrobe value.",
]

MAX_TREND_IDEAS = 3
MAX_PAIRING_IDEAS = 2

FOLLOW_UP_BUDGET = "What budget should I optimize for?"
FOLLOW_UP_OCCASION = "Which occasion should I optimize this for: daily wear, office, or outing?"
FOLLOW_UP_COLOR = "Which color direction do you prefer: neutrals, earthy tones, or bright shades?"
FOLLOW_UP_FIT = "Do you want a regular fit, slim fit, or oversized fit?"

EDUCATION_CORE_PLAN = [
    "Pick one fashion niche and audience (Women, Men, or Kids) so your content stays focused.",
    "Build trust-first branding: clear bio, consistent colors, and practical styling content before hard selling.",
    "Create offer buckets: premium picks, budget deals, and seasonal edits with clear value messaging.",
]
EDUCATION_LINKTREE_BLOCK = [
    "Set up Linktree for conversion: top links should be best outfit, under-999 deals, and your strongest platform picks.",
    "Use affiliate-safe CTA style: compare options first, then share one clear buy link.",
]
EDUCATION_PINTEREST_HEADING = "Pinterest system for fashion growth:"
EDUCATION_PINTEREST_BULLETS = [
    "Create niche boards (e.g., Men Summer Looks, Women Ethnic Under INR 999).",
    "Use vertical pins in 2:3 ratio with a strong hook title.",
    "Route clicks to Linktree affiliate links, not random deep links.",
    "Post consistently: 5-10 pins per day and test multiple hooks weekly.",
]
EDUCATION_TRACKING_LINE = "Track what converts: saves, outbound clicks, Linktree CTR, and purchases by platform."
AFFILIATE_BASICS_TERMS = [
    "affiliate",
    "earn money",
    "earning money",
    "how it works",
    "promotion",
    "growth strategy",
    "branding",
]


def format_value_stars(rating: float) -> str:
    """Render a 1-5 rating as filled/empty stars; out-of-range ratings are clamped."""
    safe = max(1, min(5, int(round(rating))))
    return STAR_FILLED * safe + STAR_EMPTY * (5 - safe)


def infer_value_rating(text: str) -> int:
    """Purpose: Estimate value for money on a 1-5 scale from pricing words.
    Inputs/Outputs: Input is lowercased text; output is 2, 3 or 4.
    Side Effects / State: None.
    Dependencies: OVERPRICED_TERMS, DEAL_TERMS, PREMIUM_TERMS, BUDGET_UNDER_RE.
    Failure Modes: None; defaults to 3 without pricing words.
    If Removed: Product analysis loses its star rating and verdict basis.
    Testing Notes: "overpriced" -> 2; "on sale" -> 4; "under 999" -> 4; "luxury" -> 3.
    """
    # Overpriced beats deal wording, deal beats premium wording.
    if has_any_term(text, OVERPRICED_TERMS):
        return 2
    if has_any_term(text, DEAL_TERMS) or BUDGET_UNDER_RE.search(text):
        return 4
    if has_any_term(text, PREMIUM_TERMS):
        return 3
    return DEFAULT_VALUE_RATING


def infer_verdict(rating: int, text: str) -> Tuple[str, str]:
    """Map a value rating plus quality wording to (label, reason)."""
    if rating <= 2 or has_any_term(text, POOR_QUALITY_TERMS):
        return VERDICT_SKIP, "price-to-quality balance looks weak for this pick."
    if rating >= 4:
        return VERDICT_WORTH_IT, "value looks strong for the style and likely daily usability."
    return VERDICT_GOOD_OPTION, "decent choice if the fit, reviews, and fabric blend check out."


def build_product_link_reply(
    message: str,
    audience: Audience,
    language: LanguageStyle = LanguageStyle.ENGLISH,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> str:
    """Purpose: Render the product analysis card for a link or named product.
    Inputs/Outputs: Inputs: message, inferred audience, language, vocabulary. Output: reply text.
    Side Effects / State: None.
    Dependencies: signal extractors plus the *_RULES tables in vocabulary.
    Failure Modes: None; every missing signal renders a default ("Other", "Casual", 3 stars).
    If Removed: product_link messages have no rule-based answer.
    Testing Notes: Check section order: header, Product Analysis, Styling Tip, Neon Verdict, Quick Action.
    """
    # Derive every field first, then lay them out in the fixed section order.
    lower = normalize_message(message)
    urls = extract_urls(message)
    platform = infer_platform(urls[0] if urls else "", lower, vocabulary)
    gender = resolve_audience(lower, audience)
    item_type = first_rule_label(lower, PRODUCT_TYPE_RULES, DEFAULT_PRODUCT_TYPE)
    category = item_type if gender == Audience.GENERAL else f"{gender.value} {item_type}"
    rating = infer_value_rating(lower)
    verdict, reason = infer_verdict(rating, lower)

    return "\n".join(
        [
            SHORT_HEADER,
            "",
            f"{ICONS['search']} Product Analysis",
            f"{BULLET} Platform: {platform}",
            f"{BULLET} Category: {category}",
            f"{BULLET} Style: {first_rule_label(lower, STYLE_TYPE_RULES, DEFAULT_STYLE_TYPE)}",
            f"{BULLET} Best For: {first_rule_label(lower, BEST_FOR_RULES, DEFAULT_BEST_FOR)}",
            f"{BULLET} Season: {first_rule_label(lower, SEASON_RULES, DEFAULT_SEASON)}",
            f"{BULLET} Value for Money: {format_value_stars(rating)}",
            "",
            f"{ICONS['style']} Styling Tip",
            f"{BULLET} Pair with {first_rule_label(lower, PAIRING_TIP_RULES, DEFAULT_PAIRING_TIP)}.",
            f"{BULLET} Fabric check: {first_rule_label(lower, FABRIC_RULES, DEFAULT_FABRIC_NOTE)}.",
            "",
            f"{ICONS['verdict']} Neon Verdict",
            f"{verdict} — {reason}",
            "",
            f"{ICONS['cart']} Quick Action",
            "Check recent reviews, real-user photos, and return policy before checkout.",
            AFFILIATE_PLACEHOLDER,
        ]
    )


def _keyed_ideas(
    text: str,
    gender: Audience,
    category_rules: Sequence[Tuple[List[str], List[str]]],
    audience_ideas: Dict[Audience, List[str]],
    fallback: List[str],
) -> List[str]:
    # Detected category first, then audience, then the generic list.
    for terms, ideas in category_rules:
        if has_any_term(text, terms, plural=True):
            return list(ideas)
    return list(audience_ideas.get(gender, fallback))


def infer_trending_ideas(text: str, gender: Audience, budget: Optional[int]) -> List[str]:
    suffix = f"under INR {budget}" if budget else "in budget-friendly ranges"
    ideas = _keyed_ideas(text, gender, TREND_CATEGORY_RULES, TREND_AUDIENCE_IDEAS, TREND_FALLBACK_IDEAS)
    return [f"{idea} {suffix}" for idea in ideas[:MAX_TREND_IDEAS]]


def infer_pairing_ideas(text: str, gender: Audience) -> List[str]:
    ideas = _keyed_ideas(text, gender, PAIRING_CATEGORY_RULES, PAIRING_AUDIENCE_IDEAS, PAIRING_FALLBACK_IDEAS)
    return ideas[:MAX_PAIRING_IDEAS]


def infer_follow_up(text: str, budget: Optional[int]) -> str:
    """Purpose: Pick the single most useful follow-up question.
    Inputs/Outputs: Inputs: lowercased text and extracted budget. Output: one question.
    Side Effects / State: None.
    Dependencies: OCCASION_TERMS, COLOR_TERMS.
    Failure Modes: None.
    If Removed: Suggestions end without a next step.
    Testing Notes: no budget -> budget question; budget, no occasion -> occasion; then color; then fit.
    """
    # Ask for the first missing slot only.
    if not budget:
        return FOLLOW_UP_BUDGET
    if not has_any_term(text, OCCASION_TERMS):
        return FOLLOW_UP_OCCASION
    if not has_any_term(text, COLOR_TERMS):
        return FOLLOW_UP_COLOR
    return FOLLOW_UP_FIT


def build_fashion_suggestion_reply(
    message: str,
    audience: Audience,
    language: LanguageStyle = LanguageStyle.ENGLISH,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> str:
    """Purpose: Render trend ideas, pairing tips and one follow-up question.
    Inputs/Outputs: Inputs: message, inferred audience, language, vocabulary. Output: reply text.
    Side Effects / State: None.
    Dependencies: extract_budget, the TREND_/PAIRING_ tables, infer_follow_up.
    Failure Modes: None; missing budget renders the tailored-budget line.
    If Removed: fashion_suggestion messages have no rule-based answer.
    Testing Notes: At most 3 trend lines, at most 2 pairing tips, exactly one question.
    """
    # Resolve slots, then lay out the suggestion card.
    lower = normalize_message(message)
    gender = resolve_audience(lower, audience)
    budget = extract_budget(message)
    budget_line = f"Around INR {budget}" if budget else "Budget can be tailored to your range"

    lines = [
        SHORT_HEADER,
        "",
        f"{ICONS['palette']} Fashion Suggestions",
        f"{BULLET} Audience: {gender.value}",
        f"{BULLET} Weather Fit: {first_rule_label(lower, WEATHER_FIT_RULES, DEFAULT_WEATHER_FIT)}",
        f"{BULLET} Budget Focus: {budget_line}",
        f"{BULLET} Trending Styles:",
    ]
    lines.extend(f"{BULLET} {idea}" for idea in infer_trending_ideas(lower, gender, budget))
    lines.extend(["", f"{ICONS['style']} Pairing Tips"])
    lines.extend(f"{BULLET} {tip}" for tip in infer_pairing_ideas(lower, gender))
    lines.extend(
        [
            "",
            f"{ICONS['cart']} Quick Action",
            "Want to grab this look?",
            AFFILIATE_PLACEHOLDER,
            "",
            f"{ICONS['question']} One Smart Question",
            infer_follow_up(lower, budget),
        ]
    )
    return "\n".join(lines)


def build_education_reply(
    message: str,
    audience: Audience = Audience.GENERAL,
    language: LanguageStyle = LanguageStyle.ENGLISH,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> str:
    """Purpose: Render the affiliate growth plan.
    Inputs/Outputs: Input is the message; output is a numbered plan.
    Side Effects / State: None.
    Dependencies: EDUCATION_* tables, AFFILIATE_BASICS_TERMS.
    Failure Modes: None.
    If Removed: education messages have no rule-based answer.
    Testing Notes: Core 3 points always present; numbering stays continuous when blocks are skipped.
    """
    # Core plan, optional Linktree and Pinterest blocks, tracking line; numbered as appended.
    lower = normalize_message(message)
    wants_basics = has_any_term(lower, AFFILIATE_BASICS_TERMS)
    wants_linktree = "linktree" in lower or wants_basics
    wants_pinterest = "pinterest" in lower or wants_basics

    lines = [f"{ICONS['growth']} Fashion Affiliate Growth Plan"]
    number = 0

    def add_point(text: str) -> None:
        nonlocal number
        number += 1
        lines.append(f"{number}. {text}")

    for point in EDUCATION_CORE_PLAN:
        add_point(point)
    if wants_linktree:
        for point in EDUCATION_LINKTREE_BLOCK:
            add_point(point)
    if wants_pinterest:
        add_point(EDUCATION_PINTEREST_HEADING)
        lines.extend(f"{BULLET} {bullet}" for bullet in EDUCATION_PINTEREST_BULLETS)
    add_point(EDUCATION_TRACKING_LINE)
    return "\n".join(lines)


def _pick(variants: Tuple[str, str], language: LanguageStyle) -> str:
    # Hindi and Hinglish both use the Hinglish variant.
    english, hinglish = variants
    return english if language == LanguageStyle.ENGLISH else hinglish


def build_friendly_chat_reply(
    message: str,
    audience: Audience = Audience.GENERAL,
    language: LanguageStyle = LanguageStyle.ENGLISH,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> str:
    """Keyword micro-replies for jokes, greetings and "how are you", else a help line."""
    text = normalize_message(message)
    if has_any_term(text, JOKE_TERMS):
        return _pick(JOKE_REPLIES, language)
    if is_greeting_opener(text):
        return _pick(GREETING_REPLIES, language)
    if has_any_term(text, WELLBEING_PHRASES):
        return _pick(WELLBEING_REPLIES, language)
    return _pick(HELP_REPLIES, language)


def is_greeting_opener(text: str) -> bool:
    """True when the message starts with a greeting word ("hi", "hello neon", ...)."""
    words = normalize_message(text).split()
    if not words:
        return False
    first = words[0].strip(",.!?")
    return first in GREETING_OPENERS


ResponseBuilder = Callable[[str, Audience, LanguageStyle, Vocabulary], str]

RESPONSE_BUILDERS: Dict[IntentMode, ResponseBuilder] = {
    IntentMode.PRODUCT_LINK: build_product_link_reply,
    IntentMode.FASHION_SUGGESTION: build_fashion_suggestion_reply,
    IntentMode.EDUCATION: build_education_reply,
    IntentMode.FRIENDLY_CHAT: build_friendly_chat_reply,
}

_missing_builders = set(IntentMode) - set(RESPONSE_BUILDERS)
if _missing_builders:
    raise RuntimeError(f"No response builder for intent modes: {sorted(m.value for m in _missing_builders)}")


def build_mode_response(
    mode: IntentMode,
    message: str,
    audience: Audience,
    language: LanguageStyle,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> str:
    """Dispatch to the builder registered for mode."""
    logger.debug("builder mode=%s audience=%s language=%s", mode.value, audience.value, language.value)
    return RESPONSE_BUILDERS[mode](message, audience, language, vocabulary)
