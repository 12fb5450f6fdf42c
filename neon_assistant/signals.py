"""Pure text signal extractors.

Each extractor reads a message and returns one categorical or numeric fact
about it, or an empty value when nothing matches. None of them keep state.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

from .domain import Audience, LanguageStyle
from .utils import compile_terms, find_all, matches_any, normalize_message
from .vocabulary import (
    DEFAULT_VOCABULARY,
    ENGLISH_COMMERCE_SIGNALS,
    HINDI_ROMAN_SIGNALS,
    KIDS_TOKENS,
    MEN_TOKENS,
    OTHER_PLATFORM,
    WOMEN_TOKENS,
    Vocabulary,
)

URL_RE = re.compile(r"\b[a-z][a-z0-9+.\-]*://[^\s)]+", re.IGNORECASE)
DEVANAGARI_RE = re.compile("[\u0900-\u097F]")
BUDGET_UNDER_RE = re.compile(r"\bunder\s*([0-9]{2,6})\b", re.IGNORECASE)
BUDGET_CURRENCY_RE = re.compile(r"(?:\brs\.?|\binr|₹)\s*([0-9]{2,6})\b", re.IGNORECASE)

# Kids is checked before women, women before men.
GENDER_TOKEN_PRIORITY: List[Tuple[Audience, List[str]]] = [
    (Audience.KIDS, KIDS_TOKENS),
    (Audience.WOMEN, WOMEN_TOKENS),
    (Audience.MEN, MEN_TOKENS),
]


@lru_cache(maxsize=256)
def term_pattern(terms: Tuple[str, ...], plural: bool = False) -> Pattern[str]:
    """Compile and memoize a vocabulary table."""
    return compile_terms(terms, plural=plural)


def has_any_term(text: str, terms: Iterable[str], plural: bool = False) -> bool:
    """Generic any-match helper over a declarative term table."""
    return matches_any(normalize_message(text), term_pattern(tuple(terms), plural))


def first_rule_label(text: str, rules: Sequence[Tuple[Sequence[str], str]], default: str) -> str:
    """Purpose: Resolve an ordered (terms, label) rule table against a message.
    Inputs/Outputs: Inputs: text, rules, default label. Output: label of the first matching rule.
    Side Effects / State: None.
    Dependencies: has_any_term.
    Failure Modes: None; returns default when no rule matches.
    If Removed: Product type, style, season and fabric inference lose their shared lookup.
    Testing Notes: "cotton tshirt" resolves T-Shirt before Shirt because T-Shirt is listed first.
    """
    # Walk the table in declared order; first match wins.
    for terms, label in rules:
        if has_any_term(text, terms):
            return label
    return default


def extract_urls(text: str) -> List[str]:
    """Purpose: Find every scheme://non-whitespace URL in a message.
    Inputs/Outputs: Input is raw text; output is the list of URLs in appearance order.
    Side Effects / State: None.
    Dependencies: URL_RE.
    Failure Modes: A closing parenthesis ends the URL; bare domains are not URLs.
    If Removed: Product-link intent and platform inference lose their strongest signal.
    Testing Notes: "see https://a.in/x and http://b.in" -> both URLs, same order.
    """
    # URL casing is preserved.
    return find_all(text, URL_RE)


def infer_platform(url: str, text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> str:
    """Purpose: Map a URL or free text to a shopping platform label.
    Inputs/Outputs: Inputs: subject URL (may be empty), message text. Output: platform label or "Other".
    Side Effects / State: None.
    Dependencies: Vocabulary.platforms lookup list (ordered).
    Failure Modes: None; unknown platforms resolve to "Other".
    If Removed: Product analysis cannot report where the product is sold.
    Testing Notes: URL wins over text: url=myntra, text mentions amazon -> Myntra.
    """
    # The URL decides when present; otherwise scan the text.
    subject = (url or text or "").lower()
    for needle, label in vocabulary.platforms:
        if needle in subject:
            return label
    return OTHER_PLATFORM


def contains_brand_and_product(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    """Purpose: Detect a brand mention together with an apparel product mention.
    Inputs/Outputs: Input is message text; output is True only when both are present.
    Side Effects / State: None.
    Dependencies: Vocabulary.brands and Vocabulary.products tables.
    Failure Modes: Brands outside the table are not recognized.
    If Removed: "zara shirt" style messages fall through to generic suggestions.
    Testing Notes: "zara" -> False; "zara shirt" -> True; "shirt" -> False.
    """
    # Conjunctive: a brand on its own is not a product reference.
    has_brand = has_any_term(text, vocabulary.brands)
    has_product = has_any_term(text, vocabulary.products, plural=True)
    return has_brand and has_product


def scan_gender_tokens(text: str) -> Optional[Audience]:
    """Purpose: Find the explicit audience word in a message.
    Inputs/Outputs: Input is text; output is Audience.KIDS, WOMEN, MEN or None.
    Side Effects / State: None.
    Dependencies: GENDER_TOKEN_PRIORITY.
    Failure Modes: None.
    If Removed: Replies cannot target the audience the user named.
    Testing Notes: "outfit for kids and women" -> Audience.KIDS.
    """
    # Priority order lives in GENDER_TOKEN_PRIORITY, not in branch order.
    for label, tokens in GENDER_TOKEN_PRIORITY:
        if has_any_term(text, tokens):
            return label
    return None


def extract_budget(text: str) -> Optional[int]:
    """Purpose: Extract a rupee budget such as "under 999" or "Rs. 1499".
    Inputs/Outputs: Input is text; output is the first captured amount or None.
    Side Effects / State: None.
    Dependencies: BUDGET_UNDER_RE then BUDGET_CURRENCY_RE.
    Failure Modes: Amounts with separators ("1,499") are read only up to the separator.
    If Removed: Suggestions cannot be tuned to the user's price range.
    Testing Notes: "under 999" -> 999; "inr 1500 shirt" -> 1500; "cheap shirt" -> None.
    """
    # "under N" takes precedence over currency-prefixed amounts.
    for pattern in (BUDGET_UNDER_RE, BUDGET_CURRENCY_RE):
        match = pattern.search(text or "")
        if match:
            return int(match.group(1))
    return None


def has_devanagari(text: str) -> bool:
    return bool(DEVANAGARI_RE.search(text or ""))


def detect_language_style(text: str) -> LanguageStyle:
    """Purpose: Scan language markers and name the register the user writes in.
    Inputs/Outputs: Input is raw text; output is a LanguageStyle.
    Side Effects / State: None.
    Dependencies: DEVANAGARI_RE, HINDI_ROMAN_SIGNALS, ENGLISH_COMMERCE_SIGNALS.
    Failure Modes: Romanized Hindi without any listed function word reads as English.
    If Removed: Friendly replies cannot switch to Hinglish.
    Testing Notes: Devanagari always wins; "bhai shirt chahiye" -> hinglish; "hi" -> english.
    """
    # Script beats every word-level signal.
    if has_devanagari(text):
        return LanguageStyle.HINDI
    hindi_words = has_any_term(text, HINDI_ROMAN_SIGNALS)
    english_words = has_any_term(text, ENGLISH_COMMERCE_SIGNALS)
    if hindi_words and english_words:
        return LanguageStyle.HINGLISH
    if hindi_words:
        return LanguageStyle.HINGLISH
    return LanguageStyle.ENGLISH
