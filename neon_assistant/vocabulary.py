"""Declarative keyword and phrase tables used by the signal extractors.

Every rule-based decision in the assistant reads one of these tables instead of
an inline pattern, so each vocabulary can be tested and extended on its own.
Brand, product and platform tables can be extended at startup from a JSON file
(see load_vocabulary).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

# Intent vocabularies.
EDUCATION_TERMS = [
    "affiliate",
    "affiliate marketing",
    "earn money",
    "earning money",
    "pinterest",
    "linktree",
    "branding",
    "brand",
    "promotion",
    "promote",
    "growth strategy",
    "traffic",
    "conversion",
    "how it works",
    "monetize",
    "monetise",
]
EVALUATION_PHRASES = [
    "check this",
    "is this worth it",
    "worth it",
    "should i buy",
    "review this",
    "is this good",
    "good option",
]
SUGGESTION_PHRASES = [
    "show",
    "suggest",
    "recommend",
    "trendy",
    "trending",
    "what should i wear",
    "what to wear",
    "outfit",
    "style",
    "look",
    "for women",
    "for men",
    "for girls",
    "for boys",
    "for kids",
]
FASHION_ITEM_TERMS = [
    "shirt",
    "tshirt",
    "t-shirt",
    "tee",
    "dress",
    "kurta",
    "kurti",
    "saree",
    "lehenga",
    "jeans",
    "trouser",
    "hoodie",
    "jacket",
    "top",
    "ethnic",
    "streetwear",
    "casual",
    "formal",
    "party wear",
]

DEFAULT_BRANDS = [
    "zara",
    "h&m",
    "hm",
    "uniqlo",
    "nike",
    "adidas",
    "puma",
    "levi",
    "levis",
    "myntra",
    "ajio",
    "roadster",
    "allen solly",
    "manyavar",
    "fabindia",
    "biba",
    "wrogn",
    "snitch",
    "rare rabbit",
    "uspolo",
    "u.s. polo",
    "louis philippe",
    "van heusen",
]
DEFAULT_PRODUCTS = [
    "shirt",
    "tshirt",
    "t-shirt",
    "tee",
    "jeans",
    "dress",
    "kurta",
    "kurti",
    "saree",
    "lehenga",
    "jacket",
    "hoodie",
    "top",
    "trouser",
    "pants",
    "sneaker",
    "shoes",
    "ethnic",
    "co-ord",
    "coord",
]
DEFAULT_PLATFORMS: List[Tuple[str, str]] = [
    ("amazon", "Amazon"),
    ("flipkart", "Flipkart"),
    ("myntra", "Myntra"),
    ("meesho", "Meesho"),
]
OTHER_PLATFORM = "Other"

# Audience tokens. Gender labels read the narrow lists; the audience hint reads the broad ones.
KIDS_TOKENS = ["kid", "kids"]
WOMEN_TOKENS = ["girl", "girls", "women", "womens", "ladies", "female"]
MEN_TOKENS = ["boy", "boys", "men", "mens", "male"]
KIDS_HINT_TOKENS = ["kid", "kids", "child", "children", "toddler", "baby"]
WOMEN_HINT_TOKENS = ["women", "womens", "woman", "female", "ladies", "girls"]
MEN_HINT_TOKENS = ["men", "mens", "man", "male", "boys"]

# Language markers.
HINDI_ROMAN_SIGNALS = [
    "bhai",
    "yaar",
    "acha",
    "accha",
    "achha",
    "kya",
    "kaise",
    "sahi",
    "kapda",
    "kapde",
    "chahiye",
    "mere",
    "mujhe",
    "aap",
    "aur",
    "kyu",
]
ENGLISH_COMMERCE_SIGNALS = ["shirt", "dress", "fit", "style", "color", "fabric", "link", "buy", "product", "under"]

# Product analysis tables, evaluated top to bottom; first match wins.
PRODUCT_TYPE_RULES: List[Tuple[List[str], str]] = [
    (["t-shirt", "tshirt", "tee"], "T-Shirt"),
    (["shirt"], "Shirt"),
    (["jean", "jeans", "trouser", "trousers", "pants"], "Bottomwear"),
    (["dress"], "Dress"),
    (["kurti", "kurta", "saree", "lehenga", "ethnic"], "Ethnic Wear"),
    (["hoodie"], "Hoodie"),
    (["jacket"], "Jacket"),
]
DEFAULT_PRODUCT_TYPE = "Fashion Apparel"

STYLE_TYPE_RULES: List[Tuple[List[str], str]] = [
    (["ethnic", "kurta", "saree", "lehenga"], "Ethnic"),
    (["formal", "office", "blazer"], "Formal"),
    (["street", "oversized", "cargo", "sneaker"], "Streetwear"),
    (["party", "wedding", "festive"], "Occasion"),
]
DEFAULT_STYLE_TYPE = "Casual"

BEST_FOR_RULES: List[Tuple[List[str], str]] = [
    (["office", "work", "formal"], "Office and smart-casual looks"),
    (["party", "wedding", "festive"], "Events and occasion wear"),
    (["gym", "sports", "run"], "Active use"),
]
DEFAULT_BEST_FOR = "Daily wear and easy styling"

SEASON_RULES: List[Tuple[List[str], str]] = [
    (["winter", "fleece", "wool", "sweatshirt", "hoodie"], "Winter"),
    (["monsoon", "rain", "waterproof"], "Monsoon"),
    (["summer", "linen", "cotton"], "Summer"),
]
DEFAULT_SEASON = "Summer-friendly for Indian weather"

WEATHER_FIT_RULES: List[Tuple[List[str], str]] = [
    (["winter", "cold"], "Layer-friendly for cooler weather"),
    (["monsoon", "rain"], "Quick-dry and easy-maintenance pieces"),
]
DEFAULT_WEATHER_FIT = "Breathable picks for warm and humid Indian weather"

FABRIC_RULES: List[Tuple[List[str], str]] = [
    (["cotton"], "cotton-rich fabric is great for comfort"),
    (["linen"], "linen blend is breathable for Indian summer"),
    (["polyester"], "polyester blend can feel warm, check blend ratio"),
    (["viscose", "rayon"], "viscose or rayon drape well but check durability"),
]
DEFAULT_FABRIC_NOTE = "prefer cotton-rich fabrics for better comfort"

OVERPRICED_TERMS = ["overpriced", "too expensive", "high price"]
DEAL_TERMS = ["sale", "discount", "offer", "deal", "cashback"]
PREMIUM_TERMS = ["premium", "luxury"]
POOR_QUALITY_TERMS = ["poor quality", "bad quality", "skip"]

OCCASION_TERMS = ["occasion", "office", "party", "wedding", "daily"]
COLOR_TERMS = ["color", "colour"]

# Friendly chat triggers.
JOKE_TERMS = ["joke", "funny"]
GREETING_OPENERS = ["hi", "hello", "hey", "namaste", "yo"]
WELLBEING_PHRASES = ["how are you", "kaise ho", "kaisa hai"]


@dataclass(frozen=True)
class Vocabulary:
    """Extensible catalog vocabularies for brand, product and platform signals."""
    brands: List[str] = field(default_factory=lambda: list(DEFAULT_BRANDS))
    products: List[str] = field(default_factory=lambda: list(DEFAULT_PRODUCTS))
    platforms: List[Tuple[str, str]] = field(default_factory=lambda: list(DEFAULT_PLATFORMS))


DEFAULT_VOCABULARY = Vocabulary()


def load_vocabulary(path: Optional[Path]) -> Vocabulary:
    """Purpose: Build a Vocabulary from the built-in tables plus an optional JSON extension.
    Inputs/Outputs: Input is a Path or None; output is a Vocabulary.
    Side Effects / State: Reads the JSON file when a path is given.
    Dependencies: json; extension keys are "brands", "products", "platforms".
    Failure Modes: Missing file or malformed content raises ValueError at startup.
    If Removed: The catalog vocabularies can only change with a code release.
    Testing Notes: Add a brand via a temp file and confirm the brand+product signal fires.
    """
    # Start from the defaults and append anything the file contributes.
    if path is None:
        return DEFAULT_VOCABULARY
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8-sig"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot read vocabulary file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Vocabulary file {path} must contain a JSON object")

    brands = _merge_terms(DEFAULT_VOCABULARY.brands, data.get("brands"), "brands")
    products = _merge_terms(DEFAULT_VOCABULARY.products, data.get("products"), "products")
    platforms = list(DEFAULT_VOCABULARY.platforms)
    for entry in _as_list(data.get("platforms"), "platforms"):
        if not (isinstance(entry, (list, tuple)) and len(entry) == 2 and all(isinstance(v, str) for v in entry)):
            raise ValueError(f"Vocabulary platforms entries must be [needle, label] pairs, got {entry!r}")
        needle, label = entry[0].strip().lower(), entry[1].strip()
        if needle and label and needle not in {known for known, _ in platforms}:
            platforms.append((needle, label))
    return replace(DEFAULT_VOCABULARY, brands=brands, products=products, platforms=platforms)


def _as_list(value: Any, key: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Vocabulary key {key!r} must be a list")
    return value


def _merge_terms(base: List[str], extra: Any, key: str) -> List[str]:
    # Keep base order, append new lowercase terms once.
    merged = list(base)
    seen = set(merged)
    for term in _as_list(extra, key):
        if not isinstance(term, str):
            raise ValueError(f"Vocabulary key {key!r} must only contain strings")
        cleaned = term.strip().lower()
        if cleaned and cleaned not in seen:
            merged.append(cleaned)
            seen.add(cleaned)
    return merged


def vocabulary_summary(vocabulary: Vocabulary) -> Dict[str, int]:
    """Table sizes for startup logging."""
    return {
        "brands": len(vocabulary.brands),
        "products": len(vocabulary.products),
        "platforms": len(vocabulary.platforms),
    }
