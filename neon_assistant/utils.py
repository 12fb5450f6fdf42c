import hashlib
import re
from typing import Iterable, List, Pattern


def normalize_message(text: str) -> str:
    """Purpose: Normalize a chat message for matching and cache keys.
    Inputs/Outputs: Input is a raw string; output is trimmed, lowercased text.
    Side Effects / State: None; pure function.
    Dependencies: None; used by every signal extractor and by the cache key.
    Failure Modes: Returns an empty string when input is falsy.
    If Removed: Matching becomes case-sensitive and cache keys split on casing.
    Testing Notes: "  Zara SHIRT " -> "zara shirt"; Devanagari is kept intact.
    """
    # Keep non-ASCII characters so Devanagari detection still works downstream.
    if not text:
        return ""
    return text.strip().lower()


def compile_terms(terms: Iterable[str], plural: bool = False) -> Pattern[str]:
    """Purpose: Build one case-insensitive whole-word regex from a term list.
    Inputs/Outputs: Inputs: terms (iterable[str]), plural flag. Output: compiled pattern.
    Side Effects / State: None.
    Dependencies: re.escape keeps punctuation like "h&m" or "t-shirt" literal.
    Failure Modes: An empty term list yields a pattern that never matches.
    If Removed: Vocabulary tables cannot be turned into matchers.
    Testing Notes: compile_terms(["shirt"], plural=True) matches "shirts", not "tshirt".
    """
    # Longest terms first so multi-word phrases win over their prefixes.
    cleaned = sorted({term.strip().lower() for term in terms if term and term.strip()}, key=len, reverse=True)
    if not cleaned:
        return re.compile(r"(?!x)x")
    suffix = r"s?" if plural else ""
    body = "|".join(re.escape(term) for term in cleaned)
    return re.compile(rf"(?<!\w)(?:{body}){suffix}(?!\w)", re.IGNORECASE)


def matches_any(text: str, pattern: Pattern[str]) -> bool:
    """True when the compiled vocabulary pattern occurs anywhere in text."""
    if not text:
        return False
    return pattern.search(text) is not None


def find_all(text: str, pattern: Pattern[str]) -> List[str]:
    """Return every match of pattern in appearance order."""
    if not text:
        return []
    return [match.group(0) for match in pattern.finditer(text)]


def hash_cache_key(turn_phase: str, mode: str, message: str, audience_hint: str = "") -> str:
    """Purpose: Derive the response-cache key for a message.
    Inputs/Outputs: Inputs: turn phase ("first"/"next"), intent mode, raw message and the
        caller audience hint ("" when none). Output: sha256 hex.
    Side Effects / State: None.
    Dependencies: Uses normalize_message and hashlib.
    Failure Modes: None; deterministic for identical inputs.
    If Removed: Cached replies could leak across intents or turn phases.
    Testing Notes: Same text with a different phase, mode or audience hint must hash differently.
    """
    # Phase, mode and hint are part of the key.
    material = f"{turn_phase}:{mode}:{audience_hint}:{normalize_message(message)}"
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


def mask_identity(identity: str) -> str:
    """Purpose: Mask a requestor identity for safe logging.
    Inputs/Outputs: Input is "kind:value"; output keeps kind and the last 3 characters.
    Side Effects / State: None.
    Dependencies: None.
    Failure Modes: Short values collapse to a generic mask.
    If Removed: Logs may expose user ids or client addresses.
    Testing Notes: "user:abcdef" -> "user:***def"; "ip:1" -> "ip:***".
    """
    # Split off the identity kind and hide everything but the tail.
    if not identity:
        return "***"
    kind, _, value = identity.partition(":")
    if not value:
        kind, value = "", kind
    tail = value[-3:] if len(value) > 3 else ""
    masked = "***" + tail
    return f"{kind}:{masked}" if kind else masked
