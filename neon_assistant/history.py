from __future__ import annotations

from typing import Any, Dict, List, Optional


def optimize_chat_history(chat_history: Any, max_messages: int, max_chars: int) -> List[Dict[str, str]]:
    """Purpose: Reduce client-sent history to a small, well-formed window.
    Inputs/Outputs: Inputs: raw history (any JSON value), message cap, per-message char cap.
        Output: list of {"role", "content"} dicts, oldest first.
    Side Effects / State: None; pure function.
    Dependencies: None.
    Failure Modes: Non-list input yields an empty history; malformed items are dropped.
    If Removed: First-turn detection and the AI collaborator see unbounded, untrusted history.
    Testing Notes: 10 valid items with max_messages=6 -> last 6; "system" role -> "user".
    """
    # Keep well-formed items, take the tail, then normalize role and content.
    if not isinstance(chat_history, list):
        return []
    valid = [
        item
        for item in chat_history
        if isinstance(item, dict) and isinstance(item.get("role"), str) and isinstance(item.get("content"), str)
    ]
    window = valid[-max_messages:] if max_messages > 0 else []
    optimized: List[Dict[str, str]] = []
    for item in window:
        content = item["content"].strip()[:max_chars]
        if not content:
            continue
        role = "assistant" if item["role"] == "assistant" else "user"
        optimized.append({"role": role, "content": content})
    return optimized


def derive_requestor_identity(
    user_id: Optional[str],
    forwarded_for: Optional[str] = None,
    real_ip: Optional[str] = None,
    client_host: Optional[str] = None,
) -> str:
    """Purpose: Build the rate-limit identity for a request.
    Inputs/Outputs: Inputs: optional user id and network hints. Output: "user:<id>" or "ip:<addr>".
    Side Effects / State: None.
    Dependencies: None.
    Failure Modes: Falls back to "ip:anonymous" when nothing identifies the caller.
    If Removed: Cooldown cannot tell callers apart.
    Testing Notes: user id wins; first x-forwarded-for entry beats x-real-ip and client host.
    """
    # Used only for throttling, never for authorization.
    if isinstance(user_id, str) and user_id.strip():
        return f"user:{user_id.strip()}"
    forwarded = (forwarded_for or "").split(",")[0].strip()
    address = forwarded or (real_ip or "").strip() or (client_host or "").strip() or "anonymous"
    return f"ip:{address}"
