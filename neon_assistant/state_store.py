from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .utils import mask_identity

logger = logging.getLogger("neon.state")

COOLDOWN_REPLY = "Easy there! Give me a second and I'll style your next look."


@dataclass
class CacheEntry:
    """Cached reply with its absolute expiry time."""
    key: str
    response: str
    expires_at: float


class ChatStateStore:
    """Process-wide response cache and per-identity cooldown records."""

    def __init__(
        self,
        cooldown_seconds: float,
        cache_ttl_seconds: float,
        identity_stale_seconds: float,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """Purpose: Initialize the two lock-guarded maps and their time windows.
        Inputs/Outputs: Inputs are cooldown, cache TTL and staleness windows in seconds,
            plus an optional clock; no return value.
        Side Effects / State: Creates empty cache and cooldown maps.
        Dependencies: threading.Lock; time.monotonic by default.
        Failure Modes: Raises ValueError for non-positive windows.
        If Removed: The engine loses caching and burst protection.
        Testing Notes: Inject a fake clock to step through TTL and cooldown windows.
        """
        # Keep configuration and start with empty maps.
        if cooldown_seconds <= 0 or cache_ttl_seconds <= 0 or identity_stale_seconds <= 0:
            raise ValueError("State store windows must be greater than 0")
        self._cooldown_seconds = cooldown_seconds
        self._cache_ttl_seconds = cache_ttl_seconds
        self._identity_stale_seconds = identity_stale_seconds
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        self._responses: Dict[str, CacheEntry] = {}
        self._last_request_at: Dict[str, float] = {}

    def check_cooldown(self, identity: str) -> Optional[str]:
        """Purpose: Gate a request against the identity's cooldown window.
        Inputs/Outputs: Input is the requestor identity; output is the cooldown reply
            when blocked, else None.
        Side Effects / State: Always overwrites the identity's last-request timestamp,
            including when the request is blocked.
        Dependencies: cooldown window and clock.
        Failure Modes: None; concurrent requests from one identity race on last write.
        If Removed: Rapid bursts reach the classifier and AI collaborator unthrottled.
        Testing Notes: Two calls inside the window -> second blocked; after the window -> open.
        """
        # Read and overwrite under one lock so the record stays a singleton.
        now = self._clock()
        with self._lock:
            last_seen = self._last_request_at.get(identity)
            self._last_request_at[identity] = now
        if last_seen is None or now - last_seen >= self._cooldown_seconds:
            return None
        logger.info("cooldown identity=%s since_last=%.3fs", mask_identity(identity), now - last_seen)
        return COOLDOWN_REPLY

    def get_response(self, key: str) -> Optional[str]:
        """Return a live cached reply, evicting the entry if it has expired."""
        now = self._clock()
        with self._lock:
            entry = self._responses.get(key)
            if entry is None:
                return None
            if now > entry.expires_at:
                self._responses.pop(key, None)
                return None
            return entry.response

    def put_response(self, key: str, response: str) -> None:
        """Store a reply for the configured TTL."""
        expires_at = self._clock() + self._cache_ttl_seconds
        with self._lock:
            self._responses[key] = CacheEntry(key=key, response=response, expires_at=expires_at)

    def sweep(self) -> Dict[str, int]:
        """Purpose: Evict expired cache entries and stale cooldown records.
        Inputs/Outputs: No inputs; returns counts of removed entries per map.
        Side Effects / State: Mutates both maps.
        Dependencies: cache TTL (via expires_at) and the identity staleness window.
        Failure Modes: None.
        If Removed: Both process-lifetime maps grow without bound.
        Testing Notes: Advance the fake clock past TTL and staleness; both counts become non-zero.
        """
        # Collect keys first, then delete, all under the lock.
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._responses.items() if entry.expires_at <= now]
            for key in expired:
                del self._responses[key]
            stale = [
                identity
                for identity, last_seen in self._last_request_at.items()
                if now - last_seen > self._identity_stale_seconds
            ]
            for identity in stale:
                del self._last_request_at[identity]
        if expired or stale:
            logger.debug("sweep expired_responses=%s stale_identities=%s", len(expired), len(stale))
        return {"responses": len(expired), "identities": len(stale)}

    def clear(self) -> None:
        with self._lock:
            self._responses.clear()
            self._last_request_at.clear()

    def get_stats(self) -> Dict[str, float]:
        """Map sizes and windows for the stats endpoint."""
        with self._lock:
            return {
                "cached_responses": len(self._responses),
                "tracked_identities": len(self._last_request_at),
                "cooldown_seconds": self._cooldown_seconds,
                "cache_ttl_seconds": self._cache_ttl_seconds,
                "identity_stale_seconds": self._identity_stale_seconds,
            }
