import time
import uuid
import logging
import threading
from ..config.settings import STATE_TOKEN_TTL_SECONDS


class PendingStateStore:
    """
    Short-lived tokens handed out before an OAuth redirect.

    Each token can be consumed once. Expired tokens are rejected on consume
    and dropped by sweep(). The clock is injectable so expiry is testable.
    """

    def __init__(self, ttl_seconds=STATE_TOKEN_TTL_SECONDS, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries = {}
        self._lock = threading.Lock()

    def issue(self, payload=None):
        token = uuid.uuid4().hex
        with self._lock:
            self._entries[token] = (self.clock() + self.ttl_seconds, payload)
        return token

    def consume(self, token):
        with self._lock:
            entry = self._entries.pop(token, None)
        if entry is None:
            return None

        expires_at, payload = entry
        if self.clock() >= expires_at:
            logging.warning("⚠️ Rejected expired state token")
            return None
        return payload

    def sweep(self):
        now = self.clock()
        with self._lock:
            expired = [t for t, (expires_at, _) in self._entries.items() if now >= expires_at]
            for token in expired:
                del self._entries[token]
        if expired:
            logging.info(f"🧹 Removed {len(expired)} expired state tokens")
        return len(expired)

    def __len__(self):
        with self._lock:
            return len(self._entries)
