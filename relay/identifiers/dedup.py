'''
    Description:
        - Time-bounded set of recently processed event fingerprints.
        - admit_once() is the single check-then-insert used for both chat
          messages and badge broadcasts.
        - Every admitted fingerprint expires a fixed TTL after admission
          (not sliding). Expiry is driven by one heap ordered by expiry
          instant, drained by run() on the event loop and lazily on admission.
'''

# ========== Imports ==========
from __future__ import annotations

import asyncio
import heapq
import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

log = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 10.0


# ========== Window ==========
class DedupWindow:
    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._expiries: Dict[str, float] = {}           # fingerprint -> expiry instant
        self._heap: List[Tuple[float, str]] = []        # (expiry instant, fingerprint)
        self._wakeup = asyncio.Event()

    def admit_once(self, fingerprint: str) -> bool:
        now = self._clock()
        self.evict_expired(now)
        if fingerprint in self._expiries:
            return False
        expires_at = now + self.ttl
        self._expiries[fingerprint] = expires_at
        heapq.heappush(self._heap, (expires_at, fingerprint))
        self._wakeup.set()
        return True

    def evict_expired(self, now: Optional[float] = None) -> int:
        """Drop every entry whose expiry instant has passed. Returns how many went."""
        if now is None:
            now = self._clock()
        evicted = 0
        while self._heap and self._heap[0][0] <= now:
            expires_at, fingerprint = heapq.heappop(self._heap)
            if self._expiries.get(fingerprint) == expires_at:
                del self._expiries[fingerprint]
                evicted += 1
        return evicted

    def next_expiry_in(self) -> Optional[float]:
        if not self._heap:
            return None
        return max(0.0, self._heap[0][0] - self._clock())

    async def run(self) -> None:
        """Background eviction loop; sleeps until the earliest expiry or a new insert."""
        while True:
            self._wakeup.clear()
            evicted = self.evict_expired()
            if evicted:
                log.debug("evicted %d fingerprint(s), %d retained", evicted, len(self))
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=self.next_expiry_in())
            except asyncio.TimeoutError:
                pass

    def __contains__(self, fingerprint: str) -> bool:
        expires_at = self._expiries.get(fingerprint)
        return expires_at is not None and expires_at > self._clock()

    def __len__(self) -> int:
        return len(self._expiries)
