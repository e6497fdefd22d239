from __future__ import annotations
from typing import Dict

from .registry import normalize_address


class BadgeDirectory:
    """Address-scoped badge flags. Outlives connections; last write wins."""

    def __init__(self):
        self._badges: Dict[str, bool] = {}   # address -> has_badge

    def set_badge(self, address: str, has_badge: bool) -> bool:
        addr = normalize_address(address)
        if not addr:
            return False
        self._badges[addr] = bool(has_badge)
        return True

    def has_badge(self, address: str) -> bool:
        return self._badges.get(normalize_address(address), False)

    def __len__(self) -> int:
        return len(self._badges)
