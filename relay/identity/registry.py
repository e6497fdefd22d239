from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Set


def normalize_address(address) -> str:
    """Lowercase wallet address, or "" for anything that isn't a usable string."""
    if not isinstance(address, str):
        return ""
    return address.strip().lower()


@dataclass
class IdentityRecord:
    connection_id: str
    display_name: str = ""
    wallet_address: str = ""


class IdentityRegistry:
    """
    Live connections -> last announced display name and wallet address.

    Keeps a reverse index address -> connection ids so a badge grant can
    find every session claiming an address without scanning all records.
    """

    def __init__(self):
        self._records: Dict[str, IdentityRecord] = {}   # connection_id -> record
        self._by_address: Dict[str, Set[str]] = {}      # address -> {connection_id}

    def upsert(self, connection_id: str, display_name: Optional[str] = None, address: str = "") -> IdentityRecord:
        rec = self._records.get(connection_id)
        if rec is None:
            rec = IdentityRecord(connection_id=connection_id)
            self._records[connection_id] = rec
        if display_name is not None:
            rec.display_name = display_name

        addr = normalize_address(address)
        if addr and addr != rec.wallet_address:
            self._unindex(rec)
            rec.wallet_address = addr
            self._by_address.setdefault(addr, set()).add(connection_id)
        return rec

    def address_of(self, connection_id: str) -> str:
        rec = self._records.get(connection_id)
        return rec.wallet_address if rec else ""

    def display_name_of(self, connection_id: str) -> str:
        rec = self._records.get(connection_id)
        return rec.display_name if rec else ""

    def connections_for(self, address: str) -> List[str]:
        return sorted(self._by_address.get(normalize_address(address), ()))

    def remove(self, connection_id: str) -> None:
        rec = self._records.pop(connection_id, None)
        if rec:
            self._unindex(rec)

    def _unindex(self, rec: IdentityRecord) -> None:
        if not rec.wallet_address:
            return
        owners = self._by_address.get(rec.wallet_address)
        if owners is None:
            return
        owners.discard(rec.connection_id)
        if not owners:
            del self._by_address[rec.wallet_address]

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._records

    def __len__(self) -> int:
        return len(self._records)
