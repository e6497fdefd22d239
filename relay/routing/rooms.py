# relay/routing/rooms.py
"""
Room kinds and membership.

Two fixed broadcast groups live on the transport: chat-normal (anyone) and
chat-vip (badge holders). Joining Standard is always allowed; Privileged
membership is only ever pushed by the relay, never granted on request.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, List, Set

from relay.protocol.rpc import system_message
from relay.protocol.types import NEW_MESSAGE, ROOM_NORMAL, ROOM_VIP, VIP_WELCOME_TEXT

if TYPE_CHECKING:
    from relay.identity.registry import IdentityRegistry
    from relay.routing.transport import Transport
    from relay.server.utils import Clock

logger = logging.getLogger(__name__)


class RoomKind(str, Enum):
    STANDARD = "normal"
    PRIVILEGED = "vip"


def normalize_room_kind(value) -> RoomKind:
    if isinstance(value, str) and value.lower() == RoomKind.PRIVILEGED.value:
        return RoomKind.PRIVILEGED
    return RoomKind.STANDARD


def room_name(kind: RoomKind) -> str:
    return ROOM_VIP if kind is RoomKind.PRIVILEGED else ROOM_NORMAL


class RoomMembership:
    def __init__(self, identities: "IdentityRegistry", transport: "Transport", clock: "Clock"):
        self._identities = identities
        self._transport = transport
        self._clock = clock
        self._granted: Set[str] = set()   # connection ids already bound to chat-vip

    def join_standard(self, connection_id: str) -> None:
        self._transport.bind_to_room(connection_id, ROOM_NORMAL)

    def grant_privileged(self, address: str) -> List[str]:
        """
        Bind every live session claiming `address` to chat-vip and welcome it.
        The badge report may come from another tab than the one that should
        gain access, so this goes by address, not by reporting connection.
        Returns the connection ids that were newly granted.
        """
        granted = []
        for cid in self._identities.connections_for(address):
            if cid in self._granted or not self._transport.is_connected(cid):
                continue
            self._transport.bind_to_room(cid, ROOM_VIP)
            self._granted.add(cid)
            welcome = system_message(
                VIP_WELCOME_TEXT, RoomKind.PRIVILEGED.value,
                self._clock.now_iso(), self._clock.now_ms(),
            )
            self._transport.deliver_to(cid, NEW_MESSAGE, welcome, RoomKind.PRIVILEGED.value)
            granted.append(cid)
        if granted:
            logger.info("Granted VIP access to %d session(s) of %s", len(granted), address)
        return granted

    def restore_privileged(self, connection_id: str) -> None:
        """Re-bind a returning badge holder without another welcome."""
        if connection_id in self._granted:
            return
        self._transport.bind_to_room(connection_id, ROOM_VIP)
        self._granted.add(connection_id)

    def is_privileged(self, connection_id: str) -> bool:
        return connection_id in self._granted

    def release(self, connection_id: str) -> None:
        self._granted.discard(connection_id)
