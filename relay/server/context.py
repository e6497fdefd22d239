'''
    Description:
        - Context bundles the relay's shared state (identities, badges,
          dedup window, room membership) with the transport and clock.
        - Handlers receive it explicitly; nothing here is module-global.
'''

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from relay.identifiers.dedup import DEFAULT_TTL_SECONDS, DedupWindow
from relay.identity.badges import BadgeDirectory
from relay.identity.registry import IdentityRegistry
from relay.routing.rooms import RoomMembership
from relay.routing.transport import Transport
from relay.server.utils import Clock


@dataclass
class Context:
    transport: Transport
    clock: Clock = field(default_factory=Clock)
    identities: IdentityRegistry = field(default_factory=IdentityRegistry)
    badges: BadgeDirectory = field(default_factory=BadgeDirectory)
    dedup_ttl: float = DEFAULT_TTL_SECONDS
    dedup: DedupWindow = field(init=False)
    rooms: RoomMembership = field(init=False)

    def __post_init__(self) -> None:
        # Both stores share the context's clock and registry
        self.dedup = DedupWindow(ttl=self.dedup_ttl, clock=self.clock.monotonic)
        self.rooms = RoomMembership(self.identities, self.transport, self.clock)

    @classmethod
    def create(cls, transport: Transport, clock: Optional[Clock] = None,
               dedup_ttl: float = DEFAULT_TTL_SECONDS) -> "Context":
        return cls(transport=transport, clock=clock or Clock(), dedup_ttl=dedup_ttl)
