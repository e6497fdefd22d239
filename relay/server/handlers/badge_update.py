import logging

from relay.identifiers.fingerprints import badge_fingerprint
from relay.identity.registry import normalize_address
from relay.protocol.types import BADGE_UPDATE
from relay.server.utils import as_flag

logger = logging.getLogger(__name__)


def handle_badge_update(ctx, connection_id, address=None, has_badge=None):
    addr = normalize_address(address)
    if not addr:
        return
    flag = as_flag(has_badge)

    ctx.badges.set_badge(addr, flag)

    event_id = badge_fingerprint(addr, flag, ctx.clock.now_ms())
    if not ctx.dedup.admit_once(event_id):
        logger.debug("Dropping duplicate badge update %s", event_id)
        return

    # Badge status is global presence info, not scoped to a room
    ctx.transport.broadcast_all(BADGE_UPDATE, addr, flag)
    logger.info("Badge update for %s: %s (reported by %s)", addr, flag, connection_id)

    if flag:
        ctx.rooms.grant_privileged(addr)
