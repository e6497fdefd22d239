import logging

from relay.identity.registry import normalize_address
from relay.protocol.types import BADGE_UPDATE
from relay.routing.rooms import normalize_room_kind, room_name
from relay.server.utils import as_text

logger = logging.getLogger(__name__)


def handle_join_chat(ctx, connection_id, username=None, address=None, chat_type=None):
    kind = normalize_room_kind(chat_type)
    username = as_text(username)
    addr = normalize_address(address)
    logger.info("%s joining the %s chat (%s) with address: %s", username, kind.value, room_name(kind), addr)

    ctx.identities.upsert(connection_id, username, addr)

    # VIP is never joined on request; only a badge puts a session there
    ctx.rooms.join_standard(connection_id)

    # Known badge from before this connection (reconnect, new tab): resync everyone
    if addr and ctx.badges.has_badge(addr):
        ctx.transport.broadcast_all(BADGE_UPDATE, addr, True)
        ctx.rooms.restore_privileged(connection_id)
        logger.info("Re-emitting badge for returning user: %s", addr)
