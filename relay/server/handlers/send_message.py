import logging

from relay.identifiers.fingerprints import message_fingerprint
from relay.identity.registry import normalize_address
from relay.protocol.rpc import system_message
from relay.protocol.types import NEW_MESSAGE, VIP_REQUIRED_TEXT
from relay.routing.rooms import RoomKind, normalize_room_kind, room_name
from relay.server.utils import as_text, parse_client_timestamp

logger = logging.getLogger(__name__)


def handle_send_message(ctx, connection_id, message=None, username=None, address=None,
                        chat_type=None, timestamp=None):
    kind = normalize_room_kind(chat_type)
    room = room_name(kind)
    text = as_text(message)
    username = as_text(username)
    logger.info("Message from %s to %s chat (%s): %s", username, kind.value, room, text)

    addr = normalize_address(address)
    if addr:
        ctx.identities.upsert(connection_id, None, addr)

    # The registry holds the most recent identity for this connection
    sender = ctx.identities.address_of(connection_id) or addr

    if kind is RoomKind.PRIVILEGED and not ctx.badges.has_badge(sender):
        logger.warning("User %s tried to send to VIP chat but doesn't have a badge", username)
        notice = system_message(
            VIP_REQUIRED_TEXT, RoomKind.STANDARD.value,
            ctx.clock.now_iso(), ctx.clock.now_ms(),
        )
        ctx.transport.deliver_to(connection_id, NEW_MESSAGE, notice, RoomKind.STANDARD.value)
        return

    sent_at = parse_client_timestamp(timestamp) or ctx.clock.now_iso()
    sender_id = sender or connection_id
    message_id = message_fingerprint(sender_id, sent_at, text, kind.value)

    if not ctx.dedup.admit_once(message_id):
        logger.debug("Dropping duplicate message %s", message_id)
        return

    ctx.transport.broadcast_to_room(room, NEW_MESSAGE, {
        "id": sender_id,
        "message": text,
        "username": username,
        "timestamp": sent_at,
        "messageId": message_id,
        "chatType": kind.value,
    }, kind.value)
