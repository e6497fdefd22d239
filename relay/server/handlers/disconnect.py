import logging

logger = logging.getLogger(__name__)


def handle_disconnect(ctx, connection_id, reason=""):
    logger.info("Client disconnected (%s): %s", reason, connection_id)
    # Badges are address scoped and outlive the connection
    ctx.identities.remove(connection_id)
    ctx.rooms.release(connection_id)
