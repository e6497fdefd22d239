'''
    Description:
        - Main entry point for the chat relay.
          Builds the transport and the shared context, registers the event
          handlers, starts the dedup eviction task and serves forever.

    Run: python -m relay.run_relay
'''

# ==== Imports ====
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from relay.config import Settings, settings
from relay.protocol.types import BADGE_UPDATE, JOIN_CHAT, SEND_MESSAGE
from relay.routing.transport import TransportServer
from relay.server.context import Context
from relay.server.handlers import (
    handle_badge_update,
    handle_disconnect,
    handle_join_chat,
    handle_send_message,
)
from relay.server.utils import Clock

log = logging.getLogger("relay.run_relay")


# ==== Functions ====

def adapt(context: Context, handler):
    def _wrapped(connection_id: str, args: list):
        handler(context, connection_id, *args)
    return _wrapped


def adapt_disconnect(context: Context):
    def _wrapped(connection_id: str, reason: str):
        handle_disconnect(context, connection_id, reason)
    return _wrapped


def build_relay(config: Settings, clock: Optional[Clock] = None) -> tuple[Context, TransportServer]:
    ''' Wire a transport and context together without starting anything. '''
    server = TransportServer(
        host=config.HOST,
        port=config.PORT,
        origins=config.allowed_origins(),
        ping_interval=config.WS_PING_INTERVAL,
        ping_timeout=config.WS_PING_TIMEOUT,
        max_size=config.WS_MAX_FRAME_BYTES,
    )
    context = Context.create(server, clock=clock, dedup_ttl=config.DEDUP_TTL_SECONDS)

    server.on(JOIN_CHAT,    adapt(context, handle_join_chat))
    server.on(SEND_MESSAGE, adapt(context, handle_send_message))
    server.on(BADGE_UPDATE, adapt(context, handle_badge_update))
    server.on_disconnect(adapt_disconnect(context))
    return context, server


async def main(config: Settings = settings):
    context, server = build_relay(config)
    await server.start()
    log.info("Server running on port %d", server.port)

    evictions = asyncio.create_task(context.dedup.run())
    try:
        await asyncio.Future()  # run forever
    finally:
        evictions.cancel()
        await asyncio.gather(evictions, return_exceptions=True)
        await server.stop()


def cli():
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(main())


if __name__ == "__main__":
    cli()
