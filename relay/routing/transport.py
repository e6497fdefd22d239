# relay/routing/transport.py

"""
Chat relay: Transport (WebSocket) layer

- One WebSocket listener (single port) for all chat clients.
- Exactly ONE JSON object per WebSocket text frame (no newline framing).
- Plain HTTP requests (no Upgrade) get the health acknowledgement.
- Origin allow-list enforced during the handshake.
- Owns the room groups; the core only asks it to bind, deliver and broadcast.
- Pluggable dispatch table (.on) plus a disconnect callback.

Sends are fire-and-forget: websockets' broadcast() writes synchronously and
skips connections that are no longer open, so handlers never await I/O.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Set

from websockets.asyncio.server import Server, ServerConnection, broadcast, serve
from websockets.exceptions import ConnectionClosed
from websockets.http11 import Request, Response

from relay.protocol.rpc import (
    decode_frame, encode, event_frame, frame_args, resp_error, validate_frame,
)
from relay.protocol.types import ERR_BAD_FRAME, ERR_BAD_JSON, ERR_INTERNAL, ERR_UNKNOWN_TYPE

HEALTH_TEXT = "Chat relay server is running\n"

# ------------ Types ------------------------------------------------------------

Handler = Callable[[str, List[Any]], None]
DisconnectHandler = Callable[[str, str], None]


class Transport(Protocol):

    """What the relay core needs from the transport, and nothing more."""

    def deliver_to(self, connection_id: str, event: str, *args: Any) -> None: ...

    def broadcast_to_room(self, room: str, event: str, *args: Any) -> None: ...

    def broadcast_all(self, event: str, *args: Any) -> None: ...

    def bind_to_room(self, connection_id: str, room: str) -> None: ...

    def is_connected(self, connection_id: str) -> bool: ...


@dataclass
class Link:

    """A connected chat client."""

    ws: ServerConnection
    connection_id: str
    rooms: Set[str] = field(default_factory=set)

    def tag(self) -> str:
        remote = self.ws.remote_address
        return f"{self.connection_id}@{remote[0]}" if remote else self.connection_id


# ------------------------------ Transport Server --------------------------------

class TransportServer:

    """
    Single WebSocket listener for chat clients.

    - register event handlers via .on(event, handler); handlers are plain
      functions called with (connection_id, args) and must not block
    - register the disconnect callback via .on_disconnect(handler)
    - origins: allowed Origin header values; None in the list admits clients
      that send no Origin; origins=None disables the check
    """

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 10000,
        *,
        origins: Optional[Sequence[Optional[str]]] = None,
        ping_interval: Optional[float] = 20,
        ping_timeout: Optional[float] = 20,
        max_size: Optional[int] = 2**20,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._host = host
        self._port = port
        self._handlers: Dict[str, Handler] = {}
        self._on_disconnect: Optional[DisconnectHandler] = None
        self._server: Optional[Server] = None
        self._ws_kwargs = dict(
            origins=list(origins) if origins is not None else None,
            ping_interval=ping_interval,
            ping_timeout=ping_timeout,
            max_size=max_size,
        )

        self.links: Dict[str, Link] = {}          # connection_id -> Link
        self.rooms: Dict[str, Set[str]] = {}      # room -> {connection_id}

        self.log = log or logging.getLogger(__name__)

    # ---- public API -----------------------------------------------------------

    def on(self, event: str, handler: Handler) -> None:

        """Register a handler for an inbound event type."""

        self._handlers[event] = handler

    def on_disconnect(self, handler: DisconnectHandler) -> None:
        self._on_disconnect = handler

    @property
    def port(self) -> int:

        """Bound port (useful when started with port=0)."""

        if self._server is None:
            return self._port
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:

        """Start the WebSocket listener."""

        self._server = await serve(
            self._conn_handler, self._host, self._port,
            process_request=self._process_request,
            **self._ws_kwargs,
        )
        self.log.info("WebSocket listening on ws://%s:%d", self._host, self.port)

    async def stop(self) -> None:

        """Gracefully stop the server and close connections."""

        if self._server:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
        self.links.clear()
        self.rooms.clear()

    # ---- capability interface used by the relay core --------------------------

    def deliver_to(self, connection_id: str, event: str, *args: Any) -> None:
        link = self.links.get(connection_id)
        if link:
            broadcast([link.ws], encode(event_frame(event, *args)))

    def broadcast_to_room(self, room: str, event: str, *args: Any) -> None:
        members = [self.links[cid].ws for cid in self.rooms.get(room, ()) if cid in self.links]
        if members:
            broadcast(members, encode(event_frame(event, *args)))

    def broadcast_all(self, event: str, *args: Any) -> None:
        if self.links:
            broadcast([link.ws for link in self.links.values()], encode(event_frame(event, *args)))

    def bind_to_room(self, connection_id: str, room: str) -> None:
        link = self.links.get(connection_id)
        if not link:
            return
        self.rooms.setdefault(room, set()).add(connection_id)
        link.rooms.add(room)

    def unbind_from_room(self, connection_id: str, room: str) -> None:
        members = self.rooms.get(room)
        if members is not None:
            members.discard(connection_id)
            if not members:
                del self.rooms[room]
        link = self.links.get(connection_id)
        if link:
            link.rooms.discard(room)

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self.links

    def room_members(self, room: str) -> Set[str]:
        return set(self.rooms.get(room, ()))

    # ---- connection lifecycle -------------------------------------------------

    def _process_request(self, connection: ServerConnection, request: Request) -> Optional[Response]:

        """Answer plain HTTP requests (health checks) before the WebSocket handshake."""

        if request.headers.get("Upgrade", "").lower() != "websocket":
            return connection.respond(HTTPStatus.OK, HEALTH_TEXT)
        return None

    async def _conn_handler(self, ws: ServerConnection) -> None:
        link = Link(ws=ws, connection_id=str(ws.id))
        self.links[link.connection_id] = link
        self.log.info("Client connected: %s", link.tag())
        try:
            async for message in ws:
                self._handle_frame(message, link)
        except ConnectionClosed:
            pass
        except Exception as e:
            self.log.exception("Socket error on %s: %s", link.tag(), e)
        finally:
            self._detach(link)

    def _detach(self, link: Link) -> None:
        self.links.pop(link.connection_id, None)
        for room in list(link.rooms):
            self.unbind_from_room(link.connection_id, room)
        code, why = link.ws.close_code, link.ws.close_reason
        reason = f"{code} {why}".strip() if code is not None else "transport close"
        if self._on_disconnect:
            try:
                self._on_disconnect(link.connection_id, reason)
            except Exception as e:
                self.log.exception("disconnect handler error for %s: %s", link.tag(), e)

    def _handle_frame(self, message: str | bytes, link: Link) -> None:

        """Parse, structure-check, then dispatch."""

        try:
            obj = decode_frame(message)
        except ValueError:
            self.log.warning("invalid JSON from %s", link.tag())
            self._send_error(link, ERR_BAD_JSON, "invalid_json")
            return

        ok, why = validate_frame(obj)
        if not ok:
            self.log.warning("bad frame from %s: %s", link.tag(), why)
            self._send_error(link, ERR_BAD_FRAME, why)
            return

        self._dispatch(obj, link)

    def _dispatch(self, obj: dict, link: Link) -> None:

        """Dispatch by event type. Unknown type -> ERROR(UNKNOWN_TYPE)."""

        event = obj["type"]
        handler = self._handlers.get(event)
        if not handler:
            self._send_error(link, ERR_UNKNOWN_TYPE, f"no_handler:{event}")
            return
        try:
            handler(link.connection_id, frame_args(obj))
        except Exception as e:
            self.log.exception("handler error for %s: %s", event, e)
            self._send_error(link, ERR_INTERNAL, f"handler_exception:{event}")

    # ---- error helper ---------------------------------------------------------

    def _send_error(self, link: Link, code: str, detail: str) -> None:
        broadcast([link.ws], encode(resp_error(code, detail)))


__all__ = ["TransportServer", "Transport", "Link", "HEALTH_TEXT"]
