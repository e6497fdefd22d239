# relay/protocol/types.py
from __future__ import annotations

# ---- Event types (client -> server) ----
JOIN_CHAT = "join-chat"
SEND_MESSAGE = "send-message"
BADGE_UPDATE = "badge-update"

# ---- Event types (server -> client) ----
NEW_MESSAGE = "new-message"
# BADGE_UPDATE is echoed back to every client with (address, hasBadge)
ERROR = "ERROR"

# ---- Common error codes ----
ERR_BAD_JSON = "BAD_JSON"
ERR_BAD_FRAME = "BAD_FRAME"
ERR_UNKNOWN_TYPE = "UNKNOWN_TYPE"
ERR_INTERNAL = "INTERNAL"

# ---- Room identifiers (clients join by name, keep stable) ----
ROOM_NORMAL = "chat-normal"
ROOM_VIP = "chat-vip"

# ---- System notices ----
SYSTEM_ID = "system"
SYSTEM_USERNAME = "System"
VIP_REQUIRED_TEXT = "You need a diamond badge to send messages to the VIP chat"
VIP_WELCOME_TEXT = "\U0001F389 Congratulations! You now have access to the VIP chat!"

# Positional parameter order per inbound event (Socket.IO style clients send
# these as "args"; named clients send the same keys in "payload").
EVENT_PARAMS: dict[str, tuple[str, ...]] = {
    JOIN_CHAT: ("username", "address", "chatType"),
    SEND_MESSAGE: ("message", "username", "address", "chatType", "timestamp"),
    BADGE_UPDATE: ("address", "hasBadge"),
}

# Minimal shape docs (for human readers)
# Inbound:  { "type": "send-message", "args": ["hi", "alice", "0xAB", "vip"] }
#       or  { "type": "send-message", "payload": {"message": "hi", "username": "alice"} }
# Outbound: { "type": "new-message", "args": [{...message...}, "vip"] }
# Error:    { "type": "ERROR", "payload": {"code": "BAD_JSON", "detail": "..."} }
