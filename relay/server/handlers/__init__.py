from .badge_update import handle_badge_update
from .disconnect import handle_disconnect
from .join_chat import handle_join_chat
from .send_message import handle_send_message

__all__ = [
    "handle_badge_update",
    "handle_disconnect",
    "handle_join_chat",
    "handle_send_message",
]
