from __future__ import annotations


def message_fingerprint(sender: str, timestamp: str, text: str, chat_type: str) -> str:
    """
    Dedup key for a chat message; also sent to clients as messageId.
    sender is the wallet address when known, otherwise the connection id.
    """
    return f"{sender}-{timestamp}-{text}-{chat_type}"


def badge_fingerprint(address: str, has_badge: bool, now_ms: int) -> str:
    # Seeded with the broadcast instant: genuine toggles never collide,
    # only retransmissions of the same toggle within one instant do.
    return f"badge-{address}-{'true' if has_badge else 'false'}-{now_ms}"
