from .dedup import DedupWindow
from .fingerprints import badge_fingerprint, message_fingerprint

__all__ = ["DedupWindow", "badge_fingerprint", "message_fingerprint"]
