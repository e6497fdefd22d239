from .badges import BadgeDirectory
from .registry import IdentityRecord, IdentityRegistry, normalize_address

__all__ = ["BadgeDirectory", "IdentityRecord", "IdentityRegistry", "normalize_address"]
