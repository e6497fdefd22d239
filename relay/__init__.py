"""Realtime chat relay with a badge-gated VIP room."""

__version__ = "1.0.0"
