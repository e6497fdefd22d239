from __future__ import annotations
import time
from datetime import datetime, timezone


class Clock:
    """Wall and monotonic time in one place so tests can freeze both."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        return time.monotonic()

    def now_ms(self) -> int:
        return int(self.now().timestamp() * 1000)

    def now_iso(self) -> str:
        return iso_utc(self.now())


def iso_utc(dt: datetime) -> str:
    ''' ISO-8601 in UTC with milliseconds and a Z suffix, e.g. 2025-01-02T03:04:05.678Z '''
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def parse_client_timestamp(value) -> str | None:
    ''' Client supplied ISO timestamp rewritten as iso_utc(), else None. Naive values are UTC. '''
    if not isinstance(value, str) or not value:
        return None
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return iso_utc(dt)

def as_text(value, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default

def as_flag(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False
