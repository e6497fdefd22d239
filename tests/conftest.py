"""Shared fixtures: a frozen clock and an in-memory transport that records traffic."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta, timezone

import pytest

from relay.server.context import Context
from relay.server.utils import Clock


class FakeClock(Clock):
    def __init__(self) -> None:
        self._wall = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        self._mono = 1000.0

    def now(self) -> datetime:
        return self._wall

    def monotonic(self) -> float:
        return self._mono

    def advance(self, seconds: float) -> None:
        self._wall += timedelta(seconds=seconds)
        self._mono += seconds


class RecordingTransport:
    def __init__(self) -> None:
        self.connected: set[str] = set()
        self.rooms: dict[str, set[str]] = defaultdict(set)
        self.delivered: list[tuple] = []          # (connection_id, event, args)
        self.room_broadcasts: list[tuple] = []    # (room, event, args)
        self.global_broadcasts: list[tuple] = []  # (event, args)

    def connect(self, *connection_ids: str) -> None:
        self.connected.update(connection_ids)

    def drop(self, connection_id: str) -> None:
        self.connected.discard(connection_id)
        for members in self.rooms.values():
            members.discard(connection_id)

    def deliver_to(self, connection_id, event, *args):
        self.delivered.append((connection_id, event, args))

    def broadcast_to_room(self, room, event, *args):
        self.room_broadcasts.append((room, event, args))

    def broadcast_all(self, event, *args):
        self.global_broadcasts.append((event, args))

    def bind_to_room(self, connection_id, room):
        if connection_id in self.connected:
            self.rooms[room].add(connection_id)

    def is_connected(self, connection_id):
        return connection_id in self.connected


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> RecordingTransport:
    t = RecordingTransport()
    t.connect("c1", "c2", "c3")
    return t


@pytest.fixture
def ctx(transport: RecordingTransport, clock: FakeClock) -> Context:
    return Context.create(transport, clock=clock)
