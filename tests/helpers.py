"""
Helper utilities for PhoLight tests.

Provides a controllable clock, a predictable random source, and
connection stand-ins (plain and AsyncMock-backed sockets).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from starlette.websockets import WebSocketState


START = datetime(2026, 6, 20, 21, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class CountingRng:
    """
    Deterministic stand-in for random.Random.

    Walks through the word lists and numbers in order, so consecutive
    passwords are always different ("HappyLight100", "CoolNight101", ...).
    """

    def __init__(self) -> None:
        self._choices = 0
        self._ints = 0

    def choice(self, seq):
        item = seq[self._choices % len(seq)]
        self._choices += 1
        return item

    def randint(self, a: int, b: int) -> int:
        value = a + self._ints % (b - a + 1)
        self._ints += 1
        return value


class FakeConnection:
    """Identity-only connection used by the registry and router tests."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"FakeConnection({self.name!r})"


def make_socket(open_: bool = True) -> AsyncMock:
    """AsyncMock WebSocket whose Starlette states report open or closed."""
    ws = AsyncMock()
    state = WebSocketState.CONNECTED if open_ else WebSocketState.DISCONNECTED
    ws.client_state = state
    ws.application_state = state
    return ws


def sent_payloads(ws: AsyncMock) -> list[str]:
    """Raw text frames passed to ws.send_text, in order."""
    return [call.args[0] for call in ws.send_text.await_args_list]
