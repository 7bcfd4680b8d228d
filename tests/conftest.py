"""
Shared fixtures for PhoLight tests.

Provides a password authority wired to a fixed clock and a predictable
random source, plus a registry and router built on top of it.
"""

import pytest

from pholight.password import PasswordAuthority
from pholight.registry import ConnectionRegistry
from pholight.router import BroadcastRouter

from .helpers import CountingRng, FakeClock


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> CountingRng:
    return CountingRng()


@pytest.fixture
def authority(clock: FakeClock, rng: CountingRng) -> PasswordAuthority:
    """Authority with a fixed clock; first secret is "HappyLight100"."""
    return PasswordAuthority(clock=clock, rng=rng)


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture
def router(registry: ConnectionRegistry, authority: PasswordAuthority) -> BroadcastRouter:
    return BroadcastRouter(registry, authority)


@pytest.fixture
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"
