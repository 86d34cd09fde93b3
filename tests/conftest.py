"""Global test fixtures for sealbot."""

from __future__ import annotations

import random
from unittest.mock import AsyncMock

import pytest

from sealbot.core.events.bus import EventBus
from sealbot.core.wallet.keys import SigningIdentity
from tests.pytest_plugins.fakes import EventRecorder, SleepRecorder, make_receipt

# Fixed private keys, only ever used in tests
KEY_ONE = bytes(range(32))
KEY_TWO = bytes(range(1, 33))


# ============================================================================
# EVENT BUS
# ============================================================================


@pytest.fixture
def events() -> EventBus:
    """Fresh event bus."""
    return EventBus()


@pytest.fixture
def recorder(events: EventBus) -> EventRecorder:
    """Recorder subscribed to the ``events`` bus."""
    rec = EventRecorder()
    events.subscribe(rec)
    return rec


# ============================================================================
# WALLETS AND CHAIN
# ============================================================================


@pytest.fixture
def identity() -> SigningIdentity:
    return SigningIdentity.from_private_key(KEY_ONE)


@pytest.fixture
def other_identity() -> SigningIdentity:
    return SigningIdentity.from_private_key(KEY_TWO)


@pytest.fixture
def chain_client() -> AsyncMock:
    """Chain client whose calls all succeed without creating objects."""
    client = AsyncMock()
    client.execute_move_call.return_value = make_receipt()
    return client


# ============================================================================
# TIMING AND RANDOMNESS
# ============================================================================


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
