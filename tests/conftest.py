"""Pytest configuration for klaw-relay tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from hypothesis import HealthCheck, settings
from klaw_relay import _config

if TYPE_CHECKING:
    from collections.abc import Generator

# The autouse reset fixture below is safe to share across examples.
settings.register_profile('relay', suppress_health_check=[HealthCheck.function_scoped_fixture])
settings.load_profile('relay')


class Recorder:
    """Receiver that records every event it gets."""

    def __init__(self) -> None:
        self.events: list[Any] = []

    def __call__(self, event: Any) -> None:
        self.events.append(event)


@pytest.fixture(autouse=True)
def reset_relay_defaults() -> Generator[None]:
    """Make every test start from built-in relay defaults."""
    _config.reset()
    yield
    _config.reset()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_recorder() -> type[Recorder]:
    """Factory for tests that need more than one receiver."""
    return Recorder


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return 'asyncio'
