"""Shared pytest fixtures for the PgnBrowser test suite."""

import os
import sys
from typing import Any, Dict, Iterator, List

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pgnbrowser.config.config_loader import ConfigLoader
from pgnbrowser.services.logging_service import LoggingService


QUIET_LOGGING = {
    'console': {'enabled': False, 'level': 'ERROR'},
    'file': {'enabled': False},
}


class FakePosition:
    """Mutable 64-square position, standing in for a board the driver advances in place."""

    def __init__(self, fill: int = 6) -> None:
        self.stones: List[int] = [fill] * 64

    def stone_at(self, square_index: int) -> int:
        return self.stones[square_index]


@pytest.fixture(autouse=True)
def quiet_logging() -> Iterator[None]:
    """Run every test against a fresh logging singleton with no output."""
    LoggingService.reset_instance()
    LoggingService.get_instance({'logging': QUIET_LOGGING})
    yield
    LoggingService.reset_instance()


@pytest.fixture
def config() -> Dict[str, Any]:
    """Bundled configuration with logging silenced."""
    loaded = ConfigLoader().load()
    loaded['logging'] = dict(QUIET_LOGGING)
    return loaded


@pytest.fixture
def position() -> FakePosition:
    return FakePosition()
