"""
Pytest configuration for pageflow
"""

import logging
import sys

import pytest

from pageflow.geometry import PageSetup
from pageflow.placer import FlowPlacer

from .helpers import FakeTypesetter, RecordingSink


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)  # Only show warnings and errors during tests
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def recording_sink():
    """Page sink that records pages and placements without drawing."""
    return RecordingSink()


@pytest.fixture
def fake_typesetter():
    """Typesetter answering 10pt height and 2pt depth for every block."""
    return FakeTypesetter()


@pytest.fixture
def placer_factory(recording_sink, fake_typesetter):
    """Build a FlowPlacer around the recording sink and fake typesetter."""

    def factory(page_style=None, typesetter=None):
        return FlowPlacer(
            PageSetup(),
            recording_sink,
            typesetter or fake_typesetter,
            lambda: page_style,
        )

    return factory


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    # Ignore logging errors during tests
    logging.raiseExceptions = False
