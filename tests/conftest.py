"""Pytest configuration and fixtures."""

import pytest

from bondcurve.admin import AdminCap
from bondcurve.events import RecordingEventSink
from bondcurve.exchange import Exchange
from bondcurve.pools.pool import Pool
from tests.helpers import launch_pool


@pytest.fixture
def sink() -> RecordingEventSink:
    """An event sink that records everything published."""
    return RecordingEventSink()


@pytest.fixture
def initialized(sink: RecordingEventSink) -> tuple[Exchange, AdminCap]:
    """A fresh exchange and its admin capability."""
    return Exchange.initialize(event_sink=sink)


@pytest.fixture
def exchange(initialized: tuple[Exchange, AdminCap]) -> Exchange:
    return initialized[0]


@pytest.fixture
def admin_cap(initialized: tuple[Exchange, AdminCap]) -> AdminCap:
    return initialized[1]


@pytest.fixture
def pool(exchange: Exchange) -> Pool:
    """A MEME pool with the full supply and 1 unit of settlement reserve."""
    return launch_pool(exchange)
