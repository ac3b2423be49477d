"""Shared fixtures for the WabbaBot test suite."""

import itertools
from unittest.mock import AsyncMock

import pytest

from wabbabot.broadcast.release import ReleaseBroadcaster
from wabbabot.metadata.source import ModlistMetadata
from wabbabot.models import Author, Channel, MessageRef, Modlist
from wabbabot.registry.modlists import ModlistRegistry
from wabbabot.registry.subscriptions import SubscriptionRegistry

AUTHOR_ID = 1001
ADMIN_ID = 9999


@pytest.fixture
def metadata_source():
    """Mock metadata source returning a fixed title/version/image."""
    source = AsyncMock()
    source.fetch = AsyncMock(
        return_value=ModlistMetadata(
            title="Living on the Edge",
            version="2.0.0",
            image_link="https://example.com/lote.png",
        )
    )
    source.close = AsyncMock()
    return source


@pytest.fixture
def sink():
    """Mock message sink; every send returns a fresh MessageRef."""
    counter = itertools.count(1)
    mock = AsyncMock()

    async def _send(server_id, channel_id, notification):
        return MessageRef(server_id=server_id, channel_id=channel_id, message_id=next(counter))

    mock.send = AsyncMock(side_effect=_send)
    mock.send_text = AsyncMock()
    mock.edit = AsyncMock()
    return mock


@pytest.fixture
def modlists(metadata_source):
    return ModlistRegistry(metadata_source)


@pytest.fixture
def subscriptions():
    return SubscriptionRegistry()


@pytest.fixture
def broadcaster(modlists, subscriptions, sink):
    return ReleaseBroadcaster(modlists, subscriptions, sink, admins={ADMIN_ID})


@pytest.fixture
def modlist(modlists):
    """A registered modlist ``lote`` authored by AUTHOR_ID."""
    m = Modlist(id="lote", author_id=AUTHOR_ID, title="Living on the Edge", version="1.0.0")
    modlists.add(m)
    return m


@pytest.fixture
def author():
    return Author(id=AUTHOR_ID, name="Tim")


@pytest.fixture
def listening_server(subscriptions, modlist):
    """Server 1 with channel 10 listening to the ``lote`` modlist."""
    server = subscriptions.spawn_server(1, "Server One")
    subscriptions.add_channel(1, Channel(10))
    subscriptions.add_listener(server, 10, modlist.id)
    return server
