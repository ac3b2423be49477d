"""Tests for the subscription registry."""

import pytest

from wabbabot.models import Channel, Server
from wabbabot.registry.subscriptions import SubscriptionRegistry


@pytest.fixture
def registry():
    return SubscriptionRegistry()


@pytest.fixture
def server(registry):
    s = registry.spawn_server(1, "Server One")
    registry.add_channel(1, Channel(10))
    registry.add_channel(1, Channel(11))
    return s


def test_spawn_server_is_get_or_create(registry):
    first = registry.spawn_server(1, "Old name")
    first.list_roles["lote"] = 5
    second = registry.spawn_server(1, "New name")
    assert second is first
    assert second.name == "New name"
    assert second.list_roles == {"lote": 5}
    assert len(registry.servers) == 1


def test_add_channel_is_idempotent(registry, server):
    original = server.channels[10]
    original.listen_to("lote")
    stored = registry.add_channel(1, Channel(10))
    assert stored is original
    assert len(server.channels) == 2
    assert server.channels[10].listening_to == {"lote"}


def test_add_channel_to_unknown_server(registry):
    assert registry.add_channel(404, Channel(10)) is None


def test_add_listener_has_set_semantics(registry, server):
    for _ in range(3):
        assert registry.add_listener(server, 10, "lote") is True
    assert server.channels[10].listening_to == {"lote"}


def test_add_listener_rejects_foreign_channel(registry, server):
    assert registry.add_listener(server, 999, "lote") is False
    assert 999 not in server.channels


def test_remove_listener_true_when_entry_removed(registry, server):
    registry.add_listener(server, 10, "lote")
    assert registry.remove_listener(server, 10, "lote") is True
    assert not server.channels[10].is_listening_to("lote")


def test_remove_listener_false_when_nothing_to_remove(registry, server):
    assert registry.remove_listener(server, 10, "lote") is False
    assert registry.remove_listener(server, 999, "lote") is False


def test_servers_listening_to(registry, server):
    other = registry.spawn_server(2, "Server Two")
    registry.add_channel(2, Channel(20))
    registry.add_listener(server, 11, "lote")
    registry.add_listener(other, 20, "other")

    assert registry.servers_listening_to("lote") == [server]
    assert registry.servers_listening_to("missing") == []


def test_cascade_delete_clears_every_channel(registry, server):
    other = registry.spawn_server(2, "Server Two")
    registry.add_channel(2, Channel(20))
    registry.add_listener(server, 10, "lote")
    registry.add_listener(server, 11, "lote")
    registry.add_listener(other, 20, "lote")
    registry.add_listener(other, 20, "keep")

    assert registry.cascade_delete("lote") is True
    assert registry.servers_listening_to("lote") == []
    assert other.channels[20].listening_to == {"keep"}
    # Servers and channels themselves survive.
    assert len(registry.servers) == 2
    assert set(server.channels) == {10, 11}


def test_cascade_delete_without_listeners_succeeds(registry):
    assert registry.cascade_delete("nobody") is True


def test_set_list_role_requires_listening_channel(registry, server):
    assert registry.set_list_role(1, "lote", 55) is False
    assert registry.set_list_role(404, "lote", 55) is False

    registry.add_listener(server, 10, "lote")
    assert registry.set_list_role(1, "lote", 55) is True
    assert registry.set_list_role(1, "lote", 66) is True
    assert server.list_roles == {"lote": 66}


def test_auto_listen_subscribes_flagged_channels(registry, server):
    server.channels[11].auto_listen_to_new_lists = True
    assert registry.auto_listen("fresh") == 1
    assert server.channels[11].is_listening_to("fresh")
    assert not server.channels[10].is_listening_to("fresh")
    assert registry.auto_listen("fresh") == 0


def test_load_and_dump_round_trip(registry, server):
    registry.add_listener(server, 10, "lote")
    dumped = registry.dump()

    restored = SubscriptionRegistry()
    restored.load(Server.from_dict(d) for d in dumped)
    assert restored.servers == registry.servers
