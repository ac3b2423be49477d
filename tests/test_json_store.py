"""Tests for JSON state persistence."""

import json

import pytest

from wabbabot.models import Channel, Modlist, Server
from wabbabot.storage.json_store import JsonStateStore, StateStoreError


@pytest.mark.asyncio
async def test_load_missing_files_is_empty(tmp_path):
    store = JsonStateStore(tmp_path / "db")
    assert await store.load() == ([], [])


@pytest.mark.asyncio
async def test_save_then_load(tmp_path):
    store = JsonStateStore(tmp_path / "db")
    modlists = [Modlist(id="lote", author_id=1, title="LOTE", version="2")]
    servers = [Server(id=1, name="S", channels={10: Channel(10, {"lote"})}, list_roles={"lote": 5})]

    await store.save([m.to_dict() for m in modlists], [s.to_dict() for s in servers])
    loaded_modlists, loaded_servers = await store.load()

    assert loaded_modlists == modlists
    assert loaded_servers == servers
    assert not list((tmp_path / "db").glob("*.tmp"))


@pytest.mark.asyncio
async def test_save_writes_readable_json(tmp_path):
    store = JsonStateStore(tmp_path)
    await store.save([Modlist(id="a", author_id=1).to_dict()], [])
    data = json.loads(store.modlists_path.read_text(encoding="utf-8"))
    assert data[0]["id"] == "a"
    assert json.loads(store.servers_path.read_text(encoding="utf-8")) == []


@pytest.mark.asyncio
async def test_corrupt_file_raises(tmp_path):
    (tmp_path / "modlists.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StateStoreError):
        await JsonStateStore(tmp_path).load()


@pytest.mark.asyncio
async def test_non_array_file_raises(tmp_path):
    (tmp_path / "servers.json").write_text('{"id": 1}', encoding="utf-8")
    with pytest.raises(StateStoreError, match="JSON array"):
        await JsonStateStore(tmp_path).load()


@pytest.mark.asyncio
async def test_malformed_entry_raises(tmp_path):
    (tmp_path / "modlists.json").write_text('[{"title": "no id"}]', encoding="utf-8")
    with pytest.raises(StateStoreError, match="Malformed"):
        await JsonStateStore(tmp_path).load()
