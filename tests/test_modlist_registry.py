"""Tests for the modlist registry."""

import pytest

from wabbabot.errors import DuplicateModlistError, NotFoundError
from wabbabot.models import Modlist
from wabbabot.registry.modlists import ModlistRegistry


def test_add_and_get(modlists):
    m = Modlist(id="lote", author_id=1)
    assert modlists.add(m) is True
    assert modlists.get_by_id("lote") is m
    assert modlists.get_by_id("missing") is None


def test_add_duplicate_raises(modlists):
    modlists.add(Modlist(id="lote", author_id=1))
    with pytest.raises(DuplicateModlistError, match="lote"):
        modlists.add(Modlist(id="lote", author_id=2))
    assert modlists.get_by_id("lote").author_id == 1


def test_delete(modlists):
    m = Modlist(id="lote", author_id=1)
    modlists.add(m)
    assert modlists.delete(m) is True
    assert modlists.get_by_id("lote") is None
    assert modlists.delete(m) is False


def test_list_all_keeps_insertion_order(modlists):
    for mid in ("b", "a", "c"):
        modlists.add(Modlist(id=mid, author_id=1))
    assert [m.id for m in modlists.list_all()] == ["b", "a", "c"]


@pytest.mark.asyncio
async def test_refresh_mutates_shared_instance(modlists, metadata_source):
    m = Modlist(id="lote", author_id=7, title="old", version="0.1")
    modlists.add(m)
    holder = modlists.get_by_id("lote")

    await modlists.refresh(Modlist(id="lote", author_id=0))

    metadata_source.fetch.assert_awaited_once_with("lote")
    assert holder.title == "Living on the Edge"
    assert holder.version == "2.0.0"
    assert holder.image_link == "https://example.com/lote.png"
    assert holder.author_id == 7


@pytest.mark.asyncio
async def test_refresh_unregistered_updates_given_object(modlists):
    m = Modlist(id="new", author_id=3)
    result = await modlists.refresh(m)
    assert result is m
    assert m.title == "Living on the Edge"
    assert "new" not in modlists


@pytest.mark.asyncio
async def test_refresh_propagates_not_found(modlists, metadata_source):
    metadata_source.fetch.side_effect = NotFoundError("nope")
    m = Modlist(id="lote", author_id=1, title="keep")
    modlists.add(m)
    with pytest.raises(NotFoundError):
        await modlists.refresh(m)
    assert m.title == "keep"


def test_show_empty(modlists):
    assert "no modlists" in modlists.show()


def test_show_lists_every_modlist(modlists):
    modlists.add(Modlist(id="lote", author_id=1, title="LOTE", version="2"))
    modlists.add(Modlist(id="fo4", author_id=2))
    text = modlists.show()
    assert "**LOTE** 2 (`lote`)" in text
    assert "`fo4`" in text
    assert "<@2>" in text


def test_load_and_dump(metadata_source):
    registry = ModlistRegistry(metadata_source)
    registry.load([Modlist(id="a", author_id=1), Modlist(id="a", author_id=2)])
    assert len(registry) == 1
    assert registry.dump() == [
        {"id": "a", "author_id": 1, "title": "", "version": "", "image_link": ""}
    ]
