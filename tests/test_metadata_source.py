"""Tests for the Wabbajack metadata source."""

from unittest.mock import AsyncMock

import pytest

from wabbabot.errors import MetadataError, NotFoundError
from wabbabot.metadata.source import WabbajackMetadataSource, find_entry, parse_entry

INDEX = [
    {
        "title": "Living on the Edge",
        "version": "2.0.1",
        "links": {"image": "https://example.com/lote.png", "machineURL": "lote"},
    },
    {"title": "No links"},
    {"title": "Other", "version": "1", "links": {"machineURL": "other"}},
]


def test_find_entry_matches_machine_url():
    assert find_entry(INDEX, "lote") is INDEX[0]
    assert find_entry(INDEX, "missing") is None


def test_parse_entry_handles_missing_links():
    meta = parse_entry(INDEX[1])
    assert meta.title == "No links"
    assert meta.version == ""
    assert meta.image_link == ""


@pytest.mark.asyncio
async def test_fetch_returns_metadata():
    source = WabbajackMetadataSource("https://example.com/modlists.json")
    source._download_index = AsyncMock(return_value=INDEX)

    meta = await source.fetch("lote")

    assert meta.title == "Living on the Edge"
    assert meta.version == "2.0.1"
    assert meta.image_link == "https://example.com/lote.png"


@pytest.mark.asyncio
async def test_fetch_unknown_id_raises_not_found():
    source = WabbajackMetadataSource("https://example.com/modlists.json")
    source._download_index = AsyncMock(return_value=INDEX)

    with pytest.raises(NotFoundError, match="missing"):
        await source.fetch("missing")


@pytest.mark.asyncio
async def test_fetch_propagates_metadata_errors():
    source = WabbajackMetadataSource("https://example.com/modlists.json")
    source._download_index = AsyncMock(side_effect=MetadataError("HTTP 500"))

    with pytest.raises(MetadataError):
        await source.fetch("lote")


@pytest.mark.asyncio
async def test_close_without_session_is_noop():
    source = WabbajackMetadataSource()
    await source.close()
    assert source._session is None
