"""Modlist metadata retrieval.

Title, version and image of a modlist live in the public Wabbajack modlist
index, a JSON array of entries shaped roughly like::

    {
        "title": "Living on the Edge",
        "version": "2.0.1",
        "links": {"image": "https://...", "machineURL": "lote"}
    }

A modlist's id is the entry's ``links.machineURL``.

Usage::

    async with WabbajackMetadataSource(url) as source:
        metadata = await source.fetch("lote")
        print(metadata.title, metadata.version)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from wabbabot.errors import MetadataError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_MODLISTS_URL: str = (
    "https://raw.githubusercontent.com/wabbajack-tools/mod-lists/master/modlists.json"
)
"""Default location of the Wabbajack modlist index."""


@dataclass(frozen=True, slots=True)
class ModlistMetadata:
    """Externally owned fields of a modlist."""

    title: str
    version: str
    image_link: str


class MetadataSource(Protocol):
    """Anything that can look up a modlist's current metadata."""

    async def fetch(self, modlist_id: str) -> ModlistMetadata:
        """Return metadata for *modlist_id*.

        Raises:
            NotFoundError: If the source does not know the id.
            MetadataError: If the source could not be queried.
        """
        ...


def parse_entry(entry: dict[str, Any]) -> ModlistMetadata:
    """Build :class:`ModlistMetadata` from one index entry."""
    links = entry.get("links") or {}
    return ModlistMetadata(
        title=str(entry.get("title", "")),
        version=str(entry.get("version", "")),
        image_link=str(links.get("image", "")),
    )


def find_entry(index: list[dict[str, Any]], modlist_id: str) -> dict[str, Any] | None:
    """Return the index entry whose machine URL equals *modlist_id*."""
    for entry in index:
        links = entry.get("links") or {}
        if links.get("machineURL") == modlist_id:
            return entry
    return None


class WabbajackMetadataSource:
    """Fetches modlist metadata from the Wabbajack modlist index.

    The index is downloaded on every :meth:`fetch` so a release always
    announces the version that is live at that moment.

    Args:
        url: Location of the JSON index.
        timeout: Total request timeout in seconds.
    """

    def __init__(self, url: str = DEFAULT_MODLISTS_URL, timeout: float = 30.0) -> None:
        self._url = url
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> WabbajackMetadataSource:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def _download_index(self) -> list[dict[str, Any]]:
        session = self._get_session()
        try:
            async with session.get(self._url) as resp:
                if resp.status >= 400:
                    raise MetadataError(
                        f"Modlist index returned HTTP {resp.status}"
                    )
                body = await resp.json(content_type=None)
        except aiohttp.ClientError as exc:
            raise MetadataError(f"Could not reach the modlist index: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise MetadataError("Timed out downloading the modlist index") from exc
        except ValueError as exc:
            raise MetadataError(f"Modlist index is not valid JSON: {exc}") from exc

        if not isinstance(body, list):
            raise MetadataError("Modlist index is not a JSON array")
        return body

    async def fetch(self, modlist_id: str) -> ModlistMetadata:
        index = await self._download_index()
        entry = find_entry(index, modlist_id)
        if entry is None:
            raise NotFoundError(f"Modlist with id {modlist_id} not found in the modlist index")
        metadata = parse_entry(entry)
        logger.debug("Fetched metadata for %s: %s %s", modlist_id, metadata.title, metadata.version)
        return metadata

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
