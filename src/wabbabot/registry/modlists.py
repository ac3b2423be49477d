"""Registry of known modlists, keyed by id.

The registry is the single owner of every :class:`~wabbabot.models.Modlist`.
:meth:`ModlistRegistry.refresh` mutates the stored object in place, so
anything holding a reference sees the new title, version and image.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from wabbabot.errors import DuplicateModlistError
from wabbabot.metadata.source import MetadataSource
from wabbabot.models import Modlist

log = logging.getLogger(__name__)


class ModlistRegistry:
    """CRUD store of modlists plus metadata refresh.

    Args:
        metadata_source: Where :meth:`refresh` pulls title/version/image from.
    """

    def __init__(self, metadata_source: MetadataSource) -> None:
        self._metadata_source = metadata_source
        self._modlists: dict[str, Modlist] = {}

    def add(self, modlist: Modlist) -> bool:
        """Register *modlist*.

        Raises:
            DuplicateModlistError: If a modlist with the same id exists.
        """
        if modlist.id in self._modlists:
            raise DuplicateModlistError(modlist.id)
        self._modlists[modlist.id] = modlist
        log.info("Added modlist %s (author %s)", modlist.id, modlist.author_id)
        return True

    def get_by_id(self, modlist_id: str) -> Modlist | None:
        return self._modlists.get(modlist_id)

    def delete(self, modlist: Modlist) -> bool:
        """Remove *modlist*; ``False`` if its id was not registered."""
        if self._modlists.pop(modlist.id, None) is None:
            return False
        log.info("Deleted modlist %s", modlist.id)
        return True

    async def refresh(self, modlist: Modlist) -> Modlist:
        """Overwrite the metadata fields of *modlist* from the metadata source.

        The stored entry for the id is updated (and *modlist* too, when the
        caller passed an unregistered object).  ``id`` and ``author_id`` are
        never touched.

        Raises:
            NotFoundError: If the metadata source does not know the id.
            MetadataError: If the metadata source could not be queried.
        """
        metadata = await self._metadata_source.fetch(modlist.id)
        target = self._modlists.get(modlist.id, modlist)
        targets = [target] if target is modlist else [target, modlist]
        for entry in targets:
            entry.title = metadata.title
            entry.version = metadata.version
            entry.image_link = metadata.image_link
        log.debug("Refreshed %s -> %s %s", modlist.id, metadata.title, metadata.version)
        return target

    def list_all(self) -> list[Modlist]:
        return list(self._modlists.values())

    def show(self) -> str:
        """Human-readable listing used by ``showmodlists``."""
        if not self._modlists:
            return "There are no modlists yet."
        lines = [
            f"**{m.title or m.id}** {m.version} (`{m.id}`), managed by <@{m.author_id}>"
            for m in self._modlists.values()
        ]
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._modlists)

    def __contains__(self, modlist_id: object) -> bool:
        return modlist_id in self._modlists

    # ------------------------------------------------------------------
    # Persistence hooks
    # ------------------------------------------------------------------

    def load(self, modlists: Iterable[Modlist]) -> None:
        """Replace the registry contents, keeping the first of any duplicate ids."""
        self._modlists.clear()
        for modlist in modlists:
            self._modlists.setdefault(modlist.id, modlist)

    def dump(self) -> list[dict[str, Any]]:
        return [m.to_dict() for m in self._modlists.values()]
