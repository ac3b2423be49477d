"""JSON persistence of modlists and servers.

State is kept in two files under the data directory::

    db/modlists.json   # [{"id": ..., "author_id": ..., "title": ...}, ...]
    db/servers.json    # [{"id": ..., "name": ..., "channels": [...], ...}, ...]

Both are loaded once at startup and rewritten after every mutating command.
Writes go to a temporary file first and are moved into place, so a crash
mid-write never leaves a truncated file behind.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from wabbabot.models import Modlist, Server

log = logging.getLogger(__name__)

MODLISTS_FILE: str = "modlists.json"
SERVERS_FILE: str = "servers.json"


class StateStoreError(Exception):
    """Persisted state exists but cannot be read."""


class JsonStateStore:
    """Loads and saves the bot's persistent state as JSON files.

    Args:
        data_dir: Directory holding the state files.  Created on first save.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    @property
    def modlists_path(self) -> Path:
        return self.data_dir / MODLISTS_FILE

    @property
    def servers_path(self) -> Path:
        return self.data_dir / SERVERS_FILE

    # ------------------------------------------------------------------
    # Sync helpers (run in a worker thread)
    # ------------------------------------------------------------------

    @staticmethod
    def _read(path: Path) -> list[dict[str, Any]]:
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8") or "[]")
        except (OSError, json.JSONDecodeError) as exc:
            raise StateStoreError(f"Cannot read {path}: {exc}") from exc
        if not isinstance(data, list):
            raise StateStoreError(f"{path} must contain a JSON array")
        return data

    @staticmethod
    def _write(path: Path, data: list[dict[str, Any]]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _load_sync(self) -> tuple[list[Modlist], list[Server]]:
        try:
            modlists = [Modlist.from_dict(d) for d in self._read(self.modlists_path)]
            servers = [Server.from_dict(d) for d in self._read(self.servers_path)]
        except (KeyError, TypeError, ValueError) as exc:
            raise StateStoreError(f"Malformed state in {self.data_dir}: {exc}") from exc
        return modlists, servers

    def _save_sync(self, modlists: list[dict[str, Any]], servers: list[dict[str, Any]]) -> None:
        self._write(self.modlists_path, modlists)
        self._write(self.servers_path, servers)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def load(self) -> tuple[list[Modlist], list[Server]]:
        """Read modlists and servers; missing files count as empty.

        Raises:
            StateStoreError: If a file exists but is unreadable or malformed.
        """
        modlists, servers = await asyncio.to_thread(self._load_sync)
        log.info("Loaded %d modlists and %d servers from %s", len(modlists), len(servers), self.data_dir)
        return modlists, servers

    async def save(self, modlists: list[dict[str, Any]], servers: list[dict[str, Any]]) -> None:
        """Write the serialized registries (see ``dump()`` on each registry)."""
        await asyncio.to_thread(self._save_sync, modlists, servers)
        log.debug("Saved state to %s", self.data_dir)
