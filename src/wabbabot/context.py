"""Application context: the one object every command handler talks to.

:class:`AppContext` is built once at startup, owns the registries, the
broadcaster and the state store, and exposes one coroutine per chat command.
Each returns an :class:`~wabbabot.errors.Outcome` instead of raising, so the
command layer only has to decide how to show a success or a failure.

Usage::

    app = AppContext.from_settings(settings, sink=DiscordMessageSink(bot))
    await app.startup()
    outcome = await app.listen(guild.id, guild.name, channel.id, "lotf")
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Iterable, TypeVar

from wabbabot.broadcast.release import ReleaseBroadcaster, ReleaseResult
from wabbabot.broadcast.sink import MessageSink
from wabbabot.config import WabbaBotSettings
from wabbabot.errors import (
    AuthorizationError,
    DuplicateModlistError,
    NotFoundError,
    Outcome,
    WabbaBotError,
)
from wabbabot.metadata.source import MetadataSource, WabbajackMetadataSource
from wabbabot.models import Author, Channel, Modlist
from wabbabot.registry.modlists import ModlistRegistry
from wabbabot.registry.subscriptions import SubscriptionRegistry
from wabbabot.storage.json_store import JsonStateStore

log = logging.getLogger(__name__)

T = TypeVar("T")


class AppContext:
    """Wires registries, broadcaster and persistence together.

    Args:
        metadata_source: Source of modlist titles, versions and images.
        sink: Delivers and edits release messages.
        store: Persistent state; ``None`` keeps everything in memory.
        admins: User ids allowed to manage every modlist.
    """

    def __init__(
        self,
        metadata_source: MetadataSource,
        sink: MessageSink,
        store: JsonStateStore | None = None,
        admins: Iterable[int] = (),
    ) -> None:
        self.admins: frozenset[int] = frozenset(admins)
        self.metadata_source = metadata_source
        self.store = store
        self.modlists = ModlistRegistry(metadata_source)
        self.subscriptions = SubscriptionRegistry()
        self.broadcaster = ReleaseBroadcaster(
            self.modlists, self.subscriptions, sink, admins=self.admins,
        )
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: WabbaBotSettings, sink: MessageSink) -> AppContext:
        return cls(
            metadata_source=WabbajackMetadataSource(
                settings.MODLISTS_URL, timeout=settings.METADATA_TIMEOUT,
            ),
            sink=sink,
            store=JsonStateStore(settings.DATA_DIR),
            admins=settings.ADMINS,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def startup(self) -> None:
        """Load persisted state.  Errors here are fatal to the caller."""
        if self.store is None:
            return
        modlists, servers = await self.store.load()
        self.modlists.load(modlists)
        self.subscriptions.load(servers)

    async def persist(self) -> None:
        if self.store is None:
            return
        try:
            await self.store.save(self.modlists.dump(), self.subscriptions.dump())
        except OSError:
            log.exception("Failed to save state to %s", self.store.data_dir)

    async def close(self) -> None:
        close = getattr(self.metadata_source, "close", None)
        if close is not None:
            await close()

    def is_admin(self, user_id: int) -> bool:
        return user_id in self.admins

    # ------------------------------------------------------------------
    # Boundary
    # ------------------------------------------------------------------

    async def _run(self, operation: Awaitable[T]) -> Outcome[T]:
        try:
            return Outcome.success(await operation)
        except WabbaBotError as exc:
            log.info("Command failed: %s: %s", type(exc).__name__, exc)
            return Outcome.failure(exc)

    def _require_modlist(self, modlist_id: str) -> Modlist:
        modlist = self.modlists.get_by_id(modlist_id)
        if modlist is None:
            raise NotFoundError(f"Modlist with id {modlist_id} not found")
        return modlist

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    async def listen(
        self, server_id: int, server_name: str, channel_id: int, modlist_id: str
    ) -> Outcome[Modlist]:
        """Subscribe *channel_id* of *server_id* to *modlist_id*."""
        return await self._run(self._listen(server_id, server_name, channel_id, modlist_id))

    async def _listen(
        self, server_id: int, server_name: str, channel_id: int, modlist_id: str
    ) -> Modlist:
        modlist = self._require_modlist(modlist_id)
        async with self._lock:
            server = self.subscriptions.spawn_server(server_id, server_name)
            self.subscriptions.add_channel(server_id, Channel(channel_id))
            if not self.subscriptions.add_listener(server, channel_id, modlist_id):
                raise NotFoundError(f"Channel {channel_id} does not belong to this server")
            await self.persist()
        return modlist

    async def unlisten(self, server_id: int, channel_id: int, modlist_id: str) -> Outcome[Modlist]:
        """Unsubscribe *channel_id* of *server_id* from *modlist_id*."""
        return await self._run(self._unlisten(server_id, channel_id, modlist_id))

    async def _unlisten(self, server_id: int, channel_id: int, modlist_id: str) -> Modlist:
        server = self.subscriptions.get_server_by_id(server_id)
        if server is None:
            raise NotFoundError("This server is not listening to any modlists yet")
        modlist = self._require_modlist(modlist_id)
        async with self._lock:
            if not self.subscriptions.remove_listener(server, channel_id, modlist_id):
                raise NotFoundError(f"{modlist.title or modlist.id} wasn't listening to that channel")
            await self.persist()
        return modlist

    async def show_listeners(self, modlist_id: str) -> Outcome[str]:
        """Describe every server and channel listening to *modlist_id*."""
        return await self._run(self._show_listeners(modlist_id))

    async def _show_listeners(self, modlist_id: str) -> str:
        modlist = self._require_modlist(modlist_id)
        lines = []
        for server in self.subscriptions.servers_listening_to(modlist_id):
            channels = ", ".join(f"`{c.id}`" for c in server.listening_channels(modlist_id))
            lines.append(
                f"Server {server.name} (`{server.id}`) is listening to "
                f"{modlist.title or modlist.id} in the following channels: {channels}"
            )
        if not lines:
            raise NotFoundError("There are no servers listening to this modlist")
        return "\n".join(lines)

    async def set_role(self, server_id: int, modlist_id: str, role_id: int) -> Outcome[Modlist]:
        """Ping *role_id* in *server_id* whenever *modlist_id* is released."""
        return await self._run(self._set_role(server_id, modlist_id, role_id))

    async def _set_role(self, server_id: int, modlist_id: str, role_id: int) -> Modlist:
        modlist = self._require_modlist(modlist_id)
        async with self._lock:
            if not self.subscriptions.set_list_role(server_id, modlist_id, role_id):
                raise NotFoundError(
                    f"This server is not listening to any channels yet for list {modlist.title or modlist.id}"
                )
            await self.persist()
        return modlist

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    async def release(self, modlist_id: str, author: Author, message: str) -> Outcome[ReleaseResult]:
        """Broadcast a new release of *modlist_id* written by *author*."""
        return await self._run(self._release(modlist_id, author, message))

    async def _release(self, modlist_id: str, author: Author, message: str) -> ReleaseResult:
        modlist = self._require_modlist(modlist_id)
        if not self.broadcaster.can_manage(modlist, author.id):
            raise AuthorizationError("You're not managing this list")
        try:
            return await self.broadcaster.release(modlist, author, message)
        finally:
            # The refresh may have changed title, version or image even if
            # nothing was sent.
            async with self._lock:
                await self.persist()

    async def revise(self, modlist_id: str, author: Author, message: str) -> Outcome[int]:
        """Edit every message of the latest release of *modlist_id*."""
        return await self._run(self._revise(modlist_id, author, message))

    async def _revise(self, modlist_id: str, author: Author, message: str) -> int:
        modlist = self._require_modlist(modlist_id)
        return await self.broadcaster.revise(modlist, author, message)

    # ------------------------------------------------------------------
    # Modlists
    # ------------------------------------------------------------------

    async def add_modlist(self, modlist_id: str, author_id: int) -> Outcome[Modlist]:
        """Register *modlist_id* managed by *author_id*, fetching its metadata."""
        return await self._run(self._add_modlist(modlist_id, author_id))

    async def _add_modlist(self, modlist_id: str, author_id: int) -> Modlist:
        if modlist_id in self.modlists:
            raise DuplicateModlistError(modlist_id)
        modlist = Modlist(id=modlist_id, author_id=author_id)
        await self.modlists.refresh(modlist)
        async with self._lock:
            self.modlists.add(modlist)
            self.subscriptions.auto_listen(modlist.id)
            await self.persist()
        return modlist

    async def del_modlist(self, modlist_id: str) -> Outcome[Modlist]:
        """Delete *modlist_id* after removing every subscription to it."""
        return await self._run(self._del_modlist(modlist_id))

    async def _del_modlist(self, modlist_id: str) -> Modlist:
        modlist = self.modlists.get_by_id(modlist_id)
        if modlist is None:
            raise NotFoundError(f"Modlist {modlist_id} does not exist")
        async with self._lock:
            deleted = self.subscriptions.cascade_delete(modlist_id) and self.modlists.delete(modlist)
            await self.persist()
        if not deleted:
            raise NotFoundError(f"Modlist {modlist_id} could not be deleted")
        return modlist

    async def show_modlists(self) -> Outcome[str]:
        return await self._run(self._show_modlists())

    async def _show_modlists(self) -> str:
        return self.modlists.show()
