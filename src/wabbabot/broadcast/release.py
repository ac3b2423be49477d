"""Release broadcasting and revision.

A release fans a notification out to every channel listening to a modlist
and remembers the sent messages; a revision edits every one of those
messages in place.  Only the most recent release of a modlist can be
revised, and the record lives for the lifetime of the process.

Per modlist the broadcaster moves ``NoRelease -> Released -> Released``:
:meth:`ReleaseBroadcaster.revise` keeps the current record and each new
successful :meth:`ReleaseBroadcaster.release` replaces it.

Usage::

    broadcaster = ReleaseBroadcaster(modlists, subscriptions, sink, admins={1234})
    result = await broadcaster.release(modlist, author, "v2 is out")
    edited = await broadcaster.revise(modlist, author, "v2.1 is out")
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable

from wabbabot.broadcast.formatter import ReleaseFormatter
from wabbabot.broadcast.sink import MessageSink
from wabbabot.errors import (
    AuthorizationError,
    BroadcastFailedError,
    NoPriorReleaseError,
    NoSubscribersError,
)
from wabbabot.models import Author, Modlist, MessageRef, ReleaseNotification, Server
from wabbabot.registry.modlists import ModlistRegistry
from wabbabot.registry.subscriptions import SubscriptionRegistry

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReleaseResult:
    """What a successful release reached.

    Attributes:
        channel_count: Number of channels that received the notification.
        sent_refs: References to the sent notifications, in server and
            channel order.
    """

    channel_count: int
    sent_refs: tuple[MessageRef, ...]


class ReleaseBroadcaster:
    """Posts release notifications and revises the latest one.

    Args:
        modlists: Registry used to refresh metadata before a release.
        subscriptions: Registry answering who listens to a modlist.
        sink: Delivers and edits the actual messages.
        admins: User ids allowed to manage every modlist.
    """

    def __init__(
        self,
        modlists: ModlistRegistry,
        subscriptions: SubscriptionRegistry,
        sink: MessageSink,
        admins: Iterable[int] = (),
    ) -> None:
        self._modlists = modlists
        self._subscriptions = subscriptions
        self._sink = sink
        self._admins: frozenset[int] = frozenset(admins)
        self._records: dict[str, list[MessageRef]] = {}
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def can_manage(self, modlist: Modlist, user_id: int) -> bool:
        """``True`` if *user_id* is the modlist's author or an administrator."""
        return user_id == modlist.author_id or user_id in self._admins

    def has_release(self, modlist_id: str) -> bool:
        return modlist_id in self._records

    def last_release(self, modlist_id: str) -> list[MessageRef]:
        """Copy of the refs recorded by the latest release (empty if none)."""
        return list(self._records.get(modlist_id, ()))

    # ------------------------------------------------------------------
    # Release
    # ------------------------------------------------------------------

    async def release(self, modlist: Modlist, author: Author, message: str) -> ReleaseResult:
        """Announce a new release of *modlist* in every listening channel.

        Raises:
            NoSubscribersError: If no server listens to the modlist.
            BroadcastFailedError: If no channel could be reached.  The
                previous release record is kept in that case.
            NotFoundError, MetadataError: If the metadata refresh failed.
        """
        async with self._locks[modlist.id]:
            modlist = await self._modlists.refresh(modlist)

            servers = self._subscriptions.servers_listening_to(modlist.id)
            if not servers:
                raise NoSubscribersError("There are no servers listening to this modlist")

            notification = ReleaseFormatter.build_notification(author.name, modlist, message)
            targets = [
                (server, channel.id)
                for server in servers
                for channel in server.listening_channels(modlist.id)
            ]
            results = await asyncio.gather(
                *(self._post(server, channel_id, modlist.id, notification)
                  for server, channel_id in targets),
                return_exceptions=True,
            )

            sent_refs: list[MessageRef] = []
            for (server, channel_id), result in zip(targets, results):
                if isinstance(result, BaseException):
                    log.warning(
                        "Release of %s failed in channel %s of %s: %s",
                        modlist.id, channel_id, server.id, result,
                    )
                    continue
                sent_refs.append(result)

            if not sent_refs:
                raise BroadcastFailedError("Failed to release modlist in any servers")

            self._records[modlist.id] = sent_refs
            log.info(
                "%s released %s %s in %d/%d channels",
                author.name, modlist.id, modlist.version, len(sent_refs), len(targets),
            )
            return ReleaseResult(channel_count=len(sent_refs), sent_refs=tuple(sent_refs))

    async def _post(
        self,
        server: Server,
        channel_id: int,
        modlist_id: str,
        notification: ReleaseNotification,
    ) -> MessageRef:
        """Send the notification and, if configured, the role ping."""
        ref = await self._sink.send(server.id, channel_id, notification)
        role_id = server.list_roles.get(modlist_id)
        if role_id is not None:
            try:
                await self._sink.send_text(server.id, channel_id, ReleaseFormatter.role_ping(role_id))
            except Exception:
                log.exception("Role ping for %s failed in channel %s", modlist_id, channel_id)
        return ref

    # ------------------------------------------------------------------
    # Revise
    # ------------------------------------------------------------------

    async def revise(self, modlist: Modlist, author: Author, message: str) -> int:
        """Edit every message of the latest release of *modlist*.

        The notification is rebuilt from the modlist's current fields; no
        metadata is fetched.  Messages are edited in the order they were
        recorded and the record itself is left unchanged, so revising again
        edits the same messages.

        Returns:
            The number of messages that were edited.

        Raises:
            AuthorizationError: If *author* may not manage the modlist.
            NoPriorReleaseError: If the modlist has not been released since
                the bot started.
        """
        if not self.can_manage(modlist, author.id):
            raise AuthorizationError("You're not managing this list")

        async with self._locks[modlist.id]:
            refs = self._records.get(modlist.id)
            if refs is None:
                raise NoPriorReleaseError(
                    "Could not edit last message for this list - was there one?"
                )

            notification = ReleaseFormatter.build_notification(author.name, modlist, message)
            edited = 0
            for ref in refs:
                try:
                    await self._sink.edit(ref, notification)
                except Exception:
                    log.exception("Could not revise message %s in channel %s", ref.message_id, ref.channel_id)
                    continue
                edited += 1

            log.info("%s revised %d/%d release messages of %s", author.name, edited, len(refs), modlist.id)
            return edited
