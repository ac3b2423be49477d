"""Servers, their channels, and which modlists each channel listens to.

Servers and channels are created lazily the first time a subscription is
requested for them and are never removed; deleting a modlist only clears the
listening entries that reference it.

Every method here is synchronous and never yields to the event loop, so a
mutation always completes before the next command is handled.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from wabbabot.models import Channel, Server

log = logging.getLogger(__name__)


class SubscriptionRegistry:
    """Server/channel subscription state and per-server ping roles."""

    def __init__(self) -> None:
        self._servers: dict[int, Server] = {}

    # ------------------------------------------------------------------
    # Servers and channels
    # ------------------------------------------------------------------

    def spawn_server(self, server_id: int, name: str) -> Server:
        """Return the server with *server_id*, creating it if needed.

        An existing server keeps its channels and roles but takes the new
        *name*.
        """
        server = self._servers.get(server_id)
        if server is None:
            server = Server(id=server_id, name=name)
            self._servers[server_id] = server
            log.info("Spawned server %s (%s)", name, server_id)
        elif server.name != name:
            server.name = name
        return server

    def get_server_by_id(self, server_id: int) -> Server | None:
        return self._servers.get(server_id)

    def add_channel(self, server_id: int, channel: Channel) -> Channel | None:
        """Insert *channel* into the server unless a channel with its id exists.

        Returns the channel now stored under that id, or ``None`` when the
        server is unknown.
        """
        server = self._servers.get(server_id)
        if server is None:
            return None
        return server.channels.setdefault(channel.id, channel)

    @property
    def servers(self) -> list[Server]:
        return list(self._servers.values())

    # ------------------------------------------------------------------
    # Listening
    # ------------------------------------------------------------------

    def add_listener(self, server: Server, channel_id: int, modlist_id: str) -> bool:
        """Make *channel_id* listen to *modlist_id*.

        Returns ``True`` whenever the channel belongs to *server*, including
        when it was already listening; ``False`` if it does not.
        """
        channel = server.channels.get(channel_id)
        if channel is None:
            return False
        channel.listen_to(modlist_id)
        log.info("Channel %s in %s now listens to %s", channel_id, server.id, modlist_id)
        return True

    def remove_listener(self, server: Server, channel_id: int, modlist_id: str) -> bool:
        """Stop *channel_id* listening to *modlist_id*.

        Returns ``True`` if the channel was listening and the entry was
        removed, ``False`` if there was nothing to remove (including when the
        channel does not belong to *server*).
        """
        channel = server.channels.get(channel_id)
        if channel is None:
            return False
        removed = channel.unlisten_to(modlist_id)
        if removed:
            log.info("Channel %s in %s no longer listens to %s", channel_id, server.id, modlist_id)
        return removed

    def servers_listening_to(self, modlist_id: str) -> list[Server]:
        return [s for s in self._servers.values() if s.is_listening_to(modlist_id)]

    def cascade_delete(self, modlist_id: str) -> bool:
        """Remove *modlist_id* from every channel of every server."""
        removed = 0
        for server in self._servers.values():
            for channel in server.channels.values():
                if channel.unlisten_to(modlist_id):
                    removed += 1
        log.info("Removed %d listening entries for %s", removed, modlist_id)
        return True

    def auto_listen(self, modlist_id: str) -> int:
        """Subscribe every auto-listening channel to a newly added modlist."""
        count = 0
        for server in self._servers.values():
            for channel in server.channels.values():
                if channel.auto_listen_to_new_lists and not channel.is_listening_to(modlist_id):
                    channel.listen_to(modlist_id)
                    count += 1
        if count:
            log.info("Auto-subscribed %d channels to %s", count, modlist_id)
        return count

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def set_list_role(self, server_id: int, modlist_id: str, role_id: int) -> bool:
        """Ping *role_id* in *server_id* on releases of *modlist_id*.

        Fails (returns ``False``) unless at least one of the server's
        channels listens to the modlist.
        """
        server = self._servers.get(server_id)
        if server is None or not server.is_listening_to(modlist_id):
            return False
        server.list_roles[modlist_id] = role_id
        log.info("Server %s pings role %s for %s", server_id, role_id, modlist_id)
        return True

    # ------------------------------------------------------------------
    # Persistence hooks
    # ------------------------------------------------------------------

    def load(self, servers: Iterable[Server]) -> None:
        self._servers.clear()
        for server in servers:
            self._servers.setdefault(server.id, server)

    def dump(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self._servers.values()]
