"""Data model shared by the registries, the broadcaster and the state store.

Modlists are owned by :class:`~wabbabot.registry.modlists.ModlistRegistry`
and servers by :class:`~wabbabot.registry.subscriptions.SubscriptionRegistry`.
Callers always hold references to the registry-owned objects, never copies,
so a metadata refresh is visible to every pending operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Modlist:
    """A curated, versioned content list with a single managing author."""

    id: str
    author_id: int
    title: str = ""
    version: str = ""
    image_link: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "author_id": self.author_id,
            "title": self.title,
            "version": self.version,
            "image_link": self.image_link,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Modlist:
        return cls(
            id=str(data["id"]),
            author_id=int(data["author_id"]),
            title=data.get("title", ""),
            version=data.get("version", ""),
            image_link=data.get("image_link", ""),
        )


@dataclass
class Channel:
    """A Discord text channel and the modlists it listens to."""

    id: int
    listening_to: set[str] = field(default_factory=set)
    auto_listen_to_new_lists: bool = False

    def listen_to(self, modlist_id: str) -> None:
        self.listening_to.add(modlist_id)

    def unlisten_to(self, modlist_id: str) -> bool:
        """Stop listening to *modlist_id*; ``True`` if it was listened to."""
        if modlist_id not in self.listening_to:
            return False
        self.listening_to.discard(modlist_id)
        return True

    def is_listening_to(self, modlist_id: str) -> bool:
        return modlist_id in self.listening_to

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "listening_to": sorted(self.listening_to),
            "auto_listen_to_new_lists": self.auto_listen_to_new_lists,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Channel:
        return cls(
            id=int(data["id"]),
            listening_to=set(data.get("listening_to", [])),
            auto_listen_to_new_lists=bool(data.get("auto_listen_to_new_lists", False)),
        )


@dataclass
class Server:
    """A Discord guild with its subscribed channels and per-modlist ping roles."""

    id: int
    name: str
    channels: dict[int, Channel] = field(default_factory=dict)
    list_roles: dict[str, int] = field(default_factory=dict)

    def listening_channels(self, modlist_id: str) -> list[Channel]:
        """Channels of this server that listen to *modlist_id*."""
        return [c for c in self.channels.values() if c.is_listening_to(modlist_id)]

    def is_listening_to(self, modlist_id: str) -> bool:
        return any(c.is_listening_to(modlist_id) for c in self.channels.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "channels": [c.to_dict() for c in self.channels.values()],
            # JSON object keys must be strings; modlist ids already are.
            "list_roles": dict(self.list_roles),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Server:
        channels: dict[int, Channel] = {}
        for raw in data.get("channels", []):
            channel = Channel.from_dict(raw)
            channels.setdefault(channel.id, channel)
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            channels=channels,
            list_roles={str(k): int(v) for k, v in data.get("list_roles", {}).items()},
        )


@dataclass(frozen=True, slots=True)
class Author:
    """The user who invoked a release or revision."""

    id: int
    name: str


@dataclass(frozen=True, slots=True)
class MessageRef:
    """Identifies a sent release notification well enough to edit it later."""

    server_id: int
    channel_id: int
    message_id: int


@dataclass(frozen=True, slots=True)
class ReleaseNotification:
    """Platform-neutral content of a release announcement.

    Attributes:
        title: ``"<author> just released <title> <version>!"``.
        description: The free text supplied by the releaser.
        image_url: The modlist's image link (may be empty).
        timestamp: When the notification was formatted.
    """

    title: str
    description: str
    image_url: str
    timestamp: datetime
