"""Delivery of release notifications.

:class:`MessageSink` is the narrow interface the broadcaster talks to;
:class:`DiscordMessageSink` implements it on top of a connected discord.py
client.
"""

from __future__ import annotations

import logging
from typing import Protocol

import discord

from wabbabot.broadcast.formatter import ReleaseFormatter
from wabbabot.errors import NotFoundError
from wabbabot.models import MessageRef, ReleaseNotification

log = logging.getLogger(__name__)


class MessageSink(Protocol):
    """Sends and edits messages in chat channels."""

    async def send(
        self, server_id: int, channel_id: int, notification: ReleaseNotification
    ) -> MessageRef:
        ...

    async def send_text(self, server_id: int, channel_id: int, text: str) -> None:
        ...

    async def edit(self, ref: MessageRef, notification: ReleaseNotification) -> None:
        ...


class DiscordMessageSink:
    """:class:`MessageSink` backed by a discord.py client.

    Args:
        client: The running bot.  Channels are looked up in its cache first
            and fetched over the API on a miss.
    """

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    async def _resolve_channel(self, server_id: int, channel_id: int) -> discord.abc.Messageable:
        channel = self._client.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._client.fetch_channel(channel_id)
            except (discord.NotFound, discord.Forbidden) as exc:
                raise NotFoundError(f"Channel {channel_id} is not reachable") from exc

        guild = getattr(channel, "guild", None)
        if guild is None or guild.id != server_id:
            raise NotFoundError(f"Channel {channel_id} does not belong to server {server_id}")
        if not isinstance(channel, discord.abc.Messageable):
            raise NotFoundError(f"Channel {channel_id} cannot receive messages")
        return channel

    async def send(
        self, server_id: int, channel_id: int, notification: ReleaseNotification
    ) -> MessageRef:
        channel = await self._resolve_channel(server_id, channel_id)
        message = await channel.send(embed=ReleaseFormatter.to_embed(notification))
        return MessageRef(server_id=server_id, channel_id=channel_id, message_id=message.id)

    async def send_text(self, server_id: int, channel_id: int, text: str) -> None:
        channel = await self._resolve_channel(server_id, channel_id)
        await channel.send(text, allowed_mentions=discord.AllowedMentions(roles=True))

    async def edit(self, ref: MessageRef, notification: ReleaseNotification) -> None:
        channel = await self._resolve_channel(ref.server_id, ref.channel_id)
        if not hasattr(channel, "get_partial_message"):
            raise NotFoundError(f"Channel {ref.channel_id} does not support editing")
        message = channel.get_partial_message(ref.message_id)
        await message.edit(embed=ReleaseFormatter.to_embed(notification))
        log.debug("Edited message %s in channel %s", ref.message_id, ref.channel_id)
