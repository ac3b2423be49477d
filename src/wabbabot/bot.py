"""WabbaBot: the Discord bot that announces modlist releases."""

from __future__ import annotations

import logging

import discord
from discord.ext import commands

from wabbabot.broadcast.sink import DiscordMessageSink
from wabbabot.commands import COMMAND_EXTENSIONS
from wabbabot.config import WabbaBotSettings
from wabbabot.context import AppContext

log = logging.getLogger(__name__)


class WabbaBot(commands.Bot):
    """Command bot wired to a single :class:`AppContext`.

    Args:
        settings: Validated configuration; the command prefix, admins,
            data directory and metadata source all come from here.
    """

    def __init__(self, settings: WabbaBotSettings) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True
        intents.members = True

        super().__init__(
            command_prefix=settings.COMMAND_PREFIX,
            intents=intents,
        )

        self.settings = settings
        self.app = AppContext.from_settings(settings, sink=DiscordMessageSink(self))

    async def setup_hook(self) -> None:
        """Called after login, before the bot starts processing events."""
        # Persisted state must load before any command is accepted.
        await self.app.startup()

        for ext in COMMAND_EXTENSIONS:
            await self.load_extension(ext)
        log.info("Command cogs loaded")

    async def on_ready(self) -> None:
        log.info("Logged in as %s (ID: %s)", self.user, self.user.id)
        client_id = self.settings.DISCORD_CLIENT_ID or self.user.id
        invite = discord.utils.oauth_url(
            client_id, permissions=discord.Permissions(send_messages=True, embed_links=True),
        )
        log.info("Running WabbaBot with invite URL: %s", invite)

    async def close(self) -> None:
        await self.app.close()
        await super().close()
