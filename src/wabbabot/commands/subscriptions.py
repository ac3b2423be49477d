"""Subscription commands.

Provides ``!listen``, ``!unlisten``, ``!showlisteners`` and ``!setrole``:
binding channels of a server to modlists and choosing which role gets
pinged when a modlist is released.

Usage::

    # In bot startup:
    await bot.load_extension("wabbabot.commands.subscriptions")
"""

from __future__ import annotations

import logging

import discord
from discord.ext import commands

from wabbabot.broadcast.formatter import ReleaseFormatter
from wabbabot.commands.checks import (
    admins_only,
    handle_command_error,
    manage_roles_only,
    reply,
    send_error,
)

log = logging.getLogger(__name__)


class SubscriptionCommands(commands.Cog):
    """Commands that manage which channels hear about which modlists.

    Attributes:
        bot: The parent bot; its ``app`` attribute is the
            :class:`~wabbabot.context.AppContext`.
    """

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    async def cog_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        await handle_command_error(ctx, error)

    # ------------------------------------------------------------------
    # !listen
    # ------------------------------------------------------------------

    @commands.command(name="listen")
    @commands.guild_only()
    @manage_roles_only()
    async def listen(
        self, ctx: commands.Context, modlist_id: str, channel: discord.TextChannel
    ) -> None:
        """Listen to new modlist releases from the specified list in the specified channel.

        Usage: !listen <modlist id> <#channel>
        """
        outcome = await self.bot.app.listen(ctx.guild.id, ctx.guild.name, channel.id, modlist_id)
        title = outcome.value.title if outcome.ok else ""
        await reply(ctx, outcome, f"Now listening to **{title}** in {channel.name}.")

    # ------------------------------------------------------------------
    # !unlisten
    # ------------------------------------------------------------------

    @commands.command(name="unlisten")
    @commands.guild_only()
    @manage_roles_only()
    async def unlisten(
        self, ctx: commands.Context, modlist_id: str, channel: discord.TextChannel
    ) -> None:
        """Stop listening to new modlist releases from the specified list in the specified channel.

        Usage: !unlisten <modlist id> <#channel>
        """
        outcome = await self.bot.app.unlisten(ctx.guild.id, channel.id, modlist_id)
        title = outcome.value.title if outcome.ok else ""
        await reply(ctx, outcome, f"No longer listening to {title} in {channel.name}.")

    # ------------------------------------------------------------------
    # !showlisteners
    # ------------------------------------------------------------------

    @commands.command(name="showlisteners")
    @admins_only()
    async def show_listeners(self, ctx: commands.Context, modlist_id: str) -> None:
        """Show all servers and channels listening to the specified modlist.

        Usage: !showlisteners <modlist id>
        """
        outcome = await self.bot.app.show_listeners(modlist_id)
        if not outcome.ok:
            await send_error(ctx, str(outcome.error))
            return
        for chunk in ReleaseFormatter.split_for_discord(outcome.value):
            await ctx.send(chunk, allowed_mentions=discord.AllowedMentions.none())

    # ------------------------------------------------------------------
    # !setrole
    # ------------------------------------------------------------------

    @commands.command(name="setrole")
    @commands.guild_only()
    @manage_roles_only()
    async def set_role(self, ctx: commands.Context, modlist_id: str, role: discord.Role) -> None:
        """Set the role to ping when the specified modlist releases a new version.

        Usage: !setrole <modlist id> <@role>
        """
        outcome = await self.bot.app.set_role(ctx.guild.id, modlist_id, role.id)
        title = outcome.value.title if outcome.ok else ""
        await reply(ctx, outcome, f"Releases for {title} will now ping the {role.name} role!")


async def setup(bot: commands.Bot) -> None:
    """Entry point for ``bot.load_extension``."""
    await bot.add_cog(SubscriptionCommands(bot))
