"""Modlist administration commands: ``!addmodlist``, ``!delmodlist``, ``!showmodlists``.

Usage::

    # In bot startup:
    await bot.load_extension("wabbabot.commands.modlists")
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


class ModlistCommands(commands.Cog):
    """Registering, deleting and listing modlists."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    async def cog_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        await handle_command_error(ctx, error)

    @commands.command(name="addmodlist")
    @commands.guild_only()
    @admins_only()
    async def add_modlist(self, ctx: commands.Context, modlist_id: str, member: discord.Member) -> None:
        """Add a new modlist managed by the given user.

        Usage: !addmodlist <modlist id> <@user>
        """
        if member.id == self.bot.user.id or member.id == self.bot.settings.DISCORD_CLIENT_ID:
            await send_error(ctx, "I can't manage a modlist myself")
            return

        outcome = await self.bot.app.add_modlist(modlist_id, member.id)
        title = outcome.value.title if outcome.ok else ""
        await reply(
            ctx,
            outcome,
            f"Modlist **{title}** managed by **{member.name}** was added to the database.",
        )

    @commands.command(name="delmodlist")
    @admins_only()
    async def del_modlist(self, ctx: commands.Context, modlist_id: str) -> None:
        """Delete a modlist and every subscription to it.

        Usage: !delmodlist <modlist id>
        """
        outcome = await self.bot.app.del_modlist(modlist_id)
        title = (outcome.value.title or outcome.value.id) if outcome.ok else ""
        await reply(ctx, outcome, f"Modlist `{title}` was deleted.")

    @commands.command(name="showmodlists")
    @manage_roles_only()
    async def show_modlists(self, ctx: commands.Context) -> None:
        """Present a list of all modlists.

        Usage: !showmodlists
        """
        outcome = await self.bot.app.show_modlists()
        if not outcome.ok:
            await send_error(ctx, str(outcome.error))
            return
        for chunk in ReleaseFormatter.split_for_discord(outcome.value):
            await ctx.send(chunk, allowed_mentions=discord.AllowedMentions.none())


async def setup(bot: commands.Bot) -> None:
    """Entry point for ``bot.load_extension``."""
    await bot.add_cog(ModlistCommands(bot))
