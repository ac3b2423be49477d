"""Release commands: ``!release`` and ``!revise``.

Only the modlist's author or a bot administrator may use them.

Usage::

    # In bot startup:
    await bot.load_extension("wabbabot.commands.releases")
"""

from __future__ import annotations

import logging

from discord.ext import commands

from wabbabot.commands.checks import handle_command_error, send_error
from wabbabot.models import Author

log = logging.getLogger(__name__)


class ReleaseCommands(commands.Cog):
    """Announcing releases and revising the latest announcement."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    async def cog_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        await handle_command_error(ctx, error)

    @staticmethod
    def _author(ctx: commands.Context) -> Author:
        return Author(id=ctx.author.id, name=ctx.author.name)

    @commands.command(name="release")
    async def release(self, ctx: commands.Context, modlist_id: str, *, message: str = "") -> None:
        """Put out a new release of your list.

        Usage: !release <modlist id> <message>
        """
        async with ctx.typing():
            outcome = await self.bot.app.release(modlist_id, self._author(ctx), message)
        if not outcome.ok:
            await send_error(ctx, str(outcome.error))
            return
        await ctx.send(f"Modlist was released in {outcome.value.channel_count} channels!")

    @commands.command(name="revise")
    async def revise(self, ctx: commands.Context, modlist_id: str, *, message: str) -> None:
        """Revise the last release message for this list.

        Usage: !revise <modlist id> <new message>
        """
        outcome = await self.bot.app.revise(modlist_id, self._author(ctx), message)
        if not outcome.ok:
            await send_error(ctx, str(outcome.error))
            return
        modlist = self.bot.app.modlists.get_by_id(modlist_id)
        title = modlist.title if modlist is not None else modlist_id
        await ctx.send(f"Successfully revised {outcome.value} release messages for {title}!")


async def setup(bot: commands.Bot) -> None:
    """Entry point for ``bot.load_extension``."""
    await bot.add_cog(ReleaseCommands(bot))
