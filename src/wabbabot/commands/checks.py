"""Permission checks and error reporting shared by all command cogs."""

from __future__ import annotations

import logging

from discord.ext import commands

from wabbabot.broadcast.formatter import ReleaseFormatter
from wabbabot.errors import Outcome

log = logging.getLogger(__name__)


class NotBotAdmin(commands.CheckFailure):
    def __init__(self) -> None:
        super().__init__("This command is reserved for bot administrators")


class CannotManageRoles(commands.CheckFailure):
    def __init__(self) -> None:
        super().__init__("This command is reserved for people with the Manage Roles permission")


def admins_only():
    """Allow only users listed in ``ADMINS``."""

    async def predicate(ctx: commands.Context) -> bool:
        if ctx.bot.app.is_admin(ctx.author.id):
            return True
        raise NotBotAdmin()

    return commands.check(predicate)


def manage_roles_only():
    """Allow bot administrators and members with the Manage Roles permission."""

    async def predicate(ctx: commands.Context) -> bool:
        if ctx.bot.app.is_admin(ctx.author.id):
            return True
        permissions = getattr(ctx.author, "guild_permissions", None)
        if permissions is not None and permissions.manage_roles:
            return True
        raise CannotManageRoles()

    return commands.check(predicate)


async def send_error(ctx: commands.Context, message: str) -> None:
    await ctx.send(ReleaseFormatter.error_message(str(message).rstrip(".")))


async def reply(ctx: commands.Context, outcome: Outcome, success: str) -> None:
    """Send *success* if *outcome* succeeded, otherwise its error."""
    if outcome.ok:
        await ctx.send(success)
    else:
        await send_error(ctx, str(outcome.error))


async def handle_command_error(ctx: commands.Context, error: commands.CommandError) -> None:
    """Turn discord.py command errors into a user-visible message."""
    if isinstance(error, commands.CheckFailure):
        await send_error(ctx, str(error) or "You are not allowed to use this command")
        return
    if isinstance(error, commands.MissingRequiredArgument):
        await send_error(ctx, f"Missing required argument: {error.param.name}")
        return
    if isinstance(error, (commands.ChannelNotFound, commands.ChannelNotReadable)):
        await send_error(ctx, "Channel does not exist in server")
        return
    if isinstance(error, commands.MemberNotFound):
        await send_error(ctx, "User does not exist in server")
        return
    if isinstance(error, commands.RoleNotFound):
        await send_error(ctx, "Role does not exist in server")
        return
    if isinstance(error, commands.BadArgument):
        await send_error(ctx, f"Invalid argument: {error}")
        return

    log.error("Unexpected error in command %s", ctx.command, exc_info=error)
    await send_error(ctx, "Something went wrong while running this command")
