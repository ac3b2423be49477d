"""Tests for command cog replies."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from wabbabot.commands.subscriptions import SubscriptionCommands
from wabbabot.errors import Outcome


@pytest.mark.asyncio
async def test_show_listeners_does_not_ping_server_names():
    bot = MagicMock()
    bot.app.show_listeners = AsyncMock(
        return_value=Outcome.success(
            "Server @everyone (`1`) is listening to LOTE in the following channels: `10`"
        )
    )
    ctx = MagicMock()
    ctx.send = AsyncMock()
    cog = SubscriptionCommands(bot)

    await cog.show_listeners.callback(cog, ctx, "lote")

    ctx.send.assert_awaited_once()
    allowed = ctx.send.await_args.kwargs["allowed_mentions"]
    assert allowed.everyone is False
    assert allowed.roles is False
    assert allowed.users is False
