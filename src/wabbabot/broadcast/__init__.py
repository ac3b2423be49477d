"""Release broadcasting, revision and message formatting.

Public API:
    :class:`ReleaseBroadcaster` -- posts and revises release notifications.
    :class:`ReleaseFormatter` -- renders notifications for Discord.
    :class:`MessageSink` / :class:`DiscordMessageSink` -- message delivery.
"""

from wabbabot.broadcast.formatter import ReleaseFormatter
from wabbabot.broadcast.release import ReleaseBroadcaster, ReleaseResult
from wabbabot.broadcast.sink import DiscordMessageSink, MessageSink

__all__ = [
    "DiscordMessageSink",
    "MessageSink",
    "ReleaseBroadcaster",
    "ReleaseFormatter",
    "ReleaseResult",
]
