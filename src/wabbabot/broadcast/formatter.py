"""Discord formatting for release announcements.

Every release and revision is rendered through this module so announcements
look the same in every subscribed channel.

Usage::

    from wabbabot.broadcast.formatter import ReleaseFormatter

    notification = ReleaseFormatter.build_notification("Tim", modlist, "v2 is out")
    await channel.send(embed=ReleaseFormatter.to_embed(notification))
"""

from __future__ import annotations

from datetime import datetime, timezone

import discord

from wabbabot.models import Modlist, ReleaseNotification

# Discord hard limits
_EMBED_TITLE_LIMIT: int = 256
_EMBED_DESCRIPTION_LIMIT: int = 4096
_MESSAGE_CHAR_LIMIT: int = 2000

RELEASE_COLOR: int = 0xBB86FC
FOOTER_TEXT: str = "WabbaBot"


class ReleaseFormatter:
    """Format release notifications for Discord.

    All methods are static; the formatter carries no state.
    """

    @staticmethod
    def build_notification(
        author_name: str,
        modlist: Modlist,
        message: str,
        *,
        timestamp: datetime | None = None,
    ) -> ReleaseNotification:
        """Create the announcement for *modlist* from its current fields.

        Args:
            author_name: Display name of the user releasing or revising.
            modlist: The modlist being announced.  Title, version and image
                are read as they are now; nothing is fetched.
            message: Free text written by the releaser.
            timestamp: Defaults to the current UTC time.
        """
        title = f"{author_name} just released {modlist.title} {modlist.version}!"
        return ReleaseNotification(
            title=title[:_EMBED_TITLE_LIMIT],
            description=message.strip()[:_EMBED_DESCRIPTION_LIMIT],
            image_url=modlist.image_link,
            timestamp=timestamp or datetime.now(timezone.utc),
        )

    @staticmethod
    def to_embed(notification: ReleaseNotification) -> discord.Embed:
        """Render *notification* as a purple WabbaBot embed."""
        embed = discord.Embed(
            title=notification.title,
            description=notification.description,
            color=RELEASE_COLOR,
            timestamp=notification.timestamp,
        )
        if notification.image_url:
            embed.set_image(url=notification.image_url)
        embed.set_footer(text=FOOTER_TEXT)
        return embed

    @staticmethod
    def role_ping(role_id: int) -> str:
        return f"<@&{role_id}>"

    @staticmethod
    def error_message(message: str) -> str:
        return f"An error occurred! **{message}.**"

    @staticmethod
    def split_for_discord(text: str, limit: int = _MESSAGE_CHAR_LIMIT) -> list[str]:
        """Split *text* into chunks that each fit in one Discord message.

        Splits on line boundaries where possible; a single line longer than
        *limit* is cut hard.
        """
        chunks: list[str] = []
        current = ""
        for line in text.splitlines():
            while len(line) > limit:
                if current:
                    chunks.append(current)
                    current = ""
                chunks.append(line[:limit])
                line = line[limit:]
            candidate = f"{current}\n{line}" if current else line
            if len(candidate) > limit:
                chunks.append(current)
                current = line
            else:
                current = candidate
        if current:
            chunks.append(current)
        return chunks
