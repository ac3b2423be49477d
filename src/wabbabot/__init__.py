"""WabbaBot -- modlist release announcements for Discord servers."""

__version__ = "1.0.0"
