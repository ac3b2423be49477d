"""Discord bot commands (!listen, !release, !addmodlist, etc.).

This package contains the three command cogs that form the WabbaBot
Discord interface:

- :mod:`wabbabot.commands.subscriptions` -- ``!listen``, ``!unlisten``,
  ``!showlisteners``, ``!setrole``
- :mod:`wabbabot.commands.releases` -- ``!release``, ``!revise``
- :mod:`wabbabot.commands.modlists` -- ``!addmodlist``, ``!delmodlist``,
  ``!showmodlists``

Load all cogs during bot startup::

    for ext in COMMAND_EXTENSIONS:
        await bot.load_extension(ext)
"""

COMMAND_EXTENSIONS: list[str] = [
    "wabbabot.commands.subscriptions",
    "wabbabot.commands.releases",
    "wabbabot.commands.modlists",
]
