"""Modlist metadata sources."""

from wabbabot.metadata.source import (
    DEFAULT_MODLISTS_URL,
    MetadataSource,
    ModlistMetadata,
    WabbajackMetadataSource,
    find_entry,
    parse_entry,
)

__all__ = [
    "DEFAULT_MODLISTS_URL",
    "MetadataSource",
    "ModlistMetadata",
    "WabbajackMetadataSource",
    "find_entry",
    "parse_entry",
]
