"""Modlist and subscription registries."""

from wabbabot.registry.modlists import ModlistRegistry
from wabbabot.registry.subscriptions import SubscriptionRegistry

__all__ = [
    "ModlistRegistry",
    "SubscriptionRegistry",
]
