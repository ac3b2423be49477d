"""Error kinds and the discriminated result returned by :class:`AppContext`.

Core components (registries, broadcaster, metadata source) raise subclasses
of :class:`WabbaBotError`.  The application context catches them at its
boundary and hands an :class:`Outcome` back to the command layer, which is
the only place that turns a failure into a user-visible message.

Usage::

    outcome = await app.release("lotf", author, "v2 is out")
    if not outcome.ok:
        await ctx.send(f"An error occurred! **{outcome.error}.**")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class WabbaBotError(Exception):
    """Base exception for all expected command failures."""


class NotFoundError(WabbaBotError):
    """A modlist, server, channel, role or member could not be found."""


class DuplicateModlistError(WabbaBotError):
    """Raised when a modlist with the same id is already registered.

    Attributes:
        modlist_id: The colliding identifier.
    """

    def __init__(self, modlist_id: str) -> None:
        self.modlist_id = modlist_id
        super().__init__(f"Modlist with id {modlist_id} already exists")


class NoSubscribersError(WabbaBotError):
    """A release was requested for a modlist nobody listens to."""


class NoPriorReleaseError(WabbaBotError):
    """A revision was requested for a modlist with no recorded release."""


class AuthorizationError(WabbaBotError):
    """The caller is neither the modlist author nor an administrator."""


class BroadcastFailedError(WabbaBotError):
    """A release reached zero channels."""


class MetadataError(WabbaBotError):
    """Modlist metadata could not be retrieved from the metadata source."""


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    """Success value or error kind of a single command.

    Attributes:
        value: The command's result when it succeeded.
        error: The failure when it did not; ``None`` on success.
    """

    value: T | None = None
    error: WabbaBotError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: WabbaBotError) -> Outcome[T]:
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, re-raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
