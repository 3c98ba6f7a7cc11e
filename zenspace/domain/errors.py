"""Error taxonomy for the planner."""

from __future__ import annotations


class ZenSpaceError(Exception):
    """Base class for every error raised by the planner."""


class MalformedInputError(ZenSpaceError, ValueError):
    """A time string or form field failed basic shape validation."""


class MalformedTimeError(MalformedInputError):
    """A clock string does not match ``HH:MM``."""


class OutOfRangeError(MalformedInputError):
    """A minute offset falls outside a single day."""


class RepositoryError(ZenSpaceError):
    """Any failure reported by the persistence backend."""


class NotFoundError(RepositoryError):
    """The requested record does not exist."""


class SpaceInUseError(RepositoryError):
    """A space cannot be deleted while bookings still reference it."""


class AssistantError(ZenSpaceError):
    """Any failure reported by the language-model service."""
