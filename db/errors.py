"""
db/errors.py
------------
Error kinds surfaced by the persistence layer.
The HTTP layer maps these to status codes; this layer only guarantees
the kind and a human-readable message.
"""


class PersistenceError(Exception):
    """Base class for every error raised by the persistence layer."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PersistenceError):
    """Unknown credentials, or a write referenced an entity that does not exist."""


class IntegrityError(PersistenceError):
    """A write could not be applied; nothing from the operation was kept."""


class TransportError(PersistenceError):
    """The database could not be reached, or no connection became available in time."""
