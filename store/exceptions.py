"""Exceptions raised by the entity store.

Absence of an entity is never an error: lookups return ``None`` and
relationship removals return ``False``. Exceptions are reserved for
conflicts the caller has to handle explicitly.
"""


class StoreError(Exception):
    """Base exception for entity store operations."""
    pass


class DuplicateUsernameError(StoreError):
    """Raised when a username is already taken by another user."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already exists: {username}")
