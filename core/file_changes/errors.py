"""Failure taxonomy for file change tracking.

Batch tracking never lets these escape to the chat turn that triggered it;
the direct write path propagates them to its caller.
"""

from __future__ import annotations


class FileChangeTrackingError(RuntimeError):
    pass


class MissingParentError(FileChangeTrackingError):
    """A chat, sub-chat or project the record must hang off does not exist."""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class InvalidChangeError(FileChangeTrackingError, ValueError):
    """A directly supplied record violates the record invariants."""


class PersistenceError(FileChangeTrackingError):
    """The store rejected a write."""
