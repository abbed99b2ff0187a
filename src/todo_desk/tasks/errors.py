# tasks/errors.py

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for task storage failures."""


class StorageUnavailable(TaskStoreError):
    """The backing database cannot be opened or its schema cannot be created."""


class ReadFailed(TaskStoreError):
    """A query round-trip failed (reported through QueryOutcome.error)."""
