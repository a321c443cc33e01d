from __future__ import annotations


class TermGraphError(RuntimeError):
    pass


class StoreError(TermGraphError):
    pass


class StoreConnectionError(StoreError):
    """The backing store cannot be reached. Never retried."""


class StoreCommandError(StoreError):
    """A single store command failed."""
