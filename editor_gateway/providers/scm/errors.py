"""Failures raised by content store implementations."""

from __future__ import annotations


class ContentStoreError(Exception):
    """Base error for remote content store failures.

    ``message`` is the remote store's raw error body when one was returned,
    otherwise the description of the transport failure.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class NotFoundError(ContentStoreError):
    pass


class ConflictError(ContentStoreError):
    pass


class UnavailableError(ContentStoreError):
    pass


class UnauthenticatedError(Exception):
    """No credential could be resolved for the request."""
