"""Content store implementations and interfaces."""

from editor_gateway.providers.scm.base import ContentStore
from editor_gateway.providers.scm.errors import (
    ConflictError,
    ContentStoreError,
    NotFoundError,
    UnauthenticatedError,
    UnavailableError,
)
from editor_gateway.providers.scm.github import GitHubContentStore

__all__ = [
    "ConflictError",
    "ContentStore",
    "ContentStoreError",
    "GitHubContentStore",
    "NotFoundError",
    "UnauthenticatedError",
    "UnavailableError",
]
