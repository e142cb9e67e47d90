"""Provider package for remote content store integrations."""

from editor_gateway.providers.scm import ContentStore, GitHubContentStore

__all__ = [
    "ContentStore",
    "GitHubContentStore",
]
