"""Read-only views of the repository for the editor sidebar."""

from __future__ import annotations

from typing import Any, Sequence

from editor_gateway.auth import ResolvedToken
from editor_gateway.models.scm import PullRequestInfo, RepoEntry
from editor_gateway.providers.scm.errors import ContentStoreError, UnauthenticatedError
from editor_gateway.workflows.base import NOT_AUTHENTICATED, Workflow


class RepositoryBrowser(Workflow):
    def list_files(self, token: ResolvedToken | None) -> Sequence[RepoEntry]:
        if token is None:
            raise UnauthenticatedError(NOT_AUTHENTICATED)
        return self._open_store(token).list_directory("")

    def list_pull_requests(self, token: ResolvedToken | None) -> Sequence[PullRequestInfo]:
        if token is None:
            raise UnauthenticatedError(NOT_AUTHENTICATED)
        return self._open_store(token).list_open_pull_requests()

    def load_file(self, token: ResolvedToken | None, path: str) -> dict[str, Any]:
        if token is None:
            return {"error": NOT_AUTHENTICATED}
        try:
            remote = self._open_store(token).read_file(path)
        except ContentStoreError:
            return {"error": "File not found"}
        return {
            "content": remote.content.decode("utf-8", errors="replace"),
            "path": path,
            "sha": remote.version,
        }
