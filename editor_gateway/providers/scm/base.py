"""Content store interface."""

from __future__ import annotations

from typing import Protocol, Sequence

from editor_gateway.models.scm import (
    Branch,
    PullRequestInfo,
    RemoteFile,
    RemoteUser,
    RepoEntry,
)


class ContentStore(Protocol):
    def read_file(self, path: str, ref: str | None = None) -> RemoteFile:
        ...

    def write_file(
        self,
        path: str,
        content: bytes,
        expected_version: str | None = None,
        message: str | None = None,
    ) -> RemoteFile:
        ...

    def write_file_on_branch(
        self,
        path: str,
        content: bytes,
        branch: str,
        message: str | None = None,
    ) -> RemoteFile:
        ...

    def get_branch_tip(self, branch: str) -> str:
        ...

    def create_branch(self, name: str, base_ref: str) -> Branch:
        ...

    def open_pull_request(
        self,
        head_branch: str,
        base_branch: str,
        title: str,
        body: str,
    ) -> PullRequestInfo:
        ...

    def merge_pull_request(self, number: int) -> PullRequestInfo:
        ...

    def get_authenticated_user(self) -> RemoteUser:
        ...

    def list_directory(self, path: str = "") -> Sequence[RepoEntry]:
        ...

    def list_open_pull_requests(self) -> Sequence[PullRequestInfo]:
        ...
