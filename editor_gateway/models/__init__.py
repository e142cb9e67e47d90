"""Shared data models for the editor gateway."""

from editor_gateway.models.results import WorkflowResult
from editor_gateway.models.scm import (
    Branch,
    PullRequestInfo,
    PullRequestState,
    RemoteFile,
    RemoteUser,
    RepoEntry,
)

__all__ = [
    "Branch",
    "PullRequestInfo",
    "PullRequestState",
    "RemoteFile",
    "RemoteUser",
    "RepoEntry",
    "WorkflowResult",
]
