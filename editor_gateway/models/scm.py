"""Data models for SCM interactions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PullRequestState(str, Enum):
    OPEN = "open"
    MERGED = "merged"
    CLOSED = "closed"


@dataclass(frozen=True)
class RemoteFile:
    path: str
    content: bytes
    version: str

    def text(self) -> str:
        return self.content.decode("utf-8")


@dataclass(frozen=True)
class Branch:
    name: str
    base_commit: str


@dataclass(frozen=True)
class PullRequestInfo:
    url: str
    number: int
    head_branch: str = ""
    base_branch: str = ""
    state: PullRequestState = PullRequestState.OPEN
    title: str = ""


@dataclass(frozen=True)
class RepoEntry:
    name: str
    path: str
    type: str

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"


@dataclass(frozen=True)
class RemoteUser:
    login: str
