"""Shared plumbing for workflows."""

from __future__ import annotations

import time
from typing import Callable

from editor_gateway.auth import ResolvedToken
from editor_gateway.config import Settings
from editor_gateway.providers.scm.base import ContentStore
from editor_gateway.providers.scm.github import GitHubContentStore

NOT_AUTHENTICATED = "GitHub not authenticated"

StoreFactory = Callable[[str], ContentStore]


def github_store_factory(settings: Settings) -> StoreFactory:
    def factory(token: str) -> ContentStore:
        return GitHubContentStore(
            token,
            repo=settings.repo,
            default_branch=settings.default_branch,
            base_url=settings.api_base_url,
            timeout_s=settings.request_timeout_s,
        )

    return factory


class Workflow:
    def __init__(
        self,
        settings: Settings,
        store_factory: StoreFactory | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings
        self._store_factory = store_factory or github_store_factory(settings)
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _open_store(self, token: ResolvedToken) -> ContentStore:
        return self._store_factory(token.value)
