from __future__ import annotations

import urllib.request

import pytest
from fastapi.testclient import TestClient

from editor_gateway.api.main import create_app
from editor_gateway.config import Settings
from editor_gateway.providers.scm.github import GitHubContentStore
from tests.fakes import FakeContentStore, FakeGitHubApi

FROZEN_NOW = 1_700_000_000.0


@pytest.fixture
def settings() -> Settings:
    return Settings(github_token=None)


@pytest.fixture
def env_settings() -> Settings:
    return Settings(github_token="env-token")


@pytest.fixture
def fake_store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture
def clock():
    ticks = iter(FROZEN_NOW + step for step in range(1000))
    return lambda: next(ticks)


@pytest.fixture
def client(env_settings, fake_store, clock) -> TestClient:
    app = create_app(env_settings, store_factory=fake_store.factory, clock=clock)
    return TestClient(app)


@pytest.fixture
def github_api(monkeypatch) -> FakeGitHubApi:
    api = FakeGitHubApi()
    monkeypatch.setattr(urllib.request, "urlopen", api.urlopen)
    return api


@pytest.fixture
def github_store(github_api) -> GitHubContentStore:
    return GitHubContentStore("secret", repo="compusophy/world-world")
