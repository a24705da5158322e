"""Shared test fixtures."""
from __future__ import annotations

from typing import Iterator

import pytest

from fakes import FakeSupabase
from livaulislam import create_app
from livaulislam.auth.session_store import SessionStore
from livaulislam.cache import EntityCache
from livaulislam.config import BaseConfig
from livaulislam.db.repositories.factory import Repositories, repositories
from livaulislam.integrations.session_storage import FileSessionStorage
from livaulislam.services.engagement import EngagementRegistry


@pytest.fixture()
def fake() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture()
def repos(fake: FakeSupabase) -> Repositories:
    return repositories(fake)


@pytest.fixture()
def storage(tmp_path) -> FileSessionStorage:
    return FileSessionStorage(tmp_path / "session.json")


@pytest.fixture()
def store(fake: FakeSupabase, repos: Repositories, storage: FileSessionStorage) -> Iterator[SessionStore]:
    s = SessionStore(fake, repos.profiles, storage)
    s.start()
    yield s
    s.close()


@pytest.fixture()
def article_cache() -> EntityCache:
    return EntityCache()


@pytest.fixture()
def profile_cache() -> EntityCache:
    return EntityCache()


@pytest.fixture()
def engagement(repos: Repositories, article_cache: EntityCache, profile_cache: EntityCache) -> EngagementRegistry:
    return EngagementRegistry(repos.likes, repos.follows, article_cache, profile_cache)


@pytest.fixture()
def app(fake: FakeSupabase, tmp_path):
    config = BaseConfig(
        SUPABASE_URL="http://supabase.test",
        SUPABASE_ANON_KEY="anon-key",
        SUPABASE_SERVICE_ROLE_KEY=None,
        SESSION_FILE=str(tmp_path / "session.json"),
        LOG_LEVEL="WARNING",
    )
    app = create_app(config, supabase_client=fake)
    app.config.update(TESTING=True)
    yield app
    app.extensions["livaulislam"].close()


@pytest.fixture()
def client(app):
    return app.test_client()
