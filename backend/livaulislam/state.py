"""Per-app client state: the session store, the entity caches and the engagement toggles."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from flask import Flask, current_app
from loguru import logger

from .auth.session_store import SessionStore
from .cache import EntityCache
from .db.repositories.factory import Repositories, repositories
from .domain.article import Article
from .domain.profile import Profile
from .services.article_service import ArticleService
from .services.community_service import CommunityService
from .services.engagement import EngagementRegistry
from .services.profile_service import ProfileService
from .services.writing_service import WritingStudio


@dataclass
class ClientState:
    repos: Repositories
    store: SessionStore
    engagement: EngagementRegistry
    articles: EntityCache[Article] = field(default_factory=EntityCache)
    profiles: EntityCache[Profile] = field(default_factory=EntityCache)
    words_per_minute: int = 200
    max_tags: int = 5
    _last_user_id: Optional[str] = None
    _unsubscribe: Optional[Callable[[], None]] = None

    def _on_session_change(self, store: SessionStore) -> None:
        if store.user_id == self._last_user_id:
            return
        logger.debug("session user changed, resetting engagement state")
        self._last_user_id = store.user_id
        self.engagement.clear()

    def start(self) -> None:
        self._unsubscribe = self.store.subscribe(self._on_session_change)
        self.store.start()
        self._last_user_id = self.store.user_id

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.store.close()

    def new_studio(self) -> WritingStudio:
        return WritingStudio(
            self.repos.articles,
            self.store,
            self.articles,
            words_per_minute=self.words_per_minute,
            max_tags=self.max_tags,
        )


def init_state(app: Flask) -> ClientState:
    clients = app.extensions["supabase"]
    repos = repositories(clients.anon)
    articles: EntityCache[Article] = EntityCache()
    profiles: EntityCache[Profile] = EntityCache()
    state = ClientState(
        repos=repos,
        store=SessionStore(clients.anon, repos.profiles, clients.storage),
        engagement=EngagementRegistry(repos.likes, repos.follows, articles, profiles),
        articles=articles,
        profiles=profiles,
        words_per_minute=app.config["WORDS_PER_MINUTE"],
        max_tags=app.config["MAX_TAGS"],
    )
    state.start()
    app.extensions["livaulislam"] = state
    return state


def client_state() -> ClientState:
    return current_app.extensions["livaulislam"]


def article_service() -> ArticleService:
    s = client_state()
    return ArticleService(s.repos, s.store, s.articles, s.engagement)


def profile_service() -> ProfileService:
    s = client_state()
    return ProfileService(s.repos, s.store, s.profiles, s.articles, s.engagement)


def community_service() -> CommunityService:
    s = client_state()
    return CommunityService(s.repos, s.store, s.engagement)
