"""Like and follow toggles.

Both follow one state machine: ``unset -> pending -> {set, unset}``. The
backend mutation is awaited first; the local flag and the cached counter move
only after it succeeds. A toggle requested while another one for the same
pair is in flight is ignored.
"""
from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from loguru import logger

from ..cache import EntityCache
from ..db.repositories.engagement_repo_supabase import FollowRepositorySupabase, LikeRepositorySupabase
from ..domain.article import Article
from ..domain.profile import Profile
from ..errors import NetworkError

MAX_TOGGLES = 1024


class ToggleState(str, Enum):
    UNSET = "unset"
    PENDING = "pending"
    SET = "set"


@dataclass(slots=True)
class ToggleResult:
    applied: bool
    is_set: bool
    count: int


class EngagementToggle:
    kind = "engagement"
    counter_field = ""

    def __init__(self, subject_id: str, actor_id: str, *, is_set: bool, cache: EntityCache) -> None:
        self.subject_id = subject_id
        self.actor_id = actor_id
        self.cache = cache
        self._is_set = is_set
        self._pending = threading.Lock()

    @property
    def is_set(self) -> bool:
        return self._is_set

    @property
    def state(self) -> ToggleState:
        if self._pending.locked():
            return ToggleState.PENDING
        return ToggleState.SET if self._is_set else ToggleState.UNSET

    def toggle(self) -> bool:
        """Flip the pair; return False when ignored because a toggle is already pending."""
        if not self._pending.acquire(blocking=False):
            logger.debug("{} toggle for {} ignored while pending", self.kind, self.subject_id)
            return False
        try:
            if self._is_set:
                self._remove()
            else:
                self._add()
        except NetworkError as e:
            logger.error("Error toggling {}: {}", self.kind, e.message)
            raise
        else:
            self._is_set = not self._is_set
            self.cache.adjust(self.subject_id, self.counter_field, 1 if self._is_set else -1)
            logger.debug("{} {} -> {}", self.kind, self.subject_id, self.state.value)
            return True
        finally:
            self._pending.release()

    def _add(self) -> None:
        raise NotImplementedError

    def _remove(self) -> None:
        raise NotImplementedError


class LikeToggle(EngagementToggle):
    kind = "like"
    counter_field = "likes_count"

    def __init__(self, repo: LikeRepositorySupabase, article_id: str, user_id: str, *,
                 is_set: bool, cache: EntityCache[Article]) -> None:
        super().__init__(article_id, user_id, is_set=is_set, cache=cache)
        self.repo = repo

    def _add(self) -> None:
        self.repo.insert(self.subject_id, self.actor_id)

    def _remove(self) -> None:
        self.repo.delete(self.subject_id, self.actor_id)


class FollowToggle(EngagementToggle):
    kind = "follow"
    counter_field = "followers_count"

    def __init__(self, repo: FollowRepositorySupabase, profile_id: str, follower_id: str, *,
                 is_set: bool, cache: EntityCache[Profile]) -> None:
        super().__init__(profile_id, follower_id, is_set=is_set, cache=cache)
        self.repo = repo

    def _add(self) -> None:
        self.repo.insert(self.subject_id, self.actor_id)

    def _remove(self) -> None:
        self.repo.delete(self.subject_id, self.actor_id)


class EngagementRegistry:
    """One toggle per (kind, subject, actor), so concurrent requests share the pending guard.

    At most ``max_entries`` toggles are kept. The least recently used settled
    ones are dropped first and rebuilt from the backend on next use.
    """

    def __init__(
        self,
        likes: LikeRepositorySupabase,
        follows: FollowRepositorySupabase,
        articles: EntityCache[Article],
        profiles: EntityCache[Profile],
        *,
        max_entries: int = MAX_TOGGLES,
    ) -> None:
        self.likes = likes
        self.follows = follows
        self.articles = articles
        self.profiles = profiles
        self.max_entries = max_entries
        self._toggles: "OrderedDict[Tuple[str, str, str], EngagementToggle]" = OrderedDict()
        self._lock = threading.Lock()

    def _lookup(self, key: Tuple[str, str, str]) -> Optional[EngagementToggle]:
        with self._lock:
            toggle = self._toggles.get(key)
            if toggle is not None:
                self._toggles.move_to_end(key)
            return toggle

    def _store(self, key: Tuple[str, str, str], toggle: EngagementToggle) -> EngagementToggle:
        # caller holds self._lock
        toggle = self._toggles.setdefault(key, toggle)
        self._toggles.move_to_end(key)
        self._evict()
        return toggle

    def _evict(self) -> None:
        if len(self._toggles) <= self.max_entries:
            return
        for key in list(self._toggles):
            if len(self._toggles) <= self.max_entries:
                break
            if self._toggles[key].state is not ToggleState.PENDING:
                del self._toggles[key]

    def like(self, article_id: str, user_id: str) -> LikeToggle:
        key = ("like", article_id, user_id)
        toggle = self._lookup(key)
        if toggle is None:
            is_set = self.likes.exists(article_id, user_id)
            toggle = LikeToggle(self.likes, article_id, user_id, is_set=is_set, cache=self.articles)
            with self._lock:
                toggle = self._store(key, toggle)
        return toggle  # type: ignore[return-value]

    def follow(self, profile_id: str, follower_id: str) -> FollowToggle:
        key = ("follow", profile_id, follower_id)
        toggle = self._lookup(key)
        if toggle is None:
            is_set = self.follows.exists(profile_id, follower_id)
            toggle = FollowToggle(self.follows, profile_id, follower_id, is_set=is_set, cache=self.profiles)
            with self._lock:
                toggle = self._store(key, toggle)
        return toggle  # type: ignore[return-value]

    def seed_follows(self, follower_id: str, following_ids) -> None:
        """Prime follow toggles from an already-fetched following list."""
        with self._lock:
            for profile_id in following_ids:
                key = ("follow", profile_id, follower_id)
                if key not in self._toggles:
                    self._store(key, FollowToggle(
                        self.follows, profile_id, follower_id, is_set=True, cache=self.profiles
                    ))

    def clear(self) -> None:
        with self._lock:
            self._toggles.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._toggles)
