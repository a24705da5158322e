"""Public profile page and following."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional

from ..auth.session_store import SessionStore
from ..cache import EntityCache
from ..db.repositories.factory import Repositories
from ..domain.article import Article
from ..domain.profile import Profile, ProfileStats
from ..errors import NotFoundError, ValidationError
from .article_service import fetch_or_default
from .engagement import EngagementRegistry, ToggleResult

PROFILE_TABS = ("published", "drafts")
PROFILE_ARTICLES_LIMIT = 20


@dataclass
class ProfilePage:
    profile: Profile
    stats: ProfileStats
    articles: List[Article] = field(default_factory=list)
    tab: str = "published"
    is_own_profile: bool = False
    is_following: bool = False


class ProfileService:
    def __init__(
        self,
        repos: Repositories,
        store: SessionStore,
        profiles: EntityCache[Profile],
        articles: EntityCache[Article],
        engagement: EngagementRegistry,
    ) -> None:
        self.repos = repos
        self.store = store
        self.profiles = profiles
        self.articles = articles
        self.engagement = engagement

    def _stats(self, profile: Profile) -> ProfileStats:
        repos = self.repos
        views = fetch_or_default(lambda: repos.articles.published_view_counts(profile.id), {}, "view counts")
        return ProfileStats(
            articles_count=fetch_or_default(
                lambda: repos.articles.count_by_author(profile.id), 0, "article count"),
            published_articles_count=len(views),
            followers_count=fetch_or_default(
                lambda: repos.follows.count_followers(profile.id), 0, "followers count"),
            following_count=fetch_or_default(
                lambda: repos.follows.count_following(profile.id), 0, "following count"),
            total_views=sum(views.values()),
            total_likes=fetch_or_default(
                lambda: repos.likes.count_for_articles(list(views)), 0, "likes count"),
        )

    def get_profile_page(self, username: str, tab: str = "published") -> Optional[ProfilePage]:
        if tab not in PROFILE_TABS:
            raise ValidationError(f"tab must be one of {', '.join(PROFILE_TABS)}")
        profile = fetch_or_default(lambda: self.repos.profiles.get_by_username(username), None, "profile")
        if profile is None:
            return None

        viewer_id = self.store.user_id
        is_own = viewer_id == profile.id
        # only the owner can see drafts
        if not is_own:
            tab = "published"

        stats = self._stats(profile)
        profile = self.profiles.merge(replace(
            profile,
            followers_count=stats.followers_count,
            following_count=stats.following_count,
        ))
        articles = fetch_or_default(
            lambda: self.repos.articles.list_by_author(
                profile.id, published=(tab == "published"), limit=PROFILE_ARTICLES_LIMIT),
            [],
            "profile articles",
        )

        is_following = False
        if viewer_id and not is_own:
            is_following = fetch_or_default(
                lambda: self.engagement.follow(profile.id, viewer_id).is_set, False, "follow status"
            )
        return ProfilePage(
            profile=profile,
            stats=stats,
            articles=self.articles.merge_all(articles),
            tab=tab,
            is_own_profile=is_own,
            is_following=is_following,
        )

    def toggle_follow(self, profile_id: str) -> ToggleResult:
        session = self.store.require_session()
        if self.profiles.get(profile_id) is None:
            profile = self.repos.profiles.get(profile_id)
            if profile is None:
                raise NotFoundError("Profile not found")
            self.profiles.merge(profile)
        toggle = self.engagement.follow(profile_id, session.user_id)
        applied = toggle.toggle()
        cached = self.profiles.get(profile_id)
        return ToggleResult(applied=applied, is_set=toggle.is_set, count=cached.followers_count if cached else 0)

    def toggle_follow_username(self, username: str) -> ToggleResult:
        profile = self.repos.profiles.get_by_username(username)
        if profile is None:
            raise NotFoundError(f"No profile named {username}")
        self.profiles.merge(profile)
        return self.toggle_follow(profile.id)
