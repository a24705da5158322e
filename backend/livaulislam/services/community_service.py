"""Community overview: aggregate stats, topics, suggestions, top authors, activity."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set

from ..auth.session_store import SessionStore
from ..db.repositories.factory import Repositories
from ..domain.community import Activity, CommunityStats, SuggestedUser, TopAuthor, TrendingTopic
from .article_service import fetch_or_default
from .engagement import EngagementRegistry

TRENDING_TOPICS_LIMIT = 8
SUGGESTED_USERS_LIMIT = 6
TOP_AUTHORS_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 10


@dataclass
class CommunityOverview:
    stats: CommunityStats = field(default_factory=CommunityStats)
    trending_topics: List[TrendingTopic] = field(default_factory=list)
    suggested_users: List[SuggestedUser] = field(default_factory=list)
    top_authors: List[TopAuthor] = field(default_factory=list)
    recent_activity: List[Activity] = field(default_factory=list)
    following: Set[str] = field(default_factory=set)


class CommunityService:
    def __init__(self, repos: Repositories, store: SessionStore, engagement: EngagementRegistry) -> None:
        self.repos = repos
        self.store = store
        self.engagement = engagement

    def overview(self) -> CommunityOverview:
        community = self.repos.community
        overview = CommunityOverview(
            stats=fetch_or_default(community.stats, CommunityStats(), "community stats"),
            trending_topics=fetch_or_default(
                lambda: community.trending_topics(limit=TRENDING_TOPICS_LIMIT), [], "trending topics"),
            top_authors=fetch_or_default(
                lambda: self.repos.profiles.top_authors(limit=TOP_AUTHORS_LIMIT), [], "top authors"),
            recent_activity=fetch_or_default(
                lambda: community.recent_activity(limit=RECENT_ACTIVITY_LIMIT), [], "recent activity"),
        )

        user_id = self.store.user_id
        if user_id:
            overview.suggested_users = fetch_or_default(
                lambda: community.suggested_users(user_id, limit=SUGGESTED_USERS_LIMIT), [], "suggested users"
            )
            overview.following = fetch_or_default(
                lambda: self.repos.follows.following_ids(user_id), set(), "following"
            )
            self.engagement.seed_follows(user_id, overview.following)
        return overview
