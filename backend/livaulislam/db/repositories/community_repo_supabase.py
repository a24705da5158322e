"""Community aggregates: opaque RPCs plus the recent-activity query."""
from __future__ import annotations

from typing import List

from ...domain.community import (
    Activity,
    ActivityArticle,
    CommunityStats,
    SuggestedUser,
    TrendingTopic,
)
from .base import SupabaseRepository
from .mapping import AUTHOR_COLUMNS, row_to_author


class CommunityRepositorySupabase(SupabaseRepository):
    table_name = "articles"

    def stats(self) -> CommunityStats:
        data = self._rpc("get_community_stats")
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict):
            return CommunityStats()
        return CommunityStats(
            total_users=int(data.get("total_users") or 0),
            total_articles=int(data.get("total_articles") or 0),
            total_likes=int(data.get("total_likes") or 0),
            total_comments=int(data.get("total_comments") or 0),
        )

    def trending_topics(self, *, limit: int = 8) -> List[TrendingTopic]:
        rows = self._rpc("get_trending_topics", {"limit_param": limit}) or []
        return [TrendingTopic(tag=r["tag"], count=int(r.get("count") or 0)) for r in rows]

    def suggested_users(self, user_id: str, *, limit: int = 6) -> List[SuggestedUser]:
        rows = self._rpc("get_suggested_users", {"user_id": user_id, "limit_param": limit}) or []
        return [
            SuggestedUser(
                id=str(r["id"]),
                username=r.get("username", ""),
                display_name=r.get("display_name") or "",
                bio=r.get("bio") or "",
                avatar_url=r.get("avatar_url") or "",
                followers_count=int(r.get("followers_count") or 0),
                article_count=int(r.get("article_count") or 0),
            )
            for r in rows
        ]

    def recent_activity(self, *, limit: int = 10) -> List[Activity]:
        q = (
            self.table.select(f"id, title, slug, created_at, author:profiles({AUTHOR_COLUMNS})")
            .eq("published", True)
            .order("created_at", desc=True)
            .limit(limit)
        )
        return [
            Activity(
                id=str(r["id"]),
                type="article",
                user=row_to_author(r.get("author")),
                article=ActivityArticle(title=r.get("title", ""), slug=r.get("slug", "")),
                created_at=r.get("created_at"),
            )
            for r in self._rows(q, "recent activity")
        ]
