"""Supabase-backed repositories for the ``article_likes`` and ``follows`` pair tables."""
from __future__ import annotations

from typing import List, Set

from postgrest.types import CountMethod

from ...domain.article import Article
from .base import SupabaseRepository
from .mapping import ARTICLE_SELECT, row_to_article


class LikeRepositorySupabase(SupabaseRepository):
    table_name = "article_likes"

    def exists(self, article_id: str, user_id: str) -> bool:
        q = self.table.select("id").eq("article_id", article_id).eq("user_id", user_id).limit(1)
        return self._first(q, "check like") is not None

    def insert(self, article_id: str, user_id: str) -> None:
        self._execute(self.table.insert({"article_id": article_id, "user_id": user_id}), "like article")

    def delete(self, article_id: str, user_id: str) -> None:
        q = self.table.delete().eq("article_id", article_id).eq("user_id", user_id)
        self._execute(q, "unlike article")

    def liked_articles(self, user_id: str) -> List[Article]:
        q = (
            self.table.select(f"article_id, created_at, articles!inner({ARTICLE_SELECT})")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        return [
            row_to_article(r["articles"])
            for r in self._rows(q, "list liked articles")
            if isinstance(r.get("articles"), dict)
        ]

    def count_for_articles(self, article_ids: List[str]) -> int:
        if not article_ids:
            return 0
        q = self.table.select("id", count=CountMethod.exact, head=True).in_("article_id", article_ids)
        return self._count(q, "count likes")


class FollowRepositorySupabase(SupabaseRepository):
    table_name = "follows"

    def exists(self, following_id: str, follower_id: str) -> bool:
        q = (
            self.table.select("id")
            .eq("follower_id", follower_id)
            .eq("following_id", following_id)
            .limit(1)
        )
        return self._first(q, "check follow") is not None

    def insert(self, following_id: str, follower_id: str) -> None:
        self._execute(
            self.table.insert({"follower_id": follower_id, "following_id": following_id}),
            "follow user",
        )

    def delete(self, following_id: str, follower_id: str) -> None:
        q = self.table.delete().eq("follower_id", follower_id).eq("following_id", following_id)
        self._execute(q, "unfollow user")

    def following_ids(self, follower_id: str) -> Set[str]:
        q = self.table.select("following_id").eq("follower_id", follower_id)
        return {str(r["following_id"]) for r in self._rows(q, "list following")}

    def count_followers(self, user_id: str) -> int:
        q = self.table.select("id", count=CountMethod.exact, head=True).eq("following_id", user_id)
        return self._count(q, "count followers")

    def count_following(self, user_id: str) -> int:
        q = self.table.select("id", count=CountMethod.exact, head=True).eq("follower_id", user_id)
        return self._count(q, "count following")
