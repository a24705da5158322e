"""Supabase-backed Profile repository."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ...domain.community import TopAuthor
from ...domain.profile import Profile
from .base import SupabaseRepository, escape_like, quote
from .mapping import row_to_profile

EDITABLE_FIELDS = {
    "display_name", "bio", "avatar_url", "website", "twitter", "linkedin", "location", "updated_at",
}


class ProfileRepositorySupabase(SupabaseRepository):
    table_name = "profiles"

    def get(self, user_id: str) -> Optional[Profile]:
        row = self._first(self.table.select("*").eq("id", user_id).limit(1), "get profile")
        return row_to_profile(row) if row else None

    def get_by_username(self, username: str) -> Optional[Profile]:
        """Exact, case-sensitive match against the stored username."""
        row = self._first(
            self.table.select("*").eq("username", username).limit(1), "get profile by username"
        )
        return row_to_profile(row) if row else None

    def username_taken(self, username: str) -> bool:
        q = self.table.select("id").ilike("username", escape_like(username)).limit(1)
        return self._first(q, "check username") is not None

    def email_for(self, user_id: str) -> Optional[str]:
        data = self._rpc("get_user_email_by_id", {"user_id": user_id})
        if isinstance(data, list):
            data = data[0] if data else None
        return data or None

    def upsert(self, row: Dict[str, Any], *, ignore_duplicates: bool = False) -> Optional[Profile]:
        q = self.table.upsert(row, on_conflict="id", ignore_duplicates=ignore_duplicates)
        saved = self._first(q, "upsert profile")
        return row_to_profile(saved) if saved else None

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[Profile]:
        body = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
        if not body:
            return self.get(user_id)
        row = self._first(self.table.update(body).eq("id", user_id), "update profile")
        return row_to_profile(row) if row else None

    def search(self, term: str, *, limit: int = 10) -> List[Profile]:
        pattern = quote(f"%{term}%")
        filters = f"username.ilike.{pattern},display_name.ilike.{pattern},bio.ilike.{pattern}"
        q = self.table.select("*").or_(filters).limit(limit)
        return [row_to_profile(r) for r in self._rows(q, "search profiles")]

    def top_authors(self, *, limit: int = 5) -> List[TopAuthor]:
        q = (
            self.table.select("*, articles(likes_count)")
            .order("followers_count", desc=True)
            .limit(limit)
        )
        authors = []
        for row in self._rows(q, "top authors"):
            articles = row.get("articles") or []
            authors.append(
                TopAuthor(
                    id=str(row.get("id")),
                    username=row.get("username", ""),
                    display_name=row.get("display_name") or "",
                    bio=row.get("bio") or "",
                    avatar_url=row.get("avatar_url") or "",
                    followers_count=int(row.get("followers_count") or 0),
                    article_count=len(articles),
                    total_likes=sum(int(a.get("likes_count") or 0) for a in articles),
                )
            )
        return authors
