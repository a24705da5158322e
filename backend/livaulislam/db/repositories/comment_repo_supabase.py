"""Supabase-backed Comment repository."""
from __future__ import annotations

from typing import List

from ...domain.article import Comment
from ...errors import NetworkError
from .base import SupabaseRepository
from .mapping import COMMENT_SELECT, row_to_comment


class CommentRepositorySupabase(SupabaseRepository):
    table_name = "comments"

    def list_for_article(self, article_id: str) -> List[Comment]:
        q = (
            self.table.select(COMMENT_SELECT)
            .eq("article_id", article_id)
            .order("created_at", desc=True)
        )
        return [row_to_comment(r) for r in self._rows(q, "list comments")]

    def create(self, article_id: str, author_id: str, content: str) -> Comment:
        row = self._first(
            self.table.insert({"article_id": article_id, "author_id": author_id, "content": content}),
            "add comment",
        )
        if row is None:
            raise NetworkError("add comment returned no row")
        # re-read to pick up the embedded author
        joined = self._first(
            self.table.select(COMMENT_SELECT).eq("id", row["id"]).limit(1), "get comment"
        )
        return row_to_comment(joined or row)
