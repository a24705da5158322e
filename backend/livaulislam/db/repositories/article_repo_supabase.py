"""Supabase-backed Article repository using supabase-py v2."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from postgrest.types import CountMethod

from ...domain.article import Article
from ...errors import NetworkError
from .base import SupabaseRepository, quote
from .mapping import ARTICLE_SELECT, row_to_article

WRITABLE_FIELDS = {
    "title", "slug", "content", "excerpt", "cover_image", "author_id", "published",
    "featured", "tags", "reading_time", "published_at", "updated_at",
}


class ArticleRepositorySupabase(SupabaseRepository):
    table_name = "articles"

    def list_published(
        self,
        *,
        featured: bool | None = None,
        order_by: str = "published_at",
        desc: bool = True,
        limit: int | None = None,
    ) -> List[Article]:
        q = self.table.select(ARTICLE_SELECT).eq("published", True)
        if featured is not None:
            q = q.eq("featured", featured)
        q = q.order(order_by, desc=desc)
        if limit:
            q = q.limit(limit)
        return [row_to_article(r) for r in self._rows(q, "list published articles")]

    def list_by_author(
        self,
        author_id: str,
        *,
        published: bool | None = None,
        limit: int | None = None,
    ) -> List[Article]:
        q = self.table.select(ARTICLE_SELECT).eq("author_id", author_id)
        if published is not None:
            q = q.eq("published", published)
        q = q.order("created_at", desc=True)
        if limit:
            q = q.limit(limit)
        return [row_to_article(r) for r in self._rows(q, "list author articles")]

    def get(self, article_id: str) -> Optional[Article]:
        row = self._first(
            self.table.select(ARTICLE_SELECT).eq("id", article_id).limit(1), "get article"
        )
        return row_to_article(row) if row else None

    def get_owned(self, article_id: str, author_id: str) -> Optional[Article]:
        q = self.table.select(ARTICLE_SELECT).eq("id", article_id).eq("author_id", author_id).limit(1)
        row = self._first(q, "get owned article")
        return row_to_article(row) if row else None

    def get_published_by_slug(self, slug: str) -> Optional[Article]:
        q = self.table.select(ARTICLE_SELECT).eq("slug", slug).eq("published", True).limit(1)
        row = self._first(q, "get article by slug")
        return row_to_article(row) if row else None

    def increment_view_count(self, article: Article) -> int:
        """Read-then-write increment; concurrent viewers can lose increments."""
        new_count = article.view_count + 1
        self._execute(
            self.table.update({"view_count": new_count}).eq("id", article.id),
            "increment view count",
        )
        return new_count

    def search(self, term: str, *, order_by: str = "created_at", limit: int = 20) -> List[Article]:
        pattern = quote(f"%{term}%")
        filters = f"title.ilike.{pattern},excerpt.ilike.{pattern},tags.cs.{{{quote(term)}}}"
        q = (
            self.table.select(ARTICLE_SELECT)
            .eq("published", True)
            .or_(filters)
            .order(order_by, desc=True)
            .limit(limit)
        )
        return [row_to_article(r) for r in self._rows(q, "search articles")]

    def count_by_author(self, author_id: str, *, published: bool | None = None) -> int:
        q = self.table.select("id", count=CountMethod.exact, head=True).eq("author_id", author_id)
        if published is not None:
            q = q.eq("published", published)
        return self._count(q, "count author articles")

    def published_view_counts(self, author_id: str) -> Dict[str, int]:
        q = self.table.select("id, view_count").eq("author_id", author_id).eq("published", True)
        return {str(r["id"]): int(r.get("view_count") or 0) for r in self._rows(q, "author view counts")}

    def create(self, fields: Dict[str, Any]) -> Article:
        body = {k: v for k, v in fields.items() if k in WRITABLE_FIELDS}
        row = self._first(self.table.insert(body), "create article")
        if row is None:
            raise NetworkError("create article returned no row")
        created = self.get(str(row["id"]))
        return created or row_to_article(row)

    def update(self, article_id: str, fields: Dict[str, Any]) -> Optional[Article]:
        body = {k: v for k, v in fields.items() if k in WRITABLE_FIELDS}
        if not body:
            return self.get(article_id)
        rows = self._rows(self.table.update(body).eq("id", article_id), "update article")
        if not rows:
            return None
        return self.get(article_id)
