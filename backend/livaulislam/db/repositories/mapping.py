"""Row-to-dataclass mapping applied once at the data-access boundary."""
from __future__ import annotations

from typing import Any, Dict, Optional

from ...domain.article import Article, Comment
from ...domain.profile import Author, Profile

AUTHOR_COLUMNS = "id, username, display_name, avatar_url, bio"
ARTICLE_SELECT = f"*, author:profiles({AUTHOR_COLUMNS})"
COMMENT_SELECT = f"*, author:profiles({AUTHOR_COLUMNS})"


def _embedded(row: Dict[str, Any], *keys: str) -> Optional[Dict[str, Any]]:
    # PostgREST returns the relation under its alias, or under the table name when unaliased
    for key in keys:
        value = row.get(key)
        if isinstance(value, list):
            value = value[0] if value else None
        if isinstance(value, dict):
            return value
    return None


def row_to_author(raw: Optional[Dict[str, Any]]) -> Author:
    if not raw:
        return Author.unknown()
    return Author(
        id=str(raw["id"]) if raw.get("id") is not None else None,
        username=raw.get("username") or "unknown",
        display_name=raw.get("display_name") or "Unknown Author",
        avatar_url=raw.get("avatar_url") or "",
        bio=raw.get("bio") or "",
    )


def row_to_article(row: Dict[str, Any]) -> Article:
    return Article(
        id=str(row.get("id")),
        title=row.get("title", ""),
        slug=row.get("slug", ""),
        author_id=str(row.get("author_id") or ""),
        author=row_to_author(_embedded(row, "author", "profiles")),
        content=row.get("content") or "",
        excerpt=row.get("excerpt") or "",
        cover_image=row.get("cover_image") or "",
        published=bool(row.get("published")),
        featured=bool(row.get("featured")),
        tags=list(row.get("tags") or []),
        reading_time=int(row.get("reading_time") or 0),
        view_count=int(row.get("view_count") or 0),
        likes_count=int(row.get("likes_count") or 0),
        comments_count=int(row.get("comments_count") or 0),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        published_at=row.get("published_at"),
    )


def row_to_comment(row: Dict[str, Any]) -> Comment:
    return Comment(
        id=str(row.get("id")),
        article_id=str(row.get("article_id")),
        author_id=str(row.get("author_id") or ""),
        content=row.get("content", ""),
        author=row_to_author(_embedded(row, "author", "profiles")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def row_to_profile(row: Dict[str, Any]) -> Profile:
    return Profile(
        id=str(row.get("id")),
        username=row.get("username", ""),
        display_name=row.get("display_name") or "",
        bio=row.get("bio") or "",
        avatar_url=row.get("avatar_url") or "",
        website=row.get("website") or "",
        twitter=row.get("twitter") or "",
        linkedin=row.get("linkedin") or "",
        location=row.get("location") or "",
        followers_count=int(row.get("followers_count") or 0),
        following_count=int(row.get("following_count") or 0),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )
