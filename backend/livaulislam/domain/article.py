"""Domain dataclasses for articles and engagement rows (DB-agnostic)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .profile import Author


@dataclass(slots=True)
class Article:
    id: str
    title: str
    slug: str
    author_id: str
    author: Author = field(default_factory=Author.unknown)
    content: str = ""
    excerpt: str = ""
    cover_image: str = ""
    published: bool = False
    featured: bool = False
    tags: List[str] = field(default_factory=list)
    reading_time: int = 0
    view_count: int = 0
    likes_count: int = 0
    comments_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    published_at: Optional[str] = None


@dataclass(slots=True)
class Comment:
    id: str
    article_id: str
    author_id: str
    content: str
    author: Author = field(default_factory=Author.unknown)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(slots=True)
class DashboardStats:
    total_articles: int = 0
    total_views: int = 0
    total_likes: int = 0
    total_comments: int = 0
    followers: int = 0
    following: int = 0
