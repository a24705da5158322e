"""Aggregates returned by the community RPCs and queries."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .profile import Author


@dataclass(slots=True)
class CommunityStats:
    total_users: int = 0
    total_articles: int = 0
    total_likes: int = 0
    total_comments: int = 0


@dataclass(slots=True)
class TrendingTopic:
    tag: str
    count: int = 0


@dataclass(slots=True)
class SuggestedUser:
    id: str
    username: str
    display_name: str = ""
    bio: str = ""
    avatar_url: str = ""
    followers_count: int = 0
    article_count: int = 0


@dataclass(slots=True)
class TopAuthor:
    id: str
    username: str
    display_name: str = ""
    bio: str = ""
    avatar_url: str = ""
    followers_count: int = 0
    article_count: int = 0
    total_likes: int = 0


@dataclass(slots=True)
class ActivityArticle:
    title: str
    slug: str


@dataclass(slots=True)
class Activity:
    id: str
    type: str
    user: Author = field(default_factory=Author.unknown)
    article: Optional[ActivityArticle] = None
    created_at: Optional[str] = None
