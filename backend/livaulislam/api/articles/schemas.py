"""Pydantic request/response schemas for articles, feeds and comments."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class AuthorOut(BaseModel):
    username: str
    display_name: str
    avatar_url: str = ""
    id: Optional[str] = None
    bio: str = ""


class ArticleOut(BaseModel):
    id: str
    title: str
    slug: str
    author_id: str
    author: AuthorOut
    content: str = ""
    excerpt: str = ""
    cover_image: str = ""
    published: bool = False
    featured: bool = False
    tags: List[str] = Field(default_factory=list)
    reading_time: int = 0
    view_count: int = 0
    likes_count: int = 0
    comments_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    published_at: Optional[str] = None


class CommentOut(BaseModel):
    id: str
    article_id: str
    author_id: str
    content: str
    author: AuthorOut
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CommentCreateIn(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000)


class ArticleDetailOut(BaseModel):
    article: ArticleOut
    comments: List[CommentOut] = Field(default_factory=list)
    is_liked: bool = False


class HomeFeedOut(BaseModel):
    featured: List[ArticleOut] = Field(default_factory=list)
    recent: List[ArticleOut] = Field(default_factory=list)
    trending: List[ArticleOut] = Field(default_factory=list)


class DiscoverFeedOut(BaseModel):
    articles: List[ArticleOut] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


class ToggleOut(BaseModel):
    applied: bool
    is_set: bool
    count: int
