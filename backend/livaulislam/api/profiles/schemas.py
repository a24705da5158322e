"""Pydantic request/response schemas for profiles."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..articles.schemas import ArticleOut


class ProfileOut(BaseModel):
    id: str
    username: str
    display_name: str = ""
    bio: str = ""
    avatar_url: str = ""
    website: str = ""
    twitter: str = ""
    linkedin: str = ""
    location: str = ""
    followers_count: int = 0
    following_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProfileUpdateIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: Optional[str] = None
    display_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar_url: Optional[str] = None
    website: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    location: Optional[str] = None


class ProfileStatsOut(BaseModel):
    articles_count: int = 0
    published_articles_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    total_views: int = 0
    total_likes: int = 0


class ProfilePageOut(BaseModel):
    profile: ProfileOut
    stats: ProfileStatsOut
    articles: List[ArticleOut] = Field(default_factory=list)
    tab: str = "published"
    is_own_profile: bool = False
    is_following: bool = False
