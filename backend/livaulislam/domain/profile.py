"""Domain dataclasses for profiles and the embedded author projection."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Profile:
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
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(slots=True)
class Author:
    """The slice of a profile embedded in article and comment rows."""

    username: str
    display_name: str
    avatar_url: str = ""
    id: str | None = None
    bio: str = ""

    @classmethod
    def unknown(cls) -> "Author":
        return cls(username="unknown", display_name="Unknown Author", avatar_url="")


@dataclass(slots=True)
class ProfileStats:
    articles_count: int = 0
    published_articles_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    total_views: int = 0
    total_likes: int = 0
