"""Writing studio: draft/publish state machine and the helpers it derives fields with."""
from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from bs4 import BeautifulSoup
from loguru import logger

from ..auth.session_store import SessionStore
from ..cache import EntityCache
from ..db.repositories.article_repo_supabase import ArticleRepositorySupabase
from ..domain.article import Article
from ..errors import NetworkError, ValidationError

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 200
MAX_TAGS = 5

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_slug(title: str) -> str:
    return _NON_ALNUM.sub("-", title.lower()).strip("-")


def strip_markup(content: str) -> str:
    return BeautifulSoup(content or "", "html.parser").get_text()


def calculate_reading_time(content: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    words = strip_markup(content).split()
    return math.ceil(len(words) / words_per_minute)


def make_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    return strip_markup(content)[:length] + "..."


class TagList:
    """At most ``limit`` tags, unique by exact (case-sensitive) match."""

    def __init__(self, tags: Iterable[str] = (), limit: int = MAX_TAGS) -> None:
        self.limit = limit
        self._tags: List[str] = []
        for tag in tags:
            self.add(tag)

    def add(self, tag: str) -> bool:
        tag = (tag or "").strip()
        if not tag or tag in self._tags or len(self._tags) >= self.limit:
            return False
        self._tags.append(tag)
        return True

    def remove(self, tag: str) -> bool:
        try:
            self._tags.remove(tag)
        except ValueError:
            return False
        return True

    def as_list(self) -> List[str]:
        return list(self._tags)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)


class DraftState(str, Enum):
    NEW = "new"
    DRAFT = "draft"
    EDITED = "edited"
    PUBLISHED = "published"


class WritingStudio:
    def __init__(
        self,
        articles: ArticleRepositorySupabase,
        store: SessionStore,
        cache: EntityCache[Article],
        *,
        words_per_minute: int = WORDS_PER_MINUTE,
        max_tags: int = MAX_TAGS,
    ) -> None:
        self.articles = articles
        self.store = store
        self.cache = cache
        self.words_per_minute = words_per_minute
        self.title = ""
        self.content = ""
        self.excerpt = ""
        self.cover_image = ""
        self.tags = TagList(limit=max_tags)
        self.article_id: Optional[str] = None
        self.published_at: Optional[str] = None
        self.state = DraftState.NEW

    def load(self, article_id: str) -> Optional[Article]:
        """Load one of the signed-in user's articles for editing; ``None`` if not theirs or missing."""
        session = self.store.require_session()
        article = self.articles.get_owned(article_id, session.user_id)
        if article is None:
            logger.warning("Article {} not found for {}", article_id, session.user_id)
            return None
        self.article_id = article.id
        self.title = article.title
        self.content = article.content
        self.excerpt = article.excerpt
        self.cover_image = article.cover_image
        self.tags = TagList(article.tags, limit=self.tags.limit)
        self.published_at = article.published_at
        self.state = DraftState.PUBLISHED if article.published else DraftState.DRAFT
        return article

    def _touch(self) -> None:
        if self.state is DraftState.DRAFT:
            self.state = DraftState.EDITED

    def edit(self, *, title: str | None = None, content: str | None = None,
             excerpt: str | None = None, cover_image: str | None = None) -> None:
        if title is not None:
            self.title = title
        if content is not None:
            self.content = content
        if excerpt is not None:
            self.excerpt = excerpt
        if cover_image is not None:
            self.cover_image = cover_image
        self._touch()

    def add_tag(self, tag: str) -> bool:
        added = self.tags.add(tag)
        if added:
            self._touch()
        return added

    def remove_tag(self, tag: str) -> bool:
        removed = self.tags.remove(tag)
        if removed:
            self._touch()
        return removed

    def save_draft(self) -> Article:
        if self.state is DraftState.PUBLISHED:
            raise ValidationError("Published articles cannot be saved as drafts")
        return self._save(publish=False)

    def publish(self) -> Article:
        return self._save(publish=True)

    def _save(self, *, publish: bool) -> Article:
        session = self.store.require_session()
        if not self.title.strip() or not self.content.strip():
            raise ValidationError("Title and content are required")

        now = datetime.now(timezone.utc).isoformat()
        published_at = (self.published_at or now) if publish else None
        fields = {
            "title": self.title,
            "slug": generate_slug(self.title),
            "content": self.content,
            "excerpt": self.excerpt or make_excerpt(self.content),
            "cover_image": self.cover_image,
            "author_id": session.user_id,
            "tags": self.tags.as_list(),
            "reading_time": calculate_reading_time(self.content, self.words_per_minute),
            "published": publish,
            "published_at": published_at,
            "updated_at": now,
        }

        try:
            if self.article_id:
                article = self.articles.update(self.article_id, fields)
                if article is None:
                    raise NetworkError(f"article {self.article_id} was not updated")
            else:
                article = self.articles.create(fields)
        except NetworkError as e:
            logger.error("Error saving article: {}", e.message)
            raise

        self.article_id = article.id
        self.published_at = article.published_at or published_at
        self.state = DraftState.PUBLISHED if publish else DraftState.DRAFT
        logger.info("saved article {} ({})", article.slug, self.state.value)
        return self.cache.merge(article)
