"""Article feeds, detail, comments, liked list, dashboard and search.

Reads resolve to empty results when the backend call fails; the failure is
logged. Mutations raise.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Set, TypeVar

from loguru import logger

from ..auth.session_store import SessionStore
from ..cache import EntityCache
from ..db.repositories.factory import Repositories
from ..domain.article import Article, Comment, DashboardStats
from ..domain.profile import Profile
from ..errors import NetworkError, NotFoundError, ValidationError
from .engagement import EngagementRegistry, ToggleResult

T = TypeVar("T")

DISCOVER_SORTS = ("latest", "popular", "oldest")
SEARCH_SORTS = {"relevance": "created_at", "date": "published_at", "popularity": "view_count"}


def fetch_or_default(fetch: Callable[[], T], default: T, what: str) -> T:
    try:
        return fetch()
    except NetworkError as e:
        logger.error("Error fetching {}: {}", what, e.message)
        return default


def _when(article: Article) -> datetime:
    value = article.published_at or article.created_at
    if not value:
        return datetime.min
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        return datetime.min


@dataclass
class HomeFeed:
    featured: List[Article] = field(default_factory=list)
    recent: List[Article] = field(default_factory=list)
    trending: List[Article] = field(default_factory=list)


@dataclass
class DiscoverFeed:
    articles: List[Article] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)


@dataclass
class ArticleDetail:
    article: Article
    comments: List[Comment] = field(default_factory=list)
    is_liked: bool = False


@dataclass
class Dashboard:
    stats: DashboardStats
    recent_articles: List[Article] = field(default_factory=list)


@dataclass
class SearchResults:
    query: str
    articles: List[Article] = field(default_factory=list)
    profiles: List[Profile] = field(default_factory=list)


def filter_and_sort(articles: List[Article], *, query: str = "", tag: str = "",
                    sort: str = "latest") -> List[Article]:
    """Client-side filtering used by the discover view."""
    result = list(articles)
    if query:
        needle = query.lower()
        result = [
            a for a in result
            if needle in a.title.lower()
            or needle in a.excerpt.lower()
            or needle in a.author.display_name.lower()
        ]
    if tag:
        result = [a for a in result if tag in a.tags]
    if sort == "popular":
        result.sort(key=lambda a: a.view_count, reverse=True)
    elif sort == "oldest":
        result.sort(key=_when)
    else:
        result.sort(key=_when, reverse=True)
    return result


class ArticleService:
    def __init__(
        self,
        repos: Repositories,
        store: SessionStore,
        cache: EntityCache[Article],
        engagement: EngagementRegistry,
    ) -> None:
        self.repos = repos
        self.store = store
        self.cache = cache
        self.engagement = engagement

    def home(self) -> HomeFeed:
        articles = self.repos.articles
        return HomeFeed(
            featured=self.cache.merge_all(fetch_or_default(
                lambda: articles.list_published(featured=True, limit=3), [], "featured articles")),
            recent=self.cache.merge_all(fetch_or_default(
                lambda: articles.list_published(limit=6), [], "recent articles")),
            trending=self.cache.merge_all(fetch_or_default(
                lambda: articles.list_published(order_by="view_count", limit=4), [], "trending articles")),
        )

    def discover(self, *, query: str = "", tag: str = "", sort: str = "latest") -> DiscoverFeed:
        if sort not in DISCOVER_SORTS:
            raise ValidationError(f"sort must be one of {', '.join(DISCOVER_SORTS)}")
        fetched = fetch_or_default(lambda: self.repos.articles.list_published(), [], "discover articles")
        articles = self.cache.merge_all(fetched)
        tags: Set[str] = set()
        for article in articles:
            tags.update(article.tags)
        return DiscoverFeed(
            articles=filter_and_sort(articles, query=query, tag=tag, sort=sort),
            tags=sorted(tags),
        )

    def article_detail(self, slug: str) -> Optional[ArticleDetail]:
        article = fetch_or_default(lambda: self.repos.articles.get_published_by_slug(slug), None, "article")
        if article is None:
            return None
        try:
            article.view_count = self.repos.articles.increment_view_count(article)
        except NetworkError as e:
            logger.error("Error incrementing view count: {}", e.message)
        article = self.cache.merge(article)

        comments = fetch_or_default(lambda: self.repos.comments.list_for_article(article.id), [], "comments")
        is_liked = False
        if self.store.user_id:
            is_liked = fetch_or_default(
                lambda: self.engagement.like(article.id, self.store.user_id).is_set, False, "like status"
            )
        return ArticleDetail(article=article, comments=comments, is_liked=is_liked)

    def toggle_like(self, article_id: str) -> ToggleResult:
        session = self.store.require_session()
        if self.cache.get(article_id) is None:
            article = self.repos.articles.get(article_id)
            if article is None:
                raise NotFoundError("Article not found")
            self.cache.merge(article)
        toggle = self.engagement.like(article_id, session.user_id)
        applied = toggle.toggle()
        cached = self.cache.get(article_id)
        return ToggleResult(applied=applied, is_set=toggle.is_set, count=cached.likes_count if cached else 0)

    def add_comment(self, article_id: str, content: str) -> Comment:
        session = self.store.require_session()
        content = (content or "").strip()
        if not content:
            raise ValidationError("Comment cannot be empty")
        comment = self.repos.comments.create(article_id, session.user_id, content)
        self.cache.adjust(article_id, "comments_count", 1)
        return comment

    def liked(self) -> List[Article]:
        session = self.store.require_session()
        fetched = fetch_or_default(lambda: self.repos.likes.liked_articles(session.user_id), [], "liked articles")
        return self.cache.merge_all(fetched)

    def dashboard(self) -> Dashboard:
        session = self.store.require_session()
        articles = self.cache.merge_all(fetch_or_default(
            lambda: self.repos.articles.list_by_author(session.user_id), [], "dashboard articles"))
        profile = self.store.profile
        stats = DashboardStats(
            total_articles=len(articles),
            total_views=sum(a.view_count for a in articles),
            total_likes=sum(a.likes_count for a in articles),
            total_comments=sum(a.comments_count for a in articles),
            followers=profile.followers_count if profile else 0,
            following=profile.following_count if profile else 0,
        )
        return Dashboard(stats=stats, recent_articles=articles[:5])

    def search(self, query: str, *, sort: str = "relevance") -> SearchResults:
        query = (query or "").strip()
        if sort not in SEARCH_SORTS:
            raise ValidationError(f"sort must be one of {', '.join(SEARCH_SORTS)}")
        if not query:
            return SearchResults(query="")
        articles = fetch_or_default(
            lambda: self.repos.articles.search(query, order_by=SEARCH_SORTS[sort]), [], "search articles"
        )
        profiles = fetch_or_default(lambda: self.repos.profiles.search(query), [], "search profiles")
        return SearchResults(query=query, articles=self.cache.merge_all(articles), profiles=profiles)
