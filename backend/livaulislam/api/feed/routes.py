"""Feeds blueprint: home, discover, search and the static about page."""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from flask import Blueprint, request

from ...domain.article import Article
from ...errors import ok
from ...state import article_service
from ..articles.schemas import ArticleOut, DiscoverFeedOut, HomeFeedOut
from ..profiles.schemas import ProfileOut


bp = Blueprint("feed", __name__)

ABOUT = {
    "name": "livaulislam",
    "tagline": "A home for writers and readers to share stories and ideas.",
    "sections": ["Our Mission", "Our Values", "Our Story", "Join Our Community"],
    "values": [
        "Creative Freedom",
        "Community First",
        "Excellence",
        "Knowledge Sharing",
        "Global Reach",
        "Passion Driven",
    ],
}


def _articles(items: List[Article]) -> List[Dict[str, Any]]:
    return [ArticleOut.model_validate(asdict(a)).model_dump() for a in items]


@bp.get("/feed/home")
def home():
    feed = article_service().home()
    return ok(HomeFeedOut.model_validate(asdict(feed)).model_dump())


@bp.get("/feed/discover")
def discover():
    feed = article_service().discover(
        query=request.args.get("q", ""),
        tag=request.args.get("tag", ""),
        sort=request.args.get("sort", "latest"),
    )
    return ok(DiscoverFeedOut.model_validate(asdict(feed)).model_dump())


@bp.get("/search")
def search():
    results = article_service().search(request.args.get("q", ""), sort=request.args.get("sort", "relevance"))
    return ok({
        "query": results.query,
        "articles": _articles(results.articles),
        "profiles": [ProfileOut.model_validate(asdict(p)).model_dump() for p in results.profiles],
    })


@bp.get("/about")
def about():
    return ok(ABOUT)
