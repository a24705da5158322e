"""Signed-in reader views: dashboard and liked articles."""
from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint

from ...errors import ok
from ...state import article_service
from ..articles.schemas import ArticleOut


bp = Blueprint("account", __name__)


@bp.get("/dashboard")
def dashboard():
    board = article_service().dashboard()
    return ok({
        "stats": asdict(board.stats),
        "recent_articles": [ArticleOut.model_validate(asdict(a)).model_dump() for a in board.recent_articles],
    })


@bp.get("/liked")
def liked():
    articles = article_service().liked()
    return ok([ArticleOut.model_validate(asdict(a)).model_dump() for a in articles])
