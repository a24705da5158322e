"""Articles blueprint: detail by slug, like toggle and comments."""
from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, request

from ...errors import NotFoundError, ok
from ...state import article_service
from .schemas import ArticleDetailOut, CommentCreateIn, CommentOut, ToggleOut


bp = Blueprint("articles", __name__)


@bp.get("/<slug>")
def get_article(slug: str):
    detail = article_service().article_detail(slug)
    if detail is None:
        raise NotFoundError("Article not found")
    return ok(ArticleDetailOut.model_validate(asdict(detail)).model_dump())


@bp.post("/<article_id>/like")
def toggle_like(article_id: str):
    result = article_service().toggle_like(article_id)
    return ok(ToggleOut.model_validate(asdict(result)).model_dump())


@bp.post("/<article_id>/comments")
def add_comment(article_id: str):
    payload = CommentCreateIn.model_validate_json(request.data)
    comment = article_service().add_comment(article_id, payload.content)
    return ok(CommentOut.model_validate(asdict(comment)).model_dump(), 201)
