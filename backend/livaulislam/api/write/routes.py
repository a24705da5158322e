"""Writing studio blueprint: load for editing, save draft, publish."""
from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, request

from ...errors import NotFoundError, ok
from ...services.writing_service import WritingStudio
from ...state import client_state
from ..articles.schemas import ArticleOut
from .schemas import ArticleDraftIn


bp = Blueprint("write", __name__)


def _studio(payload: ArticleDraftIn) -> WritingStudio:
    studio = client_state().new_studio()
    if payload.article_id and studio.load(payload.article_id) is None:
        raise NotFoundError("Article not found")
    studio.edit(
        title=payload.title,
        content=payload.content,
        excerpt=payload.excerpt,
        cover_image=payload.cover_image,
    )
    for tag in list(studio.tags):
        if tag not in payload.tags:
            studio.remove_tag(tag)
    for tag in payload.tags:
        studio.add_tag(tag)
    return studio


@bp.get("/<article_id>")
def load_article(article_id: str):
    article = client_state().new_studio().load(article_id)
    if article is None:
        raise NotFoundError("Article not found")
    return ok(ArticleOut.model_validate(asdict(article)).model_dump())


@bp.post("/draft")
def save_draft():
    payload = ArticleDraftIn.model_validate_json(request.data)
    article = _studio(payload).save_draft()
    return ok(ArticleOut.model_validate(asdict(article)).model_dump(), 201)


@bp.post("/publish")
def publish():
    payload = ArticleDraftIn.model_validate_json(request.data)
    article = _studio(payload).publish()
    return ok(ArticleOut.model_validate(asdict(article)).model_dump(), 201)
