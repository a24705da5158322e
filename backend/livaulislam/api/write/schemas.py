"""Pydantic request schema for the writing studio."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ArticleDraftIn(BaseModel):
    article_id: Optional[str] = Field(default=None, description="Existing article to edit")
    title: str = ""
    content: str = ""
    excerpt: str = ""
    cover_image: str = ""
    tags: List[str] = Field(default_factory=list)
