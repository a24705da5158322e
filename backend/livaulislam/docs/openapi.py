"""Builds a minimal OpenAPI spec from existing Pydantic schemas."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from flask import request

from ..api.articles.schemas import (
    ArticleDetailOut,
    ArticleOut,
    CommentCreateIn,
    CommentOut,
    DiscoverFeedOut,
    HomeFeedOut,
    ToggleOut,
)
from ..api.auth.schemas import PasswordChangeIn, SessionOut, SignInIn, SignUpIn, SignUpOut
from ..api.profiles.schemas import ProfileOut, ProfilePageOut, ProfileUpdateIn
from ..api.write.schemas import ArticleDraftIn

_MODELS = [
    ArticleOut, ArticleDetailOut, CommentOut, CommentCreateIn, HomeFeedOut, DiscoverFeedOut, ToggleOut,
    SignUpIn, SignUpOut, SignInIn, PasswordChangeIn, SessionOut,
    ProfileOut, ProfilePageOut, ProfileUpdateIn, ArticleDraftIn,
]


def _schemas() -> Dict[str, Any]:
    schemas: Dict[str, Any] = {}
    for model in _MODELS:
        schema = model.model_json_schema(ref_template="#/components/schemas/{model}")
        # nested models are hoisted next to the top-level ones
        schemas.update(schema.pop("$defs", {}))
        schemas[model.__name__] = schema
    return schemas


def _ref(name: str) -> Dict[str, Any]:
    return {"$ref": f"#/components/schemas/{name}"}


def _op(tag: str, summary: str, *, out: Optional[str] = None, body: Optional[str] = None,
        status: str = "200", params: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    response: Dict[str, Any] = {"description": "OK" if status == "200" else "Created"}
    if out:
        response["content"] = {
            "application/json": {"schema": {"type": "object", "properties": {"data": _ref(out)}}}
        }
    op: Dict[str, Any] = {"tags": [tag], "summary": summary, "responses": {status: response}}
    if body:
        op["requestBody"] = {"required": True, "content": {"application/json": {"schema": _ref(body)}}}
    if params:
        op["parameters"] = params
    return op


def _path_param(name: str) -> Dict[str, Any]:
    return {"name": name, "in": "path", "required": True, "schema": {"type": "string"}}


def _query_param(name: str, description: str = "") -> Dict[str, Any]:
    return {"name": name, "in": "query", "required": False, "description": description,
            "schema": {"type": "string"}}


def build_openapi() -> Dict[str, Any]:
    base_url = f"{request.scheme}://{request.host}"
    return {
        "openapi": "3.0.3",
        "info": {"title": "livaulislam API", "version": "0.1.0"},
        "servers": [{"url": base_url}],
        "tags": [
            {"name": "Health"},
            {"name": "Auth"},
            {"name": "Feed"},
            {"name": "Articles"},
            {"name": "Write"},
            {"name": "Profiles"},
            {"name": "Account"},
            {"name": "Community"},
        ],
        "paths": {
            "/api/health/": {"get": _op("Health", "Liveness probe")},
            "/api/health/supabase": {"get": _op("Health", "Supabase client and session status")},
            "/api/auth/session": {"get": _op("Auth", "Current session and profile", out="SessionOut")},
            "/api/auth/signup": {
                "post": _op("Auth", "Create an account", body="SignUpIn", out="SignUpOut", status="201")
            },
            "/api/auth/signin": {
                "post": _op("Auth", "Sign in with email or username", body="SignInIn", out="SessionOut")
            },
            "/api/auth/signout": {"post": _op("Auth", "Sign out", out="SessionOut")},
            "/api/auth/password": {"post": _op("Auth", "Change password", body="PasswordChangeIn")},
            "/api/feed/home": {"get": _op("Feed", "Featured, recent and trending articles", out="HomeFeedOut")},
            "/api/feed/discover": {
                "get": _op("Feed", "All published articles, filtered and sorted", out="DiscoverFeedOut",
                           params=[_query_param("q"), _query_param("tag"),
                                   _query_param("sort", "latest | popular | oldest")])
            },
            "/api/search": {
                "get": _op("Feed", "Search articles and profiles",
                           params=[_query_param("q"), _query_param("sort", "relevance | date | popularity")])
            },
            "/api/about": {"get": _op("Feed", "Static about page")},
            "/api/articles/{slug}": {
                "parameters": [_path_param("slug")],
                "get": _op("Articles", "Article detail (counts a view)", out="ArticleDetailOut"),
            },
            "/api/articles/{article_id}/like": {
                "parameters": [_path_param("article_id")],
                "post": _op("Articles", "Toggle like", out="ToggleOut"),
            },
            "/api/articles/{article_id}/comments": {
                "parameters": [_path_param("article_id")],
                "post": _op("Articles", "Add comment", body="CommentCreateIn", out="CommentOut", status="201"),
            },
            "/api/write/{article_id}": {
                "parameters": [_path_param("article_id")],
                "get": _op("Write", "Load own article for editing", out="ArticleOut"),
            },
            "/api/write/draft": {
                "post": _op("Write", "Save draft", body="ArticleDraftIn", out="ArticleOut", status="201")
            },
            "/api/write/publish": {
                "post": _op("Write", "Publish", body="ArticleDraftIn", out="ArticleOut", status="201")
            },
            "/api/profiles/me": {
                "patch": _op("Profiles", "Update own profile", body="ProfileUpdateIn", out="ProfileOut")
            },
            "/api/profiles/{username}": {
                "parameters": [_path_param("username")],
                "get": _op("Profiles", "Profile page", out="ProfilePageOut",
                           params=[_query_param("tab", "published | drafts")]),
            },
            "/api/profiles/{username}/follow": {
                "parameters": [_path_param("username")],
                "post": _op("Profiles", "Toggle follow", out="ToggleOut"),
            },
            "/api/dashboard": {"get": _op("Account", "Own articles and stats")},
            "/api/liked": {"get": _op("Account", "Articles liked by the signed-in user")},
            "/api/community": {"get": _op("Community", "Community overview")},
            "/api/community/follow/{user_id}": {
                "parameters": [_path_param("user_id")],
                "post": _op("Community", "Toggle follow by user id", out="ToggleOut"),
            },
        },
        "components": {"schemas": _schemas()},
    }
