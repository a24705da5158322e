"""Docs blueprint: /openapi.json, /docs (Swagger UI), /redoc."""
from __future__ import annotations

from flask import Blueprint, Response, jsonify, url_for

from .openapi import build_openapi

bp = Blueprint("docs", __name__)

_PAGE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <title>{title}</title>
  {head}
</head>
<body>
  {body}
</body>
</html>
"""


def _page(viewer: str, head: str, body: str) -> Response:
    info = build_openapi()["info"]
    title = f"{info['title']} {info['version']} - {viewer}"
    return Response(_PAGE.format(title=title, head=head, body=body), mimetype="text/html")


@bp.get("/openapi.json")
def openapi_json() -> Response:
    return jsonify(build_openapi())


@bp.get("/docs")
def swagger_ui() -> Response:
    spec_url = url_for("docs.openapi_json")
    return _page(
        "Swagger UI",
        '<link rel="stylesheet" href="https://unpkg.com/swagger-ui-dist@5/swagger-ui.css"/>\n'
        "  <style>body{margin:0;} #swagger-ui{height:100vh;}</style>",
        '<div id="swagger-ui"></div>\n'
        '  <script src="https://unpkg.com/swagger-ui-dist@5/swagger-ui-bundle.js"></script>\n'
        f"  <script>window.ui = SwaggerUIBundle({{ url: '{spec_url}', dom_id: '#swagger-ui' }});</script>",
    )


@bp.get("/redoc")
def redoc() -> Response:
    return _page(
        "ReDoc",
        '<script src="https://cdn.jsdelivr.net/npm/redoc@2/bundles/redoc.standalone.js"></script>',
        f'<redoc spec-url="{url_for("docs.openapi_json")}"></redoc>',
    )
