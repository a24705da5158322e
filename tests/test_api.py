"""HTTP surface exercised through the Flask test client."""
from __future__ import annotations

from fakes import PASSWORD, register


def _sign_in(client, identifier):
    res = client.post("/api/auth/signin", json={"identifier": identifier, "password": PASSWORD})
    assert res.status_code == 200, res.get_json()
    return res.get_json()["data"]


def test_health(client):
    assert client.get("/api/health/").get_json() == {"data": {"status": "ok"}}
    status = client.get("/api/health/supabase").get_json()["data"]
    assert status["anon_initialized"] is True
    assert status["signed_in"] is False


def test_session_starts_signed_out(client):
    data = client.get("/api/auth/session").get_json()["data"]
    assert data == {"authenticated": False, "loading": False, "user_id": None, "email": None, "profile": None}


def test_sign_in_by_username_and_out(fake, client):
    user_id = register(fake, "alice")

    data = _sign_in(client, "alice")
    assert data["authenticated"] and data["user_id"] == user_id
    assert data["profile"]["username"] == "alice"

    data = client.post("/api/auth/signout").get_json()["data"]
    assert data["authenticated"] is False


def test_sign_in_errors(fake, client):
    register(fake, "alice")
    res = client.post("/api/auth/signin", json={"identifier": "ghost", "password": PASSWORD})
    assert res.status_code == 404
    assert res.get_json()["error"] == "user_not_found"

    res = client.post("/api/auth/signin", json={"identifier": "alice@example.com", "password": "bad"})
    assert res.status_code == 401
    assert res.get_json()["error"] == "invalid_credentials"


def test_sign_up(fake, client):
    register(fake, "alice")
    res = client.post("/api/auth/signup", json={
        "email": "x@example.com", "password": PASSWORD, "username": "Alice", "display_name": "X",
    })
    assert res.status_code == 409
    assert fake.auth.sign_up_calls == 0

    res = client.post("/api/auth/signup", json={
        "email": "not-an-email", "password": PASSWORD, "username": "newbie", "display_name": "N",
    })
    assert res.status_code == 422

    res = client.post("/api/auth/signup", json={
        "email": "newbie@example.com", "password": PASSWORD, "username": "Newbie", "display_name": "N",
    })
    assert res.status_code == 201
    assert res.get_json()["data"]["confirmation_required"] is False
    assert client.get("/api/auth/session").get_json()["data"]["profile"]["username"] == "newbie"


def test_feeds_and_article_detail(fake, client):
    alice = register(fake, "alice")
    fake.add_article(alice, "Hello World", featured=True, tags=["intro"])

    home = client.get("/api/feed/home").get_json()["data"]
    assert home["featured"][0]["slug"] == "hello-world"
    assert home["featured"][0]["author"]["username"] == "alice"

    discover = client.get("/api/feed/discover?tag=intro&sort=oldest").get_json()["data"]
    assert discover["tags"] == ["intro"]
    assert client.get("/api/feed/discover?sort=bogus").status_code == 400

    detail = client.get("/api/articles/hello-world").get_json()["data"]
    assert detail["article"]["view_count"] == 1
    assert detail["comments"] == []
    assert detail["is_liked"] is False

    res = client.get("/api/articles/missing")
    assert res.status_code == 404
    assert res.get_json()["error"] == "not_found"


def test_like_and_comment_require_sign_in(fake, client):
    alice = register(fake, "alice")
    register(fake, "bob")
    article = fake.add_article(alice, "Hello")

    res = client.post(f"/api/articles/{article['id']}/like")
    assert res.status_code == 401
    assert res.get_json()["error"] == "not_authenticated"

    _sign_in(client, "bob")
    data = client.post(f"/api/articles/{article['id']}/like").get_json()["data"]
    assert data == {"applied": True, "is_set": True, "count": 1}

    res = client.post(f"/api/articles/{article['id']}/comments", json={"content": "Great read"})
    assert res.status_code == 201
    assert res.get_json()["data"]["author"]["username"] == "bob"

    liked = client.get("/api/liked").get_json()["data"]
    assert [a["title"] for a in liked] == ["Hello"]


def test_write_publish_flow(fake, client):
    register(fake, "alice")
    _sign_in(client, "alice")

    res = client.post("/api/write/draft", json={"title": "My Cool, Title!", "content": "<p>hi there</p>",
                                                "tags": ["a", "a", "b"]})
    assert res.status_code == 201
    draft = res.get_json()["data"]
    assert draft["slug"] == "my-cool-title"
    assert draft["published"] is False
    assert draft["published_at"] is None
    assert draft["tags"] == ["a", "b"]
    assert client.get("/api/articles/my-cool-title").status_code == 404

    loaded = client.get(f"/api/write/{draft['id']}").get_json()["data"]
    assert loaded["title"] == "My Cool, Title!"

    published = client.post("/api/write/publish", json={
        "article_id": draft["id"], "title": "My Cool, Title!", "content": "<p>hi there</p>", "tags": ["b"],
    }).get_json()["data"]
    assert published["id"] == draft["id"]
    assert published["published_at"]
    assert published["tags"] == ["b"]
    assert client.get("/api/articles/my-cool-title").status_code == 200

    board = client.get("/api/dashboard").get_json()["data"]
    assert board["stats"]["total_articles"] == 1

    assert client.get("/api/write/unknown-id").status_code == 404


def test_profiles(fake, client):
    alice = register(fake, "alice")
    register(fake, "bob")
    fake.add_article(alice, "Post")

    page = client.get("/api/profiles/alice").get_json()["data"]
    assert page["profile"]["username"] == "alice"
    assert page["stats"]["published_articles_count"] == 1
    assert client.get("/api/profiles/ghost").status_code == 404

    assert client.post("/api/profiles/alice/follow").status_code == 401
    _sign_in(client, "bob")
    data = client.post("/api/profiles/alice/follow").get_json()["data"]
    assert data["is_set"] is True

    res = client.patch("/api/profiles/me", json={"bio": "Reader", "twitter": "@bob"})
    assert res.status_code == 200
    assert res.get_json()["data"]["twitter"] == "bob"
    assert client.patch("/api/profiles/me", json={"followers_count": 5}).status_code == 422
    assert client.patch("/api/profiles/me", json={"username": "robert"}).status_code == 400


def test_search_community_and_about(fake, client):
    alice = register(fake, "alice")
    bob = register(fake, "bob")
    fake.add_article(alice, "Python tips", tags=["python"])

    empty = client.get("/api/search?q=").get_json()["data"]
    assert empty == {"query": "", "articles": [], "profiles": []}
    found = client.get("/api/search?q=python").get_json()["data"]
    assert [a["title"] for a in found["articles"]] == ["Python tips"]

    _sign_in(client, "bob")
    overview = client.get("/api/community").get_json()["data"]
    assert overview["stats"]["total_users"] == 2
    assert overview["following"] == []
    assert [u["username"] for u in overview["suggested_users"]] == ["alice"]

    data = client.post(f"/api/community/follow/{alice}").get_json()["data"]
    assert data["is_set"] is True
    assert client.post(f"/api/community/follow/{bob}").get_json()["data"]["is_set"] is True

    assert client.get("/api/about").get_json()["data"]["name"] == "livaulislam"


def test_openapi_document(client):
    spec = client.get("/openapi.json").get_json()
    assert "/api/feed/home" in spec["paths"]
    assert "ArticleOut" in spec["components"]["schemas"]
    assert "AuthorOut" in spec["components"]["schemas"]
    assert client.get("/docs").status_code == 200


def test_doc_pages_carry_api_title_and_spec_url(client):
    swagger = client.get("/docs").get_data(as_text=True)
    assert "<title>livaulislam API 0.1.0 - Swagger UI</title>" in swagger
    assert "url: '/openapi.json'" in swagger

    redoc = client.get("/redoc").get_data(as_text=True)
    assert "<title>livaulislam API 0.1.0 - ReDoc</title>" in redoc
    assert 'spec-url="/openapi.json"' in redoc
