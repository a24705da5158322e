from __future__ import annotations

import pytest

from livaulislam import create_app
from livaulislam.cache import EntityCache
from livaulislam.config import BaseConfig, ConfigError
from livaulislam.db.repositories.base import escape_like, quote
from livaulislam.db.repositories.mapping import row_to_article, row_to_author, row_to_comment
from livaulislam.domain.profile import Profile


def test_row_to_author_fallback_for_missing_profile():
    author = row_to_author(None)
    assert (author.username, author.display_name, author.avatar_url) == ("unknown", "Unknown Author", "")


def test_row_to_article_accepts_alias_table_name_or_list_embedding():
    base = {"id": 1, "title": "T", "slug": "t", "author_id": "u1", "tags": None}
    profile = {"id": "u1", "username": "alice", "display_name": "Alice", "avatar_url": None}

    assert row_to_article(dict(base, author=profile)).author.username == "alice"
    assert row_to_article(dict(base, profiles=profile)).author.username == "alice"
    assert row_to_article(dict(base, profiles=[profile])).author.username == "alice"
    article = row_to_article(dict(base, author=None))
    assert article.author.display_name == "Unknown Author"
    assert article.id == "1"
    assert article.tags == []


def test_row_to_comment_with_partial_author():
    comment = row_to_comment({"id": "c1", "article_id": "a1", "author_id": "u1", "content": "hi",
                              "author": {"username": "bob", "display_name": None}})
    assert comment.author.username == "bob"
    assert comment.author.display_name == "Unknown Author"


def test_filter_value_escaping():
    assert quote('say "hi"') == '"say \\"hi\\""'
    assert escape_like("a_b%c") == "a\\_b\\%c"


def test_cache_keeps_newer_copy():
    cache: EntityCache[Profile] = EntityCache()
    fresh = Profile(id="p", username="a", followers_count=5, updated_at="2024-01-02T00:00:00+00:00")
    stale = Profile(id="p", username="a", followers_count=1, updated_at="2024-01-01T00:00:00+00:00")
    newer = Profile(id="p", username="a", followers_count=7, updated_at="2024-01-03T00:00:00Z")

    assert cache.merge(fresh) is fresh
    assert cache.merge(stale) is fresh
    assert cache.merge(newer) is newer
    assert len(cache) == 1


def test_cache_adjust_floors_at_zero():
    cache: EntityCache[Profile] = EntityCache()
    assert cache.adjust("p", "followers_count", 1) is None
    cache.merge(Profile(id="p", username="a", followers_count=1))
    assert cache.adjust("p", "followers_count", -1).followers_count == 0
    assert cache.adjust("p", "followers_count", -1).followers_count == 0
    cache.evict("p")
    assert cache.get("p") is None


def test_file_session_storage_roundtrip(storage):
    assert storage.get_item("k") is None
    storage.set_item("k", "v")
    storage.set_item("other", "w")
    storage.remove_item("other")
    assert storage.get_item("k") == "v"
    assert storage.get_item("other") is None
    storage.clear()
    assert not storage.path.exists()
    assert storage.get_item("k") is None


def test_file_session_storage_tolerates_corrupt_file(storage):
    storage.path.write_text("{not json", encoding="utf-8")
    assert storage.get_item("k") is None


def test_missing_supabase_settings_are_fatal():
    config = BaseConfig(SUPABASE_URL=None, SUPABASE_ANON_KEY="key")
    with pytest.raises(ConfigError, match="SUPABASE_URL"):
        config.validate()
    with pytest.raises(ConfigError):
        create_app(BaseConfig(SUPABASE_URL="", SUPABASE_ANON_KEY=""))


def test_cache_reapplies_confirmed_adjustment_to_same_row():
    cache: EntityCache[Profile] = EntityCache()
    row = Profile(id="p", username="a", followers_count=0, updated_at="2024-01-01T00:00:00+00:00")
    cache.merge(row)
    cache.adjust("p", "followers_count", 1)

    assert cache.merge(row).followers_count == 1
    assert cache.merge(row).followers_count == 1


def test_cache_drops_adjustment_once_server_catches_up():
    cache: EntityCache[Profile] = EntityCache()
    row = Profile(id="p", username="a", followers_count=3, updated_at="2024-01-01T00:00:00+00:00")
    cache.merge(row)
    cache.adjust("p", "followers_count", 1)

    counted = Profile(id="p", username="a", followers_count=4, updated_at=row.updated_at)
    assert cache.merge(counted).followers_count == 4
    assert cache.merge(row).followers_count == 3

    cache.adjust("p", "followers_count", 1)
    newer = Profile(id="p", username="a", followers_count=3, updated_at="2024-01-02T00:00:00+00:00")
    assert cache.merge(newer).followers_count == 3
