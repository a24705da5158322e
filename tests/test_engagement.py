from __future__ import annotations

import pytest

from fakes import register
from livaulislam.errors import NetworkError
from livaulislam.services.engagement import EngagementRegistry, ToggleState


@pytest.fixture()
def setup(fake, repos, article_cache):
    author = register(fake, "alice")
    reader = register(fake, "bob")
    article = fake.add_article(author, "Hello")
    article_cache.merge(repos.articles.get(article["id"]))
    return author, reader, article["id"]


def test_like_increments_exactly_once(fake, engagement, article_cache, setup):
    _, reader, article_id = setup
    toggle = engagement.like(article_id, reader)
    assert toggle.state is ToggleState.UNSET

    assert toggle.toggle() is True

    assert toggle.is_set
    assert toggle.state is ToggleState.SET
    assert article_cache.get(article_id).likes_count == 1
    assert len(fake.tables["article_likes"]) == 1


def test_unlike_restores_count(fake, engagement, article_cache, setup):
    _, reader, article_id = setup
    toggle = engagement.like(article_id, reader)
    toggle.toggle()
    toggle.toggle()

    assert not toggle.is_set
    assert article_cache.get(article_id).likes_count == 0
    assert fake.tables["article_likes"] == []


def test_click_while_pending_is_ignored(fake, repos, engagement, article_cache, setup, monkeypatch):
    _, reader, article_id = setup
    toggle = engagement.like(article_id, reader)
    nested = []
    insert = repos.likes.insert

    def slow_insert(a_id, u_id):
        assert toggle.state is ToggleState.PENDING
        nested.append(toggle.toggle())
        insert(a_id, u_id)

    monkeypatch.setattr(repos.likes, "insert", slow_insert)
    assert toggle.toggle() is True

    assert nested == [False]
    assert article_cache.get(article_id).likes_count == 1
    assert len(fake.tables["article_likes"]) == 1


def test_failed_mutation_leaves_state_and_count(fake, engagement, article_cache, setup):
    _, reader, article_id = setup
    fake.fail("article_likes", "insert")
    toggle = engagement.like(article_id, reader)

    with pytest.raises(NetworkError):
        toggle.toggle()

    assert toggle.state is ToggleState.UNSET
    assert article_cache.get(article_id).likes_count == 0


def test_existing_like_is_detected(fake, engagement, setup):
    _, reader, article_id = setup
    fake.insert_row("article_likes", {"article_id": article_id, "user_id": reader})
    assert engagement.like(article_id, reader).is_set


def test_registry_shares_toggle_per_pair_until_cleared(engagement, setup):
    author, reader, article_id = setup
    first = engagement.like(article_id, reader)
    assert engagement.like(article_id, reader) is first
    assert engagement.like(article_id, author) is not first

    engagement.clear()
    assert engagement.like(article_id, reader) is not first


def test_follow_adjusts_followers_count(fake, repos, engagement, profile_cache, setup):
    author, reader, _ = setup
    profile_cache.merge(repos.profiles.get(author))
    toggle = engagement.follow(author, reader)

    assert toggle.toggle()

    assert profile_cache.get(author).followers_count == 1
    row = fake.tables["follows"][0]
    assert (row["follower_id"], row["following_id"]) == (reader, author)

    toggle.toggle()
    assert profile_cache.get(author).followers_count == 0


def test_seeded_follows_start_set(engagement, setup):
    author, reader, _ = setup
    engagement.seed_follows(reader, {author})
    assert engagement.follow(author, reader).is_set


def test_registry_drops_least_recently_used_settled_toggles(fake, repos, article_cache, profile_cache, setup):
    author, reader, article_id = setup
    registry = EngagementRegistry(repos.likes, repos.follows, article_cache, profile_cache, max_entries=2)
    first = registry.like(article_id, reader)
    first.toggle()
    registry.like(article_id, author)
    registry.follow(author, reader)

    assert len(registry) == 2
    rebuilt = registry.like(article_id, reader)
    assert rebuilt is not first
    assert rebuilt.is_set
    assert len(registry) == 2


def test_registry_keeps_pending_toggles(repos, article_cache, profile_cache, setup):
    author, reader, article_id = setup
    registry = EngagementRegistry(repos.likes, repos.follows, article_cache, profile_cache, max_entries=1)
    pending = registry.like(article_id, reader)
    pending._pending.acquire()
    try:
        registry.follow(author, reader)
        assert registry.like(article_id, reader) is pending
    finally:
        pending._pending.release()
