from __future__ import annotations

import pytest

from fakes import PASSWORD, register
from livaulislam.auth.session_store import SessionStore, validate_username
from livaulislam.errors import (
    InvalidCredentials,
    NetworkError,
    NotAuthenticated,
    UsernameTaken,
    UserNotFound,
    ValidationError,
)


def test_start_without_persisted_session(store):
    assert store.session is None
    assert store.profile is None
    assert store.loading is False


def test_start_restores_existing_session(fake, repos, storage):
    user_id = register(fake, "alice")
    fake.auth.sign_in_with_password({"email": "alice@example.com", "password": PASSWORD})

    s = SessionStore(fake, repos.profiles, storage)
    assert s.loading is True
    s.start()
    try:
        assert s.user_id == user_id
        assert s.profile.username == "alice"
        assert s.loading is False
    finally:
        s.close()
    assert fake.auth.listeners == []


def test_sign_in_with_username_resolves_email(fake, store):
    user_id = register(fake, "Alice", email="alice@mail.test")

    session = store.sign_in("Alice", PASSWORD)

    assert session.user_id == user_id
    assert session.email == "alice@mail.test"
    assert store.profile.username == "Alice"
    assert ("rpc", "get_user_email_by_id") in fake.calls


def test_sign_in_unknown_username_never_reaches_auth(fake, store):
    with pytest.raises(UserNotFound):
        store.sign_in("ghost", PASSWORD)
    assert fake.auth.current is None
    assert store.session is None


def test_username_sign_in_is_case_sensitive(fake, store):
    register(fake, "Alice")
    with pytest.raises(UserNotFound):
        store.sign_in("alice", PASSWORD)


def test_sign_in_wrong_password(fake, store):
    register(fake, "alice")
    with pytest.raises(InvalidCredentials):
        store.sign_in("alice@example.com", "nope")
    assert store.session is None


def test_sign_in_requires_both_fields(store):
    with pytest.raises(ValidationError):
        store.sign_in("", PASSWORD)
    with pytest.raises(ValidationError):
        store.sign_in("alice", "")


def test_sign_up_rejects_taken_username_case_insensitively(fake, store):
    register(fake, "alice")
    with pytest.raises(UsernameTaken):
        store.sign_up("new@example.com", PASSWORD, "ALICE", "Another Alice")
    assert fake.auth.sign_up_calls == 0


def test_sign_up_taken_check_does_not_treat_underscore_as_wildcard(fake, store):
    register(fake, "abc")
    result = store.sign_up("a_c@example.com", PASSWORD, "a_c", "A C")
    assert result.session is not None


@pytest.mark.parametrize("username", ["ab", "has space", "dash-name", ""])
def test_sign_up_validates_username(store, username):
    with pytest.raises(ValidationError):
        store.sign_up("x@example.com", PASSWORD, username, "Display")


def test_validate_username_accepts_letters_digits_underscore():
    assert validate_username(" Bob_1 ") == "Bob_1"


def test_sign_up_creates_profile_and_signs_in(fake, store):
    result = store.sign_up("bob@example.com", PASSWORD, "Bob_1", "Bob")

    assert not result.confirmation_required
    assert store.user_id == result.user_id
    assert store.profile is not None
    assert store.profile.username == "bob_1"
    assert store.profile.display_name == "Bob"
    row = fake.row("profiles", result.user_id)
    assert row["username"] == "bob_1"


def test_sign_up_with_email_confirmation_has_no_session(fake, store):
    fake.auth.confirm_email = True
    result = store.sign_up("carol@example.com", PASSWORD, "carol", "Carol")

    assert result.confirmation_required
    assert store.session is None
    assert fake.row("profiles", result.user_id) is not None


def test_sign_up_keeps_profile_created_by_server(fake, store):
    user_id = fake.auth.add_user("placeholder@example.com", PASSWORD)
    fake.add_profile("dave", id=user_id, bio="from trigger")

    store._ensure_profile(user_id, "dave", "Dave")

    assert fake.row("profiles", user_id)["bio"] == "from trigger"
    assert len(fake.tables["profiles"]) == 1


def test_sign_out_clears_state_even_when_remote_call_fails(fake, store, storage):
    register(fake, "alice")
    store.sign_in("alice@example.com", PASSWORD)
    storage.set_item("sb-session", "{}")
    fake.auth.fail_sign_out = True

    with pytest.raises(NetworkError):
        store.sign_out()

    assert store.session is None
    assert store.profile is None
    assert store.loading is False
    assert not storage.path.exists()


def test_sign_out_notifies_listeners(fake, store):
    register(fake, "alice")
    store.sign_in("alice@example.com", PASSWORD)
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append((s.is_authenticated, s.loading)))

    store.sign_out()

    assert seen[0] == (False, True)
    assert seen[-1] == (False, False)
    assert store.loading is False
    unsubscribe()
    store.sign_in("alice@example.com", PASSWORD)
    assert seen[-1] == (False, False)


def test_update_profile_normalizes_fields(fake, store):
    register(fake, "alice")
    store.sign_in("alice@example.com", PASSWORD)

    profile = store.update_profile(twitter="@alice", website=" https://alice.dev ", bio="Hi")

    assert profile.twitter == "alice"
    assert profile.website == "https://alice.dev"
    assert profile.bio == "Hi"
    assert store.profile.bio == "Hi"
    assert fake.row("profiles", store.user_id)["updated_at"] == profile.updated_at


def test_update_profile_rejects_username_change_and_unknown_fields(fake, store):
    register(fake, "alice")
    store.sign_in("alice@example.com", PASSWORD)

    with pytest.raises(ValidationError):
        store.update_profile(username="mallory")
    with pytest.raises(ValidationError):
        store.update_profile(followers_count=1000)
    store.update_profile(username="alice", location="Earth")
    assert store.profile.location == "Earth"


def test_update_profile_requires_session(store):
    with pytest.raises(NotAuthenticated):
        store.update_profile(bio="x")


def test_change_password(fake, store):
    register(fake, "alice")
    store.sign_in("alice@example.com", PASSWORD)

    with pytest.raises(ValidationError):
        store.change_password("newpass1", "newpass2")
    with pytest.raises(ValidationError):
        store.change_password("abc", "abc")

    store.change_password("brand-new", "brand-new")
    assert fake.auth.users["alice@example.com"]["password"] == "brand-new"


def test_refresh_profile_rereads_row(fake, store):
    register(fake, "alice")
    store.sign_in("alice@example.com", PASSWORD)
    fake.row("profiles", store.user_id)["followers_count"] = 4

    assert store.refresh_profile().followers_count == 4
    assert store.profile.followers_count == 4
