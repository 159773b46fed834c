import threading
import time

import pytest

from clipqa.services import auth as auth_module
from clipqa.services.auth import AuthService, hash_password, verify_password
from clipqa.utils.exceptions import AuthenticationError, ConflictError, ValidationError


def test_password_hash_round_trip():
    stored = hash_password("correct horse")

    assert stored.startswith("scrypt$")
    assert verify_password("correct horse", stored)
    assert not verify_password("wrong horse", stored)
    assert not verify_password("correct horse", "garbage")


async def test_register_and_login(db, query):
    auth = AuthService(db)
    registered = await auth.register("carol", "secret123")

    assert registered.user.username == "carol"
    assert auth.verify_token(registered.token) == registered.user.id
    row = (await query("SELECT password_hash FROM users"))[0]
    assert "secret123" not in row["password_hash"]

    logged_in = await auth.login("carol", "secret123")
    assert logged_in.user.id == registered.user.id
    assert logged_in.user.last_login is not None


async def test_duplicate_username_conflicts(db, alice):
    with pytest.raises(ConflictError):
        await AuthService(db).register("alice", "another-password")


@pytest.mark.parametrize(
    "username,password",
    [("ab", "secret123"), ("x" * 51, "secret123"), ("dave", "short"), ("", "secret123")],
)
async def test_register_validation(db, username, password):
    with pytest.raises(ValidationError):
        await AuthService(db).register(username, password)


async def test_login_with_bad_credentials(db, alice):
    auth = AuthService(db)
    with pytest.raises(AuthenticationError):
        await auth.login("alice", "not-the-password")
    with pytest.raises(AuthenticationError):
        await auth.login("nobody", "password-a")


async def test_tampered_and_expired_tokens(db):
    auth = AuthService(db)
    token = auth.issue_token("user-1")
    payload, signature = token.split(".")

    with pytest.raises(AuthenticationError):
        auth.verify_token(payload + "x." + signature)
    with pytest.raises(AuthenticationError):
        auth.verify_token("not-a-token")

    stale = auth.issue_token("user-1", now=time.time() - auth.settings.token_ttl_hours * 3600 - 10)
    with pytest.raises(AuthenticationError):
        auth.verify_token(stale)


async def test_password_hashing_runs_in_a_worker_thread(db, alice, monkeypatch):
    loop_thread = threading.get_ident()
    calls = []

    def recording_verify(password, stored):
        calls.append(("verify", threading.get_ident(), db._write_lock.locked()))
        return verify_password(password, stored)

    def recording_hash(password, salt=None):
        calls.append(("hash", threading.get_ident(), db._write_lock.locked()))
        return hash_password(password, salt)

    monkeypatch.setattr(auth_module, "verify_password", recording_verify)
    monkeypatch.setattr(auth_module, "hash_password", recording_hash)
    auth = AuthService(db)

    await auth.register("erin", "secret123")
    await auth.login("alice", "password-a")

    assert [name for name, _, _ in calls] == ["hash", "verify"]
    for _, thread_id, write_locked in calls:
        assert thread_id != loop_thread
        assert not write_locked
