import logging

import pytest

from components.accountstore import InMemoryAccountStore
from components.authservice import (
    AuthError,
    AuthService,
    ConflictError,
    HS256TokenSigner,
    InvalidTokenError,
    NotFoundError,
    PasswordHasher,
    ValidationError,
)
from components.recoveryservice import (
    LoggingNotifier,
    RecoveryService,
    ResetTokenGenerator,
    make_notifier,
)


def make_clock(start=1_700_000_000.0):
    t = {"now": float(start)}
    def now():
        return t["now"]
    def advance(dt):
        t["now"] += float(dt)
    return now, advance


def make_services(notifier=None):
    now, advance = make_clock()
    store = InMemoryAccountStore()
    hasher = PasswordHasher(iterations=1000)
    signer = HS256TokenSigner("test-secret", issuer="solar-api", audience="solar-web", clock=now)
    auth = AuthService(store=store, signer=signer, hasher=hasher)
    recovery = RecoveryService(
        store=store,
        hasher=hasher,
        tokens=ResetTokenGenerator(now=now),
        notifier=notifier,
    )
    return auth, recovery, store, now, advance


def _token_from(message):
    prefix = "Reset token generated: "
    assert message.startswith(prefix)
    return message[len(prefix):]


def test_reset_token_generator_is_random_with_15_minute_expiry():
    now, _ = make_clock(1000)
    gen = ResetTokenGenerator(now=now)
    t1, t2 = gen.generate(), gen.generate()
    assert t1.token != t2.token
    assert len(t1.token) >= 40
    assert t1.expires_at == 1000 + 900


def test_forgot_requires_matching_username_and_email():
    auth, recovery, _, _, _ = make_services()
    auth.signup("alice", "longenough1", "a@x.com")
    with pytest.raises(NotFoundError, match="User not found"):
        recovery.forgot("alice", "b@x.com")
    with pytest.raises(NotFoundError):
        recovery.forgot("bob", "a@x.com")


def test_forgot_stores_token_and_expiry_together():
    auth, recovery, store, now, _ = make_services()
    auth.signup("alice", "longenough1", "a@x.com")
    token = _token_from(recovery.forgot("alice", "a@x.com").message)

    doc = store.find_one({"username": "alice"})
    assert doc["resetToken"] == token
    assert doc["resetExpires"] == int(now()) + 900


def test_second_forgot_overwrites_previous_token():
    auth, recovery, _, _, _ = make_services()
    auth.signup("alice", "longenough1", "a@x.com")
    first = _token_from(recovery.forgot("alice", "a@x.com").message)
    second = _token_from(recovery.forgot("alice", "a@x.com").message)
    assert first != second

    with pytest.raises(InvalidTokenError):
        recovery.reset(first, "newpass123")
    recovery.reset(second, "newpass123")


@pytest.mark.parametrize("pw", ["", "short", "1234567"])
def test_reset_rejects_short_password_even_with_bad_token(pw):
    auth, recovery, _, _, _ = make_services()
    with pytest.raises(ValidationError):
        recovery.reset("no-such-token", pw)


def test_reset_is_single_use_and_fresh_salt():
    auth, recovery, store, _, _ = make_services()
    auth.signup("alice", "longenough1", "a@x.com")
    old = store.find_one({"username": "alice"})
    token = _token_from(recovery.forgot("alice", "a@x.com").message)

    assert recovery.reset(token, "newpass123").message == "Password reset successful"
    doc = store.find_one({"username": "alice"})
    assert doc["salt"] != old["salt"]
    assert "resetToken" not in doc and "resetExpires" not in doc

    with pytest.raises(InvalidTokenError, match="Invalid or expired token"):
        recovery.reset(token, "another12345")


def test_reset_after_window_fails():
    auth, recovery, _, _, advance = make_services()
    auth.signup("alice", "longenough1", "a@x.com")
    token = _token_from(recovery.forgot("alice", "a@x.com").message)

    advance(901)
    with pytest.raises(InvalidTokenError):
        recovery.reset(token, "newpass123")
    auth.login("alice", "longenough1")


def test_reset_at_deadline_still_valid():
    auth, recovery, _, _, advance = make_services()
    auth.signup("alice", "longenough1", "a@x.com")
    token = _token_from(recovery.forgot("alice", "a@x.com").message)
    advance(900)
    recovery.reset(token, "newpass123")


def test_reset_lost_race_is_invalid_token():
    auth, recovery, store, _, _ = make_services()
    auth.signup("alice", "longenough1", "a@x.com")
    token = _token_from(recovery.forgot("alice", "a@x.com").message)

    snapshot = store.find_one({"resetToken": token})

    class StaleReadStore:
        # both racers read the user before either writes
        def find_one(self, flt):
            return dict(snapshot)
        def update_fields(self, flt, fields, unset=()):
            return store.update_fields(flt, fields, unset)

    racer = RecoveryService(store=StaleReadStore(), hasher=recovery.hasher, tokens=recovery.tokens)
    racer.reset(token, "winner12345")
    with pytest.raises(InvalidTokenError):
        racer.reset(token, "loser123456")
    auth.login("alice", "winner12345")


def test_logging_notifier_keeps_token_out_of_response(caplog):
    auth, recovery, store, _, _ = make_services(notifier=LoggingNotifier())
    auth.signup("alice", "longenough1", "a@x.com")
    with caplog.at_level(logging.INFO, logger="recoveryservice.notifier"):
        res = recovery.forgot("alice", "a@x.com")
    token = store.find_one({"username": "alice"})["resetToken"]
    assert res.message == "Reset instructions sent"
    assert token not in res.message
    assert any(token in r.getMessage() for r in caplog.records)


def test_make_notifier_rejects_unknown_mode():
    with pytest.raises(ValueError):
        make_notifier("carrier-pigeon")


def test_full_credential_lifecycle():
    auth, recovery, _, now, _ = make_services()

    auth.signup("alice", "longenough1", "a@x.com")
    with pytest.raises(ConflictError):
        auth.signup("alice", "other12345", "b@x.com")
    assert auth.login("alice", "longenough1").token
    with pytest.raises(AuthError):
        auth.login("alice", "wrong")

    token = _token_from(recovery.forgot("alice", "a@x.com").message)
    recovery.reset(token, "newpass123")

    with pytest.raises(AuthError):
        auth.login("alice", "longenough1")
    assert auth.login("alice", "newpass123").token


def test_reset_token_without_expiry_is_invalid():
    auth, recovery, store, _, _ = make_services()
    store.insert({
        "id": "u1",
        "username": "dave",
        "email": "d@x.com",
        "passwordHash": "h",
        "salt": "s",
        "resetToken": "orphan-token",
    })
    with pytest.raises(InvalidTokenError, match="Invalid or expired token"):
        recovery.reset("orphan-token", "newpass123")
    assert store.find_one({"id": "u1"})["passwordHash"] == "h"


def test_forgot_with_blank_email_finds_nobody():
    auth, recovery, _, _, _ = make_services()
    auth.signup("alice", "longenough1", "")
    with pytest.raises(NotFoundError):
        recovery.forgot("alice", "")
