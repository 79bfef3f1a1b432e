import pytest

from pricegate.auth.errors import (
    ConflictError,
    InvalidCredentialError,
    NotFoundError,
    ValidationError,
)
from pricegate.auth.gate import GateState
from pricegate.auth.passwords import verify_password


def test_signup_stores_normalized_identity_and_opens_gate(controller, credentials, sessions, gate, price_feed):
    account = controller.signup("A@B.com", "abcdef", "abcdef")

    assert account.email == "a@b.com"
    stored = credentials.list_accounts()
    assert stored == [account]
    assert stored[0].password_hash != "abcdef"
    assert verify_password(stored[0].salt, "abcdef", stored[0].password_hash)

    assert sessions.get_session().email == "a@b.com"
    assert gate.state is GateState.AUTHENTICATED
    assert gate.whoami == "a@b.com"
    assert price_feed.starts == 1


def test_signup_gives_each_account_its_own_salt(controller, credentials):
    controller.signup("one@x.com", "samepass", "samepass")
    controller.signup("two@x.com", "samepass", "samepass")
    one, two = credentials.list_accounts()
    assert one.salt != two.salt
    assert one.password_hash != two.password_hash


@pytest.mark.parametrize(
    "identity, secret, confirmation, code",
    [
        ("", "abcdef", "abcdef", "missing credentials"),
        ("   ", "abcdef", "abcdef", "missing credentials"),
        ("a@b.com", "", "", "missing credentials"),
        ("a@b.com", "abc", "abc", "secret too short"),
        ("a@b.com", "abcde", "abcde", "secret too short"),
        ("a@b.com", "abcdef", "abcdeg", "mismatch"),
        # order: too short wins over mismatch
        ("a@b.com", "abc", "xyz", "secret too short"),
    ],
)
def test_signup_validation(controller, credentials, sessions, price_feed, identity, secret, confirmation, code):
    with pytest.raises(ValidationError) as exc:
        controller.signup(identity, secret, confirmation)
    assert exc.value.code == code
    assert credentials.list_accounts() == []
    assert sessions.get_session() is None
    assert price_feed.starts == 0


def test_signup_twice_is_conflict(controller, credentials):
    controller.signup("a@b.com", "abcdef", "abcdef")
    with pytest.raises(ConflictError) as exc:
        controller.signup("  A@B.COM", "zzzzzz", "zzzzzz")
    assert exc.value.code == "account exists"
    assert exc.value.message == "Account already exists. Try logging in."
    assert len(credentials.list_accounts()) == 1


def test_signup_validation_runs_before_conflict(controller):
    controller.signup("a@b.com", "abcdef", "abcdef")
    with pytest.raises(ValidationError):
        controller.signup("a@b.com", "abc", "abc")


def test_register_account_leaves_session_alone(controller, sessions, price_feed):
    account = controller.register_account("ops@x.com", "abcdef", "abcdef")
    assert account.email == "ops@x.com"
    assert sessions.get_session() is None
    assert price_feed.starts == 0


def test_login_with_correct_secret(controller, gate, sessions, price_feed):
    controller.register_account("a@b.com", "abcdef", "abcdef")

    rec = controller.login(" A@B.com ", "abcdef")

    assert rec.email == "a@b.com"
    assert sessions.get_session() == rec
    assert gate.is_authenticated
    assert price_feed.starts == 1


def test_login_with_wrong_secret_keeps_session(controller, sessions, price_feed):
    controller.signup("a@b.com", "abcdef", "abcdef")
    controller.register_account("c@d.com", "ghijkl", "ghijkl")
    before = sessions.get_session()

    with pytest.raises(InvalidCredentialError) as exc:
        controller.login("c@d.com", "wrong")
    assert exc.value.code == "wrong secret"
    assert exc.value.message == "Incorrect password."
    assert sessions.get_session() == before
    assert price_feed.starts == 1


def test_login_unknown_account(controller, sessions):
    with pytest.raises(NotFoundError) as exc:
        controller.login("nobody@x.com", "abcdef")
    assert exc.value.code == "no account"
    assert sessions.get_session() is None


def test_login_empty_identity_is_not_found(controller):
    with pytest.raises(NotFoundError):
        controller.login("", "abcdef")


def test_duplicate_signup_is_rejected_before_hashing(controller, monkeypatch):
    controller.register_account("a@b.com", "abcdef", "abcdef")

    def _no_salt():
        raise AssertionError("salt generated for a duplicate identity")

    monkeypatch.setattr("pricegate.auth.controller.make_salt", _no_salt)
    with pytest.raises(ConflictError):
        controller.register_account(" A@B.com", "abcdef", "abcdef")
