import pickle
import time

import attr
import pytest
from freezegun import freeze_time

from agentjar import Cookie


def test_defaults() -> None:
    cookie = Cookie("name", "value", "example.com")

    assert cookie.path == "/"
    assert cookie.expires is None
    assert not cookie.secure
    assert not cookie.http_only
    assert cookie.version == 0
    assert cookie.session


def test_empty_path_becomes_root() -> None:
    assert Cookie("name", "value", "example.com", "").path == "/"


def test_str() -> None:
    cookie = Cookie("12345%7D", "ASDFWEE345%3DASda", ".rubyforge.org")
    assert str(cookie) == "12345%7D=ASDFWEE345%3DASda"


def test_key_is_case_insensitive_on_domain() -> None:
    first = Cookie("sid", "1", "Example.COM", "/app")
    second = Cookie("sid", "2", "example.com", "/app", secure=True)

    assert first.key == second.key == ("example.com", "/app", "sid")
    assert first != second


def test_frozen() -> None:
    cookie = Cookie("name", "value", "example.com")
    with pytest.raises(attr.exceptions.FrozenInstanceError):
        cookie.value = "other"  # type: ignore[misc]


def test_evolve() -> None:
    cookie = Cookie("name", "value", "Example.com")
    lowered = attr.evolve(cookie, domain="example.com")

    assert lowered.domain == "example.com"
    assert lowered.name == "name"
    assert cookie.domain == "Example.com"


def test_expired_explicit_now() -> None:
    cookie = Cookie("name", "value", "example.com", expires=1000.0)

    assert not cookie.expired(999.0)
    assert not cookie.expired(1000.0)
    assert cookie.expired(1000.5)


def test_session_cookie_never_expires() -> None:
    cookie = Cookie("name", "value", "example.com")
    assert not cookie.expired(float("inf"))


def test_expired_uses_clock() -> None:
    with freeze_time("2020-01-01 00:00:00+00:00") as freezer:
        now = time.time()
        cookie = Cookie("name", "value", "example.com", expires=now + 10)
        assert not cookie.expired()

        freezer.move_to("2020-01-01 00:00:11+00:00")
        assert cookie.expired()


def test_pickle() -> None:
    cookie = Cookie(
        "name", "value", ".example.com", "/path",
        expires=1234567890.5, secure=True, http_only=True, version=1,
    )
    assert pickle.loads(pickle.dumps(cookie, pickle.HIGHEST_PROTOCOL)) == cookie
