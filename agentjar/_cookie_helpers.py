"""
Internal cookie handling helpers.

This module turns raw ``Set-Cookie`` header values into Cookie records.
These are not part of the public API and may change without notice.
"""

import calendar
import re
import time
from http.cookies import Morsel
from typing import Iterable, List, Optional

from .cookie import Cookie
from .log import internal_logger
from .typedefs import URLLike

__all__ = ("parse_set_cookie_headers", "parse_cookie_date", "morsel_to_cookie")

# Real-world servers send names with characters like {} [] () that
# RFC 6265 does not allow; be tolerant but still catch obvious garbage.
_COOKIE_NAME_RE = re.compile(r"^[!#$%&\'()*+\-./0-9:<=>?@A-Z\[\]^_`a-z{|}~]+$")
_COOKIE_KNOWN_ATTRS = frozenset(  # subset of Morsel._reserved
    (
        "path",
        "domain",
        "max-age",
        "expires",
        "secure",
        "httponly",
        "samesite",
        "version",
        "comment",
    )
)
_COOKIE_BOOL_ATTRS = frozenset(("secure", "httponly"))

DATE_TOKENS_RE = re.compile(
    r"[\x09\x20-\x2F\x3B-\x40\x5B-\x60\x7B-\x7E]*"
    r"(?P<token>[\x00-\x08\x0A-\x1F\d:a-zA-Z\x7F-\xFF]+)"
)
DATE_HMS_TIME_RE = re.compile(r"(\d{1,2}):(\d{1,2}):(\d{1,2})")
DATE_DAY_OF_MONTH_RE = re.compile(r"(\d{1,2})")
DATE_MONTH_RE = re.compile(
    "(jan)|(feb)|(mar)|(apr)|(may)|(jun)|(jul)|(aug)|(sep)|(oct)|(nov)|(dec)",
    re.I,
)
DATE_YEAR_RE = re.compile(r"(\d{2,4})")

MAX_TIME = float(calendar.timegm((2100, 1, 1, 1, 1, 1, -1, -1, -1)))  # so far in future


def _unquote(text: str) -> str:
    """Strip the double quotes around a cookie value, if any."""
    if len(text) < 2 or text[0] != '"' or text[-1] != '"':
        return text
    text = text[1:-1]
    return text.replace('\\"', '"').replace("\\\\", "\\")


def parse_set_cookie_headers(headers: Iterable[str]) -> "List[Morsel[str]]":
    """Parse ``Set-Cookie`` header values, one cookie per value.

    Values without a name=value pair or with an illegal cookie name are
    logged and skipped. Unknown attributes are ignored.
    """
    parsed: List[Morsel[str]] = []

    for header in headers:
        if not header:
            continue

        name_value, *attrs = header.split(";")
        key, sep, value = name_value.partition("=")
        key = key.strip()
        value = value.strip()

        if not sep or not key:
            internal_logger.warning(
                "Can not load cookies: no name=value pair in %r", header
            )
            continue
        if key.lower() in _COOKIE_KNOWN_ATTRS or not _COOKIE_NAME_RE.match(key):
            internal_logger.warning(
                "Can not load cookies: Illegal cookie name %r", key
            )
            continue

        morsel: Morsel[str] = Morsel()
        # __setstate__ skips Morsel.set() key validation; the name was
        # already checked against the relaxed pattern above.
        morsel.__setstate__(  # type: ignore[attr-defined]
            {"key": key, "value": _unquote(value), "coded_value": value}
        )

        for attr_pair in attrs:
            attr_name, sep, attr_value = attr_pair.partition("=")
            attr_name = attr_name.strip().lower()
            if attr_name not in _COOKIE_KNOWN_ATTRS:
                continue
            if attr_name in _COOKIE_BOOL_ATTRS:
                morsel[attr_name] = True
            elif sep:
                morsel[attr_name] = _unquote(attr_value.strip())

        parsed.append(morsel)

    return parsed


def parse_cookie_date(date_str: str) -> Optional[float]:
    """Implements date string parsing adhering to RFC 6265.

    Returns a Unix timestamp or None when the string is not a cookie date.
    """
    if not date_str:
        return None

    found_time = False
    found_day_of_month = False
    found_month = False
    found_year = False

    hour = minute = second = 0
    day_of_month = 0
    month = 0
    year = 0

    for token_match in DATE_TOKENS_RE.finditer(date_str):

        token = token_match.group("token")

        if not found_time:
            time_match = DATE_HMS_TIME_RE.match(token)
            if time_match:
                found_time = True
                hour, minute, second = (int(s) for s in time_match.groups())
                continue

        if not found_day_of_month:
            day_of_month_match = DATE_DAY_OF_MONTH_RE.match(token)
            if day_of_month_match:
                found_day_of_month = True
                day_of_month = int(day_of_month_match.group())
                continue

        if not found_month:
            month_match = DATE_MONTH_RE.match(token)
            if month_match:
                found_month = True
                assert month_match.lastindex is not None
                month = month_match.lastindex
                continue

        if not found_year:
            year_match = DATE_YEAR_RE.match(token)
            if year_match:
                found_year = True
                year = int(year_match.group())

    if 70 <= year <= 99:
        year += 1900
    elif 0 <= year <= 69:
        year += 2000

    if False in (found_day_of_month, found_month, found_year, found_time):
        return None

    if not 1 <= day_of_month <= 31:
        return None

    if year < 1601 or hour > 23 or minute > 59 or second > 59:
        return None

    if day_of_month > calendar.monthrange(year, month)[1]:
        return None

    return float(
        calendar.timegm((year, month, day_of_month, hour, minute, second, -1, -1, -1))
    )


def morsel_to_cookie(
    morsel: "Morsel[str]", url: URLLike, now: Optional[float] = None
) -> Cookie:
    """Build a Cookie from a parsed morsel received from url.

    A missing domain falls back to the request host and a missing or
    relative path to the request path.
    """
    if now is None:
        now = time.time()

    domain = morsel["domain"] or url.host or ""

    path = morsel["path"]
    if not path or not path.startswith("/"):
        path = url.path if url.path.startswith("/") else "/"

    expires: Optional[float] = None
    max_age = morsel["max-age"]
    if max_age:
        try:
            delta_seconds = int(max_age)
        except ValueError:
            pass
        else:
            if delta_seconds <= 0:
                expires = 0.0
            else:
                try:
                    expires = min(now + delta_seconds, MAX_TIME)
                except OverflowError:
                    expires = MAX_TIME

    if expires is None and morsel["expires"]:
        expires = parse_cookie_date(morsel["expires"])

    try:
        version = int(morsel["version"] or 0)
    except ValueError:
        version = 0

    return Cookie(
        name=morsel.key,
        value=morsel.value,
        domain=domain,
        path=path,
        expires=expires,
        secure=bool(morsel["secure"]),
        http_only=bool(morsel["httponly"]),
        version=version,
    )
