"""Various helper functions"""

import re
from collections import namedtuple

from yarl import URL

from .typedefs import StrOrURL, URLLike

__all__ = ("HostOnlyURL", "strip_port", "to_url")

_PORT_RE = re.compile(r":[0-9]+$")


class HostOnlyURL(namedtuple("HostOnlyURL", ["host", "path"])):
    """Synthetic request URL carrying a host and nothing else.

    Used where cookies are restored from storage and there is no real
    request to validate them against.
    """

    def __new__(cls, host: str, path: str = "/") -> "HostOnlyURL":
        if host is None:
            raise ValueError("None is not allowed as host value")
        return super().__new__(cls, host, path)


def strip_port(host: str) -> str:
    """Remove a trailing ``:port`` from a host or cookie domain."""
    return _PORT_RE.sub("", host)


def to_url(url: StrOrURL) -> URLLike:
    if isinstance(url, str):
        return URL(url)
    return url
