__version__ = "1.0.0"

from typing import Tuple

from .abc import AbstractCookieJar
from .cookie import Cookie
from .cookiejar import FILE_FORMATS, CookieJar, DummyCookieJar
from .errors import CookieFileError, CookieJarError, UnknownFormatError
from .helpers import HostOnlyURL

__all__: Tuple[str, ...] = (
    "AbstractCookieJar",
    "Cookie",
    # cookiejar
    "CookieJar",
    "DummyCookieJar",
    "FILE_FORMATS",
    # errors
    "CookieFileError",
    "CookieJarError",
    "UnknownFormatError",
    # helpers
    "HostOnlyURL",
)
