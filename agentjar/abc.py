import time
from abc import abstractmethod
from collections.abc import Sized
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional

from multidict import CIMultiDict

from . import hdrs
from ._cookie_helpers import morsel_to_cookie, parse_set_cookie_headers
from .cookie import Cookie
from .helpers import to_url
from .typedefs import LooseHeaders, StrOrURL

if TYPE_CHECKING:  # pragma: no cover
    IterableBase = Iterable[Cookie]
else:
    IterableBase = Iterable


class AbstractCookieJar(Sized, IterableBase):
    """Abstract Cookie Jar."""

    @abstractmethod
    def add(self, url: StrOrURL, cookie: Cookie) -> Optional[Cookie]:
        """Store cookie received from url, return None if rejected."""

    @abstractmethod
    def cookies_for(self, url: StrOrURL) -> List[Cookie]:
        """Return the jar's cookies applicable to a request to url."""

    @abstractmethod
    def all_cookies(self) -> List[Cookie]:
        """Return every live cookie in the jar."""

    @abstractmethod
    def clear(self) -> None:
        """Clear all cookies."""

    def update_cookies_from_headers(
        self, headers: Iterable[str], url: StrOrURL
    ) -> List[Cookie]:
        """Parse Set-Cookie header values and add the resulting cookies.

        Also takes the content of <meta http-equiv="Set-Cookie"> tags.
        Returns the cookies that were accepted.
        """
        url = to_url(url)
        now = time.time()
        accepted = []
        for morsel in parse_set_cookie_headers(headers):
            stored = self.add(url, morsel_to_cookie(morsel, url, now))
            if stored is not None:
                accepted.append(stored)
        return accepted

    def extract_cookies(
        self, headers: LooseHeaders, url: StrOrURL
    ) -> List[Cookie]:
        """Add the cookies set by a whole response header collection."""
        headers = CIMultiDict(headers)
        return self.update_cookies_from_headers(
            headers.getall(hdrs.SET_COOKIE, ()), url)

    def is_empty(self, url: StrOrURL) -> bool:
        return not self.cookies_for(url)

    def cookie_header(self, url: StrOrURL) -> Optional[str]:
        """Render the value of a Cookie request header for url."""
        cookies = self.cookies_for(url)
        if not cookies:
            return None
        return "; ".join(str(cookie) for cookie in cookies)

    def __iter__(self) -> Iterator[Cookie]:
        return iter(self.all_cookies())

    def __len__(self) -> int:
        return len(self.all_cookies())
