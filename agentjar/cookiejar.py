import pathlib
import pickle
import re
import threading
import time
from typing import IO, Dict, List, Optional

import attr

from .abc import AbstractCookieJar
from .cookie import Cookie
from .errors import CookieFileError, UnknownFormatError
from .helpers import HostOnlyURL, strip_port, to_url
from .log import jar_logger
from .typedefs import FileFormat, PathLike, StrOrURL, URLLike

__all__ = ("CookieJar", "DummyCookieJar", "FILE_FORMATS")

FILE_FORMATS = frozenset(("pickle", "cookiestxt"))

# domain -> path -> name -> cookie
_CookieStore = Dict[str, Dict[str, Dict[str, Cookie]]]


class CookieJar(AbstractCookieJar):
    """Cookie storage scoped by domain and path.

    Follows the RFC 2965 acceptance rules: a cookie domain needs an
    embedded dot and must not reach past the requesting host's
    immediate parent domain. Path matching is a plain string prefix.
    """

    EMBEDDED_DOT_RE = re.compile(r".\..")

    LOCAL_DOMAIN_RE = re.compile(r"(localhost|\.?local)\.?$")

    COOKIESTXT_HEADER = "# Netscape HTTP Cookie File\n"

    def __init__(self) -> None:
        self._cookies: _CookieStore = {}
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return "<{} domains={}>".format(
            self.__class__.__name__, sorted(self._cookies))

    def add(self, url: StrOrURL, cookie: Cookie) -> Optional[Cookie]:
        """Store a cookie received from url.

        Returns the stored cookie, or None when the cookie's domain is
        not acceptable for url.
        """
        url = to_url(url)
        with self._lock:
            return self._add_to(self._cookies, url, cookie)

    def cookies_for(self, url: StrOrURL) -> List[Cookie]:
        url = to_url(url)
        host = url.host or ""
        path = url.path or "/"

        with self._lock:
            now = time.time()
            self._do_expiration(now)

            cookies = []
            for domain, paths in self._cookies.items():
                if not self._is_domain_match(strip_port(domain), host):
                    continue
                for cookie_path, names in paths.items():
                    if not self._is_path_match(path, cookie_path):
                        continue
                    cookies.extend(names.values())

        return [cookie for cookie in cookies if not cookie.expired(now)]

    def all_cookies(self) -> List[Cookie]:
        with self._lock:
            self._do_expiration(time.time())
            return [
                cookie
                for paths in self._cookies.values()
                for names in paths.values()
                for cookie in names.values()
            ]

    def clear(self) -> None:
        with self._lock:
            self._cookies = {}

    def save(
        self, file_path: PathLike, file_format: FileFormat = "pickle"
    ) -> None:
        """Write the jar to file_path.

        file_format is "pickle" for a full dump of the store or
        "cookiestxt" for the Netscape cookies.txt layout. That layout
        treats "#" as the start of a comment, so a value containing "#"
        is cut short when the file is loaded again.
        """
        if file_format not in FILE_FORMATS:
            raise UnknownFormatError(file_format)
        file_path = pathlib.Path(file_path)

        with self._lock:
            self._do_expiration(time.time())
            if file_format == "pickle":
                with file_path.open(mode="wb") as f:
                    pickle.dump(self._cookies, f, pickle.HIGHEST_PROTOCOL)
            else:
                with file_path.open(mode="w", encoding="utf-8") as f:
                    self._dump_cookiestxt(f)
            jar_logger.debug(
                "Saved %d cookie domains to %s as %s",
                len(self._cookies), file_path, file_format)

    def load(
        self, file_path: PathLike, file_format: FileFormat = "pickle"
    ) -> "CookieJar":
        """Replace the jar's contents with the cookies stored in file_path.

        The jar is left untouched if reading or parsing the file fails.
        """
        if file_format not in FILE_FORMATS:
            raise UnknownFormatError(file_format)
        file_path = pathlib.Path(file_path)

        if file_format == "pickle":
            with file_path.open(mode="rb") as f:
                cookies = self._load_pickle(f, file_path)
        else:
            with file_path.open(mode="r", encoding="utf-8") as f:
                cookies = self._load_cookiestxt(f)

        with self._lock:
            self._cookies = cookies
            self._do_expiration(time.time())
            jar_logger.debug(
                "Loaded %d cookie domains from %s as %s",
                len(self._cookies), file_path, file_format)
        return self

    def _load_pickle(self, f: IO[bytes], file_path: pathlib.Path) -> _CookieStore:
        try:
            dumped = pickle.load(f)
        except (pickle.UnpicklingError, EOFError, AttributeError,
                ImportError, IndexError) as exc:
            raise CookieFileError(file_path) from exc

        if not isinstance(dumped, dict):
            raise CookieFileError(
                file_path,
                "Expected a cookie store in {}, got {}".format(
                    file_path, type(dumped).__name__))

        cookies: _CookieStore = {}
        try:
            found = [
                cookie
                for paths in dumped.values()
                for names in paths.values()
                for cookie in names.values()
            ]
        except AttributeError as exc:
            raise CookieFileError(file_path) from exc

        for cookie in found:
            if not isinstance(cookie, Cookie):
                raise CookieFileError(
                    file_path,
                    "Unexpected {} in cookie store {}".format(
                        type(cookie).__name__, file_path))
            self._store(cookies, cookie)
        return cookies

    def _load_cookiestxt(self, f: IO[str]) -> _CookieStore:
        now = time.time()
        cookies: _CookieStore = {}

        for lineno, line in enumerate(f, 1):
            line = line.rstrip("\r\n").split("#", 1)[0]
            fields = line.split("\t")
            if len(fields) != 7:
                if line:
                    jar_logger.debug(
                        "Skipping cookies.txt line %d: %d fields",
                        lineno, len(fields))
                continue

            domain, _, path, secure, expires_field, name, value = fields
            try:
                expires_seconds = int(expires_field)
            except ValueError:
                jar_logger.debug(
                    "Skipping cookies.txt line %d: bad expiry %r",
                    lineno, expires_field)
                continue

            expires = float(expires_seconds) if expires_seconds else None
            if expires is not None and expires < now:
                continue

            # The second field is derived from the domain and not read.
            cookie = Cookie(
                name=name,
                value=value,
                domain=domain,
                path=path,
                expires=expires,
                secure=secure == "TRUE",
                version=0,
            )
            self._add_to(cookies, HostOnlyURL(domain), cookie)

        return cookies

    def _dump_cookiestxt(self, f: IO[str]) -> None:
        f.write(self.COOKIESTXT_HEADER)
        for cookie in self.all_cookies():
            if "#" in cookie.value:
                jar_logger.debug(
                    "Cookie %r value contains \"#\" and will be truncated "
                    "when cookies.txt is loaded", cookie.name)
            fields = (
                cookie.domain,
                "TRUE" if cookie.domain.startswith(".") else "FALSE",
                cookie.path,
                "TRUE" if cookie.secure else "FALSE",
                "0" if cookie.session else str(int(cookie.expires)),
                cookie.name,
                cookie.value,
            )
            f.write("\t".join(fields) + "\n")

    def _do_expiration(self, now: float) -> None:
        """Drop expired cookies and the buckets they leave empty."""
        for domain in list(self._cookies):
            paths = self._cookies[domain]
            for path in list(paths):
                names = paths[path]
                for name in [n for n, c in names.items() if c.expired(now)]:
                    del names[name]
                if not names:
                    del paths[path]
            if not paths:
                del self._cookies[domain]

    def _add_to(
        self, cookies: _CookieStore, url: URLLike, cookie: Cookie
    ) -> Optional[Cookie]:
        if not self._is_valid_for_host(cookie.domain, url.host):
            jar_logger.debug(
                "Rejected cookie %r for domain %r set by host %r",
                cookie.name, cookie.domain, url.host)
            return None
        return self._store(cookies, cookie)

    @staticmethod
    def _store(cookies: _CookieStore, cookie: Cookie) -> Cookie:
        domain, path, name = cookie.key
        if domain != cookie.domain:
            cookie = attr.evolve(cookie, domain=domain)
        cookies.setdefault(domain, {}).setdefault(path, {})[name] = cookie
        return cookie

    @classmethod
    def _is_valid_for_host(cls, domain: str, host: Optional[str]) -> bool:
        """Implements the RFC 2965 acceptance rules for a cookie domain.

        Permitted:     x.foo.com setting Domain=.foo.com
        Not permitted: y.x.foo.com setting Domain=.foo.com (y.x has a dot)
        Not permitted: foo.com setting Domain=.bar.com
        """
        if not host:
            return False

        cookie_domain = strip_port(domain)

        # localhost and .local names are exempt from the embedded dot rule
        if (not cls.EMBEDDED_DOT_RE.search(cookie_domain) and
                not cls.LOCAL_DOMAIN_RE.search(cookie_domain)):
            return False

        pos = host.lower().find(cookie_domain.lower())
        if pos < 0:
            return False
        return not cls.EMBEDDED_DOT_RE.search(host[:pos])

    @staticmethod
    def _is_domain_match(domain: str, hostname: str) -> bool:
        if domain.startswith("."):
            return hostname.lower().endswith(domain.lower())
        return hostname.lower() == domain.lower()

    @staticmethod
    def _is_path_match(req_path: str, cookie_path: str) -> bool:
        # Plain prefix test: "/login" matches "/loginx" as well.
        return req_path.startswith(cookie_path)


class DummyCookieJar(AbstractCookieJar):
    """Implements a dummy cookie storage.

    It can be used with an agent that should not keep cookies.
    """

    def add(self, url: StrOrURL, cookie: Cookie) -> Optional[Cookie]:
        return None

    def cookies_for(self, url: StrOrURL) -> List[Cookie]:
        return []

    def all_cookies(self) -> List[Cookie]:
        return []

    def clear(self) -> None:
        pass
