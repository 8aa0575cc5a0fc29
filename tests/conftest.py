from typing import List

import pytest

from agentjar import Cookie, CookieJar


@pytest.fixture
def jar() -> CookieJar:
    return CookieJar()


@pytest.fixture
def cookies_to_send() -> List[Cookie]:
    return [
        Cookie("shared-cookie", "first", ".example.com"),
        Cookie("domain-cookie", "second", "example.com"),
        Cookie("subdomain1-cookie", "third", "test1.example.com"),
        Cookie("subdomain2-cookie", "fourth", "test2.example.com"),
        Cookie("different-domain-cookie", "fifth", "different.org"),
        Cookie("secure-cookie", "sixth", "secure.com", secure=True),
        Cookie("path1-cookie", "seventh", "pathtest.com", "/"),
        Cookie("path2-cookie", "eighth", "pathtest.com", "/one"),
        Cookie("path3-cookie", "ninth", "pathtest.com", "/one/two"),
        Cookie("path4-cookie", "tenth", "pathtest.com", "/one/two/"),
    ]


@pytest.fixture
def filled_jar(jar: CookieJar, cookies_to_send: List[Cookie]) -> CookieJar:
    for cookie in cookies_to_send:
        # dotted domains are set from a direct subdomain
        if cookie.domain.startswith("."):
            host = "www" + cookie.domain
        else:
            host = cookie.domain
        assert jar.add("http://{}/".format(host), cookie) is not None
    return jar
