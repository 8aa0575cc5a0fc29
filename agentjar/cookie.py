import time
from typing import Optional, Tuple

import attr

__all__ = ("Cookie",)


def _default_path(path: Optional[str]) -> str:
    return path or "/"


@attr.s(frozen=True, slots=True)
class Cookie:
    """A single stored cookie.

    Instances are immutable; use attr.evolve() to derive a changed copy.
    """

    name = attr.ib(type=str)
    value = attr.ib(type=str)
    domain = attr.ib(type=str)
    path = attr.ib(type=str, default="/", converter=_default_path)
    expires = attr.ib(type=Optional[float], default=None)
    secure = attr.ib(type=bool, default=False)
    http_only = attr.ib(type=bool, default=False)
    version = attr.ib(type=int, default=0)

    @property
    def key(self) -> Tuple[str, str, str]:
        """Storage key; two cookies with the same key replace each other."""
        return self.domain.lower(), self.path, self.name

    @property
    def session(self) -> bool:
        return self.expires is None

    def expired(self, now: Optional[float] = None) -> bool:
        if self.expires is None:
            return False
        if now is None:
            now = time.time()
        return self.expires < now

    def __str__(self) -> str:
        return "{}={}".format(self.name, self.value)
