import os
from typing import (
    Iterable,
    Literal,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Union,
)

from multidict import CIMultiDict, CIMultiDictProxy, istr
from yarl import URL


class URLLike(Protocol):
    """Anything exposing the host and path of a request."""

    @property
    def host(self) -> Optional[str]: ...

    @property
    def path(self) -> str: ...


StrOrURL = Union[str, URL, URLLike]
FileFormat = Literal["pickle", "cookiestxt"]
PathLike = Union[str, "os.PathLike[str]"]

LooseHeaders = Union[
    Mapping[str, str],
    Mapping[istr, str],
    "CIMultiDict[str]",
    "CIMultiDictProxy[str]",
    Iterable[Tuple[Union[str, istr], str]],
]
