"""Cookie jar related errors."""

from typing import Optional

__all__ = ("CookieJarError", "UnknownFormatError", "CookieFileError")


class CookieJarError(Exception):
    """Base class for cookie jar errors."""


class UnknownFormatError(CookieJarError, ValueError):
    """Persistence format is not supported.

    file_format: the rejected format identifier
    """

    def __init__(self, file_format: object) -> None:
        self.file_format = file_format
        super().__init__(
            "Unknown cookie jar file format: {!r}".format(file_format))


class CookieFileError(CookieJarError):
    """Stored cookie jar can not be read back."""

    def __init__(self, path: object, message: Optional[str] = None) -> None:
        self.path = path
        if message is None:
            message = "Can not load cookie jar from {}".format(path)
        super().__init__(message)
