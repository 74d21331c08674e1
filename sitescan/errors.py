# sitescan/errors.py
"""
Error taxonomy.

Fatal at startup : SetupError, PatternCompileError
Fatal at the end : PersistError
Per page         : FetchError and its subclasses (the crawl keeps going)
"""

from typing import Optional


class SitescanError(Exception):
    """Base class for everything this package raises on purpose."""


class SetupError(SitescanError):
    """The crawl cannot start: the seed URL is unusable or the visit log cannot be opened."""


class PatternCompileError(SitescanError):
    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class PersistError(SitescanError):
    """Writing the final mapping failed."""


# --------------------------------- fetching ----------------------------------

class FetchError(SitescanError):
    """One logical page fetch failed. The crawler records it and moves on."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{message} ({url})")
        self.url = url


class NetworkError(FetchError):
    pass


class FetchTimeout(FetchError):
    pass


class BadStatus(FetchError):
    def __init__(self, url: str, status: int):
        super().__init__(url, f"Status {status}")
        self.status = status


class UnsupportedContentType(FetchError):
    def __init__(self, url: str, content_type: Optional[str]):
        super().__init__(url, f"Unsupported content type {content_type!r}")
        self.content_type = content_type


class TooManyRedirects(FetchError):
    def __init__(self, url: str, limit: int):
        super().__init__(url, f"More than {limit} redirects")
        self.limit = limit
