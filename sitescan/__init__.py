# sitescan/__init__.py
"""
Sitescan package marker.

Exposes the main public surface so callers can do:
    from sitescan import Config, Crawler
"""
from .config import Config
from .crawler import CrawlStats, Crawler, Frontier
from .errors import (
    BadStatus,
    FetchError,
    FetchTimeout,
    NetworkError,
    PatternCompileError,
    PersistError,
    SetupError,
    SitescanError,
    TooManyRedirects,
    UnsupportedContentType,
)
from .findings import Finding, folder_key
from .patterns import Pattern, PatternKind, compile_patterns

__all__ = [
    "Config", "Crawler", "CrawlStats", "Frontier",
    "Finding", "folder_key",
    "Pattern", "PatternKind", "compile_patterns",
    "SitescanError", "SetupError", "PatternCompileError", "PersistError",
    "FetchError", "NetworkError", "FetchTimeout", "BadStatus",
    "UnsupportedContentType", "TooManyRedirects",
]
__version__ = "0.1.0"
