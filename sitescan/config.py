# sitescan/config.py
"""
Central configuration for the crawler.
Keep policy and tunables here so the crawler class stays lean.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

DEFAULT_START_URL = "https://example.com/"
DEFAULT_PATTERNS: Tuple[str, ...] = ("example.com",)


@dataclass(frozen=True)
class Config:
    # What to crawl and what to look for
    start_url: str = DEFAULT_START_URL
    # Literal substrings, or regex sources wrapped in slashes: "/https?:\/\/foo/"
    target_patterns: Tuple[str, ...] = DEFAULT_PATTERNS
    same_host_only: bool = True

    # Identity and politeness
    user_agent: str = "InternalCrawler/1.0"
    cookie: Optional[str] = None
    rate_ms: int = 1000
    timeout_sec: float = 15.0

    # Crawl limits
    max_pages: int = 300
    max_redirects: int = 10

    # Link extraction: regex over raw markup, or BeautifulSoup (tolerates unquoted values)
    use_bs4: bool = False

    # Output
    output_path: Optional[str] = "mapping.json"
    log_path: Optional[str] = "logs/crawl.tsv"  # None disables the TSV visit log
    verbose: bool = True                         # progress lines on stderr

    def with_overrides(self, **kwargs) -> "Config":
        """Return a copy with specific fields overridden."""
        return replace(self, **kwargs)
