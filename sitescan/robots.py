# sitescan/robots.py
"""
Minimal robots.txt support.

Only the wildcard section ("User-agent: *") is read, and only its Disallow lines.
A path is denied when it starts with one of those prefixes. No Allow, no
wildcards, no Crawl-delay. If robots.txt cannot be fetched we allow everything
and keep a warning for the crawler to report.
"""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import urlparse

from .errors import FetchError

_UA_FIELD = "user-agent:"
_DISALLOW_FIELD = "disallow:"


class RobotsPolicy:
    def __init__(self, disallowed: Optional[List[str]] = None, warning: Optional[str] = None):
        self.disallowed: List[str] = list(disallowed or [])
        self.warning = warning

    @classmethod
    def parse(cls, text: str) -> "RobotsPolicy":
        disallowed: List[str] = []
        in_wildcard = False
        for line in text.splitlines():
            s = line.strip()
            low = s.lower()
            if low.startswith(_UA_FIELD):
                in_wildcard = s[len(_UA_FIELD):].strip() == "*"
            elif in_wildcard and low.startswith(_DISALLOW_FIELD):
                path = s[len(_DISALLOW_FIELD):].strip()
                if path:
                    disallowed.append(path)
        return cls(disallowed)

    @classmethod
    def load(cls, origin: str, fetcher) -> "RobotsPolicy":
        """
        Fetch <origin>/robots.txt with the crawler's own fetcher.
        Any FetchError gives an empty (allow-all) policy carrying a warning.
        """
        robots_url = origin.rstrip("/") + "/robots.txt"
        try:
            text = fetcher.fetch(robots_url)
        except FetchError as exc:
            return cls(warning=f"Could not fetch robots.txt - {exc}")
        return cls.parse(text)

    def allowed(self, url: str) -> bool:
        try:
            path = urlparse(url).path or "/"
        except ValueError:
            return False
        return not any(path.startswith(prefix) for prefix in self.disallowed)
