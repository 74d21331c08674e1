# sitescan/findings.py
"""
Findings and how they are grouped.

A Finding is one pattern occurrence on one page. Findings are grouped by the
"folder" part of the page's URL path:

    https://site/             -> "/"
    https://site/blog/        -> "/blog/"
    https://site/blog/a.html  -> "/blog/"
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse

SNIPPET_RADIUS = 80
SNIPPET_MAX = 160

_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Finding:
    page_url: str
    match: str
    full_url: Optional[str]
    snippet: str

    def to_dict(self) -> dict:
        return asdict(self)


FolderMapping = Dict[str, List[Finding]]


def snippet(content: str, offset: int, radius: int = SNIPPET_RADIUS) -> str:
    """Text around `offset`, whitespace collapsed and capped at SNIPPET_MAX chars."""
    start = max(0, offset - radius)
    end = min(len(content), offset + radius)
    text = _WS_RE.sub(" ", content[start:end]).strip()
    return text[:SNIPPET_MAX]


def folder_key(url: str) -> str:
    """Directory-like prefix of the URL path. Never raises; bad input maps to "/"."""
    try:
        path = urlparse(url).path
    except ValueError:
        return "/"
    if not path or path == "/":
        return "/"
    if path.endswith("/"):
        return path
    cut = path.rfind("/")
    if cut >= 0:
        return path[: cut + 1]
    return "/"


def record(mapping: FolderMapping, key: str, findings: Iterable[Finding]) -> int:
    """Append findings under `key` in discovery order. Returns how many were added."""
    findings = list(findings)
    if findings:
        mapping.setdefault(key, []).extend(findings)
    return len(findings)
