# sitescan/links.py
"""
Small URL/link utilities shared by the content scan and link discovery.

• canonicalize(url)           : the frontier's dedup key (fragment stripped, host lower-cased)
• extract_links(content)      : every href= / src= attribute value with its offset
• resolve(raw, base)          : absolute URL for an attribute value, or None
• nearby_link(links, off, base): best-effort "which link is this match about"

We scan raw markup with a regex rather than a DOM so inline scripts, comments and
broken tags are still searched. Set use_bs4=True to go through BeautifulSoup instead
(see parser_bs4.py); it copes with unquoted attribute values but loses exact offsets.
"""

from __future__ import annotations

import re
from typing import List, NamedTuple, Optional, Sequence
from urllib.parse import quote, urldefrag, urljoin, urlparse, urlsplit, urlunsplit

LINK_RE = re.compile(r"""(?:href|src)\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
_ABSOLUTE_RE = re.compile(r"^https?://", re.IGNORECASE)

# Characters either side of a content match searched for an associated link.
NEARBY_RADIUS = 200


class Link(NamedTuple):
    offset: int  # where the attribute starts in the content
    value: str   # raw attribute value, exactly as written


# Already-encoded escapes ("%") and URL delimiters stay as they are.
_URL_SAFE = "/%:@&=+$,;?!*'()~"


def quote_url(url: str) -> str:
    """Percent-encode the path and query (non-ASCII, spaces). Idempotent."""
    try:
        p = urlsplit(url)
    except ValueError:
        return url
    return urlunsplit((
        p.scheme, p.netloc, quote(p.path, safe=_URL_SAFE), quote(p.query, safe=_URL_SAFE), p.fragment,
    ))


def canonicalize(url: str) -> str:
    """
    Normalize a URL so duplicates match:
    - remove fragments (part after '#')
    - lowercase scheme and hostname (user info is kept as written)
    - drop default ports (80 for http, 443 for https)
    - empty path becomes '/'
    - percent-encode path and query, so /café and /caf%C3%A9 are one page
    - keep query (?a=1) because it may change content
    """
    try:
        url, _ = urldefrag(url)
        p = urlsplit(url)
        scheme = p.scheme.lower()
        host = (p.hostname or "").lower()
        if not scheme or not host:
            return url
        if ":" in host:
            host = f"[{host}]"  # IPv6 literal
        # Keep explicit non-default ports
        if p.port and not (scheme == "http" and p.port == 80) and not (scheme == "https" and p.port == 443):
            host = f"{host}:{p.port}"
        if p.username is not None:
            userinfo = p.username if p.password is None else f"{p.username}:{p.password}"
            host = f"{userinfo}@{host}"
        path = quote(p.path or "/", safe=_URL_SAFE)
        q = f"?{quote(p.query, safe=_URL_SAFE)}" if p.query else ""
        return f"{scheme}://{host}{path}{q}"
    except ValueError:
        # Bad port or unbalanced brackets; the caller filters it out later.
        return url


def host_of(url: str) -> str:
    """Return lower-cased hostname of a URL or empty string if parsing fails."""
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def extract_links(content: str, use_bs4: bool = False) -> List[Link]:
    """
    All href/src attribute values in document order (duplicates kept).
    If BeautifulSoup chokes on hostile HTML, fall back to the regex scan.
    """
    if use_bs4:
        from . import parser_bs4
        try:
            return parser_bs4.parse_links(content)
        except Exception:
            pass
    return [Link(m.start(), m.group(1)) for m in LINK_RE.finditer(content)]


def resolve(raw: str, base_url: str) -> Optional[str]:
    """
    Absolute form of an attribute value.
    Values that already start with http:// or https:// are returned untouched.
    """
    if _ABSOLUTE_RE.match(raw):
        return raw
    try:
        resolved = urljoin(base_url, raw)
    except ValueError:
        return None
    return resolved or None


def nearby_link(links: Sequence[Link], offset: int, base_url: str) -> Optional[str]:
    """Resolved value of the link closest to `offset`, if one starts within NEARBY_RADIUS."""
    best: Optional[Link] = None
    for link in links:
        distance = abs(link.offset - offset)
        if distance > NEARBY_RADIUS:
            continue
        if best is None or distance < abs(best.offset - offset):
            best = link
    if best is None:
        return None
    return resolve(best.value, base_url)
