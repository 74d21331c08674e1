# sitescan/parser_bs4.py
"""
Link extraction helper using BeautifulSoup.

Why this file exists:
- The default extractor in links.py is a regex over raw markup. It only sees
  quoted attribute values.
- HTML on the internet is a glorious mess. BeautifulSoup is good at surviving it,
  including href=/about with no quotes at all.
- We keep this module tiny and focused: take page text, return raw link values.

Public API:
    parse_links(html: str) -> list[Link]

What you get back:
- Every href and src attribute on every tag, in document order (href before src
  on the same tag).
- Values are returned raw (not resolved); links.resolve() does that.
- The offset is where the owning tag starts, computed from BeautifulSoup's
  sourceline/sourcepos. Good enough for snippets; not a character-exact position.
- Duplicates are kept. The crawler's frontier handles dedup.
"""

from bisect import bisect_right
from typing import List

# We use only BeautifulSoup with the built-in "html.parser" to avoid extra deps.
from bs4 import BeautifulSoup

from .links import Link

_LINK_ATTRS = ("href", "src")


def _line_starts(text: str) -> List[int]:
    """Offset of the first character of every line (line 1 starts at 0)."""
    starts = [0]
    for i, ch in enumerate(text):
        if ch == "\n":
            starts.append(i + 1)
    return starts


def _tag_offset(starts: List[int], line, col) -> int:
    """
    Turn (sourceline, sourcepos) into a character offset.

    sourceline is 1-based, sourcepos is 0-based. Either can be None for tags the
    parser synthesized; those land at offset 0.
    """
    if not line:
        return 0
    idx = min(line, len(starts)) - 1
    return starts[idx] + (col or 0)


def parse_links(html: str) -> List[Link]:
    """
    Extract raw href/src values from a page.

    Step-by-step:
      1) Parse with the stdlib-backed "html.parser" (it records source positions).
      2) Walk every tag in document order.
      3) Collect non-empty href then src values, stripped of surrounding spaces.
      4) Attach the owning tag's offset.
    """
    soup = BeautifulSoup(html, "html.parser")
    starts = _line_starts(html)

    out: List[Link] = []
    for tag in soup.find_all(True):
        for attr in _LINK_ATTRS:
            value = tag.get(attr)
            if not isinstance(value, str):
                continue
            value = value.strip()
            if not value:
                continue
            out.append(Link(_tag_offset(starts, tag.sourceline, tag.sourcepos), value))
    return out
