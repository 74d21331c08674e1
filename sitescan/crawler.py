# sitescan/crawler.py
"""
Pattern-hunting site crawler.

What this file does (at a glance)
---------------------------------
• Maintains a strict BFS frontier: a FIFO deque plus a "pending" set for O(1)
  duplicate checks, and a visited set
• Respects robots.txt for the start host (wildcard section, Disallow prefixes only)
• Fetches one page at a time through Fetcher (redirect cap, content-type filter, timeout)
• Searches every page's raw markup, and every href/src value on it, for the
  target patterns; findings are grouped by the folder of the page URL
• Enqueues http(s) links (same host only, unless configured otherwise)
• Sleeps cfg.rate_ms between requests
• Logs one TSV row per dequeued URL, then STAT rows at the end
• Stops after cfg.max_pages attempted pages or when the frontier empties

Page budget
-----------
A page counts toward max_pages once we try to fetch it, whether or not the fetch
works. Robots-skipped URLs and URLs we already visited do not count.

TSV output columns
------------------
timestamp    url    outcome    bytes    findings    links_found    links_enqueued
elapsed_ms   detail

outcome is one of: ok, error, robots (skipped), warning (robots.txt unavailable)
"""

from __future__ import annotations

import csv
import os
import sys
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional, Set
from urllib.parse import urljoin, urlparse

from .config import Config
from .errors import FetchError, SetupError
from .fetcher import Fetcher
from .findings import Finding, FolderMapping, folder_key, record, snippet
from .links import Link, canonicalize, extract_links, host_of, nearby_link, resolve
from .output import write_mapping
from .patterns import Pattern, compile_patterns
from .robots import RobotsPolicy

LOG_COLUMNS = [
    "timestamp", "url", "outcome", "bytes", "findings",
    "links_found", "links_enqueued", "elapsed_ms", "detail",
]


# --------------------------------- frontier -----------------------------------

class Frontier:
    """
    BFS frontier.

    Invariants:
      - a URL is pending at most once
      - a visited URL is never pending again
    """

    def __init__(self):
        self._queue: Deque[str] = deque()
        self._pending: Set[str] = set()
        self.visited: Set[str] = set()

    def push(self, url: str) -> bool:
        """Enqueue unless already visited or pending. Returns True if it was added."""
        if url in self.visited or url in self._pending:
            return False
        self._queue.append(url)
        self._pending.add(url)
        return True

    def pop(self) -> str:
        url = self._queue.popleft()
        self._pending.discard(url)
        return url

    def mark_visited(self, url: str) -> None:
        self.visited.add(url)

    @property
    def pending(self) -> List[str]:
        return list(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def __contains__(self, url: str) -> bool:
        return url in self._pending


@dataclass
class CrawlStats:
    pages_attempted: int = 0
    pages_failed: int = 0
    robots_skipped: int = 0
    total_findings: int = 0
    links_enqueued: int = 0
    robots_warning: Optional[str] = None
    elapsed_sec: float = 0.0


# ------------------------------- core crawler ---------------------------------

class Crawler:
    """
    Typical usage:
        cfg = Config(start_url="https://site/", target_patterns=("foo",))
        stats = Crawler(cfg).run()

    `fetcher` and `sleep` can be swapped out (tests use an in-memory fetcher).
    """

    # --------------------------- lifecycle & wiring ---------------------------

    def __init__(self, cfg: Config, fetcher=None, sleep: Callable[[float], None] = time.sleep):
        self.cfg = cfg
        # Malformed regexes fail here, before anything touches the network.
        self.patterns: List[Pattern] = compile_patterns(cfg.target_patterns)
        self.fetcher = fetcher if fetcher is not None else Fetcher(cfg)
        self._sleep = sleep

        self.frontier = Frontier()
        self.mapping: FolderMapping = {}
        self.stats = CrawlStats()
        self.robots = RobotsPolicy()
        self.start_url: Optional[str] = None
        self.start_host = ""

        self.log = None
        self.csv = None

    def close(self):
        """Flush and close the log. Idempotent."""
        if self.log is not None:
            self.log.flush()
            self.log.close()
            self.log = None
            self.csv = None

    def run(self) -> CrawlStats:
        """
        Validate the seed, load robots.txt, crawl, then persist the mapping.
        Raises SetupError before any request if the seed is unusable, and
        PersistError after the crawl if the mapping cannot be written.
        """
        t0 = time.time()
        self.start_url = self._check_seed(self.cfg.start_url)
        self.start_host = host_of(self.start_url)
        self._open_log()
        try:
            self._say(f"Starting crawler at: {self.start_url}")
            self._say(f"Target patterns: {[p.raw for p in self.patterns]}")
            self._say(f"Max pages: {self.cfg.max_pages}")

            origin = f"{urlparse(self.start_url).scheme}://{urlparse(self.start_url).netloc}"
            self.robots = RobotsPolicy.load(origin, self.fetcher)
            if self.robots.warning:
                self.stats.robots_warning = self.robots.warning
                self._say(f"Warning: {self.robots.warning}")
                self._log_row(origin + "/robots.txt", "warning", detail=self.robots.warning)
            else:
                self._say(f"Loaded robots.txt: {len(self.robots.disallowed)} disallowed paths")

            self.frontier.push(self.start_url)
            self.crawl()

            self.stats.elapsed_sec = time.time() - t0
            if self.cfg.output_path:
                write_mapping(self.mapping, self.cfg.output_path)
                self._say(f"Output written to: {self.cfg.output_path}")
            self._write_stats()
        finally:
            self.close()
        return self.stats

    def crawl(self) -> None:
        """The main loop. Assumes the frontier is seeded and robots are loaded."""
        while len(self.frontier) and self.stats.pages_attempted < self.cfg.max_pages:
            url = self.frontier.pop()
            if url in self.frontier.visited:
                continue

            if not self.robots.allowed(url):
                self.frontier.mark_visited(url)
                self.stats.robots_skipped += 1
                self._say(f"Skipping (robots.txt): {url}")
                self._log_row(url, "robots")
                continue

            self.frontier.mark_visited(url)
            self._crawl_page(url)
            self.stats.pages_attempted += 1

            if self.cfg.rate_ms > 0 and len(self.frontier):
                self._sleep(self.cfg.rate_ms / 1000.0)

    # -------------------------------- internals ------------------------------

    @staticmethod
    def _check_seed(url: str) -> str:
        try:
            p = urlparse(url)
            host = p.hostname
            p.port  # raises on a malformed port
        except ValueError as exc:
            raise SetupError(f"Invalid start URL {url!r}: {exc}") from exc
        if p.scheme.lower() not in ("http", "https") or not host:
            raise SetupError(f"Invalid start URL {url!r}: need an absolute http(s) URL")
        return canonicalize(url)

    def _crawl_page(self, url: str) -> None:
        self._say(f"Crawling [{self.stats.pages_attempted}/{self.cfg.max_pages}]: {url}")
        t0 = time.time()
        try:
            content = self.fetcher.fetch(url)
        except FetchError as exc:
            self.stats.pages_failed += 1
            self._say(f"  Error crawling {url}: {exc}")
            self._log_row(url, "error", elapsed_ms=_ms_since(t0), detail=str(exc))
            return

        links = extract_links(content, use_bs4=self.cfg.use_bs4)
        findings = self.search_content(url, content, links)
        findings += self.search_links(url, content, links)
        found = record(self.mapping, folder_key(url), findings)
        if found:
            self.stats.total_findings += found
            self._say(f"  Found {found} matches")

        enqueued = self._enqueue_links(url, links)
        self._log_row(
            url, "ok", size=len(content), findings=found,
            links_found=len(links), links_enqueued=enqueued, elapsed_ms=_ms_since(t0),
        )

    def search_content(self, page_url: str, content: str, links: List[Link]) -> List[Finding]:
        """Every pattern occurrence in the raw page, pattern by pattern."""
        out: List[Finding] = []
        for pattern in self.patterns:
            for offset, text in pattern.occurrences(content):
                out.append(Finding(
                    page_url=page_url,
                    match=text,
                    full_url=nearby_link(links, offset, page_url),
                    snippet=snippet(content, offset),
                ))
        return out

    def search_links(self, page_url: str, content: str, links: List[Link]) -> List[Finding]:
        """Link values that match a pattern, one finding per matching pattern."""
        out: List[Finding] = []
        for link in links:
            for pattern in self.patterns:
                if pattern.search(link.value):
                    out.append(Finding(
                        page_url=page_url,
                        match=link.value,
                        full_url=resolve(link.value, page_url),
                        snippet=snippet(content, link.offset),
                    ))
        return out

    def _enqueue_links(self, base_url: str, links: List[Link]) -> int:
        enqueued = 0
        for link in links:
            try:
                absolute = urljoin(base_url, link.value)
                p = urlparse(absolute)
                host = p.hostname or ""
            except ValueError:
                continue
            if p.scheme.lower() not in ("http", "https"):
                continue
            if self.cfg.same_host_only and host != self.start_host:
                continue
            if self.frontier.push(canonicalize(absolute)):
                enqueued += 1
        self.stats.links_enqueued += enqueued
        return enqueued

    # ------------------------------ logging ----------------------------------

    def _say(self, msg: str) -> None:
        if self.cfg.verbose:
            print(msg, file=sys.stderr)

    def _open_log(self) -> None:
        if not self.cfg.log_path:
            return
        path = self.cfg.log_path
        try:
            parent = os.path.dirname(os.path.abspath(path))
            os.makedirs(parent, exist_ok=True)
            self.log = open(path, "w", newline="", encoding="utf-8")
        except OSError as exc:
            raise SetupError(f"Cannot open visit log {path!r}: {exc}") from exc
        self.csv = csv.writer(self.log, delimiter="\t")
        self.csv.writerow(LOG_COLUMNS)

    def _log_row(self, url: str, outcome: str, size: int = 0, findings: int = 0,
                 links_found: int = 0, links_enqueued: int = 0, elapsed_ms: int = 0,
                 detail: str = "") -> None:
        if self.csv is None:
            return
        ts = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        self.csv.writerow([
            ts, url, outcome, size, findings, links_found, links_enqueued, elapsed_ms, detail,
        ])

    def _write_stats(self) -> None:
        if self.csv is None:
            return
        self.csv.writerow([])
        self.csv.writerow(["STAT", "pages_attempted", self.stats.pages_attempted])
        self.csv.writerow(["STAT", "pages_failed", self.stats.pages_failed])
        self.csv.writerow(["STAT", "robots_skipped", self.stats.robots_skipped])
        self.csv.writerow(["STAT", "total_findings", self.stats.total_findings])
        self.csv.writerow(["STAT", "folders", len(self.mapping)])
        self.csv.writerow(["STAT", "elapsed_sec", f"{self.stats.elapsed_sec:.3f}"])


def _ms_since(t0: float) -> int:
    return int((time.time() - t0) * 1000)
