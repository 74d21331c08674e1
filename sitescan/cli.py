# sitescan/cli.py
"""
Command line for the sitescan crawler.
Wires up: parse flags -> build Config -> run Crawler -> print summary.

Examples:
    sitescan --target example.com
    python3 -m sitescan --target "/https?:\\/\\/example\\.com\\/foo/" --max-pages 500 --rate 500
    python3 main.py --start-url https://example.org/ --target example.com --out mapping.json
"""

import argparse
import sys
from typing import List, Optional

from .config import DEFAULT_PATTERNS, Config
from .crawler import Crawler
from .errors import SitescanError
from .output import format_summary


def str2bool(value: str) -> bool:
    """Anything but 'false'/'0'/'no'/'off' counts as true."""
    return value.strip().lower() not in ("false", "0", "no", "off")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = Config()
    p = argparse.ArgumentParser(
        prog="sitescan",
        description="Crawl a site breadth-first and map where target patterns appear, by folder."
    )
    p.add_argument("--start-url", default=defaults.start_url, help="Starting URL.")
    p.add_argument("--target", action="append", dest="targets", default=None,
                   help="Target pattern (repeatable). Wrap in /.../ for a regex, otherwise literal substring.")
    p.add_argument("--same-host-only", type=str2bool, default=defaults.same_host_only,
                   help="Restrict the crawl to the start URL's host (true/false).")
    p.add_argument("--max-pages", type=int, default=defaults.max_pages, help="Maximum pages to crawl.")
    p.add_argument("--rate", type=int, default=defaults.rate_ms, help="Milliseconds between requests.")
    p.add_argument("--user-agent", default=defaults.user_agent, help="User-Agent header.")
    p.add_argument("--timeout", type=float, default=defaults.timeout_sec, help="HTTP timeout in seconds.")
    p.add_argument("--out", default=defaults.output_path, help="Output JSON file path.")
    p.add_argument("--cookie", default=None, help="Optional Cookie header for authenticated sessions.")
    p.add_argument("--max-redirects", type=int, default=defaults.max_redirects,
                   help="Give up on a page after this many redirects.")
    p.add_argument("--log", default=defaults.log_path, help="Path to the TSV visit log ('' disables it).")
    p.add_argument("--use-bs4", action="store_true",
                   help="Extract links with BeautifulSoup (tolerates unquoted attributes).")
    p.add_argument("--quiet", action="store_true", help="No progress lines on stderr.")
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    return Config().with_overrides(
        start_url=args.start_url,
        target_patterns=tuple(args.targets) if args.targets else DEFAULT_PATTERNS,
        same_host_only=args.same_host_only,
        max_pages=args.max_pages,
        rate_ms=args.rate,
        user_agent=args.user_agent,
        timeout_sec=args.timeout,
        output_path=args.out,
        cookie=args.cookie,
        max_redirects=args.max_redirects,
        log_path=args.log or None,
        use_bs4=args.use_bs4,
        verbose=not args.quiet,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = build_config(args)
    try:
        crawler = Crawler(cfg)
        stats = crawler.run()
    except SitescanError as exc:
        print(f"Fatal error: {exc}", file=sys.stderr)
        return 1

    print()
    print(format_summary(stats, crawler.mapping))
    return 0
