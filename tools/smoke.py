# tools/smoke.py
"""
Zero-network smoke checks to make sure the project is wired correctly.

What it does:
  1) Imports all modules (fails fast if paths/packaging are broken).
  2) Builds a Config with overrides and prints key fields.
  3) Sanity-checks URL helpers (canonicalize, folder_key, resolve).
  4) Compiles a literal and a regex pattern and runs them on a tiny page.
  5) Runs both link extractors (regex and BeautifulSoup) on the same page.

What it does NOT do:
  - No network calls, no robots.txt fetch, no crawling. Keep it safe/offline.

Usage:
    python3 tools/smoke.py
"""

from sitescan.config import Config
from sitescan.crawler import Crawler
from sitescan.findings import folder_key
from sitescan.links import canonicalize, extract_links, resolve
from sitescan.patterns import compile_patterns

PAGE = """
<html><body>
  <a href="/about#team">About</a>
  <a href='https://Example.com/contact'>Contact</a>
  <img src="/img/logo.png">
  <p>Powered by example.com</p>
</body></html>
"""


def check_imports_and_config():
    print("[1] Imports OK")
    cfg = Config().with_overrides(
        start_url="https://www.example.com/",
        target_patterns=("example.com", "/cont\\w+/"),
        max_pages=10,
        rate_ms=0,
        output_path=None,
        log_path=None,
        verbose=False,
    )
    print("[2] Config OK")
    print(f"    UA={cfg.user_agent}")
    print(f"    max_pages={cfg.max_pages}, rate_ms={cfg.rate_ms}, patterns={cfg.target_patterns}")
    return cfg


def check_url_helpers():
    print("[3] URL helper sanity")
    raw = "HTTPS://Sub.Example.com:443/blog/post.html?x=1#frag"
    c = canonicalize(raw)
    print(f"    raw: {raw}")
    print(f"    canonical: {c}")
    print(f"    folder: {folder_key(c)}")
    assert c == "https://sub.example.com/blog/post.html?x=1"
    assert folder_key(c) == "/blog/"
    assert resolve("../x", "https://a.test/b/c/") == "https://a.test/b/x"


def check_patterns():
    print("[4] Pattern smoke")
    literal, regex = compile_patterns(["example.com", "/cont\\w+/"])
    hits = list(literal.occurrences(PAGE))
    print(f"    literal hits: {hits}")
    assert [text for _, text in hits] == ["Example.com", "example.com"]
    assert regex.search("CONTACT")


def check_links():
    print("[5] Link extractor smoke")
    fast = [v for _, v in extract_links(PAGE)]
    soup = [v for _, v in extract_links(PAGE, use_bs4=True)]
    print(f"    regex: {fast}")
    print(f"    bs4:   {soup}")
    assert fast == soup == ["/about#team", "https://Example.com/contact", "/img/logo.png"]


def main():
    cfg = check_imports_and_config()
    # Create a crawler object just to ensure constructor wiring is fine.
    Crawler(cfg)
    print("[6] Crawler constructed OK (no run invoked)")
    check_url_helpers()
    check_patterns()
    check_links()
    print("\nSmoke tests passed. If this works, your project structure is sane.")


if __name__ == "__main__":
    main()
