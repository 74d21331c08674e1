# tools/analyze_log.py
"""
Tiny helper to compute simple stats from a crawler TSV visit log.

Usage:
    python3 tools/analyze_log.py logs/crawl.tsv

Outputs:
    - pages fetched / failed / skipped by robots.txt
    - total bytes and total findings
    - average elapsed_ms per attempted page
    - most common failure reasons (top 10)
    - pages with the most findings (top 10)
"""

import csv
import sys
from collections import Counter


def analyze(path: str):
    outcomes = Counter()
    failures = Counter()
    per_page = Counter()
    total_bytes = 0
    total_findings = 0
    total_elapsed = 0

    with open(path, "r", encoding="utf-8") as f:
        r = csv.reader(f, delimiter="\t")
        for row in r:
            if not row or row[0] == "STAT" or row[0] == "timestamp":
                continue
            # Expected columns:
            # 0: timestamp, 1: url, 2: outcome, 3: bytes, 4: findings,
            # 5: links_found, 6: links_enqueued, 7: elapsed_ms, 8: detail
            try:
                url, outcome = row[1], row[2]
                size = int(row[3])
                findings = int(row[4])
                elapsed_ms = int(row[7])
                detail = row[8] if len(row) > 8 else ""
            except (IndexError, ValueError):
                continue

            outcomes[outcome] += 1
            if outcome in ("ok", "error"):
                total_elapsed += max(elapsed_ms, 0)
            if outcome == "error":
                # "Status 404 (https://...)" -> "Status 404"
                failures[detail.split(" (")[0]] += 1
            total_bytes += max(size, 0)
            total_findings += findings
            if findings:
                per_page[url] += findings

    attempted = outcomes["ok"] + outcomes["error"]
    avg_elapsed_ms = (total_elapsed / attempted) if attempted else 0

    print(f"File: {path}")
    print(f"Pages fetched: {outcomes['ok']}")
    print(f"Pages failed: {outcomes['error']}")
    print(f"Skipped by robots.txt: {outcomes['robots']}")
    print(f"Total bytes: {total_bytes}")
    print(f"Total findings: {total_findings}")
    print(f"Avg elapsed (ms): {avg_elapsed_ms:.2f}")
    if failures:
        print("Top failure reasons:")
        for reason, cnt in failures.most_common(10):
            print(f"  {reason}: {cnt}")
    if per_page:
        print("Pages with most findings:")
        for url, cnt in per_page.most_common(10):
            print(f"  {cnt}  {url}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python3 tools/analyze_log.py <path_to_tsv>", file=sys.stderr)
        sys.exit(2)
    analyze(sys.argv[1])
