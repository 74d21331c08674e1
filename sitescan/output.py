# sitescan/output.py
"""
Persisting the folder mapping and printing the end-of-run summary.

mapping.json looks like:
    {
      "/": [{"page_url": "...", "match": "...", "full_url": "..." | null, "snippet": "..."}],
      "/blog/": [...]
    }
"""

from __future__ import annotations

import json
import os
from typing import List

from .errors import PersistError
from .findings import FolderMapping


def write_mapping(mapping: FolderMapping, path: str) -> None:
    """Write the whole mapping as pretty-printed JSON. Any I/O failure is a PersistError."""
    data = {key: [f.to_dict() for f in findings] for key, findings in mapping.items()}
    try:
        parent = os.path.dirname(os.path.abspath(path))
        if parent and not os.path.exists(parent):
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as exc:
        raise PersistError(f"Could not write {path}: {exc}") from exc


def format_summary(stats, mapping: FolderMapping) -> str:
    lines: List[str] = [
        "=== CRAWL SUMMARY ===",
        f"Pages crawled: {stats.pages_attempted}",
        f"Pages failed: {stats.pages_failed}",
        f"Skipped by robots.txt: {stats.robots_skipped}",
        f"Total matches: {stats.total_findings}",
        f"Folders with matches: {len(mapping)}",
    ]
    if mapping:
        lines.append("")
        lines.append("Matches per folder:")
        for folder, findings in mapping.items():
            lines.append(f"  {folder}: {len(findings)}")
    return "\n".join(lines)
