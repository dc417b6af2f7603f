"""JSON reporter for scripted checks."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from textverify import __version__
from textverify.verify.models import PageResult, VerifyResult


def page_to_dict(page: PageResult) -> Dict[str, Any]:
    return {
        "page": page.page_num,
        "file": page.file_name,
        "status": page.status,
        "has_diff": page.has_diff,
        "diff_count": page.diff_count,
        "memo_shared": page.memo_shared,
        "memo_shared_group": page.memo_shared_group,
        "psd_text": page.psd_text,
        "memo_text": page.memo_text,
        "entries": [e.to_dict() for e in page.entries],
        "layers": [
            {
                "name": check.layer_name,
                "all_in_memo": check.all_in_memo,
                "missing_lines": check.missing_lines,
            }
            for check in page.layer_checks
        ],
    }


def to_dict(result: VerifyResult) -> Dict[str, Any]:
    """Convert VerifyResult to a JSON-serialisable dict."""
    pages: List[Dict[str, Any]] = [page_to_dict(p) for p in result.pages]
    return {
        "version": "1.0",
        "tool_version": __version__,
        "delimiter_pattern": result.pattern_id,
        "memo_sections": result.memo_sections,
        "total_pages": len(result.pages),
        "matched_pages": len(result.matched_pages),
        "diff_pages": len(result.diff_pages),
        "no_memo_pages": len(result.no_memo_pages),
        "has_differences": result.has_differences,
        "pages": pages,
        "duration_ms": result.duration_ms,
    }


def render(result: VerifyResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2, ensure_ascii=False)
