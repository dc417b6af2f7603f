"""Verification result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

from textverify.diff.models import DiffPart, EntryType, UnifiedDiffEntry
from textverify.text.normalizer import is_chunk_sentinel

PageStatus = Literal["match", "diff", "no-memo"]


def _counts(part: DiffPart) -> bool:
    # An unpaired chunk boundary is layout, not a text difference.
    return not is_chunk_sentinel(part.value.rstrip("\n"))


@dataclass
class LayerCheck:
    """Which lines of one text layer are missing from the page's memo."""

    layer_name: str
    lines: List[str] = field(default_factory=list)
    missing_lines: List[str] = field(default_factory=list)

    @property
    def all_in_memo(self) -> bool:
        return bool(self.lines) and not self.missing_lines


@dataclass
class PageResult:
    """Comparison of one page image against its memo section."""

    page_num: int
    file_name: str
    psd_text: str = ""
    memo_text: str = ""
    psd_parts: List[DiffPart] = field(default_factory=list)
    memo_parts: List[DiffPart] = field(default_factory=list)
    entries: List[UnifiedDiffEntry] = field(default_factory=list)
    layer_checks: List[LayerCheck] = field(default_factory=list)
    memo_shared: bool = False
    memo_shared_group: List[int] = field(default_factory=list)

    @property
    def has_memo(self) -> bool:
        return bool(self.memo_text)

    @property
    def has_diff(self) -> bool:
        return any(p.removed and _counts(p) for p in self.psd_parts) or any(
            p.added and _counts(p) for p in self.memo_parts
        )

    @property
    def status(self) -> PageStatus:
        if not self.has_memo:
            return "no-memo"
        return "diff" if self.has_diff else "match"

    @property
    def diff_count(self) -> int:
        return sum(1 for e in self.entries if e.type is EntryType.DIFF)


@dataclass
class VerifyResult:
    """Complete result of a verification run."""

    pages: List[PageResult] = field(default_factory=list)
    pattern_id: str | None = None
    memo_sections: int = 0
    duration_ms: float = 0.0

    @property
    def matched_pages(self) -> List[PageResult]:
        return [p for p in self.pages if p.status == "match"]

    @property
    def diff_pages(self) -> List[PageResult]:
        return [p for p in self.pages if p.status == "diff"]

    @property
    def no_memo_pages(self) -> List[PageResult]:
        return [p for p in self.pages if p.status == "no-memo"]

    @property
    def has_differences(self) -> bool:
        return bool(self.diff_pages)
