"""Diff data models."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class DiffPart:
    """A run of characters sharing one status on one side of the diff.

    A ``value`` ending in ``\\n`` closes a line. An empty ``value`` with a
    flag set is a marker that flags its line as changed.
    """

    value: str
    added: bool = False
    removed: bool = False

    @property
    def changed(self) -> bool:
        return self.added or self.removed

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"value": self.value}
        if self.added:
            d["added"] = True
        if self.removed:
            d["removed"] = True
        return d


@dataclass
class LineDiff:
    """Per-side part streams for one page."""

    psd: List[DiffPart] = field(default_factory=list)
    memo: List[DiffPart] = field(default_factory=list)

    @property
    def has_diff(self) -> bool:
        return any(p.removed for p in self.psd) or any(p.added for p in self.memo)


class EntryType(str, enum.Enum):
    MATCH = "match"
    DIFF = "diff"
    LINEBREAK = "linebreak"  # same text, different line breaks
    SEPARATOR = "separator"  # collapsed blank-line boundary


@dataclass
class UnifiedDiffEntry:
    """One display unit of the interleaved view."""

    type: EntryType
    text: Optional[str] = None  # match
    psd_parts: Optional[List[DiffPart]] = None  # diff
    memo_parts: Optional[List[DiffPart]] = None  # diff
    psd_text: Optional[str] = None  # linebreak
    memo_text: Optional[str] = None  # linebreak

    @classmethod
    def match(cls, text: str) -> "UnifiedDiffEntry":
        return cls(EntryType.MATCH, text=text)

    @classmethod
    def diff(
        cls,
        psd_parts: Optional[List[DiffPart]],
        memo_parts: Optional[List[DiffPart]],
    ) -> "UnifiedDiffEntry":
        return cls(EntryType.DIFF, psd_parts=psd_parts, memo_parts=memo_parts)

    @classmethod
    def linebreak(cls, psd_text: str, memo_text: str) -> "UnifiedDiffEntry":
        return cls(EntryType.LINEBREAK, psd_text=psd_text, memo_text=memo_text)

    @classmethod
    def separator(cls) -> "UnifiedDiffEntry":
        return cls(EntryType.SEPARATOR)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"type": self.type.value}
        if self.type is EntryType.MATCH:
            d["text"] = self.text
        elif self.type is EntryType.DIFF:
            d["psd_parts"] = (
                [p.to_dict() for p in self.psd_parts] if self.psd_parts is not None else None
            )
            d["memo_parts"] = (
                [p.to_dict() for p in self.memo_parts] if self.memo_parts is not None else None
            )
        elif self.type is EntryType.LINEBREAK:
            d["psd_text"] = self.psd_text
            d["memo_text"] = self.memo_text
        return d
