"""Diff engine — models, character diff, line matching, unified view."""

from textverify.diff.chardiff import diff_chars
from textverify.diff.matcher import (
    compute_line_set_diff,
    match_lines,
    match_shared_group,
    similarity,
)
from textverify.diff.models import DiffPart, EntryType, LineDiff, UnifiedDiffEntry
from textverify.diff.unified import build_unified_diff, split_parts_into_lines

__all__ = [
    "DiffPart",
    "EntryType",
    "LineDiff",
    "UnifiedDiffEntry",
    "build_unified_diff",
    "compute_line_set_diff",
    "diff_chars",
    "match_lines",
    "match_shared_group",
    "similarity",
    "split_parts_into_lines",
]
