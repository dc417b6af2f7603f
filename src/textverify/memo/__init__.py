"""Memo parsing — delimiter patterns, section splitting, rewriting."""

from textverify.memo.parser import (
    MemoSection,
    MemoSectionRange,
    ParsedMemo,
    detect_delimiter_pattern,
    get_unique_memo_sections,
    match_page_to_file,
    parse_memo,
)
from textverify.memo.patterns import BUILTIN_PATTERNS, DelimiterPattern, PatternKind
from textverify.memo.rewriter import replace_memo_section, rewrite_page

__all__ = [
    "BUILTIN_PATTERNS",
    "DelimiterPattern",
    "MemoSection",
    "MemoSectionRange",
    "ParsedMemo",
    "PatternKind",
    "detect_delimiter_pattern",
    "get_unique_memo_sections",
    "match_page_to_file",
    "parse_memo",
    "replace_memo_section",
    "rewrite_page",
]
