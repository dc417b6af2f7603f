"""Memo parsing — delimiter detection and per-page section splitting.

A memo is one free-form text file covering many pages. The page-break
convention is not declared anywhere, so every built-in delimiter pattern is
counted over the whole (header-stripped) memo and the most frequent one
wins. Memos with no recognisable delimiter fall back to splitting on runs
of two or more blank lines.

Section ranges are string offsets into the *cleaned* memo, so an edited
page can later be spliced back without re-deriving delimiters (see
:mod:`textverify.memo.rewriter`).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from textverify.memo.patterns import (
    BUILTIN_PATTERNS,
    DelimiterPattern,
    PatternKind,
    line_anchored,
)

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(line_anchored(r"^\[COMIC-POT:[^\]]*\]\s*\n?"), re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n\s*\n\s*\n")

_FILE_EXTENSION_RE = re.compile(r"\.[^.]+$")
_FILE_PAGE_RES = (
    re.compile(r"[Pp]\.?0*([0-9]+)"),  # P003, p.3
    re.compile(r"0*([0-9]+)$"),  # page_003
    re.compile(r"^0*([0-9]+)"),  # 003_text
)


@dataclass(frozen=True)
class MemoSectionRange:
    """One physical memo section and where it sits in the cleaned memo."""

    page_nums: List[int]
    text: str  # trimmed
    range_start: int  # just after the delimiter line (inclusive)
    range_end: int  # next delimiter or end of text (exclusive)


@dataclass(frozen=True)
class MemoSection:
    page_nums: List[int]
    text: str


@dataclass
class ParsedMemo:
    pages: Dict[int, str] = field(default_factory=dict)
    shared_pages: Dict[int, List[int]] = field(default_factory=dict)
    sections: List[MemoSectionRange] = field(default_factory=list)
    cleaned: str = ""
    header: str = ""  # stripped header line, re-attached on rewrite
    header_offset: int = 0  # where the header sat, as an offset into cleaned
    pattern_id: Optional[str] = None  # None = blank-line fallback

    def text_for(self, page_num: int) -> str:
        return self.pages.get(page_num, "")

    def is_shared(self, page_num: int) -> bool:
        return len(self.shared_pages.get(page_num, ())) > 1


def strip_header(raw: str) -> Tuple[str, int, str]:
    """Split off the first ``[COMIC-POT:...]`` header line.

    Returns (header, offset, cleaned); header is ``""`` when none was found.
    """
    m = _HEADER_RE.search(raw)
    if m is None:
        return "", 0, raw
    return m.group(0), m.start(), raw[: m.start()] + raw[m.end():]


def detect_delimiter_pattern(
    text: str,
    patterns: Sequence[DelimiterPattern] = BUILTIN_PATTERNS,
) -> Optional[DelimiterPattern]:
    """Return the delimiter pattern with the most line matches in *text*.

    A pattern qualifies once it reaches its ``min_matches``. On a tie the earlier
    pattern is kept, except that a numbered pattern displaces a sequential
    one.
    """
    best: Optional[DelimiterPattern] = None
    best_count = 0

    for pattern in patterns:
        count = sum(1 for _ in pattern.compiled.finditer(text))
        if count < pattern.min_matches:
            continue
        if count > best_count or (
            count == best_count
            and best is not None
            and best.is_sequential
            and not pattern.is_sequential
        ):
            best = pattern
            best_count = count

    if best is not None:
        logger.debug("Delimiter pattern %s matched %d time(s)", best.id, best_count)
    return best


def _split_by_pattern(text: str, pattern: DelimiterPattern) -> ParsedMemo:
    parsed = ParsedMemo(cleaned=text, pattern_id=pattern.id)
    matches = list(pattern.compiled.finditer(text))
    if not matches:
        return parsed

    def add(page_nums: List[int], body: str, start: int, end: int) -> None:
        for pn in page_nums:
            parsed.pages[pn] = body
        parsed.sections.append(MemoSectionRange(list(page_nums), body, start, end))

    pre_text = text[: matches[0].start()].strip()
    has_pre_text = bool(pre_text)
    if has_pre_text:
        # Unlabelled leading text belongs to the page before the first label.
        if pattern.is_sequential:
            pre_page = 1
        else:
            pre_page = max(1, pattern.extract_page(matches[0]) - 1)
        add([pre_page], pre_text, 0, matches[0].start())

    for i, m in enumerate(matches):
        start = m.end()
        end = matches[i + 1].start() if i < len(matches) - 1 else len(text)
        body = text[start:end].strip()

        if pattern.kind is PatternKind.SEQUENTIAL:
            add([i + 1 + (1 if has_pre_text else 0)], body, start, end)
        elif pattern.kind is PatternKind.PAIR_NUMBERED:
            page_nums = pattern.extract_pages(m)
            for pn in page_nums:
                parsed.shared_pages[pn] = list(page_nums)
            add(page_nums, body, start, end)
        else:
            add([pattern.extract_page(m)], body, start, end)

    return parsed


def _split_by_blank_runs(text: str) -> ParsedMemo:
    parsed = ParsedMemo(cleaned=text)
    last_end = 0
    page_num = 1

    def add(start: int, end: int) -> None:
        nonlocal page_num
        body = text[start:end].strip()
        if body:
            parsed.pages[page_num] = body
            parsed.sections.append(MemoSectionRange([page_num], body, start, end))
            page_num += 1

    for m in _BLANK_RUN_RE.finditer(text):
        add(last_end, m.start())
        last_end = m.end()
    add(last_end, len(text))
    return parsed


def parse_memo(raw: str) -> ParsedMemo:
    """Split a raw memo into page-numbered sections."""
    header, header_offset, cleaned = strip_header(raw)

    pattern = detect_delimiter_pattern(cleaned)
    if pattern is not None:
        parsed = _split_by_pattern(cleaned, pattern)
    else:
        logger.debug("No delimiter pattern found; splitting on blank-line runs")
        parsed = _split_by_blank_runs(cleaned)

    parsed.header = header
    parsed.header_offset = header_offset
    return parsed


def get_unique_memo_sections(parsed: ParsedMemo) -> List[MemoSection]:
    """One entry per physical section; shared pages collapse into one."""
    seen: set[Tuple[int, ...]] = set()
    sections: List[MemoSection] = []

    for page_num, text in parsed.pages.items():
        group = parsed.shared_pages.get(page_num)
        key = tuple(sorted(group)) if group else (page_num,)
        if key in seen:
            continue
        seen.add(key)
        sections.append(MemoSection(page_nums=list(key), text=text))

    return sections


def match_page_to_file(file_name: str) -> Optional[int]:
    """Guess the page number of a page image from its file name."""
    name = _FILE_EXTENSION_RE.sub("", file_name)
    for regex in _FILE_PAGE_RES:
        m = regex.search(name)
        if m:
            return int(m.group(1))
    return None
