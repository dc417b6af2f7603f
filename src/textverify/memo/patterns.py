"""Page delimiter patterns, in detection priority order.

Each pattern recognises one memo page-break convention on a line of its
own. ``pattern`` is stored as a raw string and compiled once, the first
time ``compiled`` is read; ``BUILTIN_PATTERNS`` compiles them all at import.
Line anchors ``^`` and ``$`` are widened to also anchor at a bare ``\\r``, so
memos saved with CR line endings split the same way as LF ones.

The ``<<N,MPage>>`` spread form counts from a single occurrence; every
other pattern needs two.

Digits are spelled ``[0-9]`` rather than ``\\d`` so full-width and other
Unicode digits never count as page numbers.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import List, Optional

_LINE_START = r"(?:^|(?<=\r))"
_LINE_END = r"(?=\r|$)"


def line_anchored(pattern: str) -> str:
    """Rewrite a leading ``^`` and trailing ``$`` of *pattern* to accept CR too."""
    if pattern.startswith("^"):
        pattern = _LINE_START + pattern[1:]
    if pattern.endswith("$"):
        pattern = pattern[:-1] + _LINE_END
    return pattern


class PatternKind(str, enum.Enum):
    NUMBERED = "numbered"  # one page number per delimiter
    PAIR_NUMBERED = "pair"  # two page numbers sharing one section
    SEQUENTIAL = "sequential"  # no number; sections numbered by appearance


@dataclass
class DelimiterPattern:
    """A single memo page-delimiter convention."""

    id: str
    description: str
    pattern: str
    kind: PatternKind = PatternKind.NUMBERED
    min_matches: int = 2  # occurrences needed before the pattern is considered

    _compiled: Optional[re.Pattern[str]] = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def compiled(self) -> re.Pattern[str]:
        if self._compiled is None:
            self._compiled = re.compile(line_anchored(self.pattern), re.MULTILINE)
        return self._compiled

    @property
    def is_sequential(self) -> bool:
        return self.kind is PatternKind.SEQUENTIAL

    def extract_page(self, match: re.Match[str]) -> int:
        """Page number carried by *match* (0 for sequential delimiters)."""
        if self.is_sequential:
            return 0
        return int(match.group(1))

    def extract_pages(self, match: re.Match[str]) -> List[int]:
        """All page numbers carried by *match*."""
        if self.kind is PatternKind.PAIR_NUMBERED:
            return [int(match.group(1)), int(match.group(2))]
        return [self.extract_page(match)]


# <<1,2Page>>, <<3,4P>>: two-page export, one section per spread
PAIR_ANGLE_PAGE = DelimiterPattern(
    id="PAIR_ANGLE_PAGE",
    description="<<N,MPage>> two pages sharing one section",
    pattern=r"^<<\s*([0-9]{1,4})\s*,\s*([0-9]{1,4})\s*(?:Page|[Pp]age|[Pp])?\s*>>\s*$",
    kind=PatternKind.PAIR_NUMBERED,
    min_matches=1,
)

# <<2Page>>, <<2>>, << 2Page >>, <<2P>>
ANGLE_PAGE = DelimiterPattern(
    id="ANGLE_PAGE",
    description="<<NPage>>",
    pattern=r"^<<\s*([0-9]{1,4})\s*(?:Page|[Pp]age|[Pp])?\s*>>\s*$",
)

# [1巻18P], [第3話5P]: volume or chapter prefix
BRACKET_PREFIXED_PAGE = DelimiterPattern(
    id="BRACKET_PREFIXED_PAGE",
    description="[<prefix>NP]",
    pattern=r"^\[(?:.*[^0-9])([0-9]{1,4})\s*[Pp]\]\s*$",
)

# P01, P1, p.1
P_DOT_NUMBER = DelimiterPattern(
    id="P_DOT_NUMBER",
    description="P.N / pN",
    pattern=r"^[Pp]\.?([0-9]{1,4})\s*$",
)

# 【1ページ】【1P】【P1】[P1]
BRACKET_NUMBER = DelimiterPattern(
    id="BRACKET_NUMBER",
    description="【N】 / [PN]",
    pattern=r"^[【\[](?:[Pp]\.?)?([0-9]{1,4})(?:ページ|[Pp])?[】\]]\s*$",
)

# ---1---, === 1 ===, *** 1 ***
RULED_NUMBER = DelimiterPattern(
    id="RULED_NUMBER",
    description="---N---",
    pattern=r"^[-=*]{2,}\s*([0-9]{1,4})\s*[-=*]{2,}\s*$",
)

# #1, #01
HASH_NUMBER = DelimiterPattern(
    id="HASH_NUMBER",
    description="#N",
    pattern=r"^#([0-9]{1,4})\s*$",
)

# 001, 01 on a line by themselves
BARE_NUMBER = DelimiterPattern(
    id="BARE_NUMBER",
    description="bare 2-4 digit line",
    pattern=r"^([0-9]{2,4})\s*$",
)

# 1ページ, 1P
NUMBER_PAGE_SUFFIX = DelimiterPattern(
    id="NUMBER_PAGE_SUFFIX",
    description="Nページ / NP",
    pattern=r"^([0-9]{1,4})\s*(?:ページ|[Pp])\s*$",
)

# Rule lines of 8+ characters, no page number
DASH_RULE = DelimiterPattern(
    id="DASH_RULE",
    description="-------- (sequential)",
    pattern=r"^[-]{8,}\s*$",
    kind=PatternKind.SEQUENTIAL,
)

EQUALS_RULE = DelimiterPattern(
    id="EQUALS_RULE",
    description="======== (sequential)",
    pattern=r"^[=]{8,}\s*$",
    kind=PatternKind.SEQUENTIAL,
)

STAR_RULE = DelimiterPattern(
    id="STAR_RULE",
    description="******** (sequential)",
    pattern=r"^[*]{8,}\s*$",
    kind=PatternKind.SEQUENTIAL,
)

BUILTIN_PATTERNS: List[DelimiterPattern] = [
    PAIR_ANGLE_PAGE,
    ANGLE_PAGE,
    BRACKET_PREFIXED_PAGE,
    P_DOT_NUMBER,
    BRACKET_NUMBER,
    RULED_NUMBER,
    HASH_NUMBER,
    BARE_NUMBER,
    NUMBER_PAGE_SUFFIX,
    DASH_RULE,
    EQUALS_RULE,
    STAR_RULE,
]

for _p in BUILTIN_PATTERNS:
    _ = _p.compiled
