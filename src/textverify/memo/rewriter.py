"""Write an edited page back into the raw memo.

Only the character range of the page's section changes: delimiter lines,
other sections and the whitespace hugging the section boundary stay as
they were. Rewrites of one memo must be applied one at a time, each on the
result of the previous one, since section ranges go stale after a splice.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from textverify.memo.parser import MemoSectionRange, parse_memo

logger = logging.getLogger(__name__)

_LEADING_WS_RE = re.compile(r"\s*")
_TRAILING_WS_RE = re.compile(r"\s*\Z")


def find_section(
    sections: Sequence[MemoSectionRange], page_num: int
) -> Optional[MemoSectionRange]:
    """First section whose page numbers include *page_num*."""
    for section in sections:
        if page_num in section.page_nums:
            return section
    return None


def replace_memo_section(
    raw: str,
    sections: Sequence[MemoSectionRange],
    page_num: int,
    new_text: str,
) -> str:
    """Return *raw* with the section owning *page_num* replaced by *new_text*.

    *raw* is the cleaned memo the *sections* were computed on. Boundary
    whitespace of the old section is kept (``\\n`` on a side that had none);
    *new_text* is trimmed. Unknown pages leave *raw* unchanged.
    """
    section = find_section(sections, page_num)
    if section is None:
        logger.debug("No memo section owns page %d; memo left unchanged", page_num)
        return raw

    old = raw[section.range_start:section.range_end]
    leading = _LEADING_WS_RE.match(old).group(0) or "\n"  # type: ignore[union-attr]
    trailing = _TRAILING_WS_RE.search(old).group(0) or "\n"  # type: ignore[union-attr]

    return (
        raw[: section.range_start]
        + leading
        + new_text.strip()
        + trailing
        + raw[section.range_end:]
    )


def rewrite_page(raw: str, page_num: int, new_text: str) -> str:
    """Parse *raw* and replace one page's section, keeping any header line.

    Convenience for callers holding the memo exactly as read from disk.
    """
    parsed = parse_memo(raw)
    section = find_section(parsed.sections, page_num)
    if section is None:
        logger.debug("No memo section owns page %d; memo left unchanged", page_num)
        return raw

    cleaned = replace_memo_section(parsed.cleaned, parsed.sections, page_num, new_text)
    if not parsed.header:
        return cleaned

    offset = parsed.header_offset
    if offset >= section.range_end:
        offset += len(cleaned) - len(parsed.cleaned)
    elif offset > section.range_start:
        offset = section.range_start
    return cleaned[:offset] + parsed.header + cleaned[offset:]
