"""Interleave the two per-side part streams into one display sequence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from textverify.diff.models import DiffPart, EntryType, UnifiedDiffEntry
from textverify.text.normalizer import CHUNK_SENTINEL, is_chunk_sentinel


@dataclass
class _Line:
    parts: List[DiffPart] = field(default_factory=list)
    changed: bool = False

    @property
    def text(self) -> str:
        return "".join(p.value for p in self.parts)


def split_parts_into_lines(parts: Sequence[DiffPart]) -> List[_Line]:
    """Group parts into logical lines; a part ending in ``\\n`` closes a line."""
    lines: List[_Line] = []
    cur = _Line()
    for p in parts:
        if p.value.endswith("\n"):
            cur.parts.append(DiffPart(p.value[:-1], added=p.added, removed=p.removed))
            cur.changed = cur.changed or p.changed
            lines.append(cur)
            cur = _Line()
        else:
            cur.parts.append(p)
            cur.changed = cur.changed or p.changed
    if cur.parts:
        lines.append(cur)
    return lines


def _flatten(block: Sequence[_Line]) -> str:
    return "".join(line.text for line in block)


def _interleave(p_lines: List[_Line], m_lines: List[_Line]) -> List[UnifiedDiffEntry]:
    result: List[UnifiedDiffEntry] = []
    pi = mi = 0

    while pi < len(p_lines) or mi < len(m_lines):
        matched: List[str] = []
        while (
            pi < len(p_lines) and not p_lines[pi].changed
            and mi < len(m_lines) and not m_lines[mi].changed
        ):
            matched.append(p_lines[pi].text)
            pi += 1
            mi += 1
        if matched:
            result.append(UnifiedDiffEntry.match("\n".join(matched)))

        p_block: List[_Line] = []
        while pi < len(p_lines) and p_lines[pi].changed:
            p_block.append(p_lines[pi])
            pi += 1
        m_block: List[_Line] = []
        while mi < len(m_lines) and m_lines[mi].changed:
            m_block.append(m_lines[mi])
            mi += 1

        if not p_block and not m_block:
            # One side ran out of lines while the other still has unchanged ones.
            if pi < len(p_lines):
                result.append(UnifiedDiffEntry.match(p_lines[pi].text))
                pi += 1
            elif mi < len(m_lines):
                result.append(UnifiedDiffEntry.match(m_lines[mi].text))
                mi += 1
            continue

        if p_block and m_block and _flatten(p_block) == _flatten(m_block):
            result.append(
                UnifiedDiffEntry.linebreak(
                    "\n".join(line.text for line in p_block),
                    "\n".join(line.text for line in m_block),
                )
            )
            continue

        for i in range(max(len(p_block), len(m_block))):
            result.append(
                UnifiedDiffEntry.diff(
                    p_block[i].parts if i < len(p_block) else None,
                    m_block[i].parts if i < len(m_block) else None,
                )
            )

    return result


def _is_sentinel_side(parts: Optional[List[DiffPart]]) -> bool:
    return parts is not None and is_chunk_sentinel("".join(p.value for p in parts))


def _only_sentinels(text: Optional[str]) -> bool:
    return all(is_chunk_sentinel(line) for line in (text or "").split("\n"))


def _fold_separators(entries: List[UnifiedDiffEntry]) -> List[UnifiedDiffEntry]:
    folded: List[UnifiedDiffEntry] = []

    for entry in entries:
        if entry.type is EntryType.MATCH:
            chunk: List[str] = []
            for line in (entry.text or "").split("\n"):
                if line == CHUNK_SENTINEL:
                    if chunk:
                        folded.append(UnifiedDiffEntry.match("\n".join(chunk)))
                        chunk = []
                    folded.append(UnifiedDiffEntry.separator())
                else:
                    chunk.append(line)
            if chunk:
                folded.append(UnifiedDiffEntry.match("\n".join(chunk)))
        elif entry.type is EntryType.DIFF:
            psd = None if _is_sentinel_side(entry.psd_parts) else entry.psd_parts
            memo = None if _is_sentinel_side(entry.memo_parts) else entry.memo_parts
            if psd is None and memo is None:
                folded.append(UnifiedDiffEntry.separator())
            elif psd is entry.psd_parts and memo is entry.memo_parts:
                folded.append(entry)
            else:
                folded.append(UnifiedDiffEntry.diff(psd, memo))
        elif (
            entry.type is EntryType.LINEBREAK
            and _only_sentinels(entry.psd_text)
            and _only_sentinels(entry.memo_text)
        ):
            folded.append(UnifiedDiffEntry.separator())
        else:
            folded.append(entry)

    merged: List[UnifiedDiffEntry] = []
    for entry in folded:
        if (
            entry.type is EntryType.SEPARATOR
            and (not merged or merged[-1].type is EntryType.SEPARATOR)
        ):
            continue
        merged.append(entry)
    while merged and merged[-1].type is EntryType.SEPARATOR:
        merged.pop()
    return merged


def build_unified_diff(
    psd_parts: Sequence[DiffPart],
    memo_parts: Sequence[DiffPart],
) -> List[UnifiedDiffEntry]:
    """Interleave PSD-side and memo-side parts line by line.

    Unchanged runs present on both sides become ``match`` entries. Changed
    blocks whose text differs only in where lines break become one
    ``linebreak`` entry; other changed lines pair up index by index as
    ``diff`` entries. Chunk sentinels turn into ``separator`` entries, never
    into differences.
    """
    entries = _interleave(
        split_parts_into_lines(psd_parts),
        split_parts_into_lines(memo_parts),
    )
    return _fold_separators(entries)
