"""Text normalisation for comparison.

Folds characters that Japanese authoring tools use interchangeably
(wave dashes, long-vowel dashes, middle dots, full-width ASCII) onto one
canonical codepoint, unifies line endings and the memo ``|`` line-break
marker, and trims every line.

Two modes:
  - default: empty lines are dropped.
  - ``preserve_chunks=True``: every run of blank lines collapses into one
    line holding :data:`CHUNK_SENTINEL`, so panel/balloon boundaries survive
    into the diff and can be rendered as a divider.
"""

from __future__ import annotations

import re
from typing import List

# Private-use codepoint; str.strip() and the confusable table leave it alone.
CHUNK_SENTINEL = "\ue000"

_WAVE_DASH_RE = re.compile("[\uff5e\u223c\u223e]")
_LONG_DASH_RE = re.compile("[\u2014\u2015\u2012\u2013\uff0d\u2500]")
_MIDDLE_DOT_RE = re.compile("[\u2022\u2219\u00b7]")
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00ad\u2060]")
_FULLWIDTH_RE = re.compile("[\uff01-\uff5a]")
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

_FULLWIDTH_OFFSET = 0xFEE0


def _fold_fullwidth(m: re.Match[str]) -> str:
    return chr(ord(m.group(0)) - _FULLWIDTH_OFFSET)


def normalize_confusables(text: str) -> str:
    """Map confusable characters onto their canonical codepoints."""
    text = _WAVE_DASH_RE.sub("\u301c", text)
    text = _LONG_DASH_RE.sub("\u30fc", text)
    text = _MIDDLE_DOT_RE.sub("\u30fb", text)
    text = text.replace("\u3000", " ")
    text = _INVISIBLE_RE.sub("", text)
    # U+FF0D sits inside the full-width block; the dash fold must run first.
    return _FULLWIDTH_RE.sub(_fold_fullwidth, text)


def split_lines(text: str) -> List[str]:
    """Split on LF, CRLF and CR only (``str.splitlines`` splits on more)."""
    return _LINE_BREAK_RE.split(text)


def is_chunk_sentinel(value: str) -> bool:
    return value == CHUNK_SENTINEL


def normalize(text: str, preserve_chunks: bool = False) -> str:
    """Return *text* canonicalised for line comparison."""
    folded = normalize_confusables(text).replace("|", "\n")
    # An existing sentinel line counts as blank, so re-normalising is a no-op.
    lines = [
        "" if is_chunk_sentinel(line) else line
        for line in (raw.strip() for raw in split_lines(folded))
    ]

    if not preserve_chunks:
        return "\n".join(line for line in lines if line)

    out: List[str] = []
    for line in lines:
        if line:
            out.append(line)
        elif out and out[-1] != CHUNK_SENTINEL:
            out.append(CHUNK_SENTINEL)
    if out and out[-1] == CHUNK_SENTINEL:
        out.pop()
    return "\n".join(out)
