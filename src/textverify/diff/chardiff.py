"""Character-level diff of two lines by LCS backtracking."""

from __future__ import annotations

from typing import List, Tuple

from textverify.diff.models import DiffPart

_EQUAL = 0
_DELETE = 1
_INSERT = 2


def _lcs_table(a: str, b: str) -> List[int]:
    """LCS lengths in one flat arena; cell (i, j) lives at ``i * (len(b) + 1) + j``."""
    m, n = len(a), len(b)
    width = n + 1
    table = [0] * ((m + 1) * width)
    for i in range(1, m + 1):
        row = i * width
        prev = row - width
        ca = a[i - 1]
        for j in range(1, n + 1):
            if ca == b[j - 1]:
                table[row + j] = table[prev + j - 1] + 1
            else:
                up = table[prev + j]
                left = table[row + j - 1]
                table[row + j] = up if up >= left else left
    return table


def _edit_script(a: str, b: str) -> List[int]:
    """Equal/delete/insert operations turning *a* into *b*, in order.

    Ties between dropping a character of *a* and taking one of *b* resolve
    to the insert, so an edit leans towards the *b* side.
    """
    table = _lcs_table(a, b)
    width = len(b) + 1
    ops: List[int] = []
    i, j = len(a), len(b)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and a[i - 1] == b[j - 1]:
            ops.append(_EQUAL)
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or table[i * width + j - 1] >= table[(i - 1) * width + j]):
            ops.append(_INSERT)
            j -= 1
        else:
            ops.append(_DELETE)
            i -= 1
    ops.reverse()
    return ops


class _RunBuffer:
    """Accumulates characters of one side into DiffPart runs."""

    def __init__(self, flag: str) -> None:
        self._flag = flag
        self._buf: List[str] = []
        self._changed = False
        self.parts: List[DiffPart] = []

    def flush(self) -> None:
        if self._buf:
            value = "".join(self._buf)
            if self._changed:
                self.parts.append(DiffPart(value, **{self._flag: True}))
            else:
                self.parts.append(DiffPart(value))
            self._buf = []

    def push(self, ch: str, changed: bool) -> None:
        if changed != self._changed:
            self.flush()
            self._changed = changed
        self._buf.append(ch)


def diff_chars(a: str, b: str) -> Tuple[List[DiffPart], List[DiffPart]]:
    """Diff two lines character by character.

    Returns (a_parts, b_parts): characters only in *a* are ``removed``,
    characters only in *b* are ``added``, shared characters appear unflagged
    on both sides.
    """
    a_runs = _RunBuffer("removed")
    b_runs = _RunBuffer("added")
    ai = bi = 0

    for op in _edit_script(a, b):
        if op == _EQUAL:
            a_runs.push(a[ai], False)
            b_runs.push(b[bi], False)
            ai += 1
            bi += 1
        elif op == _DELETE:
            a_runs.push(a[ai], True)
            ai += 1
        else:
            b_runs.push(b[bi], True)
            bi += 1

    a_runs.flush()
    b_runs.flush()
    return a_runs.parts, b_runs.parts
