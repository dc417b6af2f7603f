"""Line matching between page text and memo text.

Greedy two-pass matching:

  1. exact: each source line takes the first unused memo line equal to it;
  2. fuzzy: each remaining source line takes the unused memo line with the
     highest LCS similarity, if that score clears the length-dependent
     threshold.

Fuzzy pairs are diffed character by character. Source lines left over are
``removed``; memo lines left over are ``added``.

Every pass takes the set of memo indices already used and returns a new
one, so nothing is shared between calls.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Sequence, Tuple

from textverify.diff.chardiff import diff_chars
from textverify.diff.models import DiffPart, LineDiff

SHORT_THRESHOLD = 0.2
LONG_THRESHOLD = 0.4
SHORT_MAX_LEN = 5

_NEWLINE = DiffPart("\n")

Pairs = Dict[int, int]  # source index -> memo index


def similarity(a: str, b: str) -> float:
    """LCS length over the longer length, in [0, 1]."""
    m, n = len(a), len(b)
    if m == 0 and n == 0:
        return 1.0
    if m == 0 or n == 0:
        return 0.0
    prev = [0] * (n + 1)
    curr = [0] * (n + 1)
    for i in range(1, m + 1):
        ca = a[i - 1]
        for j in range(1, n + 1):
            if ca == b[j - 1]:
                curr[j] = prev[j - 1] + 1
            else:
                curr[j] = prev[j] if prev[j] >= curr[j - 1] else curr[j - 1]
        prev, curr = curr, prev
        curr[0] = 0
    return prev[n] / max(m, n)


def fuzzy_threshold(
    a: str,
    b: str,
    short_threshold: float = SHORT_THRESHOLD,
    long_threshold: float = LONG_THRESHOLD,
    short_max_len: int = SHORT_MAX_LEN,
) -> float:
    """Similarity a pair must reach; short lines get the lower bar."""
    return short_threshold if min(len(a), len(b)) <= short_max_len else long_threshold


def _exact_pass(
    source: Sequence[str],
    memo: Sequence[str],
    candidates: Iterable[int],
    used: FrozenSet[int],
) -> Tuple[Pairs, FrozenSet[int]]:
    pairs: Pairs = {}
    taken = set(used)
    for si in candidates:
        for mj, line in enumerate(memo):
            if mj not in taken and source[si] == line:
                pairs[si] = mj
                taken.add(mj)
                break
    return pairs, frozenset(taken)


def _fuzzy_pass(
    source: Sequence[str],
    memo: Sequence[str],
    candidates: Iterable[int],
    used: FrozenSet[int],
    thresholds: Dict[str, float],
) -> Tuple[Pairs, FrozenSet[int]]:
    pairs: Pairs = {}
    taken = set(used)
    for si in candidates:
        best_mj, best_score = -1, 0.0
        for mj, line in enumerate(memo):
            if mj in taken:
                continue
            score = similarity(source[si], line)
            if score > best_score:
                best_mj, best_score = mj, score
        if best_mj < 0:
            continue
        if best_score >= fuzzy_threshold(source[si], memo[best_mj], **thresholds):
            pairs[si] = best_mj
            taken.add(best_mj)
    return pairs, frozenset(taken)


def _with_marker(parts: List[DiffPart], flag: str) -> List[DiffPart]:
    """Guarantee a fuzzy-matched line shows as changed on this side."""
    if any(p.changed for p in parts):
        return parts
    return [*parts, DiffPart("", **{flag: True})]


def _fuzzy_line_parts(
    source_line: str, memo_line: str
) -> Tuple[List[DiffPart], List[DiffPart]]:
    psd, memo = diff_chars(source_line, memo_line)
    return (
        [*_with_marker(psd, "removed"), _NEWLINE],
        [*_with_marker(memo, "added"), _NEWLINE],
    )


def _non_empty(lines: Iterable[str]) -> List[str]:
    return [line for line in lines if line]


def match_lines(
    source_lines: Sequence[str],
    memo_lines: Sequence[str],
    *,
    short_threshold: float = SHORT_THRESHOLD,
    long_threshold: float = LONG_THRESHOLD,
    short_max_len: int = SHORT_MAX_LEN,
) -> LineDiff:
    """Match one page's lines against its memo lines.

    Both sides are emitted in memo order; source lines with no partner are
    appended to the source side as ``removed``.
    """
    thresholds = dict(
        short_threshold=short_threshold,
        long_threshold=long_threshold,
        short_max_len=short_max_len,
    )
    source = _non_empty(source_lines)
    memo = _non_empty(memo_lines)

    exact, used = _exact_pass(source, memo, range(len(source)), frozenset())
    remaining = [si for si in range(len(source)) if si not in exact]
    fuzzy, used = _fuzzy_pass(source, memo, remaining, used, thresholds)

    memo_to_exact = {mj: si for si, mj in exact.items()}
    memo_to_fuzzy = {mj: si for si, mj in fuzzy.items()}

    result = LineDiff()
    for mj, memo_line in enumerate(memo):
        if mj in memo_to_exact:
            result.psd.append(DiffPart(source[memo_to_exact[mj]] + "\n"))
            result.memo.append(DiffPart(memo_line + "\n"))
        elif mj in memo_to_fuzzy:
            psd_parts, memo_parts = _fuzzy_line_parts(source[memo_to_fuzzy[mj]], memo_line)
            result.psd.extend(psd_parts)
            result.memo.extend(memo_parts)
        else:
            result.memo.append(DiffPart(memo_line + "\n", added=True))

    for si, line in enumerate(source):
        if si not in exact and si not in fuzzy:
            result.psd.append(DiffPart(line + "\n", removed=True))

    return result


def compute_line_set_diff(psd_text: str, memo_text: str, **thresholds: float) -> LineDiff:
    """:func:`match_lines` over two normalised texts."""
    return match_lines(psd_text.split("\n"), memo_text.split("\n"), **thresholds)


def match_shared_group(
    source_lines_per_page: Sequence[Sequence[str]],
    memo_lines: Sequence[str],
    *,
    short_threshold: float = SHORT_THRESHOLD,
    long_threshold: float = LONG_THRESHOLD,
    short_max_len: int = SHORT_MAX_LEN,
) -> List[LineDiff]:
    """Match several pages that draw on one memo section.

    The exact pass runs for every page before any fuzzy pass, so a later
    page's fuzzy match cannot take a memo line an earlier page matches
    exactly. Each page is emitted in source order; memo lines nobody claimed
    go to the last page as ``added``.
    """
    thresholds = dict(
        short_threshold=short_threshold,
        long_threshold=long_threshold,
        short_max_len=short_max_len,
    )
    pages = [_non_empty(lines) for lines in source_lines_per_page]
    memo = _non_empty(memo_lines)
    used: FrozenSet[int] = frozenset()

    exact_per_page: List[Pairs] = []
    for source in pages:
        exact, used = _exact_pass(source, memo, range(len(source)), used)
        exact_per_page.append(exact)

    fuzzy_per_page: List[Pairs] = []
    for source, exact in zip(pages, exact_per_page):
        remaining = [si for si in range(len(source)) if si not in exact]
        fuzzy, used = _fuzzy_pass(source, memo, remaining, used, thresholds)
        fuzzy_per_page.append(fuzzy)

    results: List[LineDiff] = []
    for source, exact, fuzzy in zip(pages, exact_per_page, fuzzy_per_page):
        page = LineDiff()
        for si, line in enumerate(source):
            if si in exact:
                page.psd.append(DiffPart(line + "\n"))
                page.memo.append(DiffPart(memo[exact[si]] + "\n"))
            elif si in fuzzy:
                psd_parts, memo_parts = _fuzzy_line_parts(line, memo[fuzzy[si]])
                page.psd.extend(psd_parts)
                page.memo.extend(memo_parts)
            else:
                page.psd.append(DiffPart(line + "\n", removed=True))
        results.append(page)

    if results:
        for mj, line in enumerate(memo):
            if mj not in used:
                results[-1].memo.append(DiffPart(line + "\n", added=True))

    return results
