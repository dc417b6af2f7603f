"""Verification engine — runs the matcher over every page of a job.

Each page is assigned its memo section by page number (taken from the
file name, else its position in the input). Pages that share one memo
section and are all present are matched together so memo lines are split
between them; every other page is matched on its own. Pages are
independent of each other apart from that grouping.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional, Sequence, Tuple

from textverify.config.schema import TextVerifyConfig
from textverify.diff.matcher import compute_line_set_diff, match_shared_group
from textverify.diff.models import LineDiff
from textverify.diff.unified import build_unified_diff
from textverify.memo.parser import ParsedMemo, match_page_to_file, parse_memo
from textverify.text.layers import (
    PageInput,
    combine_text_for_comparison,
    layer_lines,
    sort_reading_order,
)
from textverify.text.normalizer import normalize
from textverify.verify.models import LayerCheck, PageResult, VerifyResult

logger = logging.getLogger(__name__)


def assign_page_numbers(pages: Sequence[PageInput]) -> List[int]:
    """Page number per input page: from the file name, else 1-based position."""
    numbers: List[int] = []
    for index, page in enumerate(pages):
        num = match_page_to_file(page.file_name)
        if num is None:
            logger.debug("No page number in %r; using position %d", page.file_name, index + 1)
            num = index + 1
        numbers.append(num)
    return numbers


def check_layers(page: PageInput, memo_section: str) -> List[LayerCheck]:
    """Per-layer membership of normalised lines in the memo section."""
    memo_lines = set(normalize(memo_section).split("\n")) - {""}
    checks: List[LayerCheck] = []
    for layer in page.layers:
        lines = layer_lines(layer)
        missing = [line for line in lines if line not in memo_lines]
        checks.append(LayerCheck(layer_name=layer.layer_name, lines=lines, missing_lines=missing))
    return checks


def _page_text(page: PageInput, config: TextVerifyConfig) -> str:
    ordered = sort_reading_order(page.layers, page.height, config.layers.row_ratio)
    preserve = config.normalize.preserve_chunks
    return normalize(combine_text_for_comparison(ordered, preserve), preserve)


def _thresholds(config: TextVerifyConfig) -> Dict[str, float]:
    return dict(
        short_threshold=config.match.short_threshold,
        long_threshold=config.match.long_threshold,
        short_max_len=config.match.short_max_len,
    )


def _shared_groups(
    page_nums: Sequence[int], parsed: ParsedMemo
) -> Dict[Tuple[int, ...], List[int]]:
    """Shared memo sections with two or more pages present: key -> input indices."""
    groups: Dict[Tuple[int, ...], List[int]] = {}
    for index, num in enumerate(page_nums):
        if parsed.is_shared(num):
            key = tuple(sorted(parsed.shared_pages[num]))
            groups.setdefault(key, []).append(index)
    return {key: idxs for key, idxs in groups.items() if len(idxs) > 1}


def verify(
    pages: Sequence[PageInput],
    memo_raw: str,
    config: Optional[TextVerifyConfig] = None,
    *,
    parsed: Optional[ParsedMemo] = None,
) -> VerifyResult:
    """Compare every page against its memo section. Returns a VerifyResult."""
    start = time.perf_counter()
    cfg = config or TextVerifyConfig()
    preserve = cfg.normalize.preserve_chunks
    thresholds = _thresholds(cfg)

    memo = parsed if parsed is not None else parse_memo(memo_raw)
    page_nums = assign_page_numbers(pages)

    results: List[PageResult] = []
    for page, num in zip(pages, page_nums):
        section = memo.text_for(num)
        group = memo.shared_pages.get(num, [num])
        results.append(
            PageResult(
                page_num=num,
                file_name=page.file_name,
                psd_text=_page_text(page, cfg),
                memo_text=normalize(section, preserve),
                layer_checks=check_layers(page, section),
                memo_shared=memo.is_shared(num),
                memo_shared_group=sorted(group),
            )
        )

    diffs: Dict[int, LineDiff] = {}

    for key, indices in _shared_groups(page_nums, memo).items():
        ordered = sorted(indices, key=lambda i: page_nums[i])
        logger.debug("Matching pages %s against one shared memo section", list(key))
        group_diffs = match_shared_group(
            [results[i].psd_text.split("\n") for i in ordered],
            results[ordered[0]].memo_text.split("\n"),
            **thresholds,
        )
        diffs.update(zip(ordered, group_diffs))

    for index, result in enumerate(results):
        if not result.has_memo:
            logger.debug("No memo section for page %d (%s)", result.page_num, result.file_name)
            continue
        if index not in diffs:
            diffs[index] = compute_line_set_diff(result.psd_text, result.memo_text, **thresholds)
        line_diff = diffs[index]
        result.psd_parts = line_diff.psd
        result.memo_parts = line_diff.memo
        result.entries = build_unified_diff(line_diff.psd, line_diff.memo)

    elapsed = (time.perf_counter() - start) * 1000

    return VerifyResult(
        pages=results,
        pattern_id=memo.pattern_id,
        memo_sections=len(memo.sections),
        duration_ms=round(elapsed, 2),
    )
