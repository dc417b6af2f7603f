"""Verification — per-page comparison of layers against the memo."""

from textverify.verify.engine import assign_page_numbers, check_layers, verify
from textverify.verify.models import LayerCheck, PageResult, VerifyResult

__all__ = [
    "LayerCheck",
    "PageResult",
    "VerifyResult",
    "assign_page_numbers",
    "check_layers",
    "verify",
]
