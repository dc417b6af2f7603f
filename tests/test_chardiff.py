"""Tests for the character-level differ."""

import pytest

from textverify.diff.chardiff import diff_chars
from textverify.diff.models import DiffPart


class TestDiffChars:
    def test_identical(self):
        assert diff_chars("abc", "abc") == ([DiffPart("abc")], [DiffPart("abc")])

    def test_empty_source(self):
        assert diff_chars("", "abc") == ([], [DiffPart("abc", added=True)])

    def test_empty_memo(self):
        assert diff_chars("abc", "") == ([DiffPart("abc", removed=True)], [])

    def test_both_empty(self):
        assert diff_chars("", "") == ([], [])

    def test_deleted_character(self):
        a_parts, b_parts = diff_chars("さようなら", "さよなら")
        assert a_parts == [
            DiffPart("さよ"),
            DiffPart("う", removed=True),
            DiffPart("なら"),
        ]
        assert b_parts == [DiffPart("さよなら")]

    def test_substitution(self):
        a_parts, b_parts = diff_chars("abc", "axc")
        assert a_parts == [DiffPart("a"), DiffPart("b", removed=True), DiffPart("c")]
        assert b_parts == [DiffPart("a"), DiffPart("x", added=True), DiffPart("c")]

    def test_tie_prefers_insert(self):
        # Two equally long edit scripts exist; the memo side takes the trailing edit.
        a_parts, b_parts = diff_chars("ab", "ba")
        assert a_parts == [DiffPart("a", removed=True), DiffPart("b")]
        assert b_parts == [DiffPart("b"), DiffPart("a", added=True)]


class TestDiffProperties:
    @pytest.mark.parametrize("a, b", [
        ("こんにちは", "こんばんは"),
        ("おはよー", "おはよう"),
        ("abcdef", "azced"),
        ("", "x"),
        ("ありがとう！", "ありがと…！"),
    ])
    def test_sides_reassemble(self, a, b):
        a_parts, b_parts = diff_chars(a, b)
        assert "".join(p.value for p in a_parts if not p.added) == a
        assert "".join(p.value for p in b_parts if not p.removed) == b
        assert not any(p.added for p in a_parts)
        assert not any(p.removed for p in b_parts)

    @pytest.mark.parametrize("a, b", [("abcdef", "azced"), ("ab", "ba")])
    def test_shared_text_is_equal_on_both_sides(self, a, b):
        a_parts, b_parts = diff_chars(a, b)
        assert "".join(p.value for p in a_parts if not p.changed) == "".join(
            p.value for p in b_parts if not p.changed
        )

    def test_runs_are_merged(self):
        a_parts, _ = diff_chars("abcxyz", "xyz")
        assert a_parts == [DiffPart("abc", removed=True), DiffPart("xyz")]
