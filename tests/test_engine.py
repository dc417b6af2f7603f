"""Tests for the verification engine."""

from textverify.config.schema import MatchConfig, NormalizeConfig, TextVerifyConfig
from textverify.diff.models import DiffPart, EntryType
from textverify.memo.parser import parse_memo
from textverify.text.layers import PageInput
from textverify.verify.engine import assign_page_numbers, check_layers, verify


def _page(file_name: str, *layers) -> PageInput:
    return PageInput(file_name=file_name, layers=list(layers), width=1000, height=1000)


class TestAssignPageNumbers:
    def test_from_file_name(self):
        pages = [_page("P003.psd"), _page("page_010.psd")]
        assert assign_page_numbers(pages) == [3, 10]

    def test_position_fallback(self):
        pages = [_page("cover.psd"), _page("back.psd")]
        assert assign_page_numbers(pages) == [1, 2]


class TestCheckLayers:
    def test_missing_lines(self, make_layer):
        page = _page("P001.psd", make_layer("こんにちは", name="a"), make_layer("おはよー", name="b"))
        checks = check_layers(page, "こんにちは\nおはよう")
        assert checks[0].all_in_memo
        assert checks[1].missing_lines == ["おはよー"]
        assert not checks[1].all_in_memo

    def test_normalised_before_lookup(self, make_layer):
        page = _page("P001.psd", make_layer("ＯＫ|はい"))
        assert check_layers(page, "OK\nはい")[0].all_in_memo


class TestVerify:
    def test_sample_job(self, sample_pages, memo_angle):
        result = verify(sample_pages, memo_angle)
        assert result.pattern_id == "ANGLE_PAGE"
        assert result.memo_sections == 3
        assert [p.page_num for p in result.pages] == [1, 2, 3]
        assert [p.status for p in result.pages] == ["match", "diff", "match"]
        assert result.has_differences
        assert result.diff_pages[0].file_name == "P002.psd"

    def test_reading_order_applied(self, sample_pages, memo_angle):
        page = verify(sample_pages, memo_angle).pages[0]
        assert page.psd_text == "こんにちは\nさようなら"
        assert page.entries[0].type is EntryType.MATCH

    def test_fuzzy_page_entries(self, sample_pages, memo_angle):
        page = verify(sample_pages, memo_angle).pages[1]
        assert page.diff_count == 1
        assert page.layer_checks[0].missing_lines == ["おはよー"]

    def test_page_without_memo(self, make_layer, memo_angle):
        result = verify([_page("P009.psd", make_layer("余白"))], memo_angle)
        page = result.pages[0]
        assert page.status == "no-memo"
        assert page.entries == []
        assert not result.has_differences
        assert result.no_memo_pages == [page]

    def test_prepared_memo(self, sample_pages, memo_angle):
        parsed = parse_memo(memo_angle)
        result = verify(sample_pages, "", parsed=parsed)
        assert result.pattern_id == "ANGLE_PAGE"

    def test_custom_thresholds(self, sample_pages, memo_angle):
        cfg = TextVerifyConfig(match=MatchConfig(short_threshold=0.9))
        page = verify(sample_pages, memo_angle, cfg).pages[1]
        # Below threshold: whole lines removed and added, shown as one pair.
        assert page.status == "diff"
        [entry] = page.entries
        assert entry.psd_parts == [DiffPart("おはよー", removed=True)]
        assert entry.memo_parts == [DiffPart("おはよう", added=True)]


class TestSharedSections:
    def test_group_splits_memo_lines(self, make_layer, memo_pair):
        pages = [
            _page("P001.psd", make_layer("最初の台詞", x=900, y=100), make_layer("二番目の台詞", x=100, y=100)),
            _page("P002.psd", make_layer("三番目の台詞")),
            _page("P003.psd", make_layer("次の見開き")),
        ]
        result = verify(pages, memo_pair)
        assert [p.status for p in result.pages] == ["match", "match", "match"]
        assert result.pages[0].memo_shared
        assert result.pages[1].memo_shared_group == [1, 2]
        assert result.pages[2].memo_shared_group == [3, 4]

    def test_unclaimed_memo_line_lands_on_last_page(self, make_layer, memo_pair):
        pages = [
            _page("P002.psd", make_layer("三番目の台詞")),
            _page("P001.psd", make_layer("最初の台詞")),
        ]
        result = verify(pages, memo_pair)
        by_num = {p.page_num: p for p in result.pages}
        assert by_num[1].status == "match"
        assert by_num[2].status == "diff"
        added = [part.value for part in by_num[2].memo_parts if part.added]
        assert added == ["二番目の台詞\n"]

    def test_lone_page_of_spread_matched_alone(self, make_layer, memo_pair):
        result = verify([_page("P001.psd", make_layer("最初の台詞"))], memo_pair)
        page = result.pages[0]
        assert page.memo_shared
        assert page.status == "diff"
        assert [part.value for part in page.memo_parts if part.added] == [
            "二番目の台詞\n", "三番目の台詞\n",
        ]


class TestPreserveChunks:
    def test_separator_between_layers(self, make_layer):
        memo = "<<1Page>>\nこんにちは\n\nさようなら\n<<2Page>>\n次\n"
        page = _page("P001.psd", make_layer("こんにちは", x=900, y=100), make_layer("さようなら", x=100, y=100))
        cfg = TextVerifyConfig(normalize=NormalizeConfig(preserve_chunks=True))
        result = verify([page], memo, cfg)
        assert [e.type for e in result.pages[0].entries] == [
            EntryType.MATCH, EntryType.SEPARATOR, EntryType.MATCH,
        ]
        assert result.pages[0].status == "match"

    def test_chunk_boundary_missing_from_memo_is_not_a_diff(self, make_layer):
        memo = "<<1Page>>\nこんにちは\nさようなら\n<<2Page>>\n次\n"
        page = _page("P001.psd", make_layer("こんにちは", x=900, y=100), make_layer("さようなら", x=100, y=100))
        cfg = TextVerifyConfig(normalize=NormalizeConfig(preserve_chunks=True))
        result = verify([page], memo, cfg)
        assert result.pages[0].status == "match"
        assert all(e.type is EntryType.MATCH for e in result.pages[0].entries)
