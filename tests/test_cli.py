"""Tests for the CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from textverify.cli import app

runner = CliRunner()

MATCHING_MEMO = "<<1Page>>\nこんにちは\nさようなら\n<<2Page>>\n次のページ\n"


@pytest.fixture
def memo_file(tmp_path: Path) -> Path:
    path = tmp_path / "memo.txt"
    path.write_text(MATCHING_MEMO, encoding="utf-8")
    return path


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "textverify" in result.output


class TestInit:
    def test_creates_config(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (tmp_path / ".textverify.toml").exists()

    def test_refuses_overwrite(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".textverify.toml").write_text("existing")
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1
        assert (tmp_path / ".textverify.toml").read_text() == "existing"


class TestVerify:
    def test_matching_memo_exits_zero(self, layers_file: Path, memo_file: Path):
        result = runner.invoke(app, ["verify", str(layers_file), str(memo_file)])
        assert result.exit_code == 0
        assert "MATCH" in result.output

    def test_difference_exits_one(self, layers_file: Path, tmp_path: Path):
        memo = tmp_path / "memo.txt"
        memo.write_text("<<1Page>>\nこんにちは\nさよなら\n<<2Page>>\n次のページ\n", encoding="utf-8")
        result = runner.invoke(app, ["verify", str(layers_file), str(memo)])
        assert result.exit_code == 1

    def test_json_format(self, layers_file: Path, memo_file: Path):
        result = runner.invoke(app, ["verify", str(layers_file), str(memo_file), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["pages"][0]["file"] == "page_001.psd"
        assert data["pages"][0]["status"] == "match"

    def test_output_file(self, layers_file: Path, memo_file: Path, tmp_path: Path):
        out = tmp_path / "report.json"
        result = runner.invoke(app, ["verify", str(layers_file), str(memo_file), "-o", str(out)])
        assert result.exit_code == 0
        assert json.loads(out.read_text(encoding="utf-8"))["matched_pages"] == 1

    def test_page_filter(self, layers_file: Path, memo_file: Path):
        result = runner.invoke(app, ["verify", str(layers_file), str(memo_file), "--page", "1"])
        assert result.exit_code == 0

    def test_unknown_page(self, layers_file: Path, memo_file: Path):
        result = runner.invoke(app, ["verify", str(layers_file), str(memo_file), "--page", "5"])
        assert result.exit_code == 2

    def test_invalid_format(self, layers_file: Path, memo_file: Path):
        result = runner.invoke(app, ["verify", str(layers_file), str(memo_file), "-f", "xml"])
        assert result.exit_code == 2

    def test_missing_config(self, layers_file: Path, memo_file: Path):
        result = runner.invoke(
            app, ["verify", str(layers_file), str(memo_file), "--config", "/nonexistent.toml"]
        )
        assert result.exit_code == 2

    def test_bad_layer_file(self, tmp_path: Path, memo_file: Path):
        bad = tmp_path / "layers.json"
        bad.write_text("{broken", encoding="utf-8")
        result = runner.invoke(app, ["verify", str(bad), str(memo_file)])
        assert result.exit_code == 2

    def test_undecodable_layer_file(self, tmp_path: Path, memo_file: Path):
        bad = tmp_path / "layers.json"
        bad.write_bytes(b'[{"file": "p1.psd", "layers": [{"text": "\xff\xfe"}]}]')
        result = runner.invoke(app, ["verify", str(bad), str(memo_file)])
        assert result.exit_code == 2

    def test_missing_memo(self, layers_file: Path, tmp_path: Path):
        result = runner.invoke(app, ["verify", str(layers_file), str(tmp_path / "nope.txt")])
        assert result.exit_code == 2


class TestSections:
    def test_json(self, tmp_path: Path, memo_pair: str):
        memo = tmp_path / "memo.txt"
        memo.write_text(memo_pair, encoding="utf-8")
        result = runner.invoke(app, ["sections", str(memo), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["delimiter_pattern"] == "PAIR_ANGLE_PAGE"
        assert [s["pages"] for s in data["sections"]] == [[1, 2], [3, 4]]

    def test_terminal(self, memo_file: Path):
        result = runner.invoke(app, ["sections", str(memo_file)])
        assert result.exit_code == 0
        assert "ANGLE_PAGE" in result.output

    def test_invalid_format(self, memo_file: Path):
        result = runner.invoke(app, ["sections", str(memo_file), "-f", "xml"])
        assert result.exit_code == 2


class TestReplace:
    def test_prints_rewritten_memo(self, tmp_path: Path, memo_angle: str):
        memo = tmp_path / "memo.txt"
        memo.write_text(memo_angle, encoding="utf-8")
        new_text = tmp_path / "page2.txt"
        new_text.write_text("おはよう！\n", encoding="utf-8")
        result = runner.invoke(app, ["replace", str(memo), "2", str(new_text)])
        assert result.exit_code == 0
        assert "<<2Page>>\nおはよう！\n<<3Page>>" in result.stdout
        assert memo.read_text(encoding="utf-8") == memo_angle

    def test_in_place_from_stdin(self, tmp_path: Path, memo_angle: str):
        memo = tmp_path / "memo.txt"
        memo.write_text(memo_angle, encoding="utf-8")
        result = runner.invoke(app, ["replace", str(memo), "3", "-", "--in-place"], input="じゃあね\n")
        assert result.exit_code == 0
        assert memo.read_text(encoding="utf-8").endswith("<<3Page>>\nじゃあね\n")

    def test_unknown_page(self, tmp_path: Path, memo_file: Path):
        new_text = tmp_path / "x.txt"
        new_text.write_text("x", encoding="utf-8")
        result = runner.invoke(app, ["replace", str(memo_file), "8", str(new_text)])
        assert result.exit_code == 1
