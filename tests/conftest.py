"""Shared test fixtures — sample memos, layer documents, pages."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest

from textverify.text.layers import BoundingBox, ExtractedTextLayer, PageInput


def _make_layer(text: str, x: float = 0, y: float = 0, name: str = "") -> ExtractedTextLayer:
    """A layer whose bounding-box centre is (x, y)."""
    return ExtractedTextLayer(
        text=text,
        layer_name=name or text[:8],
        bbox=BoundingBox(left=x - 10, top=y - 10, right=x + 10, bottom=y + 10),
    )


@pytest.fixture
def make_layer():
    """Factory for layers positioned by their centre point."""
    return _make_layer


@pytest.fixture
def memo_angle() -> str:
    """A memo using <<NPage>> delimiters."""
    return textwrap.dedent("""\
        <<1Page>>
        こんにちは
        さようなら

        <<2Page>>
        おはよう
        <<3Page>>
        またね
    """)


@pytest.fixture
def memo_pair() -> str:
    """A memo whose sections each cover a two-page spread."""
    return textwrap.dedent("""\
        <<1,2Page>>
        最初の台詞
        二番目の台詞
        三番目の台詞
        <<3,4Page>>
        次の見開き
    """)


@pytest.fixture
def memo_with_header() -> str:
    """A memo exported with a COMIC-POT header line."""
    return textwrap.dedent("""\
        [COMIC-POT:sample]
        [1巻1P]
        一ページ目
        [1巻2P]
        二ページ目
    """)


@pytest.fixture
def memo_no_delimiters() -> str:
    """A memo separated only by runs of blank lines."""
    return "first page\nline two\n\n\nsecond page\n\n\n\nthird page\n"


@pytest.fixture
def sample_pages() -> list[PageInput]:
    """Three pages; page 2 differs from the angle memo by one character."""
    return [
        PageInput(
            file_name="P001.psd",
            layers=[
                _make_layer("こんにちは", x=900, y=100),
                _make_layer("さようなら", x=300, y=100),
            ],
            width=1000,
            height=1000,
        ),
        PageInput(
            file_name="P002.psd",
            layers=[_make_layer("おはよー", x=500, y=500)],
            width=1000,
            height=1000,
        ),
        PageInput(
            file_name="P003.psd",
            layers=[_make_layer("またね", x=500, y=500)],
            width=1000,
            height=1000,
        ),
    ]


@pytest.fixture
def layers_document() -> dict:
    """A layer document as written by the PSD extraction step."""
    return {
        "pages": [
            {
                "file": "page_001.psd",
                "width": 1000,
                "height": 1000,
                "layers": [
                    {
                        "text": "さようなら",
                        "layerName": "left balloon",
                        "boundingBox": {"left": 100, "top": 50, "right": 200, "bottom": 150},
                        "visible": True,
                    },
                    {
                        "text": "こんにちは",
                        "layer_name": "right balloon",
                        "bbox": {"left": 800, "top": 60, "right": 900, "bottom": 140},
                    },
                    {
                        "text": "hidden note",
                        "layer_name": "memo",
                        "bbox": {"left": 0, "top": 0, "right": 10, "bottom": 10},
                        "visible": False,
                    },
                    {"text": "   ", "layer_name": "empty"},
                ],
            }
        ]
    }


@pytest.fixture
def layers_file(tmp_path: Path, layers_document: dict) -> Path:
    path = tmp_path / "layers.json"
    path.write_text(json.dumps(layers_document, ensure_ascii=False), encoding="utf-8")
    return path
