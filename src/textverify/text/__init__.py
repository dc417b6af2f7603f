"""Text layer models and comparison normalisation."""

from textverify.text.layers import (
    BoundingBox,
    ExtractedTextLayer,
    LayerLoadError,
    PageInput,
    combine_text_for_comparison,
    layer_lines,
    load_pages,
    parse_pages,
    sort_reading_order,
)
from textverify.text.normalizer import CHUNK_SENTINEL, is_chunk_sentinel, normalize

__all__ = [
    "BoundingBox",
    "CHUNK_SENTINEL",
    "ExtractedTextLayer",
    "LayerLoadError",
    "PageInput",
    "combine_text_for_comparison",
    "is_chunk_sentinel",
    "layer_lines",
    "load_pages",
    "normalize",
    "parse_pages",
    "sort_reading_order",
]
