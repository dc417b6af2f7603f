"""Extracted text layers — models, reading order, and file loading.

Layer extraction from PSD files happens outside this package; pages arrive
as a JSON or YAML document::

    - file: page_003.psd
      width: 1200
      height: 1800
      layers:
        - text: "こんにちは"
          layer_name: "balloon 1"
          bbox: {left: 900, top: 100, right: 1000, bottom: 400}
          visible: true
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

from textverify.text.normalizer import normalize

logger = logging.getLogger(__name__)

DEFAULT_ROW_RATIO = 0.08


class LayerLoadError(Exception):
    """Raised when a layer document is unreadable or malformed."""


@dataclass(frozen=True)
class BoundingBox:
    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2

    @property
    def center_y(self) -> float:
        return (self.top + self.bottom) / 2


@dataclass(frozen=True)
class ExtractedTextLayer:
    """One visible text layer as produced by the PSD reader."""

    text: str
    layer_name: str = ""
    bbox: BoundingBox = field(default_factory=BoundingBox)
    visible: bool = True


@dataclass
class PageInput:
    """All text layers of one page image."""

    file_name: str
    layers: List[ExtractedTextLayer] = field(default_factory=list)
    width: float = 0.0
    height: float = 0.0


def sort_reading_order(
    layers: Sequence[ExtractedTextLayer],
    canvas_height: float,
    row_ratio: float = DEFAULT_ROW_RATIO,
) -> List[ExtractedTextLayer]:
    """Sort layers top row first, right to left within a row.

    Rows are buckets of ``canvas_height * row_ratio`` pixels measured on the
    layer centre.
    """
    row_height = (canvas_height or 1) * row_ratio

    def key(layer: ExtractedTextLayer):
        return (math.floor(layer.bbox.center_y / row_height), -layer.bbox.center_x)

    return sorted(layers, key=key)


def combine_text_for_comparison(
    layers: Sequence[ExtractedTextLayer],
    preserve_chunks: bool = False,
) -> str:
    """Join trimmed, non-empty layer texts; a blank line between layers keeps them as chunks."""
    sep = "\n\n" if preserve_chunks else "\n"
    return sep.join(t for t in (layer.text.strip() for layer in layers) if t)


def layer_lines(layer: ExtractedTextLayer) -> List[str]:
    """Normalised, non-empty lines of a single layer."""
    text = normalize(layer.text)
    return text.split("\n") if text else []


# ---- loading ----


def _parse_bbox(raw: Any) -> BoundingBox:
    if raw is None:
        return BoundingBox()
    if not isinstance(raw, dict):
        raise LayerLoadError(f"bounding box must be a mapping, got {type(raw).__name__}")
    try:
        return BoundingBox(
            left=float(raw.get("left", 0)),
            top=float(raw.get("top", 0)),
            right=float(raw.get("right", 0)),
            bottom=float(raw.get("bottom", 0)),
        )
    except (TypeError, ValueError) as exc:
        raise LayerLoadError(f"invalid bounding box {raw!r}: {exc}") from exc


def _parse_layer(raw: Any) -> ExtractedTextLayer:
    if not isinstance(raw, dict) or "text" not in raw:
        raise LayerLoadError(f"layer entry needs a 'text' field: {raw!r}")
    return ExtractedTextLayer(
        text=str(raw["text"]),
        layer_name=str(raw.get("layer_name", raw.get("layerName", ""))),
        bbox=_parse_bbox(raw.get("bbox", raw.get("boundingBox"))),
        visible=bool(raw.get("visible", True)),
    )


def _parse_page(raw: Any, index: int, include_hidden: bool) -> PageInput:
    if not isinstance(raw, dict):
        raise LayerLoadError(f"page #{index + 1} must be a mapping")
    file_name = raw.get("file") or raw.get("file_name") or raw.get("fileName")
    if not file_name:
        raise LayerLoadError(f"page #{index + 1} has no 'file' name")
    layers_raw = raw.get("layers") or []
    if not isinstance(layers_raw, list):
        raise LayerLoadError(f"page {file_name}: 'layers' must be a list")

    layers: List[ExtractedTextLayer] = []
    for entry in layers_raw:
        layer = _parse_layer(entry)
        if not layer.visible and not include_hidden:
            continue
        if not layer.text.strip():
            continue
        layers.append(layer)

    try:
        width = float(raw.get("width", 0) or 0)
        height = float(raw.get("height", 0) or 0)
    except (TypeError, ValueError) as exc:
        raise LayerLoadError(f"page {file_name}: invalid canvas size: {exc}") from exc

    return PageInput(file_name=str(file_name), layers=layers, width=width, height=height)


def parse_pages(data: Any, include_hidden: bool = False) -> List[PageInput]:
    """Build PageInput objects from an already-decoded document."""
    if isinstance(data, dict):
        data = data.get("pages", [])
    if not isinstance(data, list):
        raise LayerLoadError("layer document must be a list of pages or {pages: [...]}")
    return [_parse_page(raw, i, include_hidden) for i, raw in enumerate(data)]


def load_pages(path: Path, include_hidden: bool = False) -> List[PageInput]:
    """Load pages from a ``.json`` or ``.yaml``/``.yml`` file."""
    try:
        with open(path, encoding="utf-8-sig") as f:
            if path.suffix.lower() == ".json":
                data: Dict[str, Any] | List[Any] = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as exc:
        raise LayerLoadError(f"Cannot read {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise LayerLoadError(f"{path} is not valid UTF-8: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise LayerLoadError(f"Failed to parse {path}: {exc}") from exc

    pages = parse_pages(data, include_hidden=include_hidden)
    logger.debug("Loaded %d page(s) from %s", len(pages), path)
    return pages
