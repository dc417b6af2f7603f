"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutputFormat = Literal["terminal", "json"]

OUTPUT_FORMATS = ("terminal", "json")


@dataclass
class NormalizeConfig:
    preserve_chunks: bool = False  # keep blank-line boundaries as separators


@dataclass
class MatchConfig:
    short_threshold: float = 0.2  # lines of short_max_len chars or fewer
    long_threshold: float = 0.4
    short_max_len: int = 5


@dataclass
class LayersConfig:
    row_ratio: float = 0.08  # reading-order row height, fraction of canvas height
    include_hidden: bool = False


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True
    show_matches: bool = True


@dataclass
class TextVerifyConfig:
    version: str = "1.0"
    normalize: NormalizeConfig = field(default_factory=NormalizeConfig)
    match: MatchConfig = field(default_factory=MatchConfig)
    layers: LayersConfig = field(default_factory=LayersConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
