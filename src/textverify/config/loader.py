"""Load and merge configuration from .textverify.toml and env vars."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from textverify.config.schema import (
    OUTPUT_FORMATS,
    LayersConfig,
    MatchConfig,
    NormalizeConfig,
    OutputConfig,
    TextVerifyConfig,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".textverify.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(base_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = base_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _parse_bool(val: str) -> Optional[bool]:
    lowered = val.strip().lower()
    if lowered in ("1", "true", "yes"):
        return True
    if lowered in ("0", "false", "no"):
        return False
    return None


def _merge_env_overrides(cfg: TextVerifyConfig) -> None:
    """Apply TEXTVERIFY_* environment variable overrides."""
    if val := os.environ.get("TEXTVERIFY_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("TEXTVERIFY_PRESERVE_CHUNKS"):
        flag = _parse_bool(val)
        if flag is not None:
            cfg.normalize.preserve_chunks = flag
    for env_name, attr in (
        ("TEXTVERIFY_SHORT_THRESHOLD", "short_threshold"),
        ("TEXTVERIFY_LONG_THRESHOLD", "long_threshold"),
    ):
        if val := os.environ.get(env_name):
            try:
                threshold = float(val)
            except ValueError:
                logger.debug("Ignoring non-numeric %s=%r", env_name, val)
                continue
            if 0.0 <= threshold <= 1.0:
                setattr(cfg.match, attr, threshold)


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    import dataclasses

    valid_fields = {f.name for f in dataclasses.fields(cls)}
    raw_section = data.get(section, {})
    if not isinstance(raw_section, dict):
        raise ConfigError(f"[{section}] must be a table")
    filtered = {k: v for k, v in raw_section.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: TextVerifyConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format: {cfg.output.format!r}")
    for name in ("short_threshold", "long_threshold"):
        value = getattr(cfg.match, name)
        if not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
            raise ConfigError(f"match.{name} must be between 0 and 1, got {value!r}")
    if not isinstance(cfg.match.short_max_len, int) or cfg.match.short_max_len < 0:
        raise ConfigError("match.short_max_len must be a non-negative integer")
    if not isinstance(cfg.layers.row_ratio, (int, float)) or cfg.layers.row_ratio <= 0:
        raise ConfigError("layers.row_ratio must be positive")


def load_config(
    base_dir: Path,
    config_override: Optional[str] = None,
) -> TextVerifyConfig:
    """Load, validate, and return a TextVerifyConfig."""
    config_path = find_config_file(base_dir, config_override)

    if config_path is None:
        cfg = TextVerifyConfig()
    else:
        logger.debug("Loading config from %s", config_path)
        raw = _parse_toml(config_path)
        cfg = TextVerifyConfig(
            version=raw.get("version", "1.0"),
            normalize=_build_section(raw, NormalizeConfig, "normalize"),
            match=_build_section(raw, MatchConfig, "match"),
            layers=_build_section(raw, LayersConfig, "layers"),
            output=_build_section(raw, OutputConfig, "output"),
        )

    _merge_env_overrides(cfg)
    _validate(cfg)
    return cfg
