"""Configuration loading, schema, and defaults."""

from textverify.config.loader import ConfigError, load_config
from textverify.config.schema import (
    LayersConfig,
    MatchConfig,
    NormalizeConfig,
    OutputConfig,
    TextVerifyConfig,
)

__all__ = [
    "ConfigError",
    "LayersConfig",
    "MatchConfig",
    "NormalizeConfig",
    "OutputConfig",
    "TextVerifyConfig",
    "load_config",
]
