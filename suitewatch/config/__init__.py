"""Configuration module for suitewatch."""

from suitewatch.config.loader import load_config
from suitewatch.config.schema import DEFAULT_ORIGIN_URL, ActionConfig

__all__ = ["ActionConfig", "DEFAULT_ORIGIN_URL", "load_config"]
