"""Configuration loading, validation, and defaults."""

from foliodash.config.loader import load_config
from foliodash.config.schema import FoliodashConfig

__all__ = ["load_config", "FoliodashConfig"]
