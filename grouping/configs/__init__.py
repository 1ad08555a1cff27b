"""Configuration loading for the grouping runner."""

from .loader import get_config_value, load_config, validate_config

__all__ = ["get_config_value", "load_config", "validate_config"]
