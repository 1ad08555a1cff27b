"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates the sections the grouping runner reads.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If the file is empty or not a mapping
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")
    if not isinstance(config, dict):
        raise ValueError(f"Configuration file must contain a mapping: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    for section in ["data", "grouping"]:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    if "data" in config:
        data = config["data"] or {}
        if "people" not in data:
            issues.append("Missing data.people")

    if "grouping" in config:
        grouping = config["grouping"] or {}
        group_size = grouping.get("group_size")
        num_groups = grouping.get("num_groups")
        if group_size is None and num_groups is None:
            issues.append("One of grouping.group_size or grouping.num_groups is required")
        if group_size is not None and (not isinstance(group_size, int) or group_size < 1):
            issues.append(f"grouping.group_size must be a positive integer, got {group_size!r}")
        if num_groups is not None and (not isinstance(num_groups, int) or num_groups < 1):
            issues.append(f"grouping.num_groups must be a positive integer, got {num_groups!r}")
        if group_size is not None and group_size == 1:
            issues.append("grouping.group_size is 1: every person will be alone")

    if "rating" in config:
        rating = config["rating"] or {}
        lo, mid, hi = rating.get("min", 1), rating.get("neutral", 3), rating.get("max", 5)
        if not lo <= mid <= hi:
            issues.append(f"Rating scale must satisfy min <= neutral <= max, got {lo}, {mid}, {hi}")

    if "global" in config:
        level = str((config["global"] or {}).get("log_level", "INFO")).upper()
        if level not in VALID_LOG_LEVELS:
            issues.append(f"Unknown global.log_level: {level}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "grouping.group_size")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
