"""
Utility functions for the receipt price advocate: logging and configuration
"""

import copy
import os
import sys
from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "advocate_config.yaml"

DEFAULT_CONFIG: Dict = {
    'logging': {
        'level': 'INFO',
        'file': 'logs/receipt_advocate.log',
    },
    'store_identifier': {
        'header_lines': 10,
    },
    'catalog': {
        'path': None,
    },
    'comparison': {
        'price_source': 'catalog',
        'advocacy_threshold': '0.20',
        'delivery_markup_percent': '0.18',
    },
    'open_food_facts': {
        'base_url': 'https://world.openfoodfacts.org/api/v2/search',
        'page_size': 3,
        'timeout_seconds': 10.0,
        'min_interval_seconds': 7.0,
    },
    'simulated': {
        'coverage': 0.7,
        'min_discount': 0.05,
        'max_discount': 0.15,
        'seed': None,
    },
}


def ensure_directory(dir_path: str) -> str:
    """
    Ensure directory exists, create if it doesn't

    Args:
        dir_path: Directory path

    Returns:
        Absolute path to directory
    """
    path = Path(dir_path)
    path.mkdir(parents=True, exist_ok=True)
    return str(path.absolute())


def deep_merge(base: Dict, override: Dict) -> Dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict:
    """
    Load configuration from YAML file, layered over DEFAULT_CONFIG

    Args:
        config_path: Path to YAML file (default: config/advocate_config.yaml)

    Returns:
        Complete configuration dictionary
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not os.path.exists(config_path):
        logger.warning(f"Config file not found: {config_path}, using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f) or {}

    return deep_merge(DEFAULT_CONFIG, config)


# Logging setup helper
def setup_logging(log_file: str = "logs/receipt_advocate.log", level: str = "INFO"):
    """
    Setup logging configuration

    Args:
        log_file: Path to log file
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    # Remove default handler
    logger.remove()

    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=level
    )

    if log_file:
        ensure_directory(os.path.dirname(log_file) or ".")
        logger.add(
            log_file,
            rotation="10 MB",
            retention="30 days",
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
        )

    logger.info("Logging initialized")
