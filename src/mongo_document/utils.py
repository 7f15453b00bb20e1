"""
Utility functions for validation and logging
"""

import re
import logging
from typing import Any, MutableMapping
from .errors import InvalidModelMetadataError


def validate_collection_name(collection: str) -> str:
    """
    Validate a MongoDB collection name
    Only allows alphanumeric, underscore, hyphen and dot, not starting with "system."
    """
    if not isinstance(collection, str) or not re.match(r'^[a-zA-Z0-9_.-]+$', collection):
        raise InvalidModelMetadataError(
            f"Invalid collection name: '{collection}'. Only alphanumeric, underscore, hyphen and dot allowed."
        )
    if collection.startswith("system."):
        raise InvalidModelMetadataError(
            f"Invalid collection name: '{collection}'. The 'system.' prefix is reserved."
        )
    return collection


def rename_key(mapping: MutableMapping[str, Any], old: str, new: str) -> MutableMapping[str, Any]:
    """Rename a key in place, keeping its value. Missing keys are ignored."""
    if old in mapping:
        mapping[new] = mapping.pop(old)
    return mapping


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Setup logger with consistent format"""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear existing handlers to avoid duplication in multiprocess scenarios
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
