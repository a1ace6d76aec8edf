"""Shared utilities for the node tree.

This module provides configuration objects, the exception hierarchy and
logging helpers used across all processing layers.
"""

from .config import (
    NodeTreeConfig,
    ParserConfig,
    SerializerConfig,
)
from .errors import (
    ConfigError,
    ConfigValidationError,
    DepthLimitError,
    InputTooLargeError,
    MalformedInputError,
    NodeTreeError,
    WriteFailureError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "NodeTreeConfig",
    "ParserConfig",
    "SerializerConfig",
    "ConfigError",
    "ConfigValidationError",
    "DepthLimitError",
    "InputTooLargeError",
    "MalformedInputError",
    "NodeTreeError",
    "WriteFailureError",
    "CorrelationLogger",
    "get_logger",
]
