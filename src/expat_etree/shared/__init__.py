"""Shared utilities for expat-backed tree building.

This module provides the error taxonomy, configuration objects, metrics and
logging helpers used across all layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ElementFactory,
    ParserConfig,
)
from .errors import (
    EmptyDocumentError,
    ParseError,
    ParserStateError,
    TagMismatchError,
    TokenizerError,
    UnclosedElementsError,
    UndefinedEntityError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
    new_correlation_id,
)
from .result import SessionMetrics

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ElementFactory",
    "ParserConfig",
    "EmptyDocumentError",
    "ParseError",
    "ParserStateError",
    "TagMismatchError",
    "TokenizerError",
    "UnclosedElementsError",
    "UndefinedEntityError",
    "CorrelationLogger",
    "get_logger",
    "new_correlation_id",
    "SessionMetrics",
]
