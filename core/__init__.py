"""
Core Infrastructure
====================

Foundational components shared by the search engine.

Components:
- exceptions: Error hierarchy for search runs
- structured_log: JSON event logging
"""

from .exceptions import (
    SearchError,
    EvaluationFailure,
    GenerationFailure,
    ConfigurationError,
    SettingsValidationError,
    VectorLengthError,
    is_fatal,
    get_error_code,
)
from .structured_log import jlog, read_recent_logs

__all__ = [
    # Exceptions
    'SearchError',
    'EvaluationFailure',
    'GenerationFailure',
    'ConfigurationError',
    'SettingsValidationError',
    'VectorLengthError',
    'is_fatal',
    'get_error_code',
    # Structured Logging
    'jlog',
    'read_recent_logs',
]
