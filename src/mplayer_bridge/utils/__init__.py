"""
Utility modules for MPlayer Bridge

Contains configuration management, logging setup, and the error types.
"""

from .config import Config, PlayerConfig, SessionConfig, LoggingConfig
from .logging_setup import setup_logging, get_logger
from .errors import (
    ErrorCategory,
    PlayerError,
    InvalidArgumentError,
    NotRunningError,
    PlayerIOError,
    EndOfStreamError,
    NumericFormatError,
    QueryTimeoutError,
)

__all__ = [
    "Config",
    "PlayerConfig",
    "SessionConfig",
    "LoggingConfig",
    "setup_logging",
    "get_logger",
    "ErrorCategory",
    "PlayerError",
    "InvalidArgumentError",
    "NotRunningError",
    "PlayerIOError",
    "EndOfStreamError",
    "NumericFormatError",
    "QueryTimeoutError",
]
