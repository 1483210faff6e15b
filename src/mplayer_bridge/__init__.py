"""
MPlayer Bridge - Slave-Mode Supervisor for mplayer

Starts, restarts and kills a single mplayer process and controls it over
its standard streams using mplayer's slave protocol.
"""

__version__ = "1.0.0"

from .core.session import PlaybackSession, SessionStatus
from .process_control.process_controller import ProcessController
from .control.slave_client import SlaveClient
from .utils.config import Config
from .utils.errors import (
    PlayerError,
    InvalidArgumentError,
    NotRunningError,
    PlayerIOError,
    EndOfStreamError,
    NumericFormatError,
    QueryTimeoutError,
)

__all__ = [
    "PlaybackSession",
    "SessionStatus",
    "ProcessController",
    "SlaveClient",
    "Config",
    "PlayerError",
    "InvalidArgumentError",
    "NotRunningError",
    "PlayerIOError",
    "EndOfStreamError",
    "NumericFormatError",
    "QueryTimeoutError"
]
