"""
Error types for MPlayer Bridge

Every failure raised to callers derives from PlayerError and carries an
ErrorCategory so front-ends can group them without isinstance ladders.
"""

from enum import Enum


class ErrorCategory(Enum):
    """Categories of errors"""
    USER_INPUT = "user_input"   # Bad construction arguments
    PROCESS = "process"         # No live player process
    IO = "io"                   # Pipe read/write failures
    PROTOCOL = "protocol"       # Malformed or missing answers


class PlayerError(Exception):
    """Base class for all MPlayer Bridge errors"""

    category = ErrorCategory.PROCESS


class InvalidArgumentError(PlayerError, ValueError):
    """The target resource is empty or does not exist"""

    category = ErrorCategory.USER_INPUT


class NotRunningError(PlayerError):
    """A command or query was issued while no player process is live"""

    def __init__(self, message: str = "mplayer isn't running"):
        super().__init__(message)


class PlayerIOError(PlayerError, OSError):
    """Writing to or reading from one of the player's pipes failed"""

    category = ErrorCategory.IO


class EndOfStreamError(PlayerIOError):
    """The output stream closed before the awaited answer line appeared"""

    category = ErrorCategory.PROTOCOL


class NumericFormatError(PlayerError, ValueError):
    """A property value could not be parsed as a number"""

    category = ErrorCategory.PROTOCOL

    def __init__(self, name: str, value: str):
        super().__init__(f"property {name!r} is not numeric: {value!r}")
        self.name = name
        self.value = value


class QueryTimeoutError(PlayerError, TimeoutError):
    """No answer arrived before the query deadline"""

    category = ErrorCategory.PROTOCOL
