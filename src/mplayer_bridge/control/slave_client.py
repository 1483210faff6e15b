"""
mplayer Slave-Mode Client

Frames commands onto mplayer's stdin and turns property answers into typed values.
See http://www.mplayerhq.hu/DOCS/tech/slave.txt for commands and properties.
"""

import threading
from enum import Enum
from typing import Iterable, Optional, TextIO, Union

from ..core.session import PlaybackSession
from ..process_control.process_controller import ProcessController
from ..utils.config import Config
from ..utils.errors import NumericFormatError, PlayerIOError, QueryTimeoutError
from ..utils.logging_setup import get_logger

logger = get_logger('slave_client')

Number = Union[int, float]

# Seek mode 2: absolute position in seconds
SEEK_ABSOLUTE = "2"


class _Unset(Enum):
    """Marks a timeout argument the caller left out"""
    TOKEN = 0


_UNSET = _Unset.TOKEN


class SlaveClient:
    """Speaks the slave protocol to one supervised mplayer process"""

    def __init__(self, controller: ProcessController, query_timeout: Optional[float] = None):
        self.controller = controller
        self.query_timeout = query_timeout
        self._write_lock = threading.Lock()

    @classmethod
    def for_file(cls, file: str, *options: str, config: Optional[Config] = None) -> 'SlaveClient':
        """Build session, controller and client for one file.

        options are listed like on the command line, e.g.
        SlaveClient.for_file("foobar.mkv", "-fs", "-alang", "hu,en")
        """
        config = config or Config()
        session = PlaybackSession(
            file=file,
            options=list(options),
            max_history_length=config.session.max_history_length,
            max_output_length=config.session.max_output_length
        )
        controller = ProcessController(session, config.player)
        return cls(controller, query_timeout=config.player.query_timeout)

    @property
    def session(self) -> PlaybackSession:
        return self.controller.session

    def send_command(self, name: str, *args: str):
        """Write one command line to mplayer's stdin"""
        stdin, _ = self.controller.channel()
        self._write(stdin, name, args)

    def _write(self, stdin: TextIO, name: str, args: Iterable[str]):
        line = " ".join([name, *(str(arg) for arg in args)])
        logger.debug(f"Sending command: {line}")

        with self._write_lock:
            try:
                stdin.write(line + "\n")
                stdin.flush()
            except (OSError, ValueError) as e:
                # Broken pipe or stdin already closed by the reaper
                logger.error(f"Error sending command {line!r}: {e}")
                raise PlayerIOError(f"failed to send {line!r}: {e}") from e

        self.session.add_command(line)

    def get_property(self, name: str, timeout: Union[Optional[float], _Unset] = _UNSET) -> str:
        """Get the value of an mplayer property.

        Blocks until mplayer answers. With no timeout configured this waits
        forever for a property mplayer never reports.
        """
        if timeout is _UNSET:
            timeout = self.query_timeout

        stdin, answers = self.controller.channel()
        query = answers.register(name)
        try:
            self._write(stdin, "pausing_keep get_property", (name,))
        except PlayerIOError:
            answers.discard(query)
            raise

        try:
            return query.wait(timeout)
        except QueryTimeoutError:
            answers.abandon(query)
            raise

    def set_property(self, name: str, value: object) -> None:
        """Set an mplayer property without touching the pause state"""
        self.send_command("pausing_keep set_property", name, str(value))

    def _get_float(self, name: str) -> float:
        value = self.get_property(name)
        try:
            return float(value)
        except ValueError as e:
            raise NumericFormatError(name, value) from e

    def path(self) -> str:
        """Returns the path of the currently played file"""
        return self.get_property("path")

    def length(self) -> float:
        """Returns the length of the currently played file in seconds"""
        return self._get_float("length")

    def position(self) -> float:
        """Returns the position in seconds in the currently played file"""
        return self._get_float("time_pos")

    def playing(self) -> bool:
        return self.controller.is_running()

    def play(self):
        """Start playback, restarting mplayer if it is already running"""
        self.controller.start()

    def pause(self):
        """Pause playback. Calling this again unpauses."""
        self.send_command("pause")

    def stop(self):
        self.controller.kill()

    def seek(self, seconds: Number):
        """Seek to an absolute position in seconds"""
        self.send_command("seek", _format_seconds(seconds), SEEK_ABSOLUTE)


def _format_seconds(seconds: Number) -> str:
    if isinstance(seconds, float) and seconds.is_integer():
        return str(int(seconds))
    return str(seconds)
