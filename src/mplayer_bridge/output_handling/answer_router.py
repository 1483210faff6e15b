"""
Answer routing for MPlayer Bridge

A single reader thread consumes the player's stdout, separates answer lines
from diagnostic chatter and hands each answer to the query waiting for it.
"""

import threading
from collections import deque
from typing import Callable, Deque, Dict, Optional, TextIO

from .answer_parser import ERROR_ANSWER, decode_answer
from ..utils.errors import EndOfStreamError, PlayerError, PlayerIOError, QueryTimeoutError
from ..utils.logging_setup import PLAYER_OUTPUT_LOGGER, get_logger

logger = get_logger('answer_router')
output_logger = get_logger(PLAYER_OUTPUT_LOGGER)


def _copy_error(error: PlayerError) -> PlayerError:
    # Each waiting thread raises its own instance
    return type(error)(*error.args)


class PendingQuery:
    """A property name awaited on the output stream"""

    def __init__(self, name: str):
        self.name = name
        self._event = threading.Event()
        self._value: Optional[str] = None
        self._error: Optional[PlayerError] = None

    def resolve(self, value: str):
        self._value = value
        self._event.set()

    def fail(self, error: PlayerError):
        self._error = error
        self._event.set()

    def done(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> str:
        """Block until the answer arrives; timeout=None waits forever"""
        if not self._event.wait(timeout):
            raise QueryTimeoutError(
                f"no answer for property {self.name!r} within {timeout}s"
            )
        if self._error is not None:
            raise self._error
        return self._value


class AnswerRouter:
    """Reads one stdout stream and routes answer lines to pending queries"""

    def __init__(self, stream: TextIO, line_callback: Optional[Callable[[str], None]] = None,
                 name: str = "mplayer-stdout"):
        self.stream = stream
        self.line_callback = line_callback
        self._pending: Dict[str, Deque[PendingQuery]] = {}
        # Answers still owed to queries that gave up waiting, per name
        self._abandoned: Dict[str, int] = {}
        self._lock = threading.Lock()
        self._closed_error: Optional[PlayerError] = None
        self._thread = threading.Thread(target=self._read_loop, name=name, daemon=True)

    def start(self):
        """Start the reader thread"""
        self._thread.start()

    def join(self, timeout: Optional[float] = None):
        self._thread.join(timeout)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed_error is not None

    def register(self, name: str) -> PendingQuery:
        """Register interest in the next answer for ``name``.

        Must be called before the query command is written so the answer
        cannot be read and discarded in between.
        """
        query = PendingQuery(name)
        with self._lock:
            if self._closed_error is not None:
                raise _copy_error(self._closed_error)
            self._pending.setdefault(name, deque()).append(query)
        return query

    def discard(self, query: PendingQuery) -> bool:
        """Forget a query whose command never reached mplayer"""
        with self._lock:
            return self._remove(query)

    def abandon(self, query: PendingQuery):
        """Give up on a query whose command was sent.

        mplayer still owes its answer, so the next answer for that name is
        dropped instead of being handed to a later query.
        """
        with self._lock:
            if self._remove(query):
                self._abandoned[query.name] = self._abandoned.get(query.name, 0) + 1

    def _remove(self, query: PendingQuery) -> bool:
        waiters = self._pending.get(query.name)
        if not waiters or query not in waiters:
            return False
        waiters.remove(query)
        if not waiters:
            del self._pending[query.name]
        return True

    def dispatch(self, line: str):
        """Classify one output line and deliver it if it answers a query"""
        answer = decode_answer(line)
        if answer is None:
            text = line.rstrip('\r\n')
            output_logger.debug(f"stdout: {text}")
            if self.line_callback:
                self.line_callback(text)
            return

        name, value = answer
        if name == ERROR_ANSWER:
            logger.warning(f"mplayer reported a failed query: {value}")

        with self._lock:
            owed = self._abandoned.get(name, 0)
            if owed:
                if owed == 1:
                    del self._abandoned[name]
                else:
                    self._abandoned[name] = owed - 1
                logger.debug(f"Dropping late answer {name}={value}")
                return

            waiters = self._pending.get(name)
            query = waiters.popleft() if waiters else None
            if waiters is not None and not waiters:
                del self._pending[name]

        if query is None:
            logger.debug(f"Discarding unrequested answer {name}={value}")
            return

        logger.debug(f"Answer for {name}: {value}")
        query.resolve(value)

    def close(self, error: PlayerError):
        """Fail every pending query and refuse new ones"""
        with self._lock:
            if self._closed_error is None:
                self._closed_error = error
            pending = [q for waiters in self._pending.values() for q in waiters]
            self._pending.clear()

        for query in pending:
            query.fail(_copy_error(error))

    def _read_loop(self):
        """Read stdout until end of stream"""
        try:
            for line in iter(self.stream.readline, ''):
                self.dispatch(line)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading mplayer stdout: {e}")
            self.close(PlayerIOError(f"error reading mplayer output: {e}"))
        else:
            logger.debug("mplayer stdout reached end of stream")
            self.close(EndOfStreamError("mplayer output closed before the answer arrived"))
        finally:
            try:
                self.stream.close()
            except OSError:
                pass
