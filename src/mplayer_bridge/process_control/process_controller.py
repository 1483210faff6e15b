"""
mplayer Process Controller

Manages the mplayer process lifecycle, its three pipes, and exit detection.
"""

import subprocess
import threading
from typing import List, Optional, TextIO, Tuple

import psutil

from ..core.session import PlaybackSession, SessionStatus
from ..output_handling.answer_router import AnswerRouter
from ..utils.config import PlayerConfig
from ..utils.errors import NotRunningError, PlayerIOError, QueryTimeoutError
from ..utils.logging_setup import PLAYER_OUTPUT_LOGGER, get_logger

logger = get_logger('process_controller')
output_logger = get_logger(PLAYER_OUTPUT_LOGGER)

# Always passed first: no status line spam, commands read from stdin
SLAVE_FLAGS = ["-quiet", "-slave"]


class ProcessController:
    """Controls one mplayer process for a playback session"""

    def __init__(self, session: PlaybackSession, config: Optional[PlayerConfig] = None):
        self.session = session
        self.config = config or PlayerConfig()
        self.process: Optional[subprocess.Popen] = None
        self.stdin: Optional[TextIO] = None
        self.stdout: Optional[TextIO] = None
        self.stderr: Optional[TextIO] = None
        self.answers: Optional[AnswerRouter] = None
        self.ps_process: Optional[psutil.Process] = None
        self._pid = 0
        self._lock = threading.RLock()
        self._reaper_thread: Optional[threading.Thread] = None
        self._error_thread: Optional[threading.Thread] = None

    def build_command(self) -> List[str]:
        """Assemble argv: player, slave flags, options, then the file last"""
        return (
            self.config.command_args()
            + SLAVE_FLAGS
            + list(self.config.default_options)
            + list(self.session.options)
            + [self.session.file]
        )

    @property
    def pid(self) -> int:
        """Pid of the live process, 0 when nothing is running"""
        with self._lock:
            return self._pid

    def start(self):
        """Start mplayer, killing any process this controller still runs"""
        with self._lock:
            previous = self.process if self._pid else None
            if previous is not None:
                logger.info(f"Replacing running mplayer (PID: {previous.pid})")
                self.kill()

        if previous is not None:
            try:
                previous.wait(timeout=self.config.restart_timeout)
            except subprocess.TimeoutExpired:
                logger.warning(f"mplayer (PID: {previous.pid}) did not exit after kill")

        cmd = self.build_command()
        logger.info(f"Starting mplayer for {self.session.file}")
        logger.debug(f"Command: {cmd}")

        with self._lock:
            try:
                process = subprocess.Popen(
                    cmd,
                    stdin=subprocess.PIPE,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True,
                    encoding=self.config.encoding,
                    errors='replace',
                    bufsize=1  # Line buffered
                )
            except OSError as e:
                logger.error(f"Failed to start mplayer: {e}")
                raise PlayerIOError(f"failed to start {cmd[0]}: {e}") from e

            self.process = process
            self.stdin = process.stdin
            self.stdout = process.stdout
            self.stderr = process.stderr
            self._pid = process.pid
            self.ps_process = self._inspect(process)
            self.session.status = SessionStatus.RUNNING
            self.session.update_activity()

            self.answers = AnswerRouter(
                process.stdout,
                line_callback=self.session.add_output,
                name=f"mplayer-stdout-{process.pid}"
            )
            self.answers.start()
            self._start_error_monitoring(process)
            self._start_reaper(process)

        logger.info(f"mplayer started with PID {process.pid}")

    def _inspect(self, process: subprocess.Popen) -> Optional[psutil.Process]:
        """Attach psutil to the child; the first cpu_percent call only sets a baseline"""
        try:
            ps_process = psutil.Process(process.pid)
            ps_process.cpu_percent(interval=None)
            return ps_process
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            logger.debug(f"Could not inspect mplayer process: {e}")
            return None

    def _start_error_monitoring(self, process: subprocess.Popen):
        """Drain stderr into the session diagnostic buffer"""
        self._error_thread = threading.Thread(
            target=self._monitor_stderr,
            args=(process.stderr,),
            name=f"mplayer-stderr-{process.pid}",
            daemon=True
        )
        self._error_thread.start()

    def _monitor_stderr(self, stream: TextIO):
        """Monitor stderr in a separate thread"""
        try:
            for line in iter(stream.readline, ''):
                line = line.rstrip('\n\r')
                output_logger.debug(f"stderr: {line}")
                self.session.add_output(line)
        except (OSError, ValueError) as e:
            logger.error(f"Error monitoring stderr: {e}")
        finally:
            try:
                stream.close()
            except OSError:
                pass

    def _start_reaper(self, process: subprocess.Popen):
        self._reaper_thread = threading.Thread(
            target=self._reap,
            args=(process,),
            name=f"mplayer-reaper-{process.pid}",
            daemon=True
        )
        self._reaper_thread.start()

    def _reap(self, process: subprocess.Popen):
        """Wait for the process to exit, then mark it not live"""
        exit_code = process.wait()
        logger.info(f"mplayer (PID: {process.pid}) exited with code {exit_code}")

        with self._lock:
            # A newer process may have replaced this one already
            if self.process is process and self._pid:
                self._pid = 0
                self.session.status = SessionStatus.NOT_RUNNING

        try:
            process.stdin.close()
        except (OSError, ValueError):
            pass

    def is_running(self) -> bool:
        """Check if mplayer is running.

        Advisory only: the process may exit right after this returns, so
        callers still have to handle I/O errors on the pipes.
        """
        with self._lock:
            return self.process is not None and self._pid != 0

    def kill(self):
        """Kill the running mplayer process without waiting for it to exit"""
        with self._lock:
            if not self.is_running():
                return

            logger.info(f"Killing mplayer (PID: {self._pid})")
            try:
                self.process.kill()
            except OSError as e:
                raise PlayerIOError(f"failed to kill mplayer: {e}") from e

            self._pid = 0
            self.session.status = SessionStatus.NOT_RUNNING
            self.session.update_activity()

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """Wait for the current process to exit and return its exit code"""
        with self._lock:
            process = self.process
        if process is None:
            return None

        try:
            return process.wait(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            raise QueryTimeoutError(f"mplayer still running after {timeout}s") from e

    def channel(self) -> Tuple[TextIO, AnswerRouter]:
        """Return the command pipe and answer router of the live process"""
        with self._lock:
            if not self.is_running():
                raise NotRunningError()
            return self.stdin, self.answers

    def get_process_info(self) -> dict:
        """Get process information"""
        with self._lock:
            process = self.process
            ps_process = self.ps_process
            live = self.is_running()

        if process is None:
            return {"status": "not_started", "pid": None}

        poll_result = process.poll()
        if not live or poll_result is not None:
            return {"status": "terminated", "pid": process.pid, "exit_code": poll_result}

        info = {"status": "running", "pid": process.pid}
        if ps_process is None:
            return info

        try:
            with ps_process.oneshot():
                info["cpu_percent"] = ps_process.cpu_percent(interval=None)
                info["memory_mb"] = ps_process.memory_info().rss / 1024 / 1024
                info["threads"] = ps_process.num_threads()
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            logger.debug(f"Could not inspect mplayer process: {e}")
        return info
