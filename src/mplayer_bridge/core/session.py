"""
Session data model for MPlayer Bridge

Defines the PlaybackSession dataclass that represents one controllable run of mplayer.
"""

import re
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List

from ..utils.errors import InvalidArgumentError

# scheme://... resources (http, dvd, tv, ...) are handed to mplayer unchecked
_URI_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*://')


class SessionStatus(Enum):
    """Lifecycle states of a playback session"""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    NOT_RUNNING = "not_running"


@dataclass
class PlaybackSession:
    """Represents one supervised run of the external player"""

    file: str
    options: List[str] = field(default_factory=list)
    status: SessionStatus = SessionStatus.NOT_STARTED
    created_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)
    command_history: List[str] = field(default_factory=list)
    output_buffer: List[str] = field(default_factory=list)
    max_history_length: int = 100
    max_output_length: int = 50
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def __post_init__(self):
        """Validate the target resource"""
        if not self.file:
            raise InvalidArgumentError("no file to play")

        if not _URI_PATTERN.match(self.file) and not Path(self.file).exists():
            raise InvalidArgumentError(f"file does not exist: {self.file}")

        self.options = list(self.options)

    def __setattr__(self, name, value):
        if name == "file" and "file" in self.__dict__:
            raise AttributeError("file cannot be changed once the session exists")
        super().__setattr__(name, value)

    def is_running(self) -> bool:
        return self.status == SessionStatus.RUNNING

    def update_activity(self):
        """Update the last activity timestamp"""
        self.last_activity = datetime.now()

    def add_command(self, command: str):
        """Add a sent command line to the history"""
        with self._lock:
            self.command_history.append(command)
            if len(self.command_history) > self.max_history_length:
                self.command_history = self.command_history[-self.max_history_length:]
        self.update_activity()

    def add_output(self, output: str):
        """Add a diagnostic line to the buffer"""
        # Called from the stdout and stderr reader threads
        with self._lock:
            self.output_buffer.append(output)
            if len(self.output_buffer) > self.max_output_length:
                self.output_buffer = self.output_buffer[-self.max_output_length:]

    def get_recent_commands(self, count: int = 10) -> List[str]:
        """Get recent commands from history"""
        with self._lock:
            return self.command_history[-count:] if self.command_history else []

    def get_recent_output(self, count: int = 10) -> List[str]:
        """Get recent diagnostic output"""
        with self._lock:
            return self.output_buffer[-count:] if self.output_buffer else []

    def to_dict(self) -> dict:
        """Convert session to dictionary representation"""
        return {
            "file": self.file,
            "options": list(self.options),
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity.isoformat(),
            "command_count": len(self.command_history),
            "output_count": len(self.output_buffer),
            "is_running": self.is_running()
        }
