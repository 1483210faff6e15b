"""
Unit tests for PlaybackSession
"""

import threading
import time
from datetime import datetime

import pytest
from mplayer_bridge.core.session import PlaybackSession, SessionStatus
from mplayer_bridge.utils.errors import InvalidArgumentError


class TestPlaybackSession:
    """Test cases for PlaybackSession data model"""

    def test_session_creation(self, media_file):
        """Test session creation with required parameters"""
        session = PlaybackSession(file=str(media_file), options=("-fs", "-alang", "hu,en"))

        assert session.file == str(media_file)
        assert session.options == ["-fs", "-alang", "hu,en"]
        assert session.status == SessionStatus.NOT_STARTED
        assert session.command_history == []
        assert session.output_buffer == []
        assert isinstance(session.created_at, datetime)
        assert not session.is_running()

    def test_session_creation_empty_file(self):
        """Test that an empty file raises InvalidArgumentError"""
        with pytest.raises(InvalidArgumentError, match="no file to play"):
            PlaybackSession(file="")

    def test_session_creation_missing_file(self, tmp_path):
        with pytest.raises(InvalidArgumentError, match="does not exist"):
            PlaybackSession(file=str(tmp_path / "missing.webm"))

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            PlaybackSession(file="")

    def test_uri_is_not_checked(self):
        session = PlaybackSession(file="http://example.com/stream.ogg")
        assert session.file == "http://example.com/stream.ogg"

    def test_file_is_immutable(self, media_file, tmp_path):
        session = PlaybackSession(file=str(media_file))
        with pytest.raises(AttributeError):
            session.file = str(tmp_path / "other.mkv")
        assert session.file == str(media_file)

    def test_options_are_copied(self, media_file):
        options = ["-fs"]
        session = PlaybackSession(file=str(media_file), options=options)
        options.append("-nosound")
        assert session.options == ["-fs"]

    def test_add_command(self, media_file):
        """Test command history management"""
        session = PlaybackSession(file=str(media_file))
        original_time = session.last_activity
        time.sleep(0.01)

        session.add_command("pause")
        session.add_command("seek 30 2")

        assert session.command_history == ["pause", "seek 30 2"]
        assert session.last_activity > original_time

        for i in range(150):
            session.add_command(f"seek {i} 2")

        assert len(session.command_history) == 100
        assert "seek 149 2" in session.command_history
        assert "pause" not in session.command_history

    def test_add_output(self, media_file):
        """Test diagnostic buffer management"""
        session = PlaybackSession(file=str(media_file), max_output_length=5)

        for i in range(8):
            session.add_output(f"line {i}")

        assert session.output_buffer == [f"line {i}" for i in range(3, 8)]
        assert session.get_recent_output(2) == ["line 6", "line 7"]

    def test_get_recent_commands(self, media_file):
        session = PlaybackSession(file=str(media_file))
        commands = ["pause", "pause", "seek 10 2", "pausing_keep get_property path"]
        for cmd in commands:
            session.add_command(cmd)

        assert session.get_recent_commands(2) == ["seek 10 2", "pausing_keep get_property path"]
        assert session.get_recent_commands(10) == commands
        assert PlaybackSession(file=str(media_file)).get_recent_commands(5) == []

    def test_recent_snapshots_while_writing(self, media_file):
        """Readers get consistent slices while reader threads append"""
        session = PlaybackSession(file=str(media_file), max_output_length=20)
        stop = threading.Event()

        def writer():
            i = 0
            while not stop.is_set():
                session.add_output(f"line {i}")
                i += 1

        thread = threading.Thread(target=writer)
        thread.start()
        try:
            for _ in range(500):
                snapshot = session.get_recent_output(10)
                assert len(snapshot) <= 10
                numbers = [int(line.split()[1]) for line in snapshot]
                if numbers:
                    assert numbers == list(range(numbers[0], numbers[0] + len(numbers)))
        finally:
            stop.set()
            thread.join(timeout=5)

    def test_to_dict(self, media_file):
        """Test dictionary conversion"""
        session = PlaybackSession(file=str(media_file), options=["-fs"])
        session.add_command("pause")
        session.add_output("Playing movie.mkv.")

        result = session.to_dict()

        assert result["file"] == str(media_file)
        assert result["options"] == ["-fs"]
        assert result["status"] == "not_started"
        assert result["command_count"] == 1
        assert result["output_count"] == 1
        assert result["is_running"] is False
        assert isinstance(result["created_at"], str)
        assert isinstance(result["last_activity"], str)


if __name__ == "__main__":
    pytest.main([__file__])
