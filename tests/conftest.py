"""
Shared fixtures for the MPlayer Bridge test suite
"""

import json
import shlex
import sys
import time
from pathlib import Path

import pytest

from mplayer_bridge.control.slave_client import SlaveClient
from mplayer_bridge.utils.config import Config

FAKE_MPLAYER = Path(__file__).parent / "fixtures" / "fake_mplayer.py"


def wait_for(predicate, timeout: float = 5.0, interval: float = 0.02) -> bool:
    """Poll predicate until it returns True or the timeout expires"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


class CommandLog:
    """Reads back what the fake player recorded"""

    def __init__(self, path: Path):
        self.path = path

    def entries(self):
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    def commands(self):
        return [e["command"] for e in self.entries() if "command" in e]

    def argvs(self):
        return [e["argv"] for e in self.entries() if "argv" in e]


@pytest.fixture
def media_file(tmp_path):
    """An existing (empty) media file"""
    path = tmp_path / "movie.mkv"
    path.write_bytes(b"")
    return path


@pytest.fixture
def command_log(tmp_path, monkeypatch):
    log_path = tmp_path / "fake_mplayer.log"
    monkeypatch.setenv("FAKE_MPLAYER_LOG", str(log_path))
    return CommandLog(log_path)


@pytest.fixture
def fake_config(command_log):
    """Config pointing the bridge at the fake player"""
    config = Config()
    config.player.command = f"{shlex.quote(sys.executable)} {shlex.quote(str(FAKE_MPLAYER))}"
    config.player.query_timeout = 5.0
    return config


@pytest.fixture
def make_client(media_file, fake_config):
    """Factory for clients on the fake player, stopped at teardown"""
    clients = []

    def factory(*options, file=None):
        client = SlaveClient.for_file(str(file or media_file), *options, config=fake_config)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.stop()
        client.controller.wait(timeout=5)


@pytest.fixture
def wait_until():
    """Expose the polling helper to tests"""
    return wait_for
