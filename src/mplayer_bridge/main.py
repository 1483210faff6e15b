#!/usr/bin/env python3
"""
MPlayer Bridge - Main Entry Point

Plays one file in mplayer and controls it from an interactive console.
"""

import argparse
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, TextIO

from mplayer_bridge import __version__
from mplayer_bridge.control.slave_client import SlaveClient
from mplayer_bridge.utils.config import Config
from mplayer_bridge.utils.errors import PlayerError, QueryTimeoutError
from mplayer_bridge.utils.logging_setup import get_logger, setup_logging

logger = get_logger('main')

HELP_TEXT = """Commands:
  pause              toggle pause
  seek SECONDS       jump to an absolute position
  pos | length | path
  get NAME           query any property
  set NAME VALUE     set any property
  raw LINE           send a literal slave command
  status             show process and session state
  play               (re)start playback
  stop               kill mplayer
  quit               stop and exit"""


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file, or defaults plus environment"""
    if config_path is None:
        return Config.from_dict({})

    config_file = Path(config_path)
    if not config_file.exists():
        print(f"❌ Configuration file not found: {config_path}")
        sys.exit(1)

    try:
        return Config.load_from_file(config_file)
    except (OSError, ValueError) as e:
        print(f"❌ Failed to load configuration: {e}")
        sys.exit(1)


class BridgeConsole:
    """Interactive console driving one SlaveClient"""

    def __init__(self, client: SlaveClient, output: TextIO = sys.stdout):
        self.client = client
        self.output = output
        self.running = False
        self.handlers: Dict[str, Callable[[List[str]], None]] = {
            "pause": lambda args: self.client.pause(),
            "seek": self._seek,
            "pos": lambda args: self._print(f"{self.client.position()}"),
            "length": lambda args: self._print(f"{self.client.length()}"),
            "path": lambda args: self._print(self.client.path()),
            "get": self._get,
            "set": self._set,
            "raw": self._raw,
            "status": self._status,
            "play": lambda args: self.client.play(),
            "stop": lambda args: self.client.stop(),
            "help": lambda args: self._print(HELP_TEXT),
        }

    def _print(self, text: str):
        print(text, file=self.output)

    def _seek(self, args: List[str]):
        if len(args) != 1:
            raise ValueError("usage: seek SECONDS")
        self.client.seek(float(args[0]))

    def _get(self, args: List[str]):
        if len(args) != 1:
            raise ValueError("usage: get NAME")
        self._print(self.client.get_property(args[0]))

    def _set(self, args: List[str]):
        if len(args) < 2:
            raise ValueError("usage: set NAME VALUE")
        self.client.set_property(args[0], " ".join(args[1:]))

    def _raw(self, args: List[str]):
        if not args:
            raise ValueError("usage: raw LINE")
        self.client.send_command(*args)

    def _status(self, args: List[str]):
        info = self.client.controller.get_process_info()
        self._print(f"process: {info}")
        self._print(f"session: {self.client.session.to_dict()}")
        for line in self.client.session.get_recent_output(5):
            self._print(f"  | {line}")

    def handle_line(self, line: str) -> bool:
        """Execute one console line; returns False when the console should exit"""
        parts = line.split()
        if not parts:
            return True

        command, args = parts[0].lower(), parts[1:]
        if command in ("quit", "exit"):
            return False

        handler = self.handlers.get(command)
        if handler is None:
            self._print(f"⚠️ Unknown command: {command} (try 'help')")
            return True

        try:
            handler(args)
        except QueryTimeoutError as e:
            self._print(f"⏱️ {e}")
        except PlayerError as e:
            logger.warning(f"Command {command} failed: {e}")
            self._print(f"❌ {e}")
        except ValueError as e:
            self._print(f"❌ {e}")
        return True

    def run(self, source: TextIO = sys.stdin):
        """Read commands until quit or end of input"""
        self.running = True
        self._print("🎬 Type 'help' for commands")
        try:
            for line in source:
                if not self.handle_line(line):
                    break
        finally:
            self.running = False
            self.client.stop()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="MPlayer Bridge - control mplayer over its slave protocol"
    )
    parser.add_argument("file", help="Media file or URI to play")
    parser.add_argument(
        "--config", "-c",
        help="Configuration file path (JSON)",
        default=None
    )
    parser.add_argument(
        "--option", "-o",
        action="append",
        default=[],
        help="Extra mplayer option, repeatable (e.g. -o=-fs)"
    )
    parser.add_argument(
        "--log-level",
        help="Override the configured log level",
        default=None
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"MPlayer Bridge {__version__}"
    )

    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.log_level:
        config.logging.level = args.log_level

    try:
        config.validate()
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    setup_logging(
        level=config.logging.level,
        log_file=config.logging.file,
        max_bytes=config.logging.max_bytes(),
        backup_count=config.logging.backup_count,
        output_level=config.logging.output_level
    )

    try:
        client = SlaveClient.for_file(args.file, *args.option, config=config)
        client.play()
    except PlayerError as e:
        logger.error(f"Failed to start playback: {e}")
        print(f"❌ {e}")
        return 1

    print(f"▶️ Playing {args.file}")
    console = BridgeConsole(client)
    try:
        console.run()
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
    print("👋 Stopped")
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
