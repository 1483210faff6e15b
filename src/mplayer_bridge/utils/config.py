"""
Configuration management for MPlayer Bridge

Handles loading and validation of configuration from JSON files and environment variables.
"""

import json
import os
import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


@dataclass
class PlayerConfig:
    """mplayer process configuration"""
    command: str = "mplayer"
    default_options: List[str] = field(default_factory=list)
    query_timeout: Optional[float] = None  # None waits forever
    restart_timeout: float = 5.0
    encoding: str = "utf-8"

    def command_args(self) -> List[str]:
        """Split the configured command into argv form"""
        return shlex.split(self.command)


@dataclass
class SessionConfig:
    """Session bookkeeping configuration"""
    max_output_length: int = 50
    max_history_length: int = 100


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    file: Optional[str] = None
    max_size: str = "10MB"
    backup_count: int = 5
    output_level: str = "WARNING"

    def max_bytes(self) -> int:
        return parse_size(self.max_size)


_SIZE_UNITS = {
    "": 1, "B": 1,
    "K": 1024, "KB": 1024,
    "M": 1024 ** 2, "MB": 1024 ** 2,
    "G": 1024 ** 3, "GB": 1024 ** 3,
}


def parse_size(value: str) -> int:
    """Convert a size such as '10MB' or '512KB' into bytes"""
    match = re.fullmatch(r'\s*(\d+)\s*([KMG]?B?)\s*', str(value).upper())
    if not match:
        raise ValueError(f"Invalid size: {value!r}")
    number, unit = match.groups()
    return int(number) * _SIZE_UNITS[unit]


def _optional_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass
class Config:
    """Main configuration class"""
    player: PlayerConfig = field(default_factory=PlayerConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> 'Config':
        """Load configuration from JSON file with environment variable override"""
        config_path = Path(config_path)

        # Load environment variables from .env file if it exists
        env_file = config_path.parent / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """Build configuration from a dict, letting environment variables win"""
        player = data.get('player', {})
        session = data.get('session', {})
        logging_data = data.get('logging', {})
        defaults = cls()

        default_options = player.get('default_options', defaults.player.default_options)
        env_options = os.getenv('MPLAYER_DEFAULT_OPTIONS')
        if env_options is not None:
            default_options = shlex.split(env_options)

        player_config = PlayerConfig(
            command=os.getenv('MPLAYER_COMMAND', player.get('command', defaults.player.command)),
            default_options=list(default_options),
            query_timeout=_optional_float(
                os.getenv('MPLAYER_QUERY_TIMEOUT', player.get('query_timeout'))
            ),
            restart_timeout=float(
                os.getenv('MPLAYER_RESTART_TIMEOUT', player.get('restart_timeout', defaults.player.restart_timeout))
            ),
            encoding=os.getenv('MPLAYER_ENCODING', player.get('encoding', defaults.player.encoding))
        )

        session_config = SessionConfig(
            max_output_length=int(
                os.getenv('SESSION_MAX_OUTPUT', session.get('max_output_length', defaults.session.max_output_length))
            ),
            max_history_length=int(
                os.getenv('SESSION_MAX_HISTORY', session.get('max_history_length', defaults.session.max_history_length))
            )
        )

        logging_config = LoggingConfig(
            level=os.getenv('LOG_LEVEL', logging_data.get('level', defaults.logging.level)),
            file=os.getenv('LOG_FILE', logging_data.get('file', defaults.logging.file)),
            max_size=os.getenv('LOG_MAX_SIZE', logging_data.get('max_size', defaults.logging.max_size)),
            backup_count=int(os.getenv('LOG_BACKUP_COUNT', logging_data.get('backup_count', defaults.logging.backup_count))),
            output_level=os.getenv('LOG_OUTPUT_LEVEL', logging_data.get('output_level', defaults.logging.output_level))
        )

        return cls(
            player=player_config,
            session=session_config,
            logging=logging_config
        )

    def validate(self) -> bool:
        """Validate configuration values"""
        errors = []

        if not self.player.command.strip():
            errors.append("Player command is required")

        if self.player.query_timeout is not None and self.player.query_timeout <= 0:
            errors.append("Query timeout must be positive")

        if self.player.restart_timeout <= 0:
            errors.append("Restart timeout must be positive")

        if self.session.max_output_length <= 0:
            errors.append("Session max output length must be positive")

        if self.session.max_history_length <= 0:
            errors.append("Session max history length must be positive")

        for level in (self.logging.level, self.logging.output_level):
            if level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
                errors.append(f"Unknown log level: {level}")

        try:
            parse_size(self.logging.max_size)
        except ValueError as e:
            errors.append(str(e))

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        return True
