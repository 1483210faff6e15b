"""
Logging setup for MPlayer Bridge

Configures application-wide logging with rotation, formatting, and levels.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Receives every line mplayer prints; noisy at DEBUG
PLAYER_OUTPUT_LOGGER = 'player_output'


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
    output_level: str = "WARNING"
) -> logging.Logger:
    """Setup application logging with console and file handlers.

    output_level applies to the mplayer_bridge.player_output logger, which
    the stdout and stderr reader threads use for each raw player line. It
    defaults to WARNING so DEBUG runs are not flooded with status chatter.
    """

    logger = logging.getLogger('mplayer_bridge')
    logger.setLevel(getattr(logging, level.upper()))
    get_logger(PLAYER_OUTPUT_LOGGER).setLevel(getattr(logging, output_level.upper()))

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(filename)s:%(lineno)d - %(message)s'
    )

    simple_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s'
    )

    # Console handler on stderr; stdout belongs to the interactive prompt
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(simple_formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger with the given name"""
    return logging.getLogger(f'mplayer_bridge.{name}')
