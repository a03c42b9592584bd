import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import colorlog

REDACTED = "***"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the centralised logging settings."""
    log_level = (level or os.getenv('SUBSONIC_LOG_LEVEL', 'INFO')).upper()
    log_file = os.getenv('SUBSONIC_LOG_FILE')
    max_bytes = int(os.getenv('LOG_FILE_MAX_BYTES', '10485760'))  # 10 MB
    backup_count = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))

    # Create a custom logger
    logger = logging.getLogger()
    logger.setLevel(log_level)

    if not logger.hasHandlers():
        # Create handlers
        console_handler = logging.StreamHandler()
        console_formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(levelname)s:%(name)s:%(message)s",
            log_colors={
                'DEBUG': 'bold_blue',
                'INFO': 'bold_green',
                'WARNING': 'bold_yellow',
                'ERROR': 'bold_red',
                'CRITICAL': 'bold_purple'
            }
        )
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        # Add file handler if SUBSONIC_LOG_FILE is specified
        if log_file:
            file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
            file_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s - (%(filename)s:%(lineno)d)'
            )
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)


def redact_url(url: str) -> str:
    """Mask the password query parameter of a request URL for logging."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (key, REDACTED if key == 'p' else value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe='*')))
