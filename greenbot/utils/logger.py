import logging
import sys
from datetime import datetime
from pathlib import Path

from greenbot.config import Config

PACKAGE_LOGGER = 'greenbot'

def _configure_package_logger() -> logging.Logger:
    """Attach console and daily file handlers to the package logger, once."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return package_logger

    log_level = logging.DEBUG if Config.DEBUG else logging.INFO
    package_logger.setLevel(log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    # Empty LOG_DIR keeps logging on the console only
    if Config.LOG_DIR:
        log_dir = Path(Config.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(
            log_dir / f'greenbot_{datetime.now().strftime("%Y%m%d")}.log',
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    return package_logger

def setup_logger(name: str) -> logging.Logger:
    """
    Get a logger that writes through the package handlers.

    Modules inside greenbot may also use logging.getLogger(__name__); their
    records propagate to the same handlers once any module has called this.
    """
    _configure_package_logger()
    return logging.getLogger(name)
