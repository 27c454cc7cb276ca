"""Logging configuration for CityTwin."""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

# Create logs directory if it doesn't exist
LOGS_DIR = Path(__file__).parent.parent / "logs"
LOGS_DIR.mkdir(exist_ok=True)

# Log file paths
API_LOG_FILE = LOGS_DIR / "api.log"
ASSISTANT_LOG_FILE = LOGS_DIR / "assistant.log"

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging():
    """Configure logging for the application."""

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))

    # API log file handler (rotating, 10MB max, keep 5 backups)
    api_file_handler = RotatingFileHandler(
        API_LOG_FILE,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    api_file_handler.setLevel(logging.INFO)
    api_file_handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))

    # Assistant log file handler: every question and the topic it resolved to
    assistant_file_handler = RotatingFileHandler(
        ASSISTANT_LOG_FILE,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    assistant_file_handler.setLevel(logging.INFO)
    assistant_file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - [ASSISTANT] - %(levelname)s - %(message)s',
        datefmt=_DATE_FORMAT
    ))

    root_logger.addHandler(console_handler)
    root_logger.addHandler(api_file_handler)

    assistant_logger = logging.getLogger('assistant')
    assistant_logger.addHandler(assistant_file_handler)
    assistant_logger.setLevel(logging.INFO)

    # Reduce noise from libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)

    return root_logger


# Convenience function to get logger
def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
