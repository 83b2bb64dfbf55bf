"""
Logging configuration for the AI Content Agent API.

Console output always; a rotating file under log_dir when one is given.
Request bodies go through sanitize_log_data before they are logged.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

LOG_FILE_NAME = "content_agent.log"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "openai", "httpx", "sqlalchemy.engine")


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = "logs") -> None:
    """
    Configure the root logger.

    Args:
        log_level: Logging level name; unknown names fall back to INFO
        log_dir: Directory for the rotating log file, or None/"" for console only
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path / LOG_FILE_NAME,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


SENSITIVE_KEYS = (
    "password", "token", "secret", "key", "api_key",
    "authorization", "openai_api_key", "database_url",
)
REDACTED = "***REDACTED***"


def _is_sensitive(key) -> bool:
    return isinstance(key, str) and any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS)


def sanitize_log_data(data: Any) -> Any:
    """
    Sanitize log data to remove sensitive information.

    Walks nested dicts and lists; any value under a sensitive-looking key is
    replaced whole. The input is not modified.

    Args:
        data: Request body or other payload about to be logged

    Returns:
        Sanitized copy without secrets
    """
    if isinstance(data, dict):
        return {
            key: REDACTED if _is_sensitive(key) else sanitize_log_data(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [sanitize_log_data(item) for item in data]
    return data
