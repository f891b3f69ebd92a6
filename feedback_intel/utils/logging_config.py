"""Logging configuration for the Feedback Intelligence Engine."""
import logging
import sys
import os
from pathlib import Path
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

DEBUG_LOG_ENV = 'FEEDBACK_INTEL_DEBUG_LOG'

_UNIFIED_HANDLER = None


def get_unified_debug_log_path() -> Optional[str]:
    """
    Get the path to the unified debug log file.

    The unified log is opt-in: it is only written when FEEDBACK_INTEL_DEBUG_LOG
    is set. The value "1" selects a timestamped file under logs/debug/, any
    other value is used as the file path.
    """
    env_log_path = os.environ.get(DEBUG_LOG_ENV)
    if not env_log_path:
        return None
    if env_log_path == '1':
        log_dir = Path("logs/debug")
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        return str(log_dir / f"run_{timestamp}.log")
    return env_log_path


def get_unified_handler() -> Optional[logging.FileHandler]:
    """Get or create the unified debug file handler."""
    global _UNIFIED_HANDLER
    if _UNIFIED_HANDLER is None:
        log_path = get_unified_debug_log_path()
        if log_path is None:
            return None
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        _UNIFIED_HANDLER = logging.FileHandler(log_path)
        _UNIFIED_HANDLER.setLevel(logging.DEBUG)
        _UNIFIED_HANDLER.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)-30s | %(funcName)-20s | L%(lineno)-4d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
    return _UNIFIED_HANDLER


def setup_logger(name: str, log_file: str = None, level: int = logging.INFO) -> logging.Logger:
    """
    Set up a logger with console, file, and unified debug handlers.

    Args:
        name: Logger name
        log_file: Log file path (optional, for component-specific logs)
        level: Logging level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    simple_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(simple_formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    unified_handler = get_unified_handler()
    if unified_handler is not None:
        logger.addHandler(unified_handler)

    logger.debug(f"Logger initialized for component: {name}")

    return logger
