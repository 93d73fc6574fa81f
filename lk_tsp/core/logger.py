"""
Logging system for LK-TSP.
Provides centralized logging with file and console handlers.
"""

import logging
import os
from datetime import datetime
from typing import Optional


def setup_logger(name: str, log_file: Optional[str] = None,
                 level: int = logging.INFO, log_dir: str = "logs",
                 file_logging: bool = True) -> logging.Logger:
    """
    Setup logger with file and console handlers.

    Args:
        name: Logger name (usually the package name, so that module loggers propagate to it)
        log_file: Optional log file path. If None, a timestamped file in log_dir is used.
        level: Logging level (default: INFO)
        log_dir: Directory for log files (default: "logs")
        file_logging: Whether to attach a file handler at all

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger('lk_tsp', 'logs/lk_tsp.log')
        >>> logger.info("Starting Lin-Kernighan search...")
        >>> logger.debug(f"New highest gain: {gain}")
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(level)
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    handlers = [logging.StreamHandler()]
    if file_logging:
        log_file = _resolve_log_file(log_file, log_dir)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if file_logging:
        logger.info(f"Logger initialized. Log file: {log_file}")
    return logger


def _resolve_log_file(log_file: Optional[str], log_dir: str) -> str:
    """Timestamped file in ``log_dir`` unless an explicit path is given; creates the directory."""
    if log_file is None:
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = os.path.join(log_dir, f'lk_tsp_{timestamp}.log')
    os.makedirs(os.path.dirname(log_file) or '.', exist_ok=True)
    return log_file


def get_logger(name: str) -> logging.Logger:
    """
    Get existing logger or create new one with default settings.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        return setup_logger(name, file_logging=False)

    return logger
