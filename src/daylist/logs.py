import logging
import os
import sys
from pathlib import Path

def _log_dir() -> Path:
    override = os.getenv('DAYLIST_LOG_DIR')
    if override:
        return Path(override)
    return Path.home() / ".local" / "share" / "daylist" / "logs"

def setup_logging():
    """Set up logging configuration for the daylist package with environment-based levels."""
    env_level = os.getenv('DAYLIST_LOG_LEVEL', '').upper()
    is_debug = os.getenv('DAYLIST_DEBUG', '').lower() in ('1', 'true', 'yes')

    # Default is production mode: warnings and errors only
    if is_debug:
        level = logging.DEBUG
    elif env_level:
        level = getattr(logging, env_level, logging.WARNING)
    else:
        level = logging.WARNING

    log_format = '[%(asctime)s] %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    detailed_formatter = logging.Formatter(log_format, date_format)
    console_formatter = logging.Formatter(
        '%(levelname)-8s [%(name)s] %(message)s' if is_debug
        else '%(levelname)s: %(message)s'
    )

    # stderr keeps the board output on stdout clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(level)

    logger = logging.getLogger('daylist')
    logger.setLevel(logging.DEBUG)  # Logger accepts all, handlers filter
    logger.handlers.clear()
    logger.addHandler(console_handler)

    # File handler (always detailed), skipped when the directory is not writable
    log_dir = _log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "daylist.log", encoding='utf-8')
    except OSError as e:
        logger.warning(f"File logging disabled, cannot use {log_dir}: {e}")
    else:
        file_handler.setFormatter(detailed_formatter)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger

# Initialize logging when package is imported
setup_logging()

def get_logger(name: str = None):
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f'daylist.{name}')
    return logging.getLogger('daylist')
