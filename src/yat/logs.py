import logging
import os
import sys
from pathlib import Path

LOG_DIR = Path.home() / ".local" / "share" / "yat" / "logs"

_console_handler = None

def setup_logging(console: bool = True):
    """Set up logging configuration for yat package with environment-based levels."""
    global _console_handler

    # Determine log level from environment
    env_level = os.getenv('YAT_LOG_LEVEL', '').upper()
    is_debug = os.getenv('YAT_DEBUG', '').lower() in ('1', 'true', 'yes')

    # Set log level based on environment - default to WARNING for regular users
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

    logger = logging.getLogger('yat')
    logger.setLevel(logging.DEBUG)  # Logger accepts all, handlers filter
    logger.handlers.clear()

    # File handler (always detailed); a read-only home just loses the log file
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_DIR / "yat.log")
        file_handler.setFormatter(detailed_formatter)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)
    except OSError as e:
        sys.stderr.write(f"yat: file logging disabled: {e}\n")

    # Console handler goes to stderr so it never mixes with command output
    _console_handler = logging.StreamHandler(sys.stderr)
    _console_handler.setFormatter(console_formatter)
    _console_handler.setLevel(level)
    if console:
        logger.addHandler(_console_handler)

    logger.propagate = False

    return logger

def detach_console():
    """Stop console logging, e.g. while a full-screen UI owns the terminal."""
    logging.getLogger('yat').removeHandler(_console_handler)

def attach_console():
    """Restore console logging after detach_console()."""
    logger = logging.getLogger('yat')
    if _console_handler is not None and _console_handler not in logger.handlers:
        logger.addHandler(_console_handler)

# Initialize logging when package is imported
setup_logging()

def get_logger(name: str = None):
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f'yat.{name}')
    return logging.getLogger('yat')
