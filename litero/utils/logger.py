import logging
import os
from logging.handlers import RotatingFileHandler

# Default log levels - can be overridden by environment variables
LOG_LEVEL_STR = os.environ.get('LOG_LEVEL', 'INFO').upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_STR, logging.INFO)
CONSOLE_LOG_LEVEL_STR = os.environ.get('CONSOLE_LOG_LEVEL', 'WARNING').upper()
CONSOLE_LOG_LEVEL = getattr(logging, CONSOLE_LOG_LEVEL_STR, logging.WARNING)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

APP_LOGGER_NAME = 'Litero'

# Determine project root based on the location of logger.py
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
WORKSPACE_PATH = os.environ.get('LITERO_WORKSPACE_ROOT') or os.path.join(PROJECT_ROOT, 'workspace')
DEFAULT_LOGS_DIR_NAME = 'logs'
LOGS_DIR = os.path.join(WORKSPACE_PATH, DEFAULT_LOGS_DIR_NAME)


def setup_logger(logger_name, log_file, level=logging.INFO, console_level=logging.WARNING, add_console_handler=True):
    """Generic function to set up a logger."""
    logger = logging.getLogger(logger_name)
    logger.setLevel(min(level, console_level) if add_console_handler else level)
    logger.propagate = False

    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    # Remove existing handlers to avoid duplication
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    file_handler = RotatingFileHandler(log_file, maxBytes=5*1024*1024, backupCount=5, encoding='utf-8')
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(file_handler)

    # Progress narration goes through click in the CLI, so the console only gets warnings by default
    if add_console_handler:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(console_handler)

    return logger


main_log_file = os.path.join(LOGS_DIR, 'litero.log')
logger = setup_logger(APP_LOGGER_NAME, main_log_file, LOG_LEVEL, CONSOLE_LOG_LEVEL)


def get_logger(name: str = APP_LOGGER_NAME) -> logging.Logger:
    """
    Returns a logger under the application logger.

    Module names (``litero.core.story``) are nested below ``Litero`` so they
    share its handlers.
    """
    if name == APP_LOGGER_NAME or name.startswith(APP_LOGGER_NAME + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
