"""
Logging utilities for supermarket invoicing
"""
import logging
import atexit

from supermarket.logging.config import LoggingConfig
from supermarket.logging.handlers import get_app_handler


essential_app_logger = None

def get_app_logger(name: str | None = None):
    global essential_app_logger
    if name:
        logger = logging.getLogger(name)
        if not logger.handlers:
            logger.addHandler(get_app_handler(name.replace('.', '_')))
            logger.setLevel(LoggingConfig.level())
            logger.propagate = False
        return logger
    if essential_app_logger is None:
        essential_app_logger = get_app_logger('supermarket')
    return essential_app_logger


def initialize_logging():
    try:
        is_valid, message = LoggingConfig.is_valid_config()
        if not is_valid:
            print(f"Warning: {message}")
        atexit.register(logging.shutdown)
        print("Logging system initialized (supermarket-invoicing)")
    except Exception as e:
        print(f"Failed to initialize logging: {e}")
        raise
