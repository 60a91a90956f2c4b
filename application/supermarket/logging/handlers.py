"""
Logging Handlers for supermarket invoicing
One JSON file per logger name, or a shared stdout stream.
"""
import logging
import os
import sys

from supermarket.logging.config import LoggingConfig
from supermarket.logging.formatters import AppLogsJSONFormatter
from supermarket.logging.filters import RequestContextFilter, BusinessContextFilter


def dbg(msg: str) -> None:
    """Lightweight debug print; enabled when LOG_DEBUG_PRINTS=true"""
    if LoggingConfig.LOG_DEBUG_PRINTS:
        print(msg)


def _with_context(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(AppLogsJSONFormatter())
    handler.addFilter(RequestContextFilter())
    handler.addFilter(BusinessContextFilter())
    return handler


_handlers = {}

def get_local_file_handler(name: str = 'app'):
    os.makedirs(LoggingConfig.LOG_DIR, exist_ok=True)
    handler = logging.FileHandler(os.path.join(LoggingConfig.LOG_DIR, f'{name}.log'), encoding='utf-8')
    dbg(f"[Logging] file handler created name={name} dir={LoggingConfig.LOG_DIR}")
    return _with_context(handler)


def get_stream_handler():
    # shared across loggers so records are not duplicated on stdout
    if 'stdout' not in _handlers:
        _handlers['stdout'] = _with_context(logging.StreamHandler(sys.stdout))
    return _handlers['stdout']


def get_app_handler(name: str = 'app'):
    if LoggingConfig.LOG_TO_STDOUT:
        return get_stream_handler()
    return get_local_file_handler(name)
