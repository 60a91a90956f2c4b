"""
Logging configuration for the supermarket invoicing service.
Local JSON files by default, stdout when running inside a container.
"""
import logging

# Settings
from supermarket.config.settings import SupermarketConfigs
configs = SupermarketConfigs()

class LoggingConfig:
    """Logging configuration resolved from environment"""

    LOG_DIR = configs.LOG_DIR
    LOG_LEVEL = configs.LOG_LEVEL
    LOG_TO_STDOUT = configs.LOG_TO_STDOUT
    LOG_DEBUG_PRINTS = configs.LOG_DEBUG_PRINTS
    APPLICATION_ENVIRONMENT = configs.APPLICATION_ENVIRONMENT
    SERVICE_NAME = configs.APP_NAME

    @classmethod
    def level(cls) -> int:
        resolved = logging.getLevelName(cls.LOG_LEVEL)
        return resolved if isinstance(resolved, int) else logging.INFO

    @classmethod
    def is_valid_config(cls):
        """Validate configuration - only the log level can be wrong"""
        if not isinstance(logging.getLevelName(cls.LOG_LEVEL), int):
            return False, f"Unknown LOG_LEVEL '{cls.LOG_LEVEL}', falling back to INFO"
        return True, "Configuration is valid"
