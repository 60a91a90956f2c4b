"""
Store-local time for invoice dates and numbers.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from supermarket.config.settings import SupermarketConfigs
configs = SupermarketConfigs()

STORE_TZ = ZoneInfo(configs.INVOICE_TIMEZONE)


def get_store_now() -> datetime:
    """
    Get current datetime in the store's timezone.
    Returns:
        Current datetime object with the configured store timezone
    """
    return datetime.now(STORE_TZ)

