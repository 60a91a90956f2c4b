"""
Invoice number generation.

Numbers look like ``INV20250115143022`` followed by a 4-digit random
suffix, e.g. ``INV202501151430220042``. The timestamp is taken in the
store's timezone at second precision.
"""
import random
import re
from datetime import datetime
from typing import Callable, Optional

from supermarket.core.constants import InvoiceConstants
from supermarket.core.exceptions import InvoiceNumberExhaustedError
from supermarket.utils.datetime_helpers import get_store_now

from supermarket.logging.utils import get_app_logger
logger = get_app_logger("supermarket.invoice_number")

from supermarket.config.settings import SupermarketConfigs
configs = SupermarketConfigs()

_system_random = random.SystemRandom()
_NUMBER_RE = re.compile(InvoiceConstants.NUMBER_PATTERN)
_SUFFIX_BOUND = 10 ** InvoiceConstants.SUFFIX_DIGITS


def is_valid_invoice_number(value: Optional[str]) -> bool:
    return bool(value) and _NUMBER_RE.match(value) is not None


class InvoiceNumberGenerator:
    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
        max_attempts: Optional[int] = None,
    ):
        self.clock = clock or get_store_now
        self.rng = rng or _system_random
        self.max_attempts = configs.INVOICE_NUMBER_MAX_ATTEMPTS if max_attempts is None else max_attempts

    @staticmethod
    def format(moment: datetime, suffix: int) -> str:
        if not 0 <= suffix < _SUFFIX_BOUND:
            raise ValueError(f"Invoice suffix out of range: {suffix}")
        return (
            f"{InvoiceConstants.NUMBER_PREFIX}"
            f"{moment.strftime(InvoiceConstants.TIMESTAMP_FORMAT)}"
            f"{suffix:0{InvoiceConstants.SUFFIX_DIGITS}d}"
        )

    def generate(self) -> str:
        return self.format(self.clock(), self.rng.randrange(_SUFFIX_BOUND))

    def generate_unique(self, exists: Callable[[str], bool]) -> str:
        """
        Draw candidates until ``exists`` reports one as free.

        Raises:
            InvoiceNumberExhaustedError: every attempt collided
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generate()
            if not exists(candidate):
                return candidate
            logger.warning(f"invoice_number_collision | candidate={candidate} attempt={attempt}")
        logger.error(f"invoice_number_exhausted | attempts={self.max_attempts}")
        raise InvoiceNumberExhaustedError(self.max_attempts)
