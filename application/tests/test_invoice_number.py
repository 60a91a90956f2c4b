import random
from datetime import datetime

import pytest

from supermarket.core.exceptions import InvoiceNumberExhaustedError
from supermarket.utils.invoice_number import InvoiceNumberGenerator, is_valid_invoice_number

FIXED = datetime(2025, 1, 15, 14, 30, 22)


def test_format_pads_suffix_to_four_digits():
    assert InvoiceNumberGenerator.format(FIXED, 42) == "INV202501151430220042"
    assert InvoiceNumberGenerator.format(FIXED, 0) == "INV202501151430220000"
    assert InvoiceNumberGenerator.format(FIXED, 9999) == "INV202501151430229999"


def test_format_rejects_suffix_out_of_range():
    with pytest.raises(ValueError):
        InvoiceNumberGenerator.format(FIXED, 10000)
    with pytest.raises(ValueError):
        InvoiceNumberGenerator.format(FIXED, -1)


def test_generated_numbers_match_pattern():
    generator = InvoiceNumberGenerator()
    for _ in range(50):
        number = generator.generate()
        assert len(number) == 21
        assert number.startswith("INV")
        assert number[3:].isdigit()
        assert is_valid_invoice_number(number)


def test_injected_clock_and_rng_are_deterministic():
    a = InvoiceNumberGenerator(clock=lambda: FIXED, rng=random.Random(1234))
    b = InvoiceNumberGenerator(clock=lambda: FIXED, rng=random.Random(1234))
    assert [a.generate() for _ in range(5)] == [b.generate() for _ in range(5)]
    assert a.generate().startswith("INV20250115143022")


def test_generate_unique_skips_taken_numbers():
    generator = InvoiceNumberGenerator(clock=lambda: FIXED, rng=random.Random(7))
    first = generator.generate()
    generator = InvoiceNumberGenerator(clock=lambda: FIXED, rng=random.Random(7))

    number = generator.generate_unique(lambda candidate: candidate == first)
    assert number != first
    assert is_valid_invoice_number(number)


def test_generate_unique_gives_up_after_max_attempts():
    seen = []

    def always_taken(candidate):
        seen.append(candidate)
        return True

    generator = InvoiceNumberGenerator(clock=lambda: FIXED, rng=random.Random(1), max_attempts=3)
    with pytest.raises(InvoiceNumberExhaustedError) as exc_info:
        generator.generate_unique(always_taken)
    assert len(seen) == 3
    assert exc_info.value.code == "INVOICE_CONFLICT"


@pytest.mark.parametrize("value", [None, "", "INV123", "inv202501151430220042", "INV20250115143022004X", "INV2025011514302200420"])
def test_is_valid_invoice_number_rejects_malformed(value):
    assert not is_valid_invoice_number(value)


def test_zero_max_attempts_is_not_replaced_by_default():
    calls = []
    generator = InvoiceNumberGenerator(clock=lambda: FIXED, rng=random.Random(1), max_attempts=0)

    assert generator.max_attempts == 0
    with pytest.raises(InvoiceNumberExhaustedError):
        generator.generate_unique(lambda candidate: calls.append(candidate) or False)
    assert calls == []
