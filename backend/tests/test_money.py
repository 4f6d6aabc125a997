"""
Test suite for receipt money parsing.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from scan_receipt.utils.money import parse_money, format_money
from decimal import Decimal


class TestParseMoney:

    def test_comma_decimal(self):
        assert parse_money("12,50") == Decimal('12.50')

    def test_dot_decimal(self):
        assert parse_money("12.50") == Decimal('12.50')

    def test_quantized_to_cents(self):
        assert str(parse_money("7,5")) == '7.50'

    def test_zero_rejected(self):
        assert parse_money("0,00") is None

    def test_upper_bound_exclusive(self):
        assert parse_money("100000,00") is None
        assert parse_money("99999,99") == Decimal('99999.99')

    def test_garbage_rejected(self):
        assert parse_money("") is None
        assert parse_money("abc") is None
        assert parse_money("NaN") is None
        assert parse_money(None) is None


class TestFormatMoney:

    def test_italian_separators(self):
        assert format_money(Decimal('1234.5')) == '€1.234,50'

    def test_small_amount(self):
        assert format_money(Decimal('3.80')) == '€3,80'

    def test_missing_amount(self):
        assert format_money(None) == 'N/A'
