"""
Test suite for total amount extraction.

Tests cover:
- Subtotal exclusion zones
- Priority tiers (most specific wording wins)
- Later-position and larger-value tie-breaks
- Range limits (0 < amount < 100000)
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from scan_receipt.services.parser import ReceiptParser
from decimal import Decimal
import pytest


@pytest.fixture
def parser():
    return ReceiptParser()


CONAD_RECEIPT = """\
SUPERMERCATO CONAD
VIA ROMA 12, MILANO
P.IVA 01234567890
DOCUMENTO COMMERCIALE
PANE 2,50
LATTE 1,30
SUBTOTALE 3,80
TOTALE COMPLESSIVO EUR 3,80
CONTANTI 5,00
RESTO 1,20
15/03/2024 18:42
"""


class TestExclusionZones:
    """Subtotal lines must never produce the chosen amount."""

    def test_subtotal_excluded_explicit_total_wins(self, parser):
        assert parser.extract_amount("SUBTOTALE: 10,00\nTOTALE EUR 12,50") == Decimal('12.50')

    def test_lone_subtotal_is_never_chosen(self, parser):
        """Even with no other candidate, the subtotal's own match is dropped."""
        assert parser.extract_amount("SUBTOTALE: 10,00") is None

    def test_taxable_base_excluded(self, parser):
        text = "IMPONIBILE 8,20\nIVA 1,80\nTOTALE 10,00"
        assert parser.extract_amount(text) == Decimal('10.00')

    def test_partial_total_excluded(self, parser):
        text = "TOTALE PARZIALE EUR 7,00\nTOTALE EUR 9,00"
        assert parser.extract_amount(text) == Decimal('9.00')

    def test_scan_exclusions_covers_whole_match(self, parser):
        text = "PANE 1,00\nSUB-TOTALE 10,00\n"
        excluded = parser.scan_exclusions(text)
        start = text.index("SUB-TOTALE")
        end = start + len("SUB-TOTALE 10,00")
        assert excluded == set(range(start, end))

    def test_repeated_subtotals_union(self, parser):
        text = "SUBTOT 1,00\nSUBTOT 2,00"
        zones = parser.find_exclusion_zones(text)
        assert len(zones) == 2
        assert parser.scan_exclusions(text) == zones[0].offsets() | zones[1].offsets()

    def test_no_subtotal_no_exclusions(self, parser):
        assert parser.scan_exclusions("TOTALE 12,50") == set()


class TestPriorityTiers:
    """More specific wording beats position in the text."""

    def test_tax_included_total_beats_later_plain_total(self, parser):
        text = "TOTALE IVA INCLUSA 25,00\nTOTALE 30,00"
        assert parser.extract_amount(text) == Decimal('25.00')

    def test_total_with_currency_beats_total_without(self, parser):
        text = "TOTALE 30,00\nTOTALE EUR 25,00"
        assert parser.extract_amount(text) == Decimal('25.00')

    def test_payment_keyword(self, parser):
        assert parser.extract_amount("CONTANTI 20,00\nRESTO 7,50") == Decimal('20.00')

    def test_currency_prefix_beats_currency_suffix(self, parser):
        assert parser.extract_amount("€ 5,00\n3,00 €") == Decimal('5.00')

    def test_currency_suffix(self, parser):
        assert parser.extract_amount("CAFFE\n1,20 EUR") == Decimal('1.20')

    def test_no_break_spaces_between_tokens(self, parser):
        """OCR output often separates keyword, currency and number with U+00A0."""
        assert parser.extract_amount("TOTALE\xa0EUR\xa012,50") == Decimal('12.50')
        assert parser.extract_amount("SUBTOTALE\xa010,00\nTOTALE\xa0EUR\xa012,50") == Decimal('12.50')

    def test_full_receipt(self, parser):
        assert parser.extract_amount(CONAD_RECEIPT) == Decimal('3.80')


class TestTieBreaks:
    """Within a tier the later candidate wins."""

    def test_later_total_wins(self, parser):
        assert parser.extract_amount("TOTALE 10,00\nTOTALE 12,00") == Decimal('12.00')

    def test_later_standalone_line_wins(self, parser):
        assert parser.extract_amount("CAFFE 1,20\n1,20\n2,40") == Decimal('2.40')

    def test_known_ambiguity_later_bare_number_wins(self, parser):
        """
        Known ambiguity: when only bare numbers exist, a later tax-share
        line beats the earlier total. Kept as-is on purpose.
        """
        text = "IMPORTO DOVUTO\n25,00\nDI CUI IVA\n4,51"
        assert parser.extract_amount(text) == Decimal('4.51')


class TestAmountRange:
    """Amounts must be strictly between 0 and 100000."""

    def test_zero_rejected(self, parser):
        assert parser.extract_amount("TOTALE 0,00") is None

    def test_upper_bound_rejected(self, parser):
        assert parser.extract_amount("TOTALE 100000,00") is None

    def test_just_below_upper_bound(self, parser):
        assert parser.extract_amount("TOTALE 99999,99") == Decimal('99999.99')

    def test_dot_decimal_separator(self, parser):
        assert parser.extract_amount("TOTALE 12.50") == Decimal('12.50')

    def test_amount_has_two_fraction_digits(self, parser):
        assert str(parser.extract_amount("TOTALE EUR 7,50")) == '7.50'

    def test_no_candidates(self, parser):
        assert parser.extract_amount("GRAZIE E ARRIVEDERCI") is None
        assert parser.extract_amount("") is None
