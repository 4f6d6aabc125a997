"""
Receipt parser service for extracting structured data from OCR text.

Tuned for Italian retail receipts (scontrini). The parser is a pure function
of its input: pattern tables are module constants compiled once at import,
and every call starts from fresh matches.
"""

import re
import logging
from dataclasses import dataclass, field
from datetime import date as Date
from decimal import Decimal
from typing import Optional, List, Set, Tuple

from scan_receipt.models.receipt import ScanResult
from scan_receipt.utils.money import parse_money
from scan_receipt.utils.candidates import (
    AmountCandidate,
    ExclusionZone,
    create_amount_candidate,
    zones_to_offsets,
)
from scan_receipt.utils.scoring import (
    select_best_amount,
    select_top_amounts,
    calculate_confidence,
)

logger = logging.getLogger(__name__)

# Digits and letters stay ASCII; \s keeps matching Unicode spaces such as U+00A0
DEFAULT_FLAGS = re.IGNORECASE


@dataclass(frozen=True)
class PatternSpec:
    """A named regex pattern with example and notes for documentation."""
    name: str
    pattern: str
    example: str
    notes: Optional[str] = None
    flags: int = DEFAULT_FLAGS
    compiled: re.Pattern = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'compiled', re.compile(self.pattern, self.flags))


_TOTAL_KEYWORDS = r'(?:TOTALE|TOT\.?|TOTAL|DA PAGARE|IMPORTO)'
_AMOUNT = r'([0-9]+[,.][0-9]{2})'

# Subtotal-like lines: never a candidate for the final total
EXCLUSION_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec(
        name='subtotal',
        pattern=(
            r'(?:SUB[\s\-]?TOTALE|SUBTOT|IMPONIBILE|IVA\s+ESCLUSA|IVA\s+ESCL|TOTALE\s+PARZIALE)'
            r'\s*[:=]?\s*(?:EUR|€)?\s*[0-9]+[,.][0-9]{2}'
        ),
        example='SUBTOTALE: 10,00',
        notes='Subtotal, taxable base, tax-excluded and partial totals',
    ),
)

# Ordered most specific first; the tuple index is the priority tier
AMOUNT_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec(
        name='total_tax_included',
        pattern=(
            _TOTAL_KEYWORDS
            + r'\s+(?:IVA\s+INCLUSA|IVA\s+COMPRESA|IVA\s+INCL|COMPRENSIVO|CON\s+IVA)'
            + r'\s*[:=]?\s*(?:EUR|€|EURO)?\s*'
            + _AMOUNT
        ),
        example='TOTALE IVA INCLUSA EUR 25,00',
        notes='Total with explicit tax-included qualifier (highest confidence)',
    ),
    PatternSpec(
        name='total_with_currency',
        pattern=(
            _TOTAL_KEYWORDS
            + r'\s+(?:COMPLESSIVO|GENERALE|FINALE?)?\s*(?:EUR|€|EURO)\s*'
            + _AMOUNT
        ),
        example='TOTALE EUR 12,50',
        notes='Total keyword followed by currency',
    ),
    PatternSpec(
        name='total_keyword',
        pattern=_TOTAL_KEYWORDS + r'\s*[:=]?\s*' + _AMOUNT,
        example='TOTALE: 12,50',
        notes='Total keyword without currency',
    ),
    PatternSpec(
        name='payment_method',
        pattern=r'(?:PAGATO|CONTANTI|CONTANTE|CARTA|BANCOMAT|POS)\s*[:=]?\s*(?:EUR|€)?\s*' + _AMOUNT,
        example='CONTANTI 20,00',
        notes='Cash, card or POS payment line',
    ),
    PatternSpec(
        name='currency_prefix',
        pattern=r'(?:EUR|€)\s*' + _AMOUNT,
        example='€ 12,50',
        notes='Currency symbol before amount',
    ),
    PatternSpec(
        name='currency_suffix',
        pattern=_AMOUNT + r'\s*(?:EUR|€)',
        example='12,50 €',
        notes='Amount followed by currency',
    ),
    PatternSpec(
        name='standalone_line',
        pattern=r'^\s*' + _AMOUNT + r'\s*$',
        example='12,50',
        notes='Bare amount alone on its line (least specific)',
        flags=DEFAULT_FLAGS | re.MULTILINE,
    ),
)

DATE_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec(
        name='numeric_full_year',
        pattern=r'([0-9]{1,2})[/\-.]([0-9]{1,2})[/\-.]([0-9]{4})',
        example='15/03/2024',
    ),
    PatternSpec(
        name='numeric_short_year',
        pattern=r'([0-9]{1,2})[/\-.]([0-9]{1,2})[/\-.]([0-9]{2})',
        example='15-03-24',
        notes='Two-digit year read as 20YY',
    ),
    PatternSpec(
        name='italian_month',
        pattern=r'([0-9]{1,2})\s+(GEN|FEB|MAR|APR|MAG|GIU|LUG|AGO|SET|OTT|NOV|DIC)[A-Za-z]*\s+([0-9]{4})',
        example='15 DIC 2024',
        notes='Abbreviated or full Italian month name',
    ),
)

MONTHS = {
    'GEN': '01', 'GENNAIO': '01',
    'FEB': '02', 'FEBBRAIO': '02',
    'MAR': '03', 'MARZO': '03',
    'APR': '04', 'APRILE': '04',
    'MAG': '05', 'MAGGIO': '05',
    'GIU': '06', 'GIUGNO': '06',
    'LUG': '07', 'LUGLIO': '07',
    'AGO': '08', 'AGOSTO': '08',
    'SET': '09', 'SETTEMBRE': '09',
    'OTT': '10', 'OTTOBRE': '10',
    'NOV': '11', 'NOVEMBRE': '11',
    'DIC': '12', 'DICEMBRE': '12',
}

# Header and footer boilerplate that is never the merchant name
MERCHANT_SKIP_PATTERNS: Tuple[re.Pattern, ...] = tuple(
    re.compile(p, DEFAULT_FLAGS) for p in (
        r'^(SCONTRINO|RICEVUTA|DOCUMENTO|FISCALE)',
        r'^(P\.IVA|P\.I\.|C\.F\.|REG\.)',
        r'^(DATA|ORA|CASSA)',
        r'^(TOTALE|TOT|SUBTOT|RESTO)',
        r'^[0-9]+[,.][0-9]{2}$',
        r'^[0-9/\-.]+$',
    )
)

_MERCHANT_STRIP = re.compile(r"[^A-Za-z0-9_\s\-'àèéìòùÀÈÉÌÒÙ]")

MERCHANT_LINE_WINDOW = 5
MERCHANT_MIN_LENGTH = 3
MERCHANT_MAX_LENGTH = 50


class ReceiptParser:
    """Service for parsing receipt text and extracting structured data."""

    exclusion_patterns = EXCLUSION_PATTERNS
    amount_patterns = AMOUNT_PATTERNS
    date_patterns = DATE_PATTERNS
    merchant_skip_patterns = MERCHANT_SKIP_PATTERNS

    def parse(self, text: str) -> ScanResult:
        """
        Parse receipt text and extract all available fields.

        Each field is an independent pass over the same text; none of them
        sees another's result.

        Args:
            text: OCR-extracted text from receipt

        Returns:
            ScanResult with amount, date, merchant, confidence and raw text
        """
        text = text or ""

        excluded = self.scan_exclusions(text)

        amount = self.extract_amount(text, excluded=excluded)
        date = self.extract_date(text)
        merchant = self.extract_merchant(text)

        result = ScanResult(
            amount=amount,
            date=date,
            merchant=merchant,
            confidence=calculate_confidence(amount, date, merchant),
            raw_text=text,
        )

        logger.debug("Receipt parsed", extra={
            "amount": str(amount) if amount is not None else None,
            "date": date,
            "merchant": merchant,
            "confidence": result.confidence,
        })

        return result

    def find_exclusion_zones(self, text: str) -> List[ExclusionZone]:
        """Locate subtotal matches whose amounts must not become the total."""
        zones = []
        for spec in self.exclusion_patterns:
            for match in spec.compiled.finditer(text):
                zones.append(ExclusionZone(
                    start=match.start(),
                    end=match.end(),
                    raw_text=match.group(0),
                ))
        return zones

    def scan_exclusions(self, text: str) -> Set[int]:
        """
        Collect every character offset covered by a subtotal match.

        Args:
            text: Receipt text

        Returns:
            Set of excluded offsets
        """
        return zones_to_offsets(self.find_exclusion_zones(text))

    def extract_amount(self, text: str, excluded: Optional[Set[int]] = None) -> Optional[Decimal]:
        """
        Extract total amount from receipt.

        Every pattern family runs over the whole text. Matches starting inside
        an exclusion zone are dropped; the survivors are ranked by pattern
        priority, then later position, then larger value.

        Args:
            text: Receipt text
            excluded: Offsets from scan_exclusions(); computed when omitted

        Returns:
            Amount as Decimal or None
        """
        if excluded is None:
            excluded = self.scan_exclusions(text)

        candidates: List[AmountCandidate] = []

        for priority, spec in enumerate(self.amount_patterns):
            for match in spec.compiled.finditer(text):
                if match.start() in excluded:
                    continue

                amount = parse_money(match.group(1))
                if amount is None:
                    continue

                candidates.append(create_amount_candidate(
                    value=amount,
                    priority=priority,
                    position=match.start(),
                    pattern_name=spec.name,
                    raw_text=match.group(0),
                ))

        best = select_best_amount(candidates)
        if best is None:
            return None

        logger.debug("Amount selected", extra={
            "pattern": best.pattern_name,
            "priority": best.priority,
            "position": best.position,
            "candidates": [
                (str(c.value), c.pattern_name) for c in select_top_amounts(candidates)
            ],
        })

        return best.value

    def extract_date(self, text: str) -> Optional[str]:
        """
        Extract receipt date.

        Patterns are tried in fixed order and the first calendrically valid
        match wins; there is no comparison across patterns.

        Args:
            text: Receipt text

        Returns:
            Date in YYYY-MM-DD format or None
        """
        for spec in self.date_patterns:
            for match in spec.compiled.finditer(text):
                day, month_text, year = match.groups()

                if spec.name == 'italian_month':
                    # Unknown month text falls back to January
                    month = MONTHS.get(month_text[:3].upper(), '01')
                else:
                    month = month_text.zfill(2)
                    if len(year) == 2:
                        year = '20' + year

                date_str = f"{year}-{month}-{day.zfill(2)}"
                if self._is_valid_date(date_str):
                    logger.debug("Date selected", extra={"pattern": spec.name, "date": date_str})
                    return date_str

        return None

    @staticmethod
    def _is_valid_date(date_str: str) -> bool:
        """Check that YYYY-MM-DD names a real calendar day."""
        try:
            year, month, day = (int(part) for part in date_str.split('-'))
            return Date(year, month, day).isoformat() == date_str
        except ValueError:
            return False

    def extract_merchant(self, text: str) -> Optional[str]:
        """
        Extract merchant name from the top of the receipt.

        Only the first five non-empty lines are considered.

        Args:
            text: Receipt text

        Returns:
            Cleaned merchant name or None
        """
        lines = [line.strip() for line in text.split('\n')]
        lines = [line for line in lines if line]

        for line in lines[:MERCHANT_LINE_WINDOW]:
            if any(p.search(line) for p in self.merchant_skip_patterns):
                continue

            if not MERCHANT_MIN_LENGTH <= len(line) <= MERCHANT_MAX_LENGTH:
                continue

            cleaned = self._clean_merchant_name(line)
            if len(cleaned) >= MERCHANT_MIN_LENGTH:
                return cleaned

        return None

    def _clean_merchant_name(self, name: str) -> str:
        """Strip punctuation and symbols, keeping letters, digits and Italian accents."""
        return _MERCHANT_STRIP.sub('', name).strip()
