"""
Money parsing for Italian receipt amounts.

Receipts print totals with a two-digit fraction and either separator:
- Italian: 12,50
- Normalized OCR: 12.50
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

# Totals outside (0, MAX_AMOUNT) are never a plausible receipt total
MAX_AMOUNT = Decimal('100000')

CENTS = Decimal('0.01')


def parse_money(amount_str: str) -> Optional[Decimal]:
    """
    Parse a receipt numeral into a two-decimal amount.

    Args:
        amount_str: Numeral as matched in the OCR text (e.g., "12,50")

    Returns:
        Decimal amount or None if parsing fails or the value is out of range

    Examples:
        >>> parse_money("12,50")
        Decimal('12.50')
        >>> parse_money("0,00") is None
        True
    """
    if not amount_str or not isinstance(amount_str, str):
        return None

    cleaned = amount_str.strip().replace(',', '.', 1)

    try:
        amount = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None

    if not amount.is_finite():
        return None

    if amount <= 0 or amount >= MAX_AMOUNT:
        return None

    return amount.quantize(CENTS)


def format_money(amount: Optional[Decimal]) -> str:
    """
    Format amount the way Italian receipts print it.

    Examples:
        >>> format_money(Decimal('1234.5'))
        '€1.234,50'
    """
    if amount is None:
        return 'N/A'

    formatted = f"{amount:,.2f}"
    # Swap US separators for Italian ones
    formatted = formatted.replace(',', '_').replace('.', ',').replace('_', '.')

    return f"€{formatted}"
