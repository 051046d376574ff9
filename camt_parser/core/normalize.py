"""
Scalar extractors turning raw tree nodes into typed values.

None of these raise on bad input: an unusable value is returned as None.
"""
import re
from decimal import Decimal
from typing import Any, Dict, Optional

from .tree import TEXT_KEY, text_of
from ..models.schema import Direction

ISO_DATE = re.compile(r'\d{4}-\d{2}-\d{2}')
AMOUNT = re.compile(r'[+-]?(\d+(\.\d*)?|\.\d+)')


def extract_date(value: Any) -> Optional[str]:
    """
    Extract the first YYYY-MM-DD found in a string or a date/datetime holder.

    Args:
        value: A string such as "2024-01-31T23:59:59+01:00", or a node with
            a Dt or DtTm child

    Returns:
        ISO calendar date string, or None
    """
    if value is None:
        return None

    if isinstance(value, str):
        match = ISO_DATE.search(value)
        return match.group() if match else None

    if isinstance(value, dict):
        for key in ('Dt', 'DtTm', TEXT_KEY):
            found = extract_date(value.get(key))
            if found:
                return found

    return None


def extract_amount(value: Any) -> Optional[Decimal]:
    """
    Parse an amount from a string or a value-holder with attributes.

    The declared precision is kept ("100.00" stays Decimal('100.00')).
    Attributes such as Ccy are ignored here.
    """
    if isinstance(value, dict):
        value = value.get(TEXT_KEY)
    if not isinstance(value, str):
        return None

    cleaned = value.strip()
    if not cleaned:
        return None

    # Plain decimal notation only; Decimal() alone also takes "1_000", "NaN" and "1E3".
    if not AMOUNT.fullmatch(cleaned):
        return None
    return Decimal(cleaned)


def extract_int(value: Any) -> Optional[int]:
    """Parse an integer, returning None for absent or non-numeric text."""
    text = text_of(value)
    if not text:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


def extract_direction(value: Any, codes: Dict[str, Direction]) -> Optional[Direction]:
    """
    Map a credit/debit indicator code to a Direction.

    Args:
        value: Indicator node, e.g. "CRDT"
        codes: Code table from the field policy

    Returns:
        Direction, or None when the indicator is absent or unknown
    """
    text = text_of(value)
    if not text:
        return None
    return codes.get(text.strip())


def normalize_text(value: Any) -> Optional[str]:
    """
    Strip surrounding whitespace from a text node; inner spacing is kept.

    Returns:
        Cleaned text, or None when nothing is left
    """
    text = text_of(value)
    if text is None:
        return None

    cleaned = text.strip()
    return cleaned or None
