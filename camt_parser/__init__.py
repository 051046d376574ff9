"""
CAMT.053 Bank Statement Parser

Extracts accounts, balances and transactions from ISO 20022 CAMT.053
bank-statement documents into normalized, JSON-serializable records, using an
ordered fallback policy for every field.
"""

__version__ = "2.1.0"

from .core.runner import Camt053Parser, parse_camt053
from .core.detectors import detect_document_namespace
from .core.errors import Camt053ParserError
from .models.schema import Statement, Transaction, EntrySummary, Direction, StatementList, dump_statements

__all__ = [
    "Camt053Parser",
    "parse_camt053",
    "detect_document_namespace",
    "Camt053ParserError",
    "Statement",
    "Transaction",
    "EntrySummary",
    "Direction",
    "StatementList",
    "dump_statements"
]
