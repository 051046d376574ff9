"""
Pydantic models for normalized CAMT.053 statement data.
"""
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator
from decimal import Decimal


class Direction(str, Enum):
    """Credit or debit classification of an entry."""
    CREDIT = "credit"
    DEBIT = "debit"


class EntrySummary(BaseModel):
    """Number of entries and their sum for one side of the statement."""
    model_config = ConfigDict(frozen=True)

    count: Optional[int] = None
    total: Optional[Decimal] = None


class Transaction(BaseModel):
    """One normalized posting line (a whole entry or one leaf of a batch entry)."""
    model_config = ConfigDict(frozen=True)

    date: Optional[str] = None  # YYYY-MM-DD
    amount: Optional[Decimal] = None
    currency: str = ""
    direction: Optional[Direction] = None  # None means unresolved
    counterparty_name: Optional[str] = None
    counterparty_account: Optional[str] = None
    description: Optional[str] = None
    description_additional: Optional[str] = None
    end_to_end_reference: Optional[str] = None
    remittance_reference: Optional[str] = None
    purpose: Optional[str] = None

    @field_validator('currency', mode='before')
    @classmethod
    def currency_never_null(cls, v):
        return v or ""


class Statement(BaseModel):
    """One account-period report."""
    model_config = ConfigDict(frozen=True)

    title: str
    account_holder: Optional[str] = None
    account_identifier: Optional[str] = None  # IBAN or other
    currency: str
    sequence_number: Optional[int] = None
    statement_date: str
    opening_balance: Optional[Decimal] = None
    closing_balance: Optional[Decimal] = None
    credit_summary: Optional[EntrySummary] = None
    debit_summary: Optional[EntrySummary] = None
    transactions: List[Transaction]

    @field_validator('currency', 'statement_date', mode='before')
    @classmethod
    def never_null(cls, v):
        """Downstream consumers key on these, so the floor is an empty string."""
        return v or ""


StatementList = TypeAdapter(List[Statement])


def dump_statements(statements: List[Statement], indent: Optional[int] = 2) -> str:
    """Serialize a statement list to JSON (decimals as strings, unresolved as null)."""
    return StatementList.dump_json(statements, indent=indent).decode("utf-8")
