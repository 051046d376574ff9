"""
Statement-level field resolution.
"""
from decimal import Decimal
from typing import Any, List, Optional, Tuple
import logging

from .entries import EntryFlattener
from .normalize import extract_amount, extract_date, extract_int
from .policy import FieldPolicy, first_of
from .tree import as_list, get
from ..models.schema import EntrySummary, Statement

logger = logging.getLogger(__name__)

BALANCE_CODE_PATH = ("Tp", "CdOrPrtry", "Cd")


class StatementResolver:
    """Resolves one Stmt subtree into a Statement."""

    def __init__(self, policy: FieldPolicy):
        self.policy = policy

    def resolve(self, statement: Any, index: int) -> Statement:
        """
        Resolve a statement and all of its transactions.

        Args:
            statement: Stmt subtree
            index: Zero-based position of the statement in the document

        Returns:
            Statement object
        """
        rules = self.policy.statement
        scopes = {"statement": statement}

        currency = first_of(rules.currency, scopes) or ""
        balances = as_list(get(statement, ("Bal",)))
        entries = as_list(get(statement, ("Ntry",)))
        flattener = EntryFlattener(self.policy, statement, currency)

        transactions = []
        for entry in entries:
            transactions.extend(flattener.flatten(entry))

        opening, closing = self.balances(balances)
        summary = get(statement, ("TxsSummry",))

        logger.debug(
            f"Statement {index + 1}: {len(entries)} entries, {len(transactions)} transactions"
        )

        return Statement(
            title=f"Statement {index + 1}: {currency} Account",
            account_holder=first_of(rules.account_holder, scopes),
            account_identifier=first_of(rules.account_identifier, scopes),
            currency=currency,
            sequence_number=extract_int(first_of(rules.sequence_number, scopes)),
            statement_date=self.statement_date(statement, balances, entries, flattener),
            opening_balance=opening,
            closing_balance=closing,
            credit_summary=self.summary(get(summary, ("TtlCdtNtries",))),
            debit_summary=self.summary(get(summary, ("TtlDbtNtries",))),
            transactions=transactions,
        )

    def statement_date(self, statement: Any, balances: List[Any], entries: List[Any],
                       flattener: EntryFlattener) -> str:
        """
        Single representative date for the statement.

        Tried in order: the policy's direct candidates (period end, creation
        time), the latest balance date, the earliest booking date.
        """
        found = first_of(self.policy.statement.statement_date, {"statement": statement}, extract_date)
        if found:
            return found

        balance_dates = [d for d in (extract_date(get(bal, ("Dt",))) for bal in balances) if d]
        if balance_dates:
            return max(balance_dates)

        booking_dates = [d for entry in entries for d in flattener.booking_dates(entry)]
        if booking_dates:
            return min(booking_dates)

        return ""

    def balances(self, balances: List[Any]) -> Tuple[Optional[Decimal], Optional[Decimal]]:
        """
        Opening and closing booked balance.

        A repeated code is malformed input; the last occurrence wins.
        """
        codes = self.policy.codes.balance
        opening = closing = None
        for balance in balances:
            code = get(balance, BALANCE_CODE_PATH)
            if code == codes.opening:
                opening = extract_amount(get(balance, ("Amt",)))
            elif code == codes.closing:
                closing = extract_amount(get(balance, ("Amt",)))
        return opening, closing

    @staticmethod
    def summary(block: Any) -> Optional[EntrySummary]:
        """Count and sum of one side of TxsSummry, or None when the block is absent."""
        if block is None:
            return None
        return EntrySummary(
            count=extract_int(get(block, ("NbOfNtries",))),
            total=extract_amount(get(block, ("Sum",))),
        )
