"""
Entry/transaction flattening.

Every entry yields one transaction per transaction-detail block, or exactly
one transaction built from the entry itself when it has none. Both cases go
through the same resolution code, written against a detail source.
"""
from decimal import Decimal
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from .normalize import extract_amount, extract_date, extract_direction, normalize_text
from .policy import Candidate, FieldPolicy, first_of, first_of_traced, is_blank
from .tree import as_list, get, text_of
from ..models.schema import Direction, Transaction

# Resolved value and the candidates that supplied it
Resolved = Tuple[Any, List[Candidate]]


class EntryOnly:
    """An entry without detail blocks, standing in as its own single detail."""
    has_detail = False

    def __init__(self, entry: Any):
        self.entry = entry

    def scopes(self, statement: Any) -> Dict[str, Any]:
        return {"statement": statement, "entry": self.entry}


class DetailOf(EntryOnly):
    """One transaction-detail block of an entry."""
    has_detail = True

    def __init__(self, entry: Any, detail: Any):
        super().__init__(entry)
        self.detail = detail

    def scopes(self, statement: Any) -> Dict[str, Any]:
        return {"statement": statement, "entry": self.entry, "detail": self.detail}


def detail_sources(entry: Any) -> List[EntryOnly]:
    """
    Enumerate the detail sources of an entry in document order.

    NtryDtls and TxDtls may both repeat, so all blocks are collected.
    """
    details = [
        detail
        for block in as_list(get(entry, ("NtryDtls",)))
        for detail in as_list(get(block, ("TxDtls",)))
    ]
    if not details:
        return [EntryOnly(entry)]
    return [DetailOf(entry, detail) for detail in details]


class EntryBaseline(NamedTuple):
    """Entry-level values used when a detail block does not carry its own."""
    date: Optional[str]
    amount: Optional[Decimal]
    direction: Optional[Direction]
    currency: str


class EntryFlattener:
    """Turns the entries of one statement into normalized transactions."""

    def __init__(self, policy: FieldPolicy, statement: Any, currency: str):
        self.policy = policy
        self.statement = statement
        self.currency = currency

    def baseline(self, entry: Any) -> EntryBaseline:
        rules = self.policy.entry
        scopes = {"statement": self.statement, "entry": entry}
        codes = self.policy.codes.direction

        currency = self.currency
        if not currency:
            currency = first_of(rules.currency, scopes) or ""

        return EntryBaseline(
            date=first_of(rules.booking_date, scopes, extract_date),
            amount=first_of(rules.amount, scopes, extract_amount),
            direction=first_of(rules.indicator, scopes, lambda v: extract_direction(v, codes)),
            currency=currency,
        )

    def flatten(self, entry: Any) -> List[Transaction]:
        """One transaction per detail source, in document order."""
        baseline = self.baseline(entry)
        return [self.resolve(source, baseline) for source in detail_sources(entry)]

    def booking_dates(self, entry: Any) -> List[str]:
        """Booking date of every detail source, falling back to the entry's."""
        baseline = self.baseline(entry)
        dates = []
        for source in detail_sources(entry):
            date = first_of(self.policy.transaction.date, source.scopes(self.statement), extract_date)
            date = date or baseline.date
            if date:
                dates.append(date)
        return dates

    def resolve(self, source: EntryOnly, baseline: EntryBaseline) -> Transaction:
        """Resolve every output field of one detail source."""
        values = {name: value for name, (value, _) in self.fields(source, baseline.direction).items()}

        return Transaction(
            date=values["date"] if values["date"] is not None else baseline.date,
            amount=values["amount"] if values["amount"] is not None else baseline.amount,
            currency=values["currency"] or baseline.currency,
            direction=baseline.direction,
            counterparty_name=values["counterparty_name"],
            counterparty_account=values["counterparty_account"],
            description=values["description"],
            description_additional=values["description_additional"],
            end_to_end_reference=values["end_to_end_reference"],
            remittance_reference=values["remittance_reference"],
            purpose=values["purpose"],
        )

    def fields(self, source: EntryOnly, direction: Optional[Direction]) -> Dict[str, Resolved]:
        """
        Resolve the detail-dependent fields of one detail source.

        Args:
            source: Entry or detail block to resolve
            direction: Direction of the owning entry

        Returns:
            Field name -> (value, winning candidates); entry-level fallbacks
            are not applied here
        """
        rules = self.policy.transaction
        scopes = source.scopes(self.statement)

        resolved = {}
        for name, candidates, convert in (
            ("date", rules.date, extract_date),
            ("amount", rules.amount, extract_amount),
            ("currency", rules.currency, text_of),
            ("end_to_end_reference", rules.end_to_end_reference, text_of),
            ("remittance_reference", rules.remittance_reference, text_of),
            ("purpose", rules.purpose, text_of),
        ):
            value, winner = first_of_traced(candidates, scopes, convert)
            resolved[name] = (value, _winners(winner))

        resolved.update(self._counterparty(source, scopes, direction))
        resolved.update(self._description(scopes))
        return resolved

    def _counterparty(self, source: EntryOnly, scopes: Dict[str, Any],
                      direction: Optional[Direction]) -> Dict[str, Resolved]:
        rules = self.policy.transaction.counterparty
        party = {Direction.CREDIT: rules.credit, Direction.DEBIT: rules.debit}.get(direction)

        resolved = {}
        for field in ("name", "account"):
            value = winner = None
            if party is not None:
                value, winner = first_of_traced(getattr(party, field), scopes)
            # Entries without detail blocks carry no counterparty at all.
            if value is None and source.has_detail:
                value, winner = first_of_traced(getattr(rules.fallback, field), scopes)
            resolved[f"counterparty_{field}"] = (value, _winners(winner))
        return resolved

    def _description(self, scopes: Dict[str, Any]) -> Dict[str, Resolved]:
        rules = self.policy.transaction.description

        parts, used = [], []
        for candidate in rules.candidates:
            text = normalize_text(candidate.resolve(scopes))
            if not is_blank(text):
                parts.append(text)
                used.append(candidate)

        if not parts:
            fallback, winner = first_of_traced(rules.fallback, scopes, normalize_text)
            if winner is not None:
                parts.append(fallback)
                used.append(winner)

        if not parts:
            return {"description": (None, []), "description_additional": (None, [])}
        return {
            "description": (parts[0], used[:1]),
            "description_additional": (rules.separator.join(parts[1:]) or None, used[1:]),
        }


def _winners(candidate: Optional[Candidate]) -> List[Candidate]:
    return [candidate] if candidate is not None else []
