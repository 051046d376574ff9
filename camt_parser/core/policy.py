"""
Field resolution policy: ordered candidate locations per output field.

The tables live in YAML (policies/default.yaml) so that the precedence of
every field can be read, reviewed and overridden without touching code.
"""
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Tuple
import logging

import yaml
from pydantic import BaseModel, ConfigDict, model_validator

from .tree import get, text_of
from ..models.schema import Direction

logger = logging.getLogger(__name__)

DEFAULT_POLICY_PATH = Path(__file__).parent.parent / "policies" / "default.yaml"

Scopes = Mapping[str, Any]


class Candidate(BaseModel):
    """One source location, written as scope:Path/To/Element."""
    model_config = ConfigDict(frozen=True)

    scope: Literal["statement", "entry", "detail"]
    path: Tuple[str, ...]

    @model_validator(mode="before")
    @classmethod
    def from_string(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        scope, sep, path = value.partition(":")
        steps = tuple(step for step in path.strip().split("/") if step)
        if not sep or not steps:
            raise ValueError(f"Malformed candidate {value!r}, expected scope:Path/To/Element")
        return {"scope": scope.strip(), "path": steps}

    def resolve(self, scopes: Scopes) -> Any:
        return get(scopes.get(self.scope), self.path)

    def __str__(self) -> str:
        return f"{self.scope}:{'/'.join(self.path)}"


class BalanceCodes(BaseModel):
    opening: str = "OPBD"
    closing: str = "CLBD"


class CodeTables(BaseModel):
    balance: BalanceCodes = BalanceCodes()
    direction: Dict[str, Direction] = {"CRDT": Direction.CREDIT, "DBIT": Direction.DEBIT}


class StatementRules(BaseModel):
    account_holder: List[Candidate]
    account_identifier: List[Candidate]
    currency: List[Candidate]
    sequence_number: List[Candidate]
    statement_date: List[Candidate]
    identifier: List[Candidate]


class EntryRules(BaseModel):
    booking_date: List[Candidate]
    amount: List[Candidate]
    indicator: List[Candidate]
    currency: List[Candidate]


class PartyRules(BaseModel):
    name: List[Candidate]
    account: List[Candidate]


class CounterpartyRules(BaseModel):
    credit: PartyRules
    debit: PartyRules
    fallback: PartyRules


class DescriptionRules(BaseModel):
    candidates: List[Candidate]
    fallback: List[Candidate]
    separator: str = " | "


class TransactionRules(BaseModel):
    date: List[Candidate]
    amount: List[Candidate]
    currency: List[Candidate]
    counterparty: CounterpartyRules
    end_to_end_reference: List[Candidate]
    remittance_reference: List[Candidate]
    purpose: List[Candidate]
    description: DescriptionRules


class FieldPolicy(BaseModel):
    """Complete set of resolution rules for one statement format."""
    model_config = ConfigDict(frozen=True)

    codes: CodeTables = CodeTables()
    statement: StatementRules
    entry: EntryRules
    transaction: TransactionRules

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "FieldPolicy":
        """
        Load and validate a policy file.

        Args:
            path: YAML policy file; the packaged default when omitted

        Returns:
            FieldPolicy

        Raises:
            ValueError: If the file is not a valid policy
        """
        path = Path(path) if path else DEFAULT_POLICY_PATH
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Policy file {path} does not contain a mapping")
        logger.debug(f"Loaded field policy: {path}")
        return cls.model_validate(data)


@lru_cache(maxsize=None)
def default_policy() -> FieldPolicy:
    return FieldPolicy.load()


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def first_of_traced(candidates: List[Candidate], scopes: Scopes,
                    convert: Callable[[Any], Any] = text_of) -> Tuple[Any, Optional[Candidate]]:
    """
    Evaluate candidates left to right and return the first usable value.

    Args:
        candidates: Ordered source locations
        scopes: Nodes for "statement", "entry" and "detail" (missing scopes are absent)
        convert: Turns the raw node into the output value; None means unusable

    Returns:
        (value, winning candidate), or (None, None) when every candidate is absent
    """
    for candidate in candidates:
        value = convert(candidate.resolve(scopes))
        if not is_blank(value):
            return value, candidate
    return None, None


def first_of(candidates: List[Candidate], scopes: Scopes,
             convert: Callable[[Any], Any] = text_of) -> Any:
    """First non-blank value among candidates, or None."""
    value, _ = first_of_traced(candidates, scopes, convert)
    return value
