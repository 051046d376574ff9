"""
Field trace tool for QA of field resolution.

Shows, for every transaction, which candidate location supplied each traced
field. The parser itself stays silent about fallbacks; this re-runs the
resolution with tracing for a human to inspect.
"""
from pathlib import Path
from typing import Dict, List, Optional
import logging

from rich.console import Console
from rich.table import Table

from ..core.entries import EntryFlattener, Resolved, detail_sources
from ..core.policy import first_of
from ..core.runner import Camt053Parser
from ..core.tree import as_list, get

logger = logging.getLogger(__name__)

TRACED_FIELDS = [
    "counterparty_name",
    "counterparty_account",
    "end_to_end_reference",
    "remittance_reference",
    "description",
]


class FieldTrace:
    """Collects the winning candidate per traced field for a document."""

    def __init__(self, policy_path: Optional[Path] = None, schema_dir: Optional[Path] = None):
        self.parser = Camt053Parser(policy_path, schema_dir)
        self.policy = self.parser.policy

    def trace(self, source) -> List[List[Dict[str, str]]]:
        """
        Trace a document.

        Args:
            source: XML text, raw bytes or a path to an XML file

        Returns:
            One list of rows per statement, one row per transaction
        """
        statements = []
        for statement in self.parser.statement_trees(source):
            currency = first_of(self.policy.statement.currency, {"statement": statement}) or ""
            flattener = EntryFlattener(self.policy, statement, currency)

            rows = []
            for entry in as_list(get(statement, ("Ntry",))):
                direction = flattener.baseline(entry).direction
                for detail_source in detail_sources(entry):
                    rows.append(self._row(detail_source, flattener.fields(detail_source, direction)))
            statements.append(rows)
        logger.info(f"Traced {sum(len(rows) for rows in statements)} transactions")
        return statements

    @staticmethod
    def _row(source, fields: Dict[str, Resolved]) -> Dict[str, str]:
        row = {"kind": "detail" if source.has_detail else "entry"}
        for field in TRACED_FIELDS:
            winners = fields[field][1]
            if field == "description":
                winners = winners + fields["description_additional"][1]
            row[field] = ", ".join(str(candidate) for candidate in winners) or "-"
        return row


def render_field_trace(traces: List[List[Dict[str, str]]], console: Console) -> None:
    """Print one table per statement."""
    for number, rows in enumerate(traces, 1):
        table = Table(title=f"Statement {number}: {len(rows)} transactions")
        table.add_column("#", justify="right")
        table.add_column("source")
        for field in TRACED_FIELDS:
            table.add_column(field)

        for index, row in enumerate(rows, 1):
            table.add_row(str(index), row["kind"], *(row[field] for field in TRACED_FIELDS))
        console.print(table)


def create_field_trace(xml_path: Path, console: Console, policy_path: Optional[Path] = None,
                       schema_dir: Optional[Path] = None) -> List[List[Dict[str, str]]]:
    """
    Trace field resolution for an XML file and print the result.

    Args:
        xml_path: Path to CAMT.053 file
        console: Rich console to print to
        policy_path: Alternative field policy YAML file
        schema_dir: Directory holding the XSD files
    """
    traces = FieldTrace(policy_path, schema_dir).trace(xml_path)
    render_field_trace(traces, console)
    return traces
