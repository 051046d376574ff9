"""
Tests for the field trace tool.
"""
from ..core.runner import parse_camt053
from ..tools.field_trace import TRACED_FIELDS, FieldTrace


class TestFieldTrace:

    def test_v08_batch(self, samples_dir):
        statements = FieldTrace().trace(samples_dir / "camt053_v08_batch_booking.xml")

        assert len(statements) == 1
        first, second = statements[0]
        assert first["kind"] == "detail"
        assert first["counterparty_name"] == "detail:RltdPties/Dbtr/Pty/Nm"
        assert first["end_to_end_reference"] == "detail:Refs/EndToEndId"
        assert second["counterparty_name"] == "entry:AcctSvcrRef"
        assert second["remittance_reference"] == "detail:RmtInf/Strd/RfrdDocInf/Nb"
        assert second["description"] == "detail:RmtInf/Strd/AddtlRmtInf, detail:AddtlTxInf"

    def test_entry_without_details(self, samples_dir):
        _, fee = FieldTrace().trace(samples_dir / "camt053_v02_eur_account.xml")[0]

        assert fee["kind"] == "entry"
        assert fee["counterparty_name"] == "-"
        assert fee["description"] == "entry:AcctSvcrRef"

    def test_sources_match_parsed_values(self, samples_dir):
        for sample in sorted(samples_dir.glob("*.xml")):
            traces = FieldTrace().trace(sample)
            statements = parse_camt053(sample)
            for rows, statement in zip(traces, statements):
                for row, transaction in zip(rows, statement.transactions):
                    for field in TRACED_FIELDS:
                        assert (row[field] == "-") == (getattr(transaction, field) is None)
