"""
Shared fixtures for the CAMT.053 parser tests.
"""
import pytest
from pathlib import Path
from lxml import etree

from ..core.policy import default_policy
from ..core.tree import build_tree

NS_V02 = "urn:iso:std:iso:20022:tech:xsd:camt.053.001.02"
NS_V08 = "urn:iso:std:iso:20022:tech:xsd:camt.053.001.08"
NS_V13 = "urn:iso:std:iso:20022:tech:xsd:camt.053.001.13"


def build_document(statements_xml: str, namespace: str = NS_V02) -> str:
    """Wrap Stmt elements into a complete, schema-valid document."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<Document xmlns="{namespace}">'
        '<BkToCstmrStmt>'
        '<GrpHdr><MsgId>TEST-MSG</MsgId><CreDtTm>2024-05-01T08:00:00</CreDtTm></GrpHdr>'
        f'{statements_xml}'
        '</BkToCstmrStmt>'
        '</Document>'
    )


@pytest.fixture
def samples_dir():
    """Directory holding the sample documents."""
    return Path(__file__).parent / "samples"


@pytest.fixture
def make_document():
    return build_document


@pytest.fixture
def tree_of():
    """Generic tree for an XML snippet."""
    def _tree_of(xml: str):
        return build_tree(etree.fromstring(xml))
    return _tree_of


@pytest.fixture
def policy():
    return default_policy()
