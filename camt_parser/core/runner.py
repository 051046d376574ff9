"""
End-to-end parsing orchestration.
"""
from pathlib import Path
from typing import Any, List, Optional
import logging

from .detectors import SchemaValidator, detect_namespace, find_document
from .errors import Camt053ParserError
from .loader import DocumentLoader, Source
from .policy import FieldPolicy, default_policy
from .statement import StatementResolver
from .tree import as_list, get
from ..models.schema import Statement

logger = logging.getLogger(__name__)

# BkToCstmrStmt in every published version; the long form is accepted as well.
CONTAINER_TAGS = ("BkToCstmrStmt", "BankToCustomerStatementV13")


class Camt053Parser:
    """Main parser class that orchestrates validation and extraction."""

    def __init__(self, policy_path: Optional[Path] = None, schema_dir: Optional[Path] = None,
                 verbose: bool = False):
        self.policy = FieldPolicy.load(policy_path) if policy_path else default_policy()
        self.validator = SchemaValidator(schema_dir)
        self.resolver = StatementResolver(self.policy)

        if verbose:
            logging.basicConfig(level=logging.DEBUG)

    def parse(self, source: Source) -> List[Statement]:
        """
        Parse a CAMT.053 document into normalized statements.

        Args:
            source: XML text, raw bytes or a path to an XML file

        Returns:
            Statements in document order

        Raises:
            Camt053ParserError: If the document is malformed, declares an
                unsupported namespace, fails schema validation or has no statements
        """
        statements = [
            self.resolver.resolve(statement, index)
            for index, statement in enumerate(self.statement_trees(source))
        ]

        logger.info(f"Parsed {len(statements)} statements")
        return statements

    def statement_trees(self, source: Source) -> List[Any]:
        """Load and validate a document, returning its Stmt subtrees."""
        root = DocumentLoader(source).load()

        document = find_document(root)
        if document is None:
            raise Camt053ParserError("Missing <Document> root")

        namespace = detect_namespace(document)
        self.validator.validate(document, namespace)
        logger.info(f"Detected namespace: {namespace}")

        return self.locate_statements(DocumentLoader.build(document))

    @staticmethod
    def locate_statements(document: Any) -> List[Any]:
        """
        Find the repeating Stmt elements under the statement container.

        Raises:
            Camt053ParserError: If the container or its statements are missing
        """
        container = None
        for tag in CONTAINER_TAGS:
            container = get(document, (tag,))
            if container is not None:
                break

        if not isinstance(container, dict):
            raise Camt053ParserError("Missing statement container")

        statements = as_list(container.get("Stmt"))
        if not statements:
            raise Camt053ParserError("No <Stmt> found")
        return statements


def parse_camt053(source: Source, policy_path: Optional[Path] = None,
                  schema_dir: Optional[Path] = None, verbose: bool = False) -> List[Statement]:
    """
    Parse a CAMT.053 bank statement document.

    Args:
        source: XML text, raw bytes or a path to an XML file
        policy_path: Alternative field policy YAML file
        schema_dir: Directory holding the XSD files
        verbose: Enable verbose logging

    Returns:
        List of Statement objects
    """
    parser = Camt053Parser(policy_path, schema_dir, verbose)
    return parser.parse(source)
