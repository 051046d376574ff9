"""
Namespace detection and XSD validation.
"""
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional
import logging

from lxml import etree

from .errors import Camt053ParserError
from .loader import DocumentLoader

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_DIR = Path(__file__).parent.parent / "schemas"

NAMESPACE_TO_XSD: Dict[str, str] = {
    'urn:iso:std:iso:20022:tech:xsd:camt.053.001.02': 'camt.053.001.02.xsd',
    'urn:iso:std:iso:20022:tech:xsd:camt.053.001.08': 'camt.053.001.08.xsd',
    'urn:iso:std:iso:20022:tech:xsd:camt.053.001.13': 'camt.053.001.13.xsd',
}

DOCUMENT_TAG = "Document"


def find_document(root: etree._Element) -> Optional[etree._Element]:
    """
    Locate the Document element.

    It is usually the root, but may be wrapped together with a business
    application header.
    """
    if etree.QName(root).localname == DOCUMENT_TAG:
        return root
    for element in root.iter():
        if isinstance(element.tag, str) and etree.QName(element).localname == DOCUMENT_TAG:
            return element
    return None


def detect_namespace(document: etree._Element) -> Optional[str]:
    """Namespace declared by the Document element, or None."""
    return etree.QName(document).namespace


@lru_cache(maxsize=None)
def _compile_schema(xsd_path: Path) -> etree.XMLSchema:
    logger.debug(f"Compiling schema: {xsd_path}")
    return etree.XMLSchema(etree.parse(str(xsd_path)))


class SchemaValidator:
    """Validates documents against the XSD registered for their namespace."""

    def __init__(self, schema_dir: Optional[Path] = None):
        self.schema_dir = Path(schema_dir) if schema_dir else DEFAULT_SCHEMA_DIR

    def schema_path(self, namespace: Optional[str]) -> Path:
        """
        Map a namespace to its schema file.

        Raises:
            Camt053ParserError: If the namespace is missing, unsupported, or its
                schema file is not present
        """
        if not namespace or namespace not in NAMESPACE_TO_XSD:
            raise Camt053ParserError(
                f"Unsupported or missing CAMT.053 namespace: {namespace or '(none)'}"
            )

        xsd_path = self.schema_dir / NAMESPACE_TO_XSD[namespace]
        if not xsd_path.exists():
            raise Camt053ParserError(f"Schema file not found for {namespace}: {xsd_path}")
        return xsd_path

    def errors(self, document: etree._Element, namespace: Optional[str]) -> List[str]:
        """Validator messages for a document; empty when it is valid."""
        xsd_path = self.schema_path(namespace)
        try:
            schema = _compile_schema(xsd_path)
        except etree.XMLSchemaParseError as e:
            raise Camt053ParserError(f"Invalid XSD {xsd_path.name}: {e}") from e

        if schema.validate(document):
            return []
        return [str(error.message) for error in schema.error_log]

    def validate(self, document: etree._Element, namespace: Optional[str]) -> None:
        """
        Raises:
            Camt053ParserError: If the document does not conform to its schema
        """
        errors = self.errors(document, namespace)
        if errors:
            raise Camt053ParserError("XSD validation failed: " + "; ".join(errors))
        logger.debug(f"Document valid against {NAMESPACE_TO_XSD[namespace]}")


def detect_document_namespace(source) -> Optional[str]:
    """
    Convenience function to detect the CAMT.053 version of a document.

    Args:
        source: XML text, raw bytes or a path to an XML file

    Returns:
        Declared namespace, or None when there is no Document element

    Raises:
        Camt053ParserError: If the source is not well-formed XML
    """
    document = find_document(DocumentLoader(source).load())
    if document is None:
        return None
    return detect_namespace(document)
