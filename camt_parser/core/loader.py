"""
XML loading using lxml.
"""
from pathlib import Path
from typing import Any, Optional, Union
import logging

from lxml import etree

from .errors import Camt053ParserError
from .tree import build_tree

logger = logging.getLogger(__name__)

Source = Union[bytes, str, Path]


def _make_parser(encoding: Optional[str] = None) -> etree.XMLParser:
    """
    Parser that never fetches external resources or expands entities.

    A given encoding overrides the one the document declares.
    """
    return etree.XMLParser(
        encoding=encoding,
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
        huge_tree=False,
    )


class DocumentLoader:
    """Loads a CAMT.053 document from text, bytes or a file."""

    def __init__(self, source: Source):
        self.source = source
        self._root = None

    def _read(self) -> bytes:
        if isinstance(self.source, Path):
            return self.source.read_bytes()
        if isinstance(self.source, str):
            return self.source.encode('utf-8')
        return self.source

    def load(self) -> etree._Element:
        """
        Parse the source into an element tree.

        Returns:
            Root element

        Raises:
            Camt053ParserError: If the source is not well-formed XML
        """
        if self._root is not None:
            return self._root

        data = self._read().strip()
        if not data:
            raise Camt053ParserError("Invalid XML: document is empty")

        try:
            # Text was encoded to UTF-8 by _read, whatever its declaration says.
            encoding = "utf-8" if isinstance(self.source, str) else None
            self._root = etree.fromstring(data, parser=_make_parser(encoding))
        except etree.XMLSyntaxError as e:
            logger.error(f"Error parsing XML: {e}")
            raise Camt053ParserError(f"Invalid XML: {e}") from e

        logger.info(f"Loaded XML document with root <{etree.QName(self._root).localname}>")
        return self._root

    @staticmethod
    def build(element: etree._Element) -> Any:
        """Generic tree for an element (see core.tree)."""
        return build_tree(element)
