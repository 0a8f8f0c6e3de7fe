"""
Record extraction engine for customs declaration XML documents.

This module turns one XML document into a list of flat records using lxml.
Every element named by the catalog's boundary entry starts one record; the
other catalog entries name the elements whose text fills the record's columns.
"""

import logging
from typing import List

from lxml import etree

from ..exceptions import XMLParsingError
from ..interfaces import RecordExtractorInterface
from ..models import FieldCatalog, Record


def _any_namespace(tag: str) -> str:
    """Build an lxml tag selector matching a local name in any (or no) namespace."""
    return "{*}" + tag


class RecordExtractor(RecordExtractorInterface):
    """
    Extracts flat records from XML documents according to a FieldCatalog.

    Extraction Strategy:
    - Boundary elements are found anywhere in the tree, the root included
    - For each boundary element, every mapped source element is looked up among
      its descendants; the first match in document order wins
    - Element names are compared by local name, so namespace prefixes are ignored
    - A boundary element with no matching descendants produces no record

    The extractor holds no mutable state after construction, so one instance
    can be shared by all worker threads.
    """

    def __init__(self, catalog: FieldCatalog):
        """
        Initialize the extractor.

        Args:
            catalog: Field catalog defining the boundary element and column mappings
        """
        self.catalog = catalog
        self.logger = logging.getLogger(__name__)

        self._boundary_selector = _any_namespace(catalog.boundary_element)
        self._field_selectors = [
            (_any_namespace(source_name), column_name)
            for source_name, column_name in catalog.field_mappings()
        ]

    def parse_document(self, document_path: str) -> etree._ElementTree:
        """
        Parse an XML document from disk.

        Args:
            document_path: Path to the XML document

        Returns:
            Parsed lxml element tree

        Raises:
            XMLParsingError: If the file cannot be read or is not well-formed XML
        """
        parser = etree.XMLParser(
            recover=False,  # Malformed documents are skipped, not repaired
            resolve_entities=False,  # Security: don't resolve external entities
            no_network=True,  # Security: disable network access
            huge_tree=True
        )
        try:
            return etree.parse(document_path, parser)
        except etree.XMLSyntaxError as e:
            raise XMLParsingError(f"XML syntax error: {e}", document_path)
        except OSError as e:
            raise XMLParsingError(f"Cannot read document: {e}", document_path)

    def extract_from_tree(self, tree: etree._ElementTree) -> List[Record]:
        """
        Extract records from an already parsed document.

        Args:
            tree: Parsed lxml element tree

        Returns:
            Records in boundary element discovery order
        """
        records = []
        for block in tree.getroot().iter(self._boundary_selector):
            record = {}
            for selector, column_name in self._field_selectors:
                element = next(block.iterdescendants(selector), None)
                if element is not None:
                    record[column_name] = element.text or ""
            if record:
                records.append(record)
        return records

    def extract_document(self, document_path: str) -> List[Record]:
        """
        Parse one XML document and extract its records.

        Args:
            document_path: Path to the XML document

        Returns:
            Extracted records (possibly empty)

        Raises:
            XMLParsingError: If the file cannot be read or parsed
        """
        tree = self.parse_document(document_path)
        records = self.extract_from_tree(tree)
        self.logger.debug(f"Extracted {len(records)} record(s) from {document_path}")
        return records


def extract_records(document_path: str, catalog: FieldCatalog) -> List[Record]:
    """Extract records from one document (functional form of RecordExtractor.extract)."""
    return RecordExtractor(catalog).extract(document_path)
