"""
Abstract interfaces for the XML to CSV extraction system.

This module defines the contracts that the pipeline stages implement so that
the CLI can be wired with alternative implementations (for example in tests).
"""

import logging

from abc import ABC, abstractmethod
from typing import List, Sequence

from .exceptions import XMLParsingError
from .models import AggregationResult, Record


class RecordExtractorInterface(ABC):
    """Abstract interface for per-document record extraction."""

    @abstractmethod
    def extract_document(self, document_path: str) -> List[Record]:
        """
        Extract every record from one XML document.

        Args:
            document_path: Path to the XML document

        Returns:
            Records in boundary element discovery order

        Raises:
            XMLParsingError: If the document cannot be read or parsed
        """
        pass

    def extract(self, document_path: str) -> List[Record]:
        """
        Extract every record from one XML document, isolating failures.

        Unreadable or unparseable documents are logged and yield an empty list.
        """
        try:
            return self.extract_document(document_path)
        except XMLParsingError as e:
            logging.getLogger(type(self).__module__).warning(f"Skipping {document_path}: {e}")
            return []


class AggregatorInterface(ABC):
    """
    Abstract interface for batch extraction strategies.

    Implementations run a RecordExtractor over many documents and merge the
    results into a single record collection.
    """

    @abstractmethod
    def run(self, document_paths: Sequence[str]) -> AggregationResult:
        """
        Extract and merge records from all documents.

        Args:
            document_paths: Paths of the documents to process

        Returns:
            AggregationResult with the merged records and run metrics
        """
        pass


class TableWriterInterface(ABC):
    """Abstract interface for serializing records to a delimited file."""

    @abstractmethod
    def write(self, records: Sequence[Record], output_path: str) -> int:
        """
        Write a header row followed by one row per record.

        Args:
            records: Records to serialize, in output row order
            output_path: Destination file path

        Returns:
            Number of data rows written

        Raises:
            OutputCreationError: If the output file cannot be opened
            RowWriteError: If a row cannot be written
        """
        pass
