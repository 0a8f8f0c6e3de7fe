"""
XML to CSV Extraction System

Extracts repeated records from customs declaration XML documents, renames their
fields through a user-editable catalog and writes a single delimited file.
"""

__version__ = "1.0.0"

# Import core models and interfaces for easy access
from .models import (
    BOUNDARY_SENTINEL,
    FieldCatalog,
    Record,
    WorkItem,
    WorkResult,
    AggregationResult
)

from .interfaces import (
    RecordExtractorInterface,
    AggregatorInterface,
    TableWriterInterface
)

from .exceptions import (
    XMLToCSVError,
    XMLParsingError,
    InputDiscoveryError,
    ConfigurationError,
    OutputCreationError,
    RowWriteError
)

__all__ = [
    # Core models
    "BOUNDARY_SENTINEL",
    "FieldCatalog",
    "Record",
    "WorkItem",
    "WorkResult",
    "AggregationResult",

    # Interfaces
    "RecordExtractorInterface",
    "AggregatorInterface",
    "TableWriterInterface",

    # Exceptions
    "XMLToCSVError",
    "XMLParsingError",
    "InputDiscoveryError",
    "ConfigurationError",
    "OutputCreationError",
    "RowWriteError"
]
