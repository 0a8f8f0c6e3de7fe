"""
Custom exceptions for the XML to CSV extraction system.

This module defines specific exception types for the different error conditions
that can occur while discovering input, parsing documents and writing output.
"""


class XMLToCSVError(Exception):
    """Base exception for all XML to CSV related errors."""

    def __init__(self, message: str, source_path: str = None):
        """
        Initialize XML to CSV error.

        Args:
            message: Error description
            source_path: Optional path of the file that caused the error
        """
        super().__init__(message)
        self.source_path = source_path


class XMLParsingError(XMLToCSVError):
    """Exception raised when an input document cannot be read or parsed."""
    pass


class InputDiscoveryError(XMLToCSVError):
    """Exception raised when the input directory cannot be enumerated."""
    pass


class ConfigurationError(XMLToCSVError):
    """Exception raised when configuration is invalid or cannot be read."""
    pass


class OutputCreationError(XMLToCSVError):
    """Exception raised when the result file cannot be created."""
    pass


class RowWriteError(XMLToCSVError):
    """Exception raised when a row cannot be written to the result file."""

    def __init__(self, message: str, row_index: int = None, source_path: str = None):
        """
        Initialize row write error.

        Args:
            message: Error description
            row_index: Zero-based index of the record that failed (None for the header row)
            source_path: Optional path of the output file
        """
        super().__init__(message, source_path)
        self.row_index = row_index
