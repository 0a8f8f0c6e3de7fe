"""
Runtime settings for the XML to CSV extraction system.

Settings start from ProcessingDefaults and can be overridden through
XML_TO_CSV_* environment variables.
"""

import codecs
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .processing_defaults import ProcessingDefaults
from ..exceptions import ConfigurationError


_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class ProcessingParameters:
    """Processing parameters with environment variable support."""
    workers: int = ProcessingDefaults.WORKERS
    deadline_seconds: float = ProcessingDefaults.DEADLINE_SECONDS
    delimiter: str = ProcessingDefaults.DELIMITER
    encoding: Optional[str] = None  # None = use the platform policy encoding
    output_dir: str = ProcessingDefaults.OUTPUT_DIR
    log_level: str = ProcessingDefaults.LOG_LEVEL
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate processing parameters."""
        if self.workers <= 0:
            raise ConfigurationError("workers must be positive")
        if self.deadline_seconds <= 0:
            raise ConfigurationError("deadline_seconds must be positive")
        if len(self.delimiter) != 1 or self.delimiter in '"\r\n':
            raise ConfigurationError(f"delimiter must be a single character other than a quote or line break, got {self.delimiter!r}")
        if self.encoding is not None:
            try:
                codecs.lookup(self.encoding)
            except LookupError:
                raise ConfigurationError(f"Unknown output encoding: {self.encoding}")
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level}")

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> 'ProcessingParameters':
        """
        Create processing parameters from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        try:
            workers = int(env.get('XML_TO_CSV_WORKERS', cls.workers))
            deadline_seconds = float(env.get('XML_TO_CSV_DEADLINE_SECONDS', cls.deadline_seconds))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}")

        return cls(
            workers=workers,
            deadline_seconds=deadline_seconds,
            delimiter=env.get('XML_TO_CSV_DELIMITER', cls.delimiter),
            encoding=env.get('XML_TO_CSV_ENCODING') or None,
            output_dir=env.get('XML_TO_CSV_OUTPUT_DIR', cls.output_dir),
            log_level=env.get('XML_TO_CSV_LOG_LEVEL', cls.log_level),
            log_file=env.get('XML_TO_CSV_LOG_FILE') or None,
        )

    def log_summary(self, logger: logging.Logger) -> None:
        logger.info(
            f"Settings: workers={self.workers}, deadline={self.deadline_seconds:.0f}s, "
            f"delimiter={self.delimiter!r}, encoding={self.encoding or 'platform default'}, "
            f"output_dir={self.output_dir}"
        )
