"""
Centralized configuration defaults for XML to CSV processing.

This module defines operational configuration constants used throughout the system.
Environment variables (see settings.py) can override these defaults at runtime.

Single Source of Truth: Change these values once; all modules automatically use updated defaults.
"""


class ProcessingDefaults:
    """
    Centralized operational configuration for XML to CSV processing.

    All values are defaults that can be overridden via environment variables:
    - XML_TO_CSV_WORKERS=8 xml_to_csv data
    - XML_TO_CSV_LOG_LEVEL=DEBUG xml_to_csv data
    """

    # Input / config locations
    DATA_DIR = "data"
    CONFIG_FILES = ("xml_to_csv_cfg", ".xml_to_csv_cfg")  # Tried in order when no config path is given

    # Parallelization
    WORKERS = 4  # Number of extraction threads
    DEADLINE_SECONDS = 120.0  # Aggregation deadline (2 minutes)

    # Output
    DELIMITER = ";"
    OUTPUT_DIR = "."
    OUTPUT_FILE_PATTERN = "result_{timestamp}.csv"
    TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

    # Logging
    LOG_LEVEL = "INFO"  # Default logging level (CRITICAL, ERROR, WARNING, INFO, DEBUG)

    @classmethod
    def to_dict(cls) -> dict:
        """
        Export all defaults as a dictionary.

        Returns:
            Dictionary of all ProcessingDefaults class attributes.
        """
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if not key.startswith('_') and key.isupper()
        }

    @classmethod
    def log_summary(cls, logger=None):
        """
        Log a summary of all operational defaults.

        Args:
            logger: Optional logger instance. If None, prints to stdout.
        """
        config_dict = cls.to_dict()
        summary = "\n".join([f"  {key}: {value}" for key, value in sorted(config_dict.items())])
        message = f"Processing Configuration Defaults:\n{summary}"

        if logger:
            logger.info(message)
        else:
            print(message)
