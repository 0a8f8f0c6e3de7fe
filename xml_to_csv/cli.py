"""
Command-line interface for the XML to CSV extraction system.

Usage:
    xml_to_csv [DATA_DIR] [CONFIG_FILE]

DATA_DIR defaults to 'data'. CONFIG_FILE defaults to 'xml_to_csv_cfg' (or
'.xml_to_csv_cfg'). Operational settings come from XML_TO_CSV_* environment
variables, see xml_to_csv.config.settings.
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

from .config.catalog_loader import load_field_catalog
from .config.processing_defaults import ProcessingDefaults
from .config.settings import ProcessingParameters
from .discovery import discover_input_files
from .exceptions import (ConfigurationError, InputDiscoveryError,
                         OutputCreationError, RowWriteError)
from .monitoring.performance_monitor import PerformanceMonitor
from .output.table_writer import TableWriter, build_output_path
from .platform_policy import PlatformPolicy, select_platform_policy
from .processing.parallel_aggregator import ParallelAggregator


EXIT_OK = 0
EXIT_UNEXPECTED_ERROR = 1
EXIT_INPUT_DISCOVERY_FAILED = 2
EXIT_CONFIGURATION_ERROR = 3
EXIT_OUTPUT_CREATION_FAILED = 4
EXIT_ROW_WRITE_FAILED = 5
EXIT_TIMED_OUT = 6
EXIT_INTERRUPTED = 130

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = ProcessingDefaults.LOG_LEVEL, log_file: Optional[str] = None) -> None:
    """
    Configure console (stdout) and optional file logging.

    The root logger is left alone if something (e.g. a test harness) already
    configured it.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(getattr(logging, log_level.upper()))
    logging.getLogger('lxml').setLevel(logging.WARNING)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xml_to_csv",
        description="Extract goods records from customs XML documents into a single delimited file."
    )
    parser.add_argument("data_dir", nargs="?", default=ProcessingDefaults.DATA_DIR,
                        help=f"Directory containing *.xml documents (default: {ProcessingDefaults.DATA_DIR})")
    parser.add_argument("config_file", nargs="?", default=None,
                        help=f"Field mapping file (default: {' or '.join(ProcessingDefaults.CONFIG_FILES)})")
    return parser


def run(data_dir: str, config_file: Optional[str], settings: ProcessingParameters,
        policy: PlatformPolicy, now: Optional[datetime] = None) -> int:
    """
    Run the extraction pipeline once.

    Args:
        data_dir: Directory scanned for XML documents
        config_file: Optional field mapping override file
        settings: Operational settings
        policy: Platform policy supplying the default output encoding
        now: Timestamp used for the result file name (defaults to the current time)

    Returns:
        Process exit code

    Raises:
        ConfigurationError, InputDiscoveryError, OutputCreationError, RowWriteError
    """
    catalog = load_field_catalog(config_file)
    files = discover_input_files(data_dir)

    monitor = PerformanceMonitor()
    monitor.start_monitoring()
    try:
        monitor.start_stage('extraction')
        aggregator = ParallelAggregator(
            catalog,
            num_workers=settings.workers,
            deadline_seconds=settings.deadline_seconds,
            monitor=monitor
        )
        result = aggregator.run(files)
        monitor.end_stage('extraction')
        monitor.record_metric('timed_out', result.timed_out)

        if not result.has_records:
            print("No data found, no output file written")
            return EXIT_TIMED_OUT if result.timed_out else EXIT_OK

        encoding = settings.encoding or policy.output_encoding
        output_path = build_output_path(settings.output_dir, now)
        writer = TableWriter(catalog, delimiter=settings.delimiter, encoding=encoding)

        monitor.start_stage('writing')
        rows_written = writer.write(result.records, output_path)
        monitor.end_stage('writing')
    finally:
        monitor.stop_monitoring()
        monitor.log_summary(logger)

    if result.timed_out:
        print(f"Deadline reached: {rows_written} record(s) from {result.files_completed}/{result.files_total} "
              f"document(s) written to {output_path}")
        return EXIT_TIMED_OUT

    print(f"{rows_written} record(s) from {result.files_total} document(s) written to {output_path}")
    return EXIT_OK


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Args:
        args: Optional command line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parsed = build_arg_parser().parse_args(args)
    policy = select_platform_policy()

    try:
        try:
            settings = ProcessingParameters.from_environment()
        except ConfigurationError as e:
            print(f"Configuration error: {e}")
            return EXIT_CONFIGURATION_ERROR

        setup_logging(settings.log_level, settings.log_file)
        settings.log_summary(logger)
        if settings.log_level == "DEBUG":
            ProcessingDefaults.log_summary(logger)

        try:
            return run(parsed.data_dir, parsed.config_file, settings, policy)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            return EXIT_CONFIGURATION_ERROR
        except InputDiscoveryError as e:
            logger.error(f"Error searching for XML files: {e}")
            return EXIT_INPUT_DISCOVERY_FAILED
        except OutputCreationError as e:
            logger.error(f"Error creating CSV file: {e}")
            return EXIT_OUTPUT_CREATION_FAILED
        except RowWriteError as e:
            logger.error(f"Error writing CSV file (partial output left in place): {e}")
            return EXIT_ROW_WRITE_FAILED
        except KeyboardInterrupt:
            print("\n Processing interrupted by user")
            return EXIT_INTERRUPTED
        except Exception as e:
            logger.exception(f"Processing failed: {e}")
            return EXIT_UNEXPECTED_ERROR
    finally:
        policy.on_exit()


if __name__ == "__main__":
    sys.exit(main())
