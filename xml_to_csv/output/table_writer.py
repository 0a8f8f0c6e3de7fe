"""
Delimited table output for extracted records.

The header is the catalog's column order followed by any column introduced by
the records themselves, in first-seen order. Rows are written with the csv
module on top of a text stream opened with the requested encoding, so the csv
writer itself never deals with bytes.
"""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..config.processing_defaults import ProcessingDefaults
from ..exceptions import OutputCreationError, RowWriteError
from ..interfaces import TableWriterInterface
from ..models import FieldCatalog, Record


def derive_columns(records: Sequence[Record], catalog: FieldCatalog) -> List[str]:
    """
    Compute the output column set.

    Args:
        records: Records in output order
        catalog: Catalog supplying the leading column order

    Returns:
        Unique column names: catalog order first, then extra record keys in
        first-encounter order
    """
    headers = []
    used_fields = set()

    for csv_field in catalog.column_order:
        if csv_field not in used_fields:
            headers.append(csv_field)
            used_fields.add(csv_field)

    for record in records:
        for key in record:
            if key not in used_fields:
                headers.append(key)
                used_fields.add(key)

    return headers


def build_output_path(output_dir: Union[str, Path] = ProcessingDefaults.OUTPUT_DIR,
                      now: Optional[datetime] = None) -> Path:
    """Return the timestamped result file path, e.g. result_2024-01-31_17-05-09.csv."""
    timestamp = (now or datetime.now()).strftime(ProcessingDefaults.TIMESTAMP_FORMAT)
    return Path(output_dir) / ProcessingDefaults.OUTPUT_FILE_PATTERN.format(timestamp=timestamp)


class TableWriter(TableWriterInterface):
    """
    Serializes records as a header row plus one row per record.

    Fields containing the delimiter, the quote character or a line break are
    quoted with standard CSV escaping. A failure while writing a row aborts
    the remaining rows; whatever was already written stays on disk.
    """

    def __init__(self, catalog: FieldCatalog,
                 delimiter: str = ProcessingDefaults.DELIMITER,
                 encoding: str = "utf-8"):
        """
        Initialize the table writer.

        Args:
            catalog: Catalog supplying the leading column order
            delimiter: Single-character field delimiter
            encoding: Output text encoding (unencodable characters are an error)
        """
        self.catalog = catalog
        self.delimiter = delimiter
        self.encoding = encoding
        self.logger = logging.getLogger(__name__)

    def write(self, records: Sequence[Record], output_path: Union[str, Path]) -> int:
        """
        Write all records to output_path.

        Args:
            records: Records in output row order
            output_path: Destination file

        Returns:
            Number of data rows written

        Raises:
            OutputCreationError: If the file cannot be created
            RowWriteError: If the header or a data row cannot be written
        """
        headers = derive_columns(records, self.catalog)

        try:
            csvfile = open(output_path, "w", newline="", encoding=self.encoding)
        except (OSError, LookupError) as e:
            raise OutputCreationError(f"Cannot create output file {output_path}: {e}", str(output_path))

        rows_written = 0
        with csvfile:
            writer = csv.writer(
                csvfile,
                delimiter=self.delimiter,
                quoting=csv.QUOTE_MINIMAL,
                lineterminator="\n"
            )

            try:
                writer.writerow(headers)
            except (OSError, UnicodeEncodeError, csv.Error) as e:
                raise RowWriteError(f"Failed to write header row: {e}", None, str(output_path))

            for index, record in enumerate(records):
                row = [record.get(header, "") for header in headers]
                try:
                    writer.writerow(row)
                except (OSError, UnicodeEncodeError, csv.Error) as e:
                    raise RowWriteError(f"Failed to write row {index + 1}: {e}", index, str(output_path))
                rows_written += 1

        self.logger.info(f"Wrote {rows_written} row(s) with {len(headers)} column(s) to {output_path}")
        return rows_written
