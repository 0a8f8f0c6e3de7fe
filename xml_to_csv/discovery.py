"""Input file discovery."""

import logging
from pathlib import Path
from typing import List, Union

from .exceptions import InputDiscoveryError


logger = logging.getLogger(__name__)


def discover_input_files(data_dir: Union[str, Path]) -> List[str]:
    """
    List the XML documents in a directory.

    Matches regular files whose suffix is '.xml' in any letter case. The
    directory is not searched recursively. Results are sorted by name.

    Args:
        data_dir: Directory to scan

    Returns:
        Paths of matching files

    Raises:
        InputDiscoveryError: If the directory does not exist or cannot be listed
    """
    directory = Path(data_dir)
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        raise InputDiscoveryError(f"Cannot list input directory {directory}: {e}", str(directory))

    files = sorted(
        str(entry) for entry in entries
        if entry.suffix.lower() == '.xml' and entry.is_file()
    )
    logger.info(f"Found {len(files)} XML file(s) in {directory}")
    return files
