"""
Field catalog loading for the XML to CSV extraction system.

The override file is line oriented:

    # comment
    GoodsNumeric=Номер
    ExtraTag=ExtraCol
    parser_open_block_tag=ESADout_CUGoods

Blank lines and lines starting with '#' are ignored. Every other line maps an
XML element name to an output column name and is merged into the built-in
default catalog.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .processing_defaults import ProcessingDefaults
from ..exceptions import ConfigurationError
from ..models import FieldCatalog


logger = logging.getLogger(__name__)


def parse_override_lines(lines, source: str = "<config>") -> List[Tuple[str, str]]:
    """
    Parse override lines into (source element, column) pairs.

    Malformed lines (no '=', more than one '=', or an empty side) are skipped
    with a warning.

    Args:
        lines: Iterable of text lines
        source: Name used in log messages

    Returns:
        Override pairs in file order
    """
    overrides = []
    for line_number, raw_line in enumerate(lines, 1):
        line = raw_line.strip()
        if not line or line.startswith('#'):
            continue

        parts = line.split('=')
        if len(parts) != 2:
            logger.warning(f"{source}:{line_number}: expected 'element=column', skipping: {line}")
            continue

        xml_tag = parts[0].strip()
        csv_field = parts[1].strip()
        if not xml_tag or not csv_field:
            logger.warning(f"{source}:{line_number}: empty element or column name, skipping: {line}")
            continue

        overrides.append((xml_tag, csv_field))
    return overrides


def resolve_config_path(config_path: Optional[Union[str, Path]] = None,
                        candidates: Sequence[str] = ProcessingDefaults.CONFIG_FILES) -> Optional[Path]:
    """
    Pick the override file to read.

    An explicit path is returned if it exists. Without one, the default
    candidates are tried in order.

    Returns:
        Path of an existing file, or None if there is nothing to load
    """
    if config_path:
        path = Path(config_path)
        if path.is_file():
            return path
        logger.warning(f"Config file {path} not found, using the built-in field catalog")
        return None

    for candidate in candidates:
        path = Path(candidate)
        if path.is_file():
            return path
    logger.info("No config file found, using the built-in field catalog")
    return None


def load_field_catalog(config_path: Optional[Union[str, Path]] = None) -> FieldCatalog:
    """
    Build the field catalog from the built-in default plus an optional override file.

    Args:
        config_path: Override file path. If None, the default file names are tried.

    Returns:
        Immutable FieldCatalog

    Raises:
        ConfigurationError: If the override file exists but cannot be read
    """
    path = resolve_config_path(config_path)
    if path is None:
        return FieldCatalog.default()

    try:
        with open(path, 'r', encoding='utf-8-sig') as file:
            overrides = parse_override_lines(file, source=str(path))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Failed to read config file {path}: {e}", str(path))

    catalog = FieldCatalog.from_overrides(overrides)
    logger.info(f"Loaded {len(overrides)} field override(s) from {path}; "
                f"{len(catalog.column_order)} columns, boundary element '{catalog.boundary_element}'")
    return catalog
