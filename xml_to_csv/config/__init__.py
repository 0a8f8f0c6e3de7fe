"""Configuration management components."""

from .catalog_loader import load_field_catalog, parse_override_lines
from .processing_defaults import ProcessingDefaults
from .settings import ProcessingParameters

__all__ = ['load_field_catalog', 'parse_override_lines', 'ProcessingDefaults', 'ProcessingParameters']
