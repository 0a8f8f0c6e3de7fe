"""XML parsing and record extraction components."""

from .record_extractor import RecordExtractor, extract_records

__all__ = ['RecordExtractor', 'extract_records']
