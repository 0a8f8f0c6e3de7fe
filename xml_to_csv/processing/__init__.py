"""
Processing module for the XML to CSV extraction system.

This module provides concurrent extraction and the thread-safe record
collection the extraction tasks merge into.
"""

from .parallel_aggregator import ExtractionWorker, ParallelAggregator
from .record_set import RecordSet

__all__ = [
    'ExtractionWorker',
    'ParallelAggregator',
    'RecordSet'
]
