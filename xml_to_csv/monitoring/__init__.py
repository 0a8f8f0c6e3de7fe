"""
Monitoring module for the XML to CSV extraction system.

This module provides run metrics collection for the extraction pipeline.
"""

from .performance_monitor import PerformanceMonitor, PerformanceMetrics

__all__ = [
    'PerformanceMonitor',
    'PerformanceMetrics'
]
