"""
Performance monitoring for the XML to CSV extraction system.

Tracks document throughput, extracted record counts and process memory for
one run of the pipeline.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

import psutil


@dataclass
class PerformanceMetrics:
    """Container for performance metrics."""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    documents_processed: int = 0
    documents_successful: int = 0
    documents_failed: int = 0
    records_extracted: int = 0

    # Processing stage timings
    extraction_time: float = 0.0
    writing_time: float = 0.0

    # System resource metrics
    peak_memory_mb: float = 0.0

    # Throughput metrics
    documents_per_second: float = 0.0
    records_per_second: float = 0.0

    # Custom metrics
    custom_metrics: Dict[str, Any] = field(default_factory=dict)


class PerformanceMonitor:
    """
    Collects run metrics for the extraction pipeline.

    Document results are recorded from the orchestrating thread. Memory is
    sampled with psutil on a background daemon thread while monitoring is active.
    """

    def __init__(self, sample_interval: float = 0.5):
        """
        Initialize the performance monitor.

        Args:
            sample_interval: Seconds between memory samples
        """
        self.logger = logging.getLogger(__name__)
        self.sample_interval = sample_interval
        self._metrics = PerformanceMetrics()
        self._is_monitoring = False
        self._monitoring_thread = None
        self._stop_monitoring_flag = threading.Event()
        self._memory_sample_count = 0
        self._stage_start_times: Dict[str, float] = {}

    @property
    def metrics(self) -> PerformanceMetrics:
        return self._metrics

    def start_monitoring(self) -> None:
        """Start performance monitoring with memory tracking."""
        if self._is_monitoring:
            self.logger.warning("Performance monitoring already started")
            return

        self._metrics = PerformanceMetrics()
        self._metrics.start_time = datetime.now()
        self._memory_sample_count = 0
        self._is_monitoring = True
        self._stop_monitoring_flag.clear()

        self._monitoring_thread = threading.Thread(
            target=self._monitor_resources,
            name="xml_to_csv-monitor",
            daemon=True
        )
        self._monitoring_thread.start()
        self.logger.debug("Performance monitoring started")

    def stop_monitoring(self) -> PerformanceMetrics:
        """Stop monitoring and return the final metrics."""
        if not self._is_monitoring:
            self.logger.warning("Performance monitoring not started")
            return self._metrics

        self._metrics.end_time = datetime.now()
        self._is_monitoring = False
        self._stop_monitoring_flag.set()

        if self._monitoring_thread and self._monitoring_thread.is_alive():
            self._monitoring_thread.join(timeout=1.0)

        self._calculate_final_metrics()
        return self._metrics

    def record_metric(self, metric_name: str, value: Any) -> None:
        """Record a custom performance metric."""
        self._metrics.custom_metrics[metric_name] = value
        self.logger.debug(f"Recorded metric: {metric_name} = {value}")

    def record_document_result(self, success: bool, records_extracted: int = 0) -> None:
        """Record the outcome of extracting a single document."""
        self._metrics.documents_processed += 1
        if success:
            self._metrics.documents_successful += 1
            self._metrics.records_extracted += records_extracted
        else:
            self._metrics.documents_failed += 1

    def start_stage(self, stage_name: str) -> None:
        """Start timing a processing stage."""
        self._stage_start_times[stage_name] = time.time()

    def end_stage(self, stage_name: str) -> float:
        """End timing a processing stage and return its duration."""
        if stage_name not in self._stage_start_times:
            return 0.0

        duration = time.time() - self._stage_start_times.pop(stage_name)
        if stage_name == 'extraction':
            self._metrics.extraction_time += duration
        elif stage_name == 'writing':
            self._metrics.writing_time += duration
        return duration

    def _monitor_resources(self) -> None:
        """Sample process memory in the background thread."""
        process = psutil.Process()
        while not self._stop_monitoring_flag.is_set():
            try:
                memory_mb = process.memory_info().rss / 1024 / 1024
            except psutil.Error as e:
                self.logger.warning(f"Error monitoring resources: {e}")
                break

            self._memory_sample_count += 1
            if memory_mb > self._metrics.peak_memory_mb:
                self._metrics.peak_memory_mb = memory_mb

            self._stop_monitoring_flag.wait(self.sample_interval)

    def _calculate_final_metrics(self) -> None:
        total_time = self.total_time_seconds()
        if total_time > 0:
            self._metrics.documents_per_second = self._metrics.documents_processed / total_time
            self._metrics.records_per_second = self._metrics.records_extracted / total_time

    def total_time_seconds(self) -> float:
        """Total monitored time in seconds."""
        if not self._metrics.start_time or not self._metrics.end_time:
            return 0.0
        return (self._metrics.end_time - self._metrics.start_time).total_seconds()

    def get_summary(self) -> Dict[str, Any]:
        """Get a performance summary suitable for logging or JSON export."""
        return {
            'total_time_seconds': self.total_time_seconds(),
            'documents_processed': self._metrics.documents_processed,
            'documents_successful': self._metrics.documents_successful,
            'documents_failed': self._metrics.documents_failed,
            'records_extracted': self._metrics.records_extracted,
            'documents_per_second': self._metrics.documents_per_second,
            'records_per_second': self._metrics.records_per_second,
            'stage_timings': {
                'extraction_time_seconds': self._metrics.extraction_time,
                'writing_time_seconds': self._metrics.writing_time,
            },
            'peak_memory_mb': self._metrics.peak_memory_mb,
            'memory_samples_count': self._memory_sample_count,
            'custom_metrics': self._metrics.custom_metrics.copy()
        }

    def log_summary(self, logger: Optional[logging.Logger] = None) -> None:
        """Log a one-line summary of the run."""
        log = logger or self.logger
        m = self._metrics
        log.info(
            f"Processed {m.documents_processed} document(s) "
            f"({m.documents_successful} ok, {m.documents_failed} failed), "
            f"{m.records_extracted} record(s) in {self.total_time_seconds():.2f}s "
            f"({m.documents_per_second:.1f} docs/s), peak memory {m.peak_memory_mb:.1f} MB"
        )
