"""
Parallel Aggregator - Worker Thread Extraction Coordinator

Runs record extraction over every input document concurrently and merges the
results into one shared RecordSet.

KEY FEATURES:
- Daemon worker threads: a fixed number of ExtractionWorker threads drain a
  queue of WorkItems, all sharing the same immutable FieldCatalog
- Lock-protected merge: the RecordSet lock is held only for the append
- Soft deadline: after the deadline the aggregator stops waiting and returns
  the records merged so far; running tasks are not interrupted, and because
  the workers are daemon threads they never hold the process open at exit
- Failure isolation: a document that fails contributes zero records

Data flow: paths → WorkItem queue → ExtractionWorker → RecordSet.merge → AggregationResult
"""

import logging
import queue
import threading
import time
from typing import Callable, Optional, Sequence

from .record_set import RecordSet
from ..config.processing_defaults import ProcessingDefaults
from ..exceptions import XMLParsingError
from ..interfaces import AggregatorInterface, RecordExtractorInterface
from ..models import AggregationResult, FieldCatalog, WorkItem, WorkResult
from ..monitoring.performance_monitor import PerformanceMonitor
from ..parsing.record_extractor import RecordExtractor


class ExtractionWorker(threading.Thread):
    """
    Daemon thread that processes WorkItems until the queue is empty or the run stops.

    The stop event is checked before each new item, so items that were never
    picked up are dropped once the coordinator gives up waiting. An item already
    in progress runs to completion.
    """

    def __init__(self, index: int, work_queue: queue.Queue, result_queue: queue.Queue,
                 stop_event: threading.Event, process: Callable[[WorkItem], WorkResult]):
        super().__init__(daemon=True, name=f"xml_to_csv-worker-{index}")
        self.work_queue = work_queue
        self.result_queue = result_queue
        self.stop_event = stop_event
        self.process = process

    def run(self):
        while not self.stop_event.is_set():
            try:
                work_item = self.work_queue.get_nowait()
            except queue.Empty:
                return
            self.result_queue.put(self.process(work_item))


class ParallelAggregator(AggregatorInterface):
    """
    Worker thread coordinator for concurrent document extraction.

    Worker Lifecycle:
    1. run() queues one WorkItem per document
    2. num_workers daemon ExtractionWorker threads pull items from the queue
    3. A worker extracts records without holding any lock, then merges them
       into the RecordSet under its lock
    4. The coordinating thread collects WorkResults until every item is done
       or the deadline elapses, whichever comes first
    5. The RecordSet is closed and the workers are told to stop; items still
       in the queue are dropped and tasks that finish later are ignored

    The deadline is advisory. Running tasks keep their threads until they
    finish, but their merges are rejected by the closed RecordSet.
    """

    def __init__(self, catalog: FieldCatalog,
                 num_workers: Optional[int] = None,
                 deadline_seconds: Optional[float] = None,
                 extractor: Optional[RecordExtractorInterface] = None,
                 monitor: Optional[PerformanceMonitor] = None):
        """
        Initialize the parallel aggregator.

        Args:
            catalog: Field catalog shared read-only by all tasks
            num_workers: Number of worker threads (defaults to ProcessingDefaults.WORKERS)
            deadline_seconds: Wall-clock limit for the whole run (defaults to ProcessingDefaults.DEADLINE_SECONDS)
            extractor: Extractor to run per document (defaults to a RecordExtractor for the catalog)
            monitor: Optional performance monitor receiving per-document results
        """
        self.logger = logging.getLogger(__name__)
        self.catalog = catalog
        self.num_workers = num_workers or ProcessingDefaults.WORKERS
        self.deadline_seconds = deadline_seconds if deadline_seconds is not None else ProcessingDefaults.DEADLINE_SECONDS
        self.extractor = extractor or RecordExtractor(catalog)
        self.monitor = monitor

        self.logger.debug(f"ParallelAggregator initialized with {self.num_workers} workers, "
                          f"deadline {self.deadline_seconds:.1f}s")

    def run(self, document_paths: Sequence[str]) -> AggregationResult:
        """
        Extract records from all documents in parallel.

        Args:
            document_paths: Paths of the XML documents to process

        Returns:
            AggregationResult with the merged records; timed_out is set if the
            deadline elapsed before every document completed
        """
        if not document_paths:
            return AggregationResult()

        start_time = time.time()
        deadline = time.monotonic() + self.deadline_seconds
        record_set = RecordSet()
        work_queue = queue.Queue()
        result_queue = queue.Queue()
        stop_event = threading.Event()

        for i, path in enumerate(document_paths, 1):
            work_queue.put(WorkItem(sequence=i, path=str(path)))
        total = work_queue.qsize()
        result = AggregationResult(files_total=total)

        worker_count = min(self.num_workers, total)
        self.logger.info(f"Starting extraction of {total} document(s) with {worker_count} workers")

        workers = [
            ExtractionWorker(
                index, work_queue, result_queue, stop_event,
                lambda work_item: self._process_work_item(work_item, record_set)
            )
            for index in range(1, worker_count + 1)
        ]
        for worker in workers:
            worker.start()

        try:
            while len(result.work_results) < total:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    result.timed_out = True
                    break
                try:
                    work_result = result_queue.get(timeout=remaining)
                except queue.Empty:
                    result.timed_out = True
                    break

                result.work_results.append(work_result)
                if self.monitor:
                    self.monitor.record_document_result(work_result.success, work_result.records_extracted)

                completed = len(result.work_results)
                if completed % 50 == 0 or completed == total:
                    self._log_progress(completed, total, start_time)
        finally:
            # Workers are daemons; they are never joined
            stop_event.set()

        result.records = record_set.close()
        result.processing_time_seconds = time.time() - start_time

        if result.timed_out:
            self.logger.warning(
                f"Deadline of {self.deadline_seconds:.1f}s reached: {result.files_completed}/{total} "
                f"document(s) completed, continuing with {len(result.records)} record(s) "
                f"from {result.files_merged} document(s)"
            )
        else:
            self.logger.info(
                f"Extraction completed: {len(result.records)} record(s) from {result.files_merged} of "
                f"{total} document(s) ({result.files_failed} failed) in {result.processing_time_seconds:.2f}s"
            )
        return result

    def _process_work_item(self, work_item: WorkItem, record_set: RecordSet) -> WorkResult:
        """Extract one document and merge its records. Runs on a worker thread."""
        start_time = time.time()
        try:
            records = self.extractor.extract_document(work_item.path)
        except Exception as e:
            error_stage = 'parsing' if isinstance(e, XMLParsingError) else 'extraction'
            self.logger.warning(f"Document {work_item.sequence} ({work_item.path}) failed during {error_stage}: {e}")
            return WorkResult(
                sequence=work_item.sequence,
                path=work_item.path,
                success=False,
                error_stage=error_stage,
                error_message=str(e),
                processing_time=time.time() - start_time
            )

        merged = record_set.merge(records) if records else False
        if records and not merged:
            self.logger.debug(f"Document {work_item.sequence} ({work_item.path}) finished after the deadline, "
                              f"{len(records)} record(s) discarded")

        return WorkResult(
            sequence=work_item.sequence,
            path=work_item.path,
            success=True,
            records_extracted=len(records),
            merged=merged,
            processing_time=time.time() - start_time
        )

    def _log_progress(self, completed: int, total: int, start_time: float) -> None:
        """Log current progress with throughput metrics."""
        elapsed_time = time.time() - start_time
        rate = completed / elapsed_time if elapsed_time > 0 else 0.0
        self.logger.info(
            f"Progress: {completed}/{total} ({completed / total * 100:.1f}%) - "
            f"Rate: {rate:.1f} docs/s"
        )
