"""
Unit tests for ParallelAggregator and RecordSet.

Covers count determinism under concurrency, per-document failure isolation
and the soft deadline path. Slow documents are simulated with a stub
extractor that blocks on a threading.Event so the tests never depend on
real parsing speed.
"""

import threading
import time

import pytest

from tests.helpers import goods_block, write_declaration
from xml_to_csv.exceptions import XMLParsingError
from xml_to_csv.interfaces import RecordExtractorInterface
from xml_to_csv.models import FieldCatalog
from xml_to_csv.monitoring.performance_monitor import PerformanceMonitor
from xml_to_csv.processing import parallel_aggregator
from xml_to_csv.processing.parallel_aggregator import ParallelAggregator
from xml_to_csv.processing.record_set import RecordSet


class StubExtractor(RecordExtractorInterface):
    """Returns canned records per path; paths in `blocking` wait for `release`."""

    def __init__(self, records_by_path, blocking=(), failing=()):
        self.records_by_path = records_by_path
        self.blocking = set(blocking)
        self.failing = set(failing)
        self.release = threading.Event()
        self.finished = threading.Event()
        self.calls = []

    def extract_document(self, document_path):
        self.calls.append(document_path)
        if document_path in self.failing:
            raise XMLParsingError("boom", document_path)
        if document_path in self.blocking:
            self.release.wait(timeout=10)
            self.finished.set()
        return [dict(r) for r in self.records_by_path.get(document_path, [])]


class InstrumentedRecordSet(RecordSet):
    """RecordSet that remembers the outcome of every merge attempt."""

    instances = []

    def __init__(self):
        super().__init__()
        self.attempts = []
        self.merge_done = threading.Event()
        InstrumentedRecordSet.instances.append(self)

    def merge(self, records):
        accepted = super().merge(records)
        self.attempts.append(accepted)
        self.merge_done.set()
        return accepted


@pytest.fixture
def catalog():
    return FieldCatalog.default()


def test_record_set_rejects_merges_after_close():
    record_set = RecordSet()
    assert record_set.merge([{"a": "1"}])

    snapshot = record_set.close()

    assert not record_set.merge([{"a": "2"}])
    assert snapshot == [{"a": "1"}]
    assert record_set.merge_count == 1
    assert record_set.closed


def test_record_set_concurrent_merges_lose_nothing():
    record_set = RecordSet()
    barrier = threading.Barrier(8)

    def producer(n):
        barrier.wait()
        for i in range(200):
            record_set.merge([{"producer": str(n), "i": str(i)}])

    threads = [threading.Thread(target=producer, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(record_set) == 1600
    assert record_set.merge_count == 1600


def test_empty_input_returns_immediately(catalog):
    result = ParallelAggregator(catalog).run([])

    assert result.records == []
    assert not result.timed_out
    assert result.files_total == 0
    assert not result.has_records


def test_record_count_is_sum_of_documents(tmp_path, catalog):
    paths = []
    expected = 0
    for n in range(20):
        blocks = [goods_block({"GoodsNumeric": f"{n}-{i}"}) for i in range(n % 4)]
        expected += len(blocks)
        paths.append(str(write_declaration(tmp_path, f"doc{n:02d}.xml", blocks)))

    result = ParallelAggregator(catalog, num_workers=6).run(paths)

    assert not result.timed_out
    assert len(result.records) == expected
    assert result.files_completed == 20
    assert result.files_merged == sum(1 for n in range(20) if n % 4)
    assert result.has_records
    assert sorted(r["Номер"] for r in result.records) == sorted(
        f"{n}-{i}" for n in range(20) for i in range(n % 4)
    )


def test_per_document_order_is_preserved(tmp_path, catalog):
    path = write_declaration(tmp_path, "ordered.xml", [goods_block({"GoodsNumeric": str(i)}) for i in range(10)])
    other = write_declaration(tmp_path, "other.xml", [goods_block({"GoodsNumeric": "x"})])

    result = ParallelAggregator(catalog, num_workers=2).run([str(path), str(other)])

    numbers = [r["Номер"] for r in result.records if r["Номер"] != "x"]
    assert numbers == [str(i) for i in range(10)]


def test_failed_document_contributes_nothing(catalog):
    extractor = StubExtractor(
        {"a.xml": [{"Номер": "1"}], "c.xml": [{"Номер": "3"}]},
        failing={"b.xml"}
    )
    monitor = PerformanceMonitor()

    result = ParallelAggregator(catalog, extractor=extractor, monitor=monitor).run(["a.xml", "b.xml", "c.xml"])

    assert sorted(r["Номер"] for r in result.records) == ["1", "3"]
    assert result.files_failed == 1
    failed = [r for r in result.work_results if not r.success]
    assert failed[0].path == "b.xml"
    assert failed[0].error_stage == "parsing"
    assert monitor.metrics.documents_failed == 1
    assert monitor.metrics.records_extracted == 2


def test_unexpected_exception_is_isolated(catalog):
    class ExplodingExtractor(StubExtractor):
        def extract_document(self, document_path):
            if document_path == "bad.xml":
                raise RuntimeError("unexpected")
            return super().extract_document(document_path)

    extractor = ExplodingExtractor({"good.xml": [{"Номер": "1"}]})

    result = ParallelAggregator(catalog, extractor=extractor).run(["good.xml", "bad.xml"])

    assert result.records == [{"Номер": "1"}]
    assert [r.error_stage for r in result.work_results if not r.success] == ["extraction"]


def test_deadline_returns_partial_results(catalog, monkeypatch):
    InstrumentedRecordSet.instances.clear()
    monkeypatch.setattr(parallel_aggregator, "RecordSet", InstrumentedRecordSet)

    fast = {f"fast{i}.xml": [{"Номер": str(i)}] for i in range(5)}
    records_by_path = dict(fast, **{"slow.xml": [{"Номер": "late"}]})
    extractor = StubExtractor(records_by_path, blocking={"slow.xml"})
    aggregator = ParallelAggregator(catalog, num_workers=4, deadline_seconds=0.5, extractor=extractor)

    started = time.monotonic()
    try:
        result = aggregator.run(["slow.xml"] + sorted(fast))
        elapsed = time.monotonic() - started

        assert result.timed_out
        assert elapsed < 3.0
        record_set = InstrumentedRecordSet.instances[-1]
        assert len(result.records) == record_set.attempts.count(True) == 5
        assert sorted(r["Номер"] for r in result.records) == [str(i) for i in range(5)]
        assert result.files_completed == 5
        assert result.files_merged == 5
    finally:
        extractor.release.set()

    # the late task still finishes and tries to merge, which must be rejected
    assert extractor.finished.wait(timeout=5)
    deadline = time.monotonic() + 5
    while len(record_set.attempts) < 6 and time.monotonic() < deadline:
        time.sleep(0.01)
    assert record_set.attempts.count(False) == 1
    assert len(result.records) == 5
    assert all(r["Номер"] != "late" for r in result.records)


def test_not_started_tasks_are_cancelled_on_deadline(catalog):
    extractor = StubExtractor({"a.xml": [{"Номер": "1"}], "b.xml": [{"Номер": "2"}]}, blocking={"a.xml"})
    aggregator = ParallelAggregator(catalog, num_workers=1, deadline_seconds=0.2, extractor=extractor)

    try:
        result = aggregator.run(["a.xml", "b.xml"])
    finally:
        extractor.release.set()

    assert result.timed_out
    assert result.records == []
    assert result.files_completed == 0
    assert extractor.finished.wait(timeout=5)
    time.sleep(0.1)
    assert extractor.calls == ["a.xml"]


def test_workers_are_daemon_threads(catalog):
    extractor = StubExtractor({"a.xml": [{"Номер": "1"}]}, blocking={"a.xml"})
    aggregator = ParallelAggregator(catalog, num_workers=2, deadline_seconds=0.2, extractor=extractor)

    try:
        result = aggregator.run(["a.xml"])
        workers = [t for t in threading.enumerate() if t.name.startswith("xml_to_csv-worker")]

        assert result.timed_out
        assert workers
        assert all(t.daemon for t in workers)
    finally:
        extractor.release.set()
