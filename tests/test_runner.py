import threading
import time

import pytest

from logbench import IngestionError, configure
from logbench.report import BenchmarkResult, level_distribution, results_frame, show_benchmark_results
from logbench.runner import run_benchmark

from conftest import SEED


class ListSink:
    def __init__(self, fail=False):
        self.batches = []
        self.closed = False
        self.fail = fail

    def write(self, batch):
        if self.fail:
            raise IngestionError('sink rejected batch')
        self.batches.append(batch)
        return len(batch)

    def close(self):
        self.closed = True


def test_parallel_streams_write_every_row_once():
    generator = configure(row_count=103, batch_size=10, seed=SEED)
    sinks = {}
    lock = threading.Lock()

    def factory(i):
        with lock:
            sinks[i] = ListSink()
            return sinks[i]

    result = run_benchmark(generator, factory, parallelism=4)

    assert result.success
    assert result.total_rows == 103
    assert len(sinks) == 4
    assert all(sink.closed for sink in sinks.values())
    starts = sorted(b.start_index for s in sinks.values() for b in s.batches)
    indexes = sorted(i for s in sinks.values() for b in s.batches for i in range(b.start_index, b.end_index))
    assert indexes == list(range(103))
    assert result.batch_count == len(starts)


def test_failing_sink_marks_result_failed():
    generator = configure(row_count=20, batch_size=5, seed=SEED)
    result = run_benchmark(generator, lambda i: ListSink(fail=True), parallelism=2)
    assert not result.success
    assert 'rejected' in result.error_message


def test_benchmark_result_throughput():
    result = BenchmarkResult('gen', 'benchmark_logs', 10000).succeeded(2000, batch_count=4)
    assert result.success
    assert result.rows_per_second == 5000
    assert BenchmarkResult('gen', 't', 10).succeeded(0).rows_per_second == 0.0
    failed = BenchmarkResult('gen', 't', 10).failed('boom')
    assert not failed.success and failed.error_message == 'boom'


def test_results_frame_ranks_by_throughput():
    results = [
        BenchmarkResult('slow', 't', 1000).succeeded(1000),
        BenchmarkResult('fast', 't', 1000).succeeded(250),
        BenchmarkResult('broken', 't', 1000).failed('x'),
    ]
    frame = results_frame(results)
    assert list(frame['provider_name']) == ['fast', 'slow']
    assert list(frame['relative']) == [1.0, 0.25]
    assert show_benchmark_results(results).equals(frame)
    assert show_benchmark_results([results[2]]).empty


def test_level_distribution():
    frame = configure(row_count=1000, batch_size=1000, seed=SEED).next_batch().to_frame()
    summary = level_distribution(frame)
    assert list(summary.index) == ['INFO', 'DEBUG', 'WARN', 'ERROR']
    assert summary['rows'].to_dict() == {'INFO': 840, 'DEBUG': 100, 'WARN': 50, 'ERROR': 10}
    assert summary['share'].sum() == pytest.approx(1.0)
    assert (summary['avg_message_length'] >= 1350).all()


def test_failing_stream_stops_the_others():
    generator = configure(row_count=2000, batch_size=10, seed=SEED)
    failed = threading.Event()

    class FailingSink(ListSink):
        def write(self, batch):
            failed.set()
            raise IngestionError('sink rejected batch')

    class SlowSink(ListSink):
        def write(self, batch):
            failed.wait(5)
            time.sleep(0.05)
            return super().write(batch)

    sinks = [FailingSink(), SlowSink()]
    result = run_benchmark(generator, lambda i: sinks[i], parallelism=2)

    assert not result.success
    assert len(sinks[1].batches) < 100
    assert sinks[1].closed


def test_exhausted_generator_writes_nothing():
    generator = configure(row_count=10, batch_size=10, seed=SEED)
    generator.next_batch()
    result = run_benchmark(generator, lambda i: ListSink(), parallelism=2)
    assert result.success
    assert result.total_rows == 0
