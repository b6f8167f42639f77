"""
Drives generators into sinks, one worker thread per stream.
"""
import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait

from .errors import LogBenchError
from .report import BenchmarkResult

logger = logging.getLogger(__name__)


def _drain(stream_index, generator, sink, stop):
    """Feed one stream into its sink until exhausted or ``stop`` is set."""
    rows_written = 0
    batch_count = 0
    start = time.perf_counter()
    try:
        while not stop.is_set():
            batch = generator.next_batch()
            if batch is None:
                break
            rows_written += sink.write(batch)
            batch_count += 1
            elapsed = time.perf_counter() - start
            rate = rows_written / elapsed if elapsed > 0 else 0.0
            logger.info(f"Stream {stream_index} batch {batch_count}: "
                        f"{rows_written} rows processed ({rate:.0f} rows/sec)")
    except Exception:
        stop.set()
        raise
    finally:
        sink.close()
    return rows_written, batch_count


def run_benchmark(generator, sink_factory, parallelism=1, provider_name='LogDataGenerator',
                  table_name='benchmark_logs'):
    """Split the unread rows of ``generator`` into ``parallelism`` streams, one sink each.

    ``sink_factory(stream_index)`` returns an object with ``write(batch) -> int``
    and ``close()``. The first failing stream stops the others before their next batch.
    """
    total_rows = generator.remaining
    result = BenchmarkResult(provider_name, table_name, total_rows)
    streams = generator.split(parallelism)
    stop = threading.Event()

    logger.info(f"Starting benchmark: {provider_name}")
    logger.info(f"Target rows: {total_rows}, batch size: {generator.batch_size}, "
                f"streams: {len(streams)}")

    start = time.perf_counter()
    try:
        with ThreadPoolExecutor(max_workers=max(1, len(streams))) as executor:
            futures = [
                executor.submit(_drain, i, stream, sink_factory(i), stop)
                for i, stream in enumerate(streams)
            ]
            wait(futures, return_when=FIRST_EXCEPTION)
            outcomes = [future.result() for future in futures]
    except LogBenchError as e:
        stop.set()
        logger.error(f"Benchmark {provider_name} failed: {e}")
        return result.failed(str(e))

    duration_ms = int((time.perf_counter() - start) * 1000)
    rows_written = sum(rows for rows, _ in outcomes)
    if rows_written != total_rows:
        return result.failed(f"Expected {total_rows} rows, sinks accepted {rows_written}")
    return result.succeeded(duration_ms, sum(batches for _, batches in outcomes))
