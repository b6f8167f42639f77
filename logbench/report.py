"""
Benchmark results and summaries.
"""
import logging
from dataclasses import asdict, dataclass
from typing import List, Optional

import pandas as pd

from .fields import LEVEL_WEIGHTS

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkResult:
    provider_name: str
    table_name: str
    total_rows: int
    duration_ms: int = 0
    rows_per_second: float = 0.0
    batch_count: int = 0
    success: bool = False
    error_message: Optional[str] = None

    def succeeded(self, duration_ms, batch_count=0):
        self.duration_ms = duration_ms
        self.batch_count = batch_count
        self.rows_per_second = self.total_rows / (duration_ms / 1000) if duration_ms > 0 else 0.0
        self.success = True
        return self

    def failed(self, message):
        self.error_message = message
        self.success = False
        return self

    def display(self):
        logger.info(f"=== {self.provider_name} Benchmark Result ===")
        logger.info(f"Table: {self.table_name}")
        if self.success:
            logger.info(f"SUCCESS: {self.total_rows} rows in {self.batch_count} batches, "
                        f"{self.duration_ms}ms, {self.rows_per_second:.0f} rows/sec")
        else:
            logger.error(f"FAILED: {self.error_message}")


def results_frame(results: List[BenchmarkResult]) -> pd.DataFrame:
    """Successful results ranked by throughput, with speed relative to the fastest."""
    frame = pd.DataFrame([asdict(r) for r in results if r.success])
    if frame.empty:
        return frame
    frame = frame.sort_values('rows_per_second', ascending=False).reset_index(drop=True)
    frame['relative'] = frame['rows_per_second'] / frame['rows_per_second'].iloc[0]
    return frame


def show_benchmark_results(results):
    frame = results_frame(results)
    if frame.empty:
        logger.info("No successful benchmarks to display")
        return frame
    columns = ['provider_name', 'total_rows', 'duration_ms', 'rows_per_second', 'relative']
    logger.info("Benchmark results:\n%s", frame[columns].to_string(index=False))
    return frame


def level_distribution(frame):
    """Row count and share per log level, in weight order."""
    summary = frame.groupby('log_level').agg(
        rows=('log_uid', 'count'),
        avg_response_time_ms=('response_time_ms', 'mean'),
        avg_message_length=('log_message', lambda s: s.str.len().mean()),
    )
    summary['share'] = summary['rows'] / summary['rows'].sum()
    order = [level for level, _ in LEVEL_WEIGHTS if level in summary.index]
    return summary.loc[order]
