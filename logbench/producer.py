"""
Batch production over a fixed row range.

``RowBatchProducer`` is stateless: a batch is a pure function of its start
index and length. ``LogDataGenerator`` adds the cursor that walks a range in
``batch_size`` steps and can be split into disjoint ranges for parallel streams.
"""
import logging
import time

import pandas as pd

from .config import DEFAULT_BATCH_SIZE, DEFAULT_ROW_COUNT, require_positive
from .fields import build_fields
from .messages import MessageSynthesizer
from .pools import POOL_CAP, PoolSet
from .schema import COLUMN_INDEX, COLUMN_NAMES, COLUMNS, PANDAS_DTYPES, TIMESTAMP
from .templates import load_templates

logger = logging.getLogger(__name__)


class Batch:
    """Contiguous rows starting at ``start_index``; rows are schema-ordered tuples."""

    __slots__ = ('start_index', 'rows')

    def __init__(self, start_index, rows):
        self.start_index = start_index
        self.rows = rows

    def __len__(self):
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def __getitem__(self, i):
        return self.rows[i]

    def __repr__(self):
        return f"Batch(start_index={self.start_index}, rows={len(self.rows)})"

    @property
    def end_index(self):
        return self.start_index + len(self.rows)

    def column(self, name):
        i = COLUMN_INDEX[name]
        return [row[i] for row in self.rows]

    def to_frame(self):
        frame = pd.DataFrame.from_records(self.rows, columns=COLUMN_NAMES)
        for column in COLUMNS:
            if column.kind == TIMESTAMP:
                frame[column.name] = pd.to_datetime(frame[column.name], unit='ms')
            frame[column.name] = frame[column.name].astype(PANDAS_DTYPES[column.kind])
        return frame


class RowBatchProducer:
    def __init__(self, fields, row_count):
        self.fields = fields
        self.row_count = row_count

    def produce_row(self, row_index):
        return tuple([field(row_index) for field in self.fields])

    def produce_batch(self, start_index, count):
        """Rows ``[start_index, start_index + count)``, clamped to the run's row count."""
        if start_index < 0 or count < 0:
            raise ValueError(f"Invalid batch range: start={start_index} count={count}")
        stop = min(start_index + count, self.row_count)
        if start_index >= stop:
            return Batch(start_index, [])

        fields = self.fields
        rows = [None] * (stop - start_index)
        for i, row_index in enumerate(range(start_index, stop)):
            rows[i] = tuple([field(row_index) for field in fields])
        return Batch(start_index, rows)


class LogDataGenerator:
    """Walks ``[start, stop)`` in batches. Not thread-safe; use ``split`` per stream."""

    def __init__(self, producer, pools, batch_size, start=0, stop=None):
        self.producer = producer
        self.pools = pools
        self.batch_size = batch_size
        self.start = start
        self.stop = producer.row_count if stop is None else stop
        self._cursor = start

    def __iter__(self):
        while True:
            batch = self.next_batch()
            if batch is None:
                return
            yield batch

    def __repr__(self):
        return f"LogDataGenerator(range=[{self.start}, {self.stop}), batch_size={self.batch_size})"

    @property
    def row_count(self):
        return self.stop - self.start

    @property
    def seed(self):
        return self.pools.seed

    @property
    def remaining(self):
        return self.stop - self._cursor

    def next_batch(self):
        """The next batch, or None once the range is exhausted."""
        if self._cursor >= self.stop:
            return None
        count = min(self.batch_size, self.stop - self._cursor)
        batch = self.producer.produce_batch(self._cursor, count)
        self._cursor += len(batch)
        return batch

    def reset(self):
        self._cursor = self.start

    def pool_build_duration(self):
        return self.pools.build_duration

    def split(self, streams):
        """Generators over disjoint contiguous sub-ranges of the unread rows, sharing pools."""
        require_positive('streams', streams)
        chunk = max(1, -(-self.remaining // streams))
        generators = []
        for lo in range(self._cursor, self.stop, chunk):
            hi = min(lo + chunk, self.stop)
            generators.append(LogDataGenerator(self.producer, self.pools, self.batch_size, lo, hi))
        return generators


def configure(row_count=DEFAULT_ROW_COUNT, batch_size=DEFAULT_BATCH_SIZE, pool_cap=None,
              seed=None, base_time=None, templates=None, templates_path=None):
    """Validate settings, build every pool once and return a ready generator.

    Raises ConfigurationError for bad knobs and PoolBuildError for bad template
    tables, always before any row is produced.
    """
    require_positive('row_count', row_count)
    require_positive('batch_size', batch_size)
    if pool_cap is not None:
        require_positive('pool_cap', pool_cap)

    if templates_path is not None:
        templates = load_templates(templates_path)
    synthesizer = MessageSynthesizer(templates)

    if base_time is None:
        base_time = int(time.time() * 1000)

    pools = PoolSet.build(row_count, pool_cap or POOL_CAP, seed)
    producer = RowBatchProducer(build_fields(pools, synthesizer, base_time), row_count)
    logger.info(f"Generator ready: {row_count} rows in batches of {batch_size}, "
                f"pool size {pools.size}, seed {pools.seed}")
    return LogDataGenerator(producer, pools, batch_size)
