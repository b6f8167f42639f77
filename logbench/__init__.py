from .config import BenchmarkConfig
from .errors import ConfigurationError, IngestionError, LogBenchError, PoolBuildError
from .messages import MessageSynthesizer
from .pools import PoolSet, ValuePool, offset
from .producer import Batch, LogDataGenerator, RowBatchProducer, configure
from .schema import COLUMN_NAMES, COLUMNS

__all__ = [
    'BenchmarkConfig',
    'Batch',
    'COLUMNS',
    'COLUMN_NAMES',
    'ConfigurationError',
    'IngestionError',
    'LogBenchError',
    'LogDataGenerator',
    'MessageSynthesizer',
    'PoolBuildError',
    'PoolSet',
    'RowBatchProducer',
    'ValuePool',
    'configure',
    'offset',
]
