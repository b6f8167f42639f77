"""
Generation and benchmark settings.
"""
import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError

DEFAULT_ROW_COUNT = 2_000_000
DEFAULT_BATCH_SIZE = 100_000
DEFAULT_PARALLELISM = 8
DEFAULT_TABLE_NAME = 'benchmark_logs'


def require_positive(name, value):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
    return value


def _env_int(name, default):
    raw = os.environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw.replace('_', ''))
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class BenchmarkConfig:
    row_count: int = DEFAULT_ROW_COUNT
    batch_size: int = DEFAULT_BATCH_SIZE
    pool_cap: Optional[int] = None
    seed: Optional[int] = None
    parallelism: int = DEFAULT_PARALLELISM
    table_name: str = DEFAULT_TABLE_NAME
    s3_bucket: Optional[str] = None
    s3_prefix: str = 'raw'
    redshift_workgroup: Optional[str] = None
    db_name: str = 'dev'
    iam_role: Optional[str] = None

    def __post_init__(self):
        require_positive('row_count', self.row_count)
        require_positive('batch_size', self.batch_size)
        require_positive('parallelism', self.parallelism)
        if self.pool_cap is not None:
            require_positive('pool_cap', self.pool_cap)

    @classmethod
    def from_env(cls):
        return cls(
            row_count=_env_int('TABLE_ROW_COUNT', DEFAULT_ROW_COUNT),
            batch_size=_env_int('BATCH_SIZE', DEFAULT_BATCH_SIZE),
            pool_cap=_env_int('POOL_CAP', None),
            seed=_env_int('SEED', None),
            parallelism=_env_int('PARALLELISM', DEFAULT_PARALLELISM),
            table_name=os.environ.get('TABLE_NAME', DEFAULT_TABLE_NAME),
            s3_bucket=os.environ.get('S3_BUCKET'),
            s3_prefix=os.environ.get('S3_PREFIX', 'raw'),
            redshift_workgroup=os.environ.get('REDSHIFT_WORKGROUP'),
            db_name=os.environ.get('DB_NAME', 'dev'),
            iam_role=os.environ.get('REDSHIFT_IAM_ROLE'),
        )

    def generator_options(self):
        """Keyword arguments for ``logbench.configure``."""
        return {
            'row_count': self.row_count,
            'batch_size': self.batch_size,
            'pool_cap': self.pool_cap,
            'seed': self.seed,
        }
