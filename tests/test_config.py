import pytest

from logbench import BenchmarkConfig, ConfigurationError
from logbench.config import DEFAULT_BATCH_SIZE, DEFAULT_PARALLELISM, DEFAULT_ROW_COUNT

ENV_VARS = ('TABLE_ROW_COUNT', 'BATCH_SIZE', 'POOL_CAP', 'SEED', 'PARALLELISM', 'TABLE_NAME',
            'S3_BUCKET', 'S3_PREFIX', 'REDSHIFT_WORKGROUP', 'DB_NAME', 'REDSHIFT_IAM_ROLE')


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = BenchmarkConfig.from_env()
    assert config.row_count == DEFAULT_ROW_COUNT == 2_000_000
    assert config.batch_size == DEFAULT_BATCH_SIZE == 100_000
    assert config.parallelism == DEFAULT_PARALLELISM == 8
    assert config.pool_cap is None and config.seed is None
    assert config.table_name == 'benchmark_logs'
    assert config.db_name == 'dev'


def test_from_env(monkeypatch):
    monkeypatch.setenv('TABLE_ROW_COUNT', '1_000')
    monkeypatch.setenv('BATCH_SIZE', '250')
    monkeypatch.setenv('SEED', '7')
    monkeypatch.setenv('S3_BUCKET', 'bench-bucket')
    monkeypatch.setenv('REDSHIFT_WORKGROUP', 'wg')
    config = BenchmarkConfig.from_env()
    assert config.row_count == 1000
    assert config.batch_size == 250
    assert config.s3_bucket == 'bench-bucket'
    assert config.generator_options() == {'row_count': 1000, 'batch_size': 250, 'pool_cap': None, 'seed': 7}


@pytest.mark.parametrize('name,value', [
    ('TABLE_ROW_COUNT', 'lots'),
    ('TABLE_ROW_COUNT', '0'),
    ('BATCH_SIZE', '-1'),
    ('PARALLELISM', '0'),
    ('POOL_CAP', '0'),
])
def test_bad_env_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        BenchmarkConfig.from_env()
