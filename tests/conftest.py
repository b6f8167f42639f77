import pytest

from logbench import configure
from logbench.pools import PoolSet

BASE_TIME = 1_700_000_000_000
SEED = 20240101


@pytest.fixture
def generator():
    return configure(row_count=10, batch_size=5, seed=SEED, base_time=BASE_TIME)


@pytest.fixture(scope='session')
def pools():
    return PoolSet.build(100_000, seed=SEED)
