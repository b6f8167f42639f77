import random
from datetime import timedelta

import pytest

from logbench import PoolBuildError, ValuePool, offset
from logbench.pools import CATEGORIES, POOL_CAP, PoolSet, pool_size


def test_offset_formula():
    assert offset(0, 10) == 3
    assert offset(1, 10) == 0
    assert offset(42, 10000) == 307
    assert offset(10 ** 9, 10000) == (10 ** 9 * 7 + 13) % 10000


def test_pool_size_is_capped_at_twice_the_rows():
    assert pool_size(0) == 0
    assert pool_size(1) == 2
    assert pool_size(100) == 200
    assert pool_size(5000) == POOL_CAP
    assert pool_size(2_000_000) == POOL_CAP
    assert pool_size(2_000_000, pool_cap=500) == 500


def test_build_sizes():
    assert len(ValuePool.build('host_id', 100, random.Random(1))) == 200
    assert len(ValuePool.build('host_id', 1_000_000, random.Random(1))) == 10000
    assert len(ValuePool.build('span_id', 3, random.Random(1), pool_cap=4)) == 4


def test_zero_target_gives_empty_pool():
    pool = ValuePool.build('trace_id', 0, random.Random(1))
    assert len(pool) == 0


def test_value_shapes():
    rng = random.Random(3)
    assert all(v.startswith('host-') for v in ValuePool.build('host_id', 50, rng).values)
    assert all(v.startswith('trace_') for v in ValuePool.build('trace_id', 50, rng).values)
    assert all(v.startswith('req_') for v in ValuePool.build('request_id', 50, rng).values)
    assert all(v.startswith('session_') for v in ValuePool.build('session_id', 50, rng).values)


def test_name_pools_cycle_the_naming_list():
    hosts = ValuePool.build('host_name', 50)
    services = ValuePool.build('service_name', 50)
    assert hosts[0] == 'alpha0'
    assert hosts[1] == 'beta1'
    assert services[0] == 'backup0'
    assert hosts[36] == 'alpha36'


def test_unknown_category():
    with pytest.raises(PoolBuildError):
        ValuePool.build('rack_id', 10)


def test_same_seed_same_pools():
    a = PoolSet.build(500, seed=99)
    b = PoolSet.build(500, seed=99)
    for category in CATEGORIES:
        assert a[category].values == b[category].values


def test_different_seed_different_ids():
    a = PoolSet.build(500, seed=1)
    b = PoolSet.build(500, seed=2)
    assert a['host_id'].values != b['host_id'].values


def test_pool_set_builds_every_category(pools):
    assert pools.size == POOL_CAP
    assert pools.seed == 20240101
    assert isinstance(pools.build_duration, timedelta)
    for category in CATEGORIES:
        assert category in pools
        assert len(pools[category]) == POOL_CAP


def test_unseeded_pool_set_records_its_seed():
    pools = PoolSet.build(10)
    assert isinstance(pools.seed, int)
    again = PoolSet.build(10, seed=pools.seed)
    assert again['trace_id'].values == pools['trace_id'].values


def test_at_uses_offset():
    pool = ValuePool.build('pod_id', 20, random.Random(5))
    assert pool.at(42) == pool[offset(42, len(pool))]
