"""
Precomputed value pools.

All randomness is spent here, once, before generation starts. Per-row work only
indexes into the pools through ``offset``, so a row index always maps to the
same pool slot for a given pool length.
"""
import logging
import random
import time
from datetime import timedelta

from .errors import PoolBuildError

logger = logging.getLogger(__name__)

POOL_CAP = 10000

IDENTIFIER_PREFIXES = ('host', 'service', 'container', 'pod', 'cluster')

# Name pools are shifted per category so host and service names differ at the same slot.
NAME_SHIFTS = {'host': 0, 'service': 1000, 'container': 2000, 'pod': 3000, 'cluster': 4000}

TOKEN_PREFIXES = {
    'trace_id': 'trace_',
    'span_id': 'span_',
    'session_id': 'session_',
    'request_id': 'req_',
}

NAME_SUFFIXES = (
    'alpha', 'beta', 'gamma', 'delta', 'epsilon', 'zeta', 'eta', 'theta',
    'iota', 'kappa', 'lambda', 'mu', 'nu', 'xi', 'omicron', 'pi', 'rho',
    'sigma', 'tau', 'upsilon', 'phi', 'chi', 'psi', 'omega', 'prime',
    'secondary', 'tertiary', 'main', 'backup', 'standby', 'primary',
    'replica', 'master', 'worker', 'node', 'edge',
)

CATEGORIES = (
    tuple(f'{prefix}_{part}' for prefix in IDENTIFIER_PREFIXES for part in ('id', 'name'))
    + tuple(TOKEN_PREFIXES)
)


def offset(row_index, pool_len):
    """Pool slot for a row: ``(row_index * 7 + 13) mod pool_len``."""
    return (row_index * 7 + 13) % pool_len


def scatter(row_index, salt=0):
    """32-bit multiplicative hash of a row index.

    Used where consecutive or evenly spaced rows must not land on correlated
    choices, e.g. every ERROR row sharing the same stack-trace decision.
    """
    h = ((row_index + salt * 0x632BE5AB) * 0x9E3779B1) & 0xFFFFFFFF
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & 0xFFFFFFFF
    return h ^ (h >> 13)


def name_suffix(seed):
    return f"{NAME_SUFFIXES[seed % len(NAME_SUFFIXES)]}{seed % 1000}"


def pool_size(target_count, pool_cap=POOL_CAP):
    """Number of entries a pool holds for a run of ``target_count`` rows."""
    if target_count <= 0:
        return 0
    return max(1, min(pool_cap, 2 * target_count))


class ValuePool:
    """Read-only sequence of candidate values for one field category."""

    __slots__ = ('category', 'values')

    def __init__(self, category, values):
        self.category = category
        self.values = tuple(values)

    def __len__(self):
        return len(self.values)

    def __getitem__(self, slot):
        return self.values[slot]

    def __repr__(self):
        return f"ValuePool({self.category!r}, size={len(self.values)})"

    def at(self, row_index):
        return self.values[offset(row_index, len(self.values))]

    @classmethod
    def build(cls, category, target_count, rng=None, pool_cap=POOL_CAP):
        """Build the pool for ``category`` sized for ``target_count`` rows.

        A target of zero gives an empty pool rather than an error.
        """
        size = pool_size(target_count, pool_cap)
        if rng is None:
            rng = random.Random()

        prefix, _, part = category.rpartition('_')
        if prefix in IDENTIFIER_PREFIXES and part == 'id':
            values = [f"{prefix}-{rng.randrange(100000) + i}" for i in range(size)]
        elif prefix in IDENTIFIER_PREFIXES and part == 'name':
            shift = NAME_SHIFTS[prefix]
            values = [name_suffix(i + shift) for i in range(size)]
        elif category in TOKEN_PREFIXES:
            token = TOKEN_PREFIXES[category]
            values = [f"{token}{rng.getrandbits(64)}" for _ in range(size)]
        else:
            raise PoolBuildError(f"Unknown pool category: {category!r}")
        return cls(category, values)


class PoolSet:
    """Every pool a generator needs, built once and shared by all producers."""

    def __init__(self, pools, seed, size, build_duration):
        self._pools = pools
        self.seed = seed
        self.size = size
        self.build_duration = build_duration

    def __getitem__(self, category):
        return self._pools[category]

    def __contains__(self, category):
        return category in self._pools

    def __iter__(self):
        return iter(self._pools.values())

    @classmethod
    def build(cls, row_count, pool_cap=POOL_CAP, seed=None):
        if seed is None:
            seed = random.SystemRandom().randrange(2 ** 32)
            logger.info(f"No pool seed given, using {seed}")

        size = pool_size(row_count, pool_cap)
        logger.info(f"Pre-generating {size} values per pool for {len(CATEGORIES)} pools...")
        start = time.perf_counter()

        pools = {}
        for category in CATEGORIES:
            # Per-category streams keep each pool independent of build order.
            rng = random.Random(f"{seed}:{category}")
            pools[category] = ValuePool.build(category, row_count, rng, pool_cap)

        elapsed = timedelta(seconds=time.perf_counter() - start)
        logger.info(f"Pre-generation completed in {elapsed.total_seconds() * 1000:.0f}ms")
        return cls(pools, seed, size, elapsed)
