"""
One value generator per column. Each is a callable ``field(row_index) -> value``
that reads shared pools or evaluates a closed-form expression; none of them
keeps state between calls.
"""
from .pools import offset
from .schema import COLUMN_NAMES

LEVEL_WEIGHTS = (('INFO', 84), ('DEBUG', 10), ('WARN', 5), ('ERROR', 1))

LEVEL_TABLE = tuple(level for level, weight in LEVEL_WEIGHTS for _ in range(weight))

USER_ID_RANGE = 9999
RESPONSE_TIME_RANGE = 999
TIMESTAMP_JITTER_MS = 1000

LOG_SOURCE = 'application'
VERSION = 'v1.0.0'


class PoolField:
    """Looks the row up in a pool; id/name pools of equal length share the slot."""

    __slots__ = ('name', 'pool', '_values', '_size')

    def __init__(self, name, pool):
        self.name = name
        self.pool = pool
        self._values = pool.values
        self._size = len(pool.values)

    def __call__(self, row_index):
        return self._values[offset(row_index, self._size)]


class LogUidField:
    __slots__ = ('name', 'base_time')

    def __init__(self, base_time):
        self.name = 'log_uid'
        self.base_time = base_time

    def __call__(self, row_index):
        return f"log_{self.base_time + row_index}_{row_index}"


class LevelField:
    """Weighted level choice without per-row float comparisons.

    37 is coprime with the table length, so every 100 consecutive rows visit
    each slot exactly once and reproduce the weights exactly.
    """

    __slots__ = ('name',)

    def __init__(self):
        self.name = 'log_level'

    def __call__(self, row_index):
        return LEVEL_TABLE[(row_index * 37 + 11) % len(LEVEL_TABLE)]


class UserIdField:
    __slots__ = ('name',)

    def __init__(self):
        self.name = 'user_id'

    def __call__(self, row_index):
        return f"user_{offset(row_index, USER_ID_RANGE) + 1}"


class ResponseTimeField:
    __slots__ = ('name',)

    def __init__(self):
        self.name = 'response_time_ms'

    def __call__(self, row_index):
        return row_index % RESPONSE_TIME_RANGE + 1


class TimestampField:
    """Milliseconds: one per row plus up to a second of jitter either way."""

    __slots__ = ('name', 'base_time', 'pool_len')

    def __init__(self, base_time, pool_len):
        self.name = 'ts'
        self.base_time = base_time
        self.pool_len = pool_len

    def __call__(self, row_index):
        jitter = offset(row_index, self.pool_len) % (2 * TIMESTAMP_JITTER_MS) - TIMESTAMP_JITTER_MS
        return self.base_time + row_index + jitter


class ConstantField:
    __slots__ = ('name', 'value')

    def __init__(self, name, value):
        self.name = name
        self.value = value

    def __call__(self, row_index):
        return self.value


class MessageField:
    __slots__ = ('name', 'synthesizer', 'level')

    def __init__(self, synthesizer, level):
        self.name = 'log_message'
        self.synthesizer = synthesizer
        self.level = level

    def __call__(self, row_index):
        return self.synthesizer.synthesize(row_index, self.level(row_index))


def build_fields(pools, synthesizer, base_time):
    """Column generators in schema order."""
    level = LevelField()
    fields = {
        'ts': TimestampField(base_time, pools.size),
        'log_uid': LogUidField(base_time),
        'log_message': MessageField(synthesizer, level),
        'log_level': level,
        'user_id': UserIdField(),
        'response_time_ms': ResponseTimeField(),
        'log_source': ConstantField('log_source', LOG_SOURCE),
        'version': ConstantField('version', VERSION),
    }
    for pool in pools:
        fields[pool.category] = PoolField(pool.category, pool)
    return tuple(fields[name] for name in COLUMN_NAMES)
