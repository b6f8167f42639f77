"""
Fixed 22-column layout of the benchmark log table.
"""
from collections import namedtuple

Column = namedtuple('Column', ['name', 'kind', 'sql_type'])

TIMESTAMP = 'timestamp'
INT64 = 'int64'
STRING = 'string'

COLUMNS = (
    Column('ts', TIMESTAMP, 'TIMESTAMP'),
    Column('log_uid', STRING, 'VARCHAR(64)'),
    Column('log_message', STRING, 'VARCHAR(2048)'),
    Column('log_level', STRING, 'VARCHAR(8)'),
    Column('host_id', STRING, 'VARCHAR(32)'),
    Column('host_name', STRING, 'VARCHAR(32)'),
    Column('service_id', STRING, 'VARCHAR(32)'),
    Column('service_name', STRING, 'VARCHAR(32)'),
    Column('container_id', STRING, 'VARCHAR(32)'),
    Column('container_name', STRING, 'VARCHAR(32)'),
    Column('pod_id', STRING, 'VARCHAR(32)'),
    Column('pod_name', STRING, 'VARCHAR(32)'),
    Column('cluster_id', STRING, 'VARCHAR(32)'),
    Column('cluster_name', STRING, 'VARCHAR(32)'),
    Column('trace_id', STRING, 'VARCHAR(32)'),
    Column('span_id', STRING, 'VARCHAR(32)'),
    Column('user_id', STRING, 'VARCHAR(16)'),
    Column('session_id', STRING, 'VARCHAR(32)'),
    Column('request_id', STRING, 'VARCHAR(32)'),
    Column('response_time_ms', INT64, 'BIGINT'),
    Column('log_source', STRING, 'VARCHAR(16)'),
    Column('version', STRING, 'VARCHAR(16)'),
)

COLUMN_NAMES = tuple(column.name for column in COLUMNS)

COLUMN_INDEX = {name: i for i, name in enumerate(COLUMN_NAMES)}

PANDAS_DTYPES = {
    TIMESTAMP: 'datetime64[ms]',
    INT64: 'int64',
    STRING: 'object',
}


def create_table_sql(table_name):
    """DDL for the log table, timestamp first so it can serve as sort key."""
    columns = ",\n".join(f"        {column.name} {column.sql_type}" for column in COLUMNS)
    return f"""
    CREATE TABLE IF NOT EXISTS {table_name} (
{columns}
    )
    SORTKEY (ts);
    """
