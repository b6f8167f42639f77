"""
Ingestion collaborators: they take batches and report how many rows landed.
"""
import csv
import logging
import time
from io import StringIO

import boto3

from .errors import IngestionError
from .schema import COLUMN_NAMES, create_table_sql

logger = logging.getLogger(__name__)


class CsvFileSink:
    """Appends batches to a local CSV file with a header row."""

    def __init__(self, path):
        self.path = path
        self._file = open(path, 'w', newline='')
        self._writer = csv.writer(self._file)
        self._writer.writerow(COLUMN_NAMES)
        self.rows_written = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def write(self, batch):
        self._writer.writerows(batch.rows)
        self.rows_written += len(batch)
        return len(batch)

    def close(self):
        if not self._file.closed:
            self._file.close()


def table_prefix(prefix, table_name):
    return f"{prefix.strip('/')}/{table_name}/"


class S3CsvSink:
    """Uploads each batch as its own CSV object under ``{prefix}/{table}/``."""

    def __init__(self, bucket, prefix, table_name, client=None):
        self.bucket = bucket
        self.prefix = prefix.strip('/')
        self.table_name = table_name
        self.client = client or boto3.client('s3')
        self.keys = []
        self.rows_written = 0

    @property
    def table_prefix(self):
        return table_prefix(self.prefix, self.table_name)

    def key_for(self, batch):
        return f"{self.table_prefix}part-{batch.start_index:012d}.csv"

    def write(self, batch):
        if not len(batch):
            return 0
        buffer = StringIO()
        batch.to_frame().to_csv(buffer, index=False, date_format='%Y-%m-%d %H:%M:%S.%f')
        key = self.key_for(batch)
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=buffer.getvalue().encode('utf-8'))
        except Exception as e:
            logger.error(f"Error uploading s3://{self.bucket}/{key}: {e}")
            raise IngestionError(f"Upload of {key} failed: {e}") from e
        self.keys.append(key)
        self.rows_written += len(batch)
        return len(batch)

    def close(self):
        logger.info(f"Uploaded {len(self.keys)} objects ({self.rows_written} rows) to s3://{self.bucket}/{self.prefix}")


def clear_s3_prefix(bucket, prefix, client=None):
    """Delete every object under ``prefix`` so a COPY only sees the current run's parts."""
    client = client or boto3.client('s3')
    deleted = 0
    try:
        paginator = client.get_paginator('list_objects_v2')
        for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
            keys = [{'Key': obj['Key']} for obj in page.get('Contents', [])]
            if keys:
                client.delete_objects(Bucket=bucket, Delete={'Objects': keys})
                deleted += len(keys)
    except Exception as e:
        logger.error(f"Error clearing s3://{bucket}/{prefix}: {e}")
        raise IngestionError(f"Could not clear s3://{bucket}/{prefix}: {e}") from e
    logger.info(f"Removed {deleted} stale objects from s3://{bucket}/{prefix}")
    return deleted


class RedshiftLoader:
    """Runs statements through the Redshift Data API and waits for each one."""

    def __init__(self, workgroup, database='dev', client=None, poll_interval=1.0):
        self.workgroup = workgroup
        self.database = database
        self.client = client or boto3.client('redshift-data')
        self.poll_interval = poll_interval

    def execute_sql(self, sql_statement):
        try:
            response = self.client.execute_statement(
                WorkgroupName=self.workgroup,
                Database=self.database,
                Sql=sql_statement
            )
            statement_id = response['Id']

            status = 'STARTED'
            desc = {}
            while status in ['STARTED', 'SUBMITTED', 'PICKED']:
                desc = self.client.describe_statement(Id=statement_id)
                status = desc['Status']
                if status in ['FINISHED', 'FAILED', 'ABORTED']:
                    break
                time.sleep(self.poll_interval)

            if status != 'FINISHED':
                raise IngestionError(f"SQL statement failed: {desc.get('Error', desc)}")
            return desc
        except Exception as e:
            logger.error(f"Error executing SQL: {e}")
            if isinstance(e, IngestionError):
                raise
            raise IngestionError(f"Error executing SQL: {e}") from e

    def create_table(self, table_name):
        logger.info(f"Creating table {table_name} if missing")
        self.execute_sql(create_table_sql(table_name))

    def truncate(self, table_name):
        self.execute_sql(f"TRUNCATE TABLE {table_name};")

    def copy_from_s3(self, table_name, bucket, prefix, iam_role=None):
        """COPY every CSV part under the prefix; returns the affected row count."""
        location = f"s3://{bucket}/{table_prefix(prefix, table_name)}"
        credentials = f"IAM_ROLE '{iam_role}'" if iam_role else "IAM_ROLE default"
        logger.info(f"Loading {location} into Redshift table: {table_name}")
        desc = self.execute_sql(f"""
        COPY {table_name} ({', '.join(COLUMN_NAMES)})
        FROM '{location}'
        {credentials}
        CSV IGNOREHEADER 1
        TIMEFORMAT 'auto';
        """)
        return desc.get('ResultRows', 0)
