# etl.py
import logging
import time

from logbench import BenchmarkConfig, ConfigurationError, IngestionError, configure
from logbench.report import BenchmarkResult, level_distribution, show_benchmark_results
from logbench.runner import run_benchmark
from logbench.sinks import RedshiftLoader, S3CsvSink, clear_s3_prefix, table_prefix

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

SUMMARY_ROWS = 1000


def main(config=None, s3_client=None, redshift_client=None):
    config = config or BenchmarkConfig.from_env()
    if not config.s3_bucket or not config.redshift_workgroup:
        raise ConfigurationError("S3_BUCKET and REDSHIFT_WORKGROUP must be set")

    logging.info("Starting log ingestion benchmark...")
    generator = configure(**config.generator_options())
    logging.info(f"Pools built in {generator.pool_build_duration().total_seconds() * 1000:.0f}ms")

    sinks = []

    def sink_factory(stream_index):
        sink = S3CsvSink(config.s3_bucket, config.s3_prefix, config.table_name, client=s3_client)
        sinks.append(sink)
        return sink

    clear_s3_prefix(config.s3_bucket, table_prefix(config.s3_prefix, config.table_name), client=s3_client)

    logging.info(f"Extracting generated rows to s3://{config.s3_bucket}/{config.s3_prefix}")
    upload = run_benchmark(generator, sink_factory, config.parallelism,
                           provider_name='S3 upload', table_name=config.table_name)
    upload.display()
    if not upload.success:
        raise IngestionError(upload.error_message)

    loader = RedshiftLoader(config.redshift_workgroup, config.db_name, client=redshift_client)
    loader.create_table(config.table_name)
    loader.truncate(config.table_name)

    result = BenchmarkResult('Redshift COPY', config.table_name, generator.row_count)
    start = time.perf_counter()
    try:
        loaded = loader.copy_from_s3(config.table_name, config.s3_bucket, config.s3_prefix, config.iam_role)
    except IngestionError as e:
        result.failed(str(e))
    else:
        logging.info(f"COPY reported {loaded} rows")
        if loaded != generator.row_count:
            result.failed(f"COPY loaded {loaded} rows, expected {generator.row_count}")
        else:
            result.succeeded(int((time.perf_counter() - start) * 1000), sum(len(s.keys) for s in sinks))
    result.display()
    show_benchmark_results([upload, result])
    if not result.success:
        raise IngestionError(result.error_message)

    sample = generator.producer.produce_batch(0, min(SUMMARY_ROWS, generator.row_count))
    logging.info("Transformation complete. Level summary of first %d rows:\n%s",
                 len(sample), level_distribution(sample.to_frame()))
    logging.info("Successfully loaded data into Redshift.")
    return result


if __name__ == '__main__':
    main()
