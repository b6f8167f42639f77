# generate_logs.py
import argparse
import logging

from logbench import configure
from logbench.report import level_distribution
from logbench.sinks import CsvFileSink

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def generate_logs(filename='benchmark_logs.csv', rows=100, batch_size=10000, seed=None):
    generator = configure(row_count=rows, batch_size=min(batch_size, rows), seed=seed)

    first_batch = None
    with CsvFileSink(filename) as sink:
        for batch in generator:
            if first_batch is None:
                first_batch = batch
            sink.write(batch)

    logging.info(f"Generated {sink.rows_written} rows in {filename} (seed {generator.seed})")
    logging.info("Level mix of first batch:\n%s", level_distribution(first_batch.to_frame()))
    return sink.rows_written


def main():
    ap = argparse.ArgumentParser(description="Write synthetic benchmark log rows to a CSV file.")
    ap.add_argument("--output", default="benchmark_logs.csv")
    ap.add_argument("--rows", type=int, default=100)
    ap.add_argument("--batch-size", type=int, default=10000)
    ap.add_argument("--seed", type=int, default=None, help="pool seed for reproducible output")
    args = ap.parse_args()
    generate_logs(args.output, args.rows, args.batch_size, args.seed)


if __name__ == '__main__':
    main()
