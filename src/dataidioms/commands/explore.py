"""Command line interface running the exploration idioms.

Each flag maps to one idiom of :mod:`dataidioms.explore`,
:mod:`dataidioms.plotting` or :mod:`dataidioms.io`, and
each result is printed in tabular format using
:func:`dataidioms.utils.tabulate.tabulate`.
"""

import argparse
import logging

import pyarrow as pa

from dataidioms import datasets, explore, io, plotting
from dataidioms.compute import AGGREGATIONS, ColumnNotFoundError
from dataidioms.dataframe import Dataframe
from dataidioms.utils import tabulate

log = logging.getLogger(__name__)


def parse_summary(spec: str) -> tuple[str, str, str | None]:
    """Parse a ``NAME=STAT:COLUMN`` summary specification.

    ``NAME=n`` is accepted to count rows.

    >>> parse_summary("mean_hwy=mean:hwy")
    ('mean_hwy', 'mean', 'hwy')
    >>> parse_summary("cars=n")
    ('cars', 'n', None)
    """
    name, sep, aggregation = spec.partition("=")
    if not sep or not name:
        raise ValueError(f"Invalid summary {spec!r}, expected NAME=STAT:COLUMN")
    stat, _, column = aggregation.partition(":")
    if stat not in AGGREGATIONS:
        raise ValueError(f"Unknown statistic {stat!r}, expected one of {list(AGGREGATIONS)}")
    if not column and stat != "n":
        raise ValueError(f"Statistic {stat!r} requires a column, like {name}={stat}:COLUMN")
    return name, stat, column or None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idioms-explore",
        description="Explore a CSV or Parquet file with common data analysis idioms.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("file", nargs="?", help="A .csv or .parquet file to explore.")
    source.add_argument("--dataset", choices=datasets.names(), help="Use an example dataset.")

    parser.add_argument("--glimpse", action="store_true", help="Print every column with its type and first values.")
    parser.add_argument("--describe", action="store_true", help="Print summary statistics of numeric columns.")
    parser.add_argument("--missing", action="store_true", help="Print the missing values of each column.")
    parser.add_argument("--count", metavar="COLUMN", help="Count the values of a categorical column.")
    parser.add_argument("--keep-missing", action="store_true",
                        help="Treat missing values as a value of their own in --count.")
    parser.add_argument("--group-by", metavar="COLUMN", action="append", default=[],
                        help="Group rows by a column before --summarize. Can be provided multiple times.")
    parser.add_argument("--summarize", metavar="NAME=STAT:COLUMN", action="append", default=[],
                        help="Compute a statistic, per group when --group-by is provided. "
                             f"STAT is one of {', '.join(AGGREGATIONS)}. Can be provided multiple times.")
    parser.add_argument("--hist", metavar="COLUMN", help="Draw an histogram of a numeric column.")
    parser.add_argument("--bins", type=int, default=30, help="Number of bins of the histogram.")
    parser.add_argument("--plot-output", metavar="PATH", default="histogram.png",
                        help="Where to save the histogram.")
    parser.add_argument("--output", metavar="PATH",
                        help="Save the data (or the summary when --summarize is used) to a .csv or .parquet file.")
    parser.add_argument("--max-rows", type=int, default=20, help="Maximum number of rows to print.")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity.")
    return parser


def load(args: argparse.Namespace) -> pa.Table:
    if args.dataset:
        return datasets.load(args.dataset)
    return Dataframe.open(args.file).to_arrow()


def save(table: pa.Table, path: str) -> None:
    if path.lower().endswith(".parquet"):
        io.write_parquet(table, path)
    else:
        io.write_csv(table, path)
    print(f"Saved {table.num_rows} rows to {path}")


def run(args: argparse.Namespace) -> None:
    """Execute the idioms requested by ``args`` printing their result."""
    table = load(args)
    log.info("Loaded %d rows and %d columns", table.num_rows, table.num_columns)

    def show(title: str, result: pa.Table) -> None:
        print(f"\n{title}")
        print(tabulate.tabulate(result, max_rows=args.max_rows))

    requested = False
    if args.glimpse:
        requested = True
        print(explore.glimpse(table))
    if args.describe:
        requested = True
        show("Summary statistics", explore.describe(table))
    if args.missing:
        requested = True
        show("Missing values", explore.missing_counts(table))
    if args.count:
        requested = True
        show(f"Counts of {args.count}", explore.proportions(table, args.count, dropna=not args.keep_missing))

    result = table
    if args.summarize:
        requested = True
        summaries = {}
        for spec in args.summarize:
            name, stat, column = parse_summary(spec)
            summaries[name] = AGGREGATIONS[stat](column)
        result = Dataframe(table).group_by(*args.group_by).summarize(**summaries).to_arrow()
        show("Summary", result)
    elif args.group_by:
        raise ValueError("--group-by requires at least one --summarize")

    if args.hist:
        requested = True
        plotting.save_figure(plotting.histogram(table, args.hist, bins=args.bins), args.plot_output)
        print(f"Saved histogram of {args.hist} to {args.plot_output}")

    if args.output:
        requested = True
        save(result, args.output)

    if not requested:
        show("First rows", explore.head(table, args.max_rows))


def main(argv: list[str] | None = None) -> None:
    """Parse the command line arguments and run the requested idioms."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        run(args)
    except (ColumnNotFoundError, FileNotFoundError, TypeError, ValueError) as e:
        parser.error(str(e))


if __name__ == "__main__":
    main()
