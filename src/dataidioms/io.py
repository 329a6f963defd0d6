"""Saving results.

At the end of an analysis the derived tables usually
need to be saved, to be shared or to be used by another
tool. Writing a CSV file is a single call to
:func:`pyarrow.csv.write_csv` and writing a Parquet
file a single call to :func:`pyarrow.parquet.write_table`.

CSV is readable by anything but loses the column types,
which will have to be inferred again when the file is read.
Parquet preserves them and is far smaller.
"""

import logging
import os

import pyarrow as pa
import pyarrow.csv
import pyarrow.parquet

from .compute.base import as_table

log = logging.getLogger(__name__)

READERS = {
    ".csv": pa.csv.read_csv,
    ".parquet": pa.parquet.read_table,
}


def _check_destination(path: str) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Directory {directory} does not exist")


def write_csv(data: pa.Table | pa.RecordBatch, path: str) -> None:
    """Save ``data`` to a comma separated file with a header row.

    Missing values are written as empty cells.
    """
    _check_destination(path)
    table = as_table(data)
    log.debug("Writing %d rows to CSV file %s", table.num_rows, path)
    pa.csv.write_csv(table, path)


def write_parquet(data: pa.Table | pa.RecordBatch, path: str) -> None:
    """Save ``data`` to a Parquet file."""
    _check_destination(path)
    table = as_table(data)
    log.debug("Writing %d rows to Parquet file %s", table.num_rows, path)
    pa.parquet.write_table(table, path)


def read_table(path: str) -> pa.Table:
    """Read a whole CSV or Parquet file, choosing by its extension."""
    extension = os.path.splitext(path)[1].lower()
    try:
        reader = READERS[extension]
    except KeyError:
        raise ValueError(
            f"Unsupported file extension {extension!r}, expected one of {list(READERS)}"
        ) from None
    if not os.path.isfile(path):
        raise FileNotFoundError(f"No such data file: {path}")
    log.debug("Reading %s", path)
    return reader(path)
