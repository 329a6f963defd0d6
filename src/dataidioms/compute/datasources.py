"""Loading data.

The first idiom of every analysis: get the data in.
Sources are the leaf nodes of a plan, they read
the data from somewhere and emit it as Arrow batches.

Reading a CSV file is a single call to :func:`pyarrow.csv.open_csv`,
reading a parquet file is a single call to :class:`pyarrow.parquet.ParquetFile`,
the sources below only wrap those calls so that the rest
of the plan can consume them.
"""

import logging
import os
from abc import abstractmethod

import pyarrow as pa
import pyarrow.csv
import pyarrow.parquet

from .base import QueryPlanNode

log = logging.getLogger(__name__)


class DataSourceNode(QueryPlanNode):
    """Base class for nodes that load data from a source."""

    @abstractmethod
    def poll_schema(self) -> pa.Schema:
        """Get the columns and their types without loading the data."""
        ...


class FileDataSource(DataSourceNode):
    """Base class for sources reading a local file."""

    def __init__(self, filename: str) -> None:
        if not os.path.isfile(filename):
            raise FileNotFoundError(f"No such data file: {filename}")
        self.filename = filename


class CSVDataSource(FileDataSource):
    """Load data from a CSV file.

    Column types are inferred by Arrow from the content,
    empty cells and cells containing ``NA`` or ``null``
    are read as missing values.
    """

    def __init__(self, filename: str, block_size: int | None = None) -> None:
        """
        :param filename: The path of the local CSV file.
        :param block_size: How many bytes to read for each batch,
                           influences how many batches will be produced.
        """
        super().__init__(filename)
        self.block_size = block_size

    def __str__(self) -> str:
        return f"CSVDataSource({self.filename}, block_size={self.block_size})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        log.debug("Reading CSV file %s", self.filename)
        read_options = pa.csv.ReadOptions(block_size=self.block_size)
        with pa.csv.open_csv(self.filename, read_options=read_options) as reader:
            emitted = False
            for batch in reader:
                emitted = True
                yield batch
            if not emitted:
                # A file with only the header still defines the columns.
                yield pa.RecordBatch.from_pylist([], schema=reader.schema)

    def poll_schema(self) -> pa.Schema:
        with pa.csv.open_csv(self.filename) as reader:
            return reader.schema


class ParquetDataSource(FileDataSource):
    """Load data from a Parquet file.

    Parquet files carry their own schema,
    so no type inference happens here.
    """

    def __init__(self, filename: str, batch_size: int | None = None) -> None:
        """
        :param filename: The path of the local parquet file.
        :param batch_size: How many rows to emit in each batch.
        """
        super().__init__(filename)
        self.batch_size = batch_size or 65536

    def __str__(self) -> str:
        return f"ParquetDataSource({self.filename}, batch_size={self.batch_size})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        log.debug("Reading Parquet file %s", self.filename)
        with pa.parquet.ParquetFile(self.filename) as reader:
            emitted = False
            for batch in reader.iter_batches(batch_size=self.batch_size):
                emitted = True
                yield batch
            if not emitted:
                yield pa.RecordBatch.from_pylist([], schema=reader.schema_arrow)

    def poll_schema(self) -> pa.Schema:
        with pa.parquet.ParquetFile(self.filename) as reader:
            return reader.schema_arrow


class TableDataSource(DataSourceNode):
    """Use an in-memory :class:`pyarrow.Table` or :class:`pyarrow.RecordBatch`.

    This is how the example datasets and tables
    built from Python dictionaries enter a plan.
    """

    def __init__(self, table: pa.Table | pa.RecordBatch) -> None:
        """
        :param table: The table or recordbatch with the data to read.
        """
        self.table = table

    def __str__(self) -> str:
        return f"TableDataSource(columns={self.table.column_names}, rows={self.table.num_rows})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        if isinstance(self.table, pa.RecordBatch):
            yield self.table
        elif self.table.num_rows == 0:
            # to_batches() gives nothing for an empty table,
            # but the columns still have to reach the next steps.
            yield pa.RecordBatch.from_pylist([], schema=self.table.schema)
        else:
            yield from self.table.combine_chunks().to_batches()

    def poll_schema(self) -> pa.Schema:
        return self.table.schema
