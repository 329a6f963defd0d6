"""Removing duplicated rows.

Asking which manufacturers are in the dataset, or which
combinations of species and country appear, means
keeping each distinct combination of values only once.
"""

import pyarrow as pa

from .base import QueryPlanNode, require_columns

ROW_INDEX_COLUMN = "__dataidioms_row_index"


class DistinctNode(QueryPlanNode):
    """Keep the first row of each distinct combination of values.

    >>> import pyarrow as pa
    >>> from dataidioms.compute import TableDataSource
    >>> data = pa.record_batch({"manufacturer": ["audi", "honda", "audi"], "year": [1999, 2008, 1999]})
    >>> next(DistinctNode(["manufacturer"], TableDataSource(data)).batches()).to_pydict()
    {'manufacturer': ['audi', 'honda']}
    """

    def __init__(self, columns: list[str] | None, child: QueryPlanNode) -> None:
        """
        :param columns: The columns whose values must be distinct,
                        only those columns are emitted.
                        ``None`` means all columns.
        :param child: The node emitting the data.
        """
        self.columns = columns
        self.child = child

    def __str__(self) -> str:
        return f"DistinctNode(columns={self.columns}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        table = self.child.collect_table()
        columns = self.columns if self.columns is not None else table.column_names
        require_columns(table, columns)
        table = table.select(columns)

        indexed = table.append_column(ROW_INDEX_COLUMN, pa.array(range(table.num_rows), pa.int64()))
        first_rows = indexed.group_by(columns, use_threads=False).aggregate(
            [(ROW_INDEX_COLUMN, "min")]
        )
        rows = first_rows.column(f"{ROW_INDEX_COLUMN}_min").to_pylist()
        distinct = table.take(pa.array(sorted(rows), pa.int64()))
        if distinct.num_rows == 0:
            yield pa.RecordBatch.from_pylist([], schema=table.schema)
        else:
            yield from distinct.combine_chunks().to_batches()
