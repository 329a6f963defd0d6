"""Ordering rows.

Looking at the most efficient cars, the highest rated
coffees, or the cheapest listings all require
sorting the data by one or more columns.
"""

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode, require_columns


class SortNode(QueryPlanNode):
    """Sort data in memory based on one or more columns.

    Rows are compared by the first key, ties are broken
    by the following keys and rows that are still equal
    keep the order they had. Missing values are placed last
    regardless of the direction.

    >>> import pyarrow as pa
    >>> from dataidioms.compute import TableDataSource
    >>> data = pa.record_batch({"hwy": [29, None, 35, 12]})
    >>> sort = SortNode(["hwy"], [True], TableDataSource(data))
    >>> next(sort.batches()).column("hwy").to_pylist()
    [35, 29, 12, None]
    """

    def __init__(self, keys: list[str], descending: list[bool], child: QueryPlanNode) -> None:
        """
        :param keys: The columns to sort by in the order they should be sorted.
        :param descending: If each column should be sorted in descending order.
        :param child: The node emitting the data to be sorted.
        """
        if len(keys) != len(descending):
            raise ValueError("Keys and descending must have the same length")

        self.sorting = list(
            zip(keys, ("descending" if desc else "ascending" for desc in descending))
        )
        self.child = child

    def __str__(self) -> str:
        return f"SortNode(sorting={self.sorting}, {self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Sort all the data received from the child.

        Sorting requires to see all rows, so the batches
        are accumulated in a single table before sorting it.
        """
        table = self.child.collect_table()
        require_columns(table, [key for key, _ in self.sorting])
        indices = pc.sort_indices(table, sort_keys=self.sorting, null_placement="at_end")
        yield from table.take(indices).combine_chunks().to_batches() or [
            pa.RecordBatch.from_pylist([], schema=table.schema)
        ]
