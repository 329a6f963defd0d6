"""Combining two tables on matching keys.

Datasets are often split: the listings in one table,
the neighbourhoods they belong to in another. Joining
puts the columns of both tables side by side for the
rows whose keys match.

The four kinds of join differ in what happens to rows
that have no match:

* ``inner`` drops them from both sides.
* ``left`` keeps the unmatched rows of the left table,
  filling the right columns with missing values.
* ``right`` does the same for the right table.
* ``outer`` keeps unmatched rows of both tables.

>>> import pyarrow as pa
>>> from dataidioms.compute import TableDataSource
>>> listings = TableDataSource(pa.table({"listing_id": [1, 2, 3], "neighbourhood": ["Nord", "Sud", "Ovest"]}))
>>> areas = TableDataSource(pa.table({"neighbourhood": ["Nord", "Sud"], "zone": ["A", "B"]}))
>>> next(JoinNode(["neighbourhood"], ["neighbourhood"], listings, areas, how="left").batches()).to_pydict()
{'listing_id': [1, 2, 3], 'neighbourhood': ['Nord', 'Sud', 'Ovest'], 'zone': ['A', 'B', None]}
"""

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode, require_columns

LEFT_ROW_INDEX = "__dataidioms_left_row"
RIGHT_ROW_INDEX = "__dataidioms_right_row"

JOIN_TYPES = {
    "inner": "inner",
    "left": "left outer",
    "right": "right outer",
    "outer": "full outer",
}


class JoinNode(QueryPlanNode):
    """Join the data of two nodes.

    The join itself is performed by :meth:`pyarrow.Table.join`.
    Rows are emitted in the order of the left table, and
    the columns of the right table that share a name with a
    left column get a ``_right`` suffix.
    """

    def __init__(
        self,
        left_keys: list[str],
        right_keys: list[str],
        left_child: QueryPlanNode,
        right_child: QueryPlanNode,
        how: str = "inner",
    ) -> None:
        """
        :param left_keys: The columns of the left data to match.
        :param right_keys: The columns of the right data to match,
                           in the same order as ``left_keys``.
        :param left_child: The node emitting the left data.
        :param right_child: The node emitting the right data.
        :param how: One of ``inner``, ``left``, ``right``, ``outer``.
        """
        if how not in JOIN_TYPES:
            raise ValueError(f"Unsupported join type {how!r}, expected one of {list(JOIN_TYPES)}")
        if len(left_keys) != len(right_keys):
            raise ValueError("Left and right keys must have the same length")
        self.left_keys = left_keys
        self.right_keys = right_keys
        self.left_child = left_child
        self.right_child = right_child
        self.how = how

    def __str__(self) -> str:
        return (
            f"JoinNode({self.how}, left_keys={self.left_keys}, right_keys={self.right_keys}, "
            f"left={self.left_child}, right={self.right_child})"
        )

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        left = self.left_child.collect_table()
        right = self.right_child.collect_table()
        require_columns(left, self.left_keys)
        require_columns(right, self.right_keys)

        # Arrow doesn't guarantee the order of the joined rows,
        # so remember where each row came from and sort on it afterwards.
        left = left.append_column(LEFT_ROW_INDEX, pa.array(range(left.num_rows), pa.int64()))
        right = right.append_column(RIGHT_ROW_INDEX, pa.array(range(right.num_rows), pa.int64()))
        joined = left.join(
            right,
            keys=self.left_keys,
            right_keys=self.right_keys,
            join_type=JOIN_TYPES[self.how],
            right_suffix="_right",
            coalesce_keys=True,
            use_threads=False,
        )
        order = pc.sort_indices(
            joined,
            sort_keys=[(LEFT_ROW_INDEX, "ascending"), (RIGHT_ROW_INDEX, "ascending")],
            null_placement="at_end",
        )
        joined = joined.take(order).drop_columns([LEFT_ROW_INDEX, RIGHT_ROW_INDEX])
        if joined.num_rows == 0:
            yield pa.RecordBatch.from_pylist([], schema=joined.schema)
        else:
            yield from joined.combine_chunks().to_batches()
