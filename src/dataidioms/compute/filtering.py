"""Keeping only the rows of interest.

Filtering is the most frequent manipulation: the cars
made after 2005, the listings cheaper than 100, the
coffees from Ethiopia. A predicate expression computes
``true`` or ``false`` for each row, and only the rows
where it is ``true`` survive.
"""

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode
from .expressions import Expression


class FilterNode(QueryPlanNode):
    """Filter data based on a predicate expression.

    Rows where the predicate is missing, for example because
    the value being compared is missing, are discarded.

    >>> import pyarrow as pa
    >>> import pyarrow.compute as pc
    >>> from dataidioms.compute import col, lit, FunctionCallExpression, TableDataSource
    >>> data = pa.record_batch({"hwy": [29, 12, None, 35]})
    >>> predicate = FunctionCallExpression(pc.greater, col("hwy"), lit(20))
    >>> next(FilterNode(predicate, TableDataSource(data)).batches()).column("hwy").to_pylist()
    [29, 35]
    """

    def __init__(self, expression: Expression, child: QueryPlanNode) -> None:
        """
        :param expression: The predicate expression to filter with.
        :param child: The node emitting the data to be filtered.
        """
        self.expression = expression
        self.child = child

    def __str__(self) -> str:
        return f"FilterNode(filter={self.expression}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        for batch in self.child.batches():
            mask = self.expression.apply(batch)
            if isinstance(mask, pa.Scalar):
                # A constant predicate keeps all the rows or none of them.
                mask = pa.array([mask.as_py()] * batch.num_rows, type=pa.bool_())
            yield batch.filter(pc.fill_null(mask, False))
