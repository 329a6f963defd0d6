"""Handling missing values.

Real datasets are never complete: coffee reviews without
the altitude of the farm, listings that never received
a review, sports programs that didn't report their expenses.

Arrow represents a missing value as ``null``,
there are mostly three ways to deal with them:

* Ignore them while computing statistics, which is what
  the ``skip_nulls`` option of aggregations is for
  (see :mod:`dataidioms.compute.aggregate`).
* Drop the rows that have them, see :class:`DropNullsNode`.
* Replace them with some value, see :class:`FillNullsNode`.

Counting how many values are missing is part of
the exploration idioms, see :func:`dataidioms.explore.missing_counts`.
"""

import functools
from typing import Any

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode, require_columns


class DropNullsNode(QueryPlanNode):
    """Drop the rows that have a missing value.

    >>> import pyarrow as pa
    >>> from dataidioms.compute import TableDataSource
    >>> data = pa.record_batch({"variety": ["Bourbon", None, "Typica"], "aroma": [7.5, 7.2, None]})
    >>> next(DropNullsNode(["variety"], TableDataSource(data)).batches()).to_pydict()
    {'variety': ['Bourbon', 'Typica'], 'aroma': [7.5, None]}
    >>> next(DropNullsNode(None, TableDataSource(data)).batches()).to_pydict()
    {'variety': ['Bourbon'], 'aroma': [7.5]}
    """

    def __init__(self, columns: list[str] | None, child: QueryPlanNode) -> None:
        """
        :param columns: Only consider missing values in these columns,
                        ``None`` means any column.
        :param child: The node emitting the data.
        """
        self.columns = columns
        self.child = child

    def __str__(self) -> str:
        return f"DropNullsNode(columns={self.columns}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        for batch in self.child.batches():
            if self.columns is None:
                yield pc.drop_null(batch)
                continue

            require_columns(batch, self.columns)
            masks = [pc.is_valid(batch.column(name)) for name in self.columns]
            if not masks:
                yield batch
                continue
            yield batch.filter(functools.reduce(pc.and_, masks))


class FillNullsNode(QueryPlanNode):
    """Replace missing values with a given value.

    Each column can be filled with a different value,
    a frequent choice is the mean or median of the column
    (see :meth:`dataidioms.dataframe.Dataframe.impute`).

    Integer columns filled with a fractional number are
    converted to floating point, so that the value is
    not truncated.

    >>> import pyarrow as pa
    >>> from dataidioms.compute import TableDataSource
    >>> data = pa.record_batch({"reviews_per_month": [1.5, None], "minimum_nights": [None, 3]})
    >>> next(FillNullsNode({"reviews_per_month": 0.0, "minimum_nights": 1.5}, TableDataSource(data)).batches()).to_pydict()
    {'reviews_per_month': [1.5, 0.0], 'minimum_nights': [1.5, 3.0]}
    """

    def __init__(self, values: dict[str, Any], child: QueryPlanNode) -> None:
        """
        :param values: ``{column_name: value}`` to use in place of missing values.
        :param child: The node emitting the data.
        """
        self.values = values
        self.child = child

    def __str__(self) -> str:
        return f"FillNullsNode(values={self.values}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        for batch in self.child.batches():
            require_columns(batch, list(self.values))
            for name, value in self.values.items():
                index = batch.schema.get_field_index(name)
                filled = fill_column(batch.column(index), value)
                batch = batch.set_column(index, name, filled)
            yield batch


def fill_column(column: pa.Array, value: Any) -> pa.Array:
    """Fill the missing values of a single column.

    Adapts the type of the column when the value
    wouldn't fit in it, like 2.5 for an integer column.
    """
    if isinstance(value, pa.Scalar):
        value = value.as_py()
    if (
        pa.types.is_integer(column.type)
        and isinstance(value, float)
        and not value.is_integer()
    ):
        column = pc.cast(column, pa.float64())
    elif pa.types.is_integer(column.type) and isinstance(value, float):
        value = int(value)
    return pc.fill_null(column, pa.scalar(value).cast(column.type))
