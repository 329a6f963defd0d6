"""Grouping and summarizing.

Summary statistics answer questions like: what is the
average highway mileage? And grouping answers questions like:
what is the average highway mileage *for each class of car*?

Given the data::

    class,   hwy
    compact, 29
    compact, 31
    suv,     17
    suv,     19
    compact, 26

Grouping by ``class`` and computing the mean of ``hwy`` gives::

    class,   mean_hwy
    compact, 28.67
    suv,     18.0

The grouping is done by :meth:`pyarrow.Table.group_by`, which is asked
for the list of rows that belong to each group. Each statistic is
then computed for each group by the matching :mod:`pyarrow.compute`
function, so that the result is exactly what the library computes
when the function is called on the group rows.

Every statistic accepts a ``skip_nulls`` option: when ``True``
(the default) missing values are ignored, when ``False``
a single missing value makes the result missing.
"""

import abc
from typing import Any

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode, require_columns

__all__ = (
    "AggregateNode",
    "Aggregation",
    "CountAggregation",
    "CountDistinctAggregation",
    "SumAggregation",
    "MeanAggregation",
    "MedianAggregation",
    "MinAggregation",
    "MaxAggregation",
    "StdDevAggregation",
    "VarianceAggregation",
    "AGGREGATIONS",
)

ROW_INDEX_COLUMN = "__dataidioms_row_index"


class AggregateNode(QueryPlanNode):
    """Group data and compute aggregations.

    Groups are emitted in the order their first row
    appears in the data. Missing values in the keys
    form a group of their own.

    With no keys the whole data is a single group,
    and a single row is emitted.

    >>> import pyarrow as pa
    >>> from dataidioms.compute import TableDataSource
    >>> data = pa.record_batch({
    ...    "class": ["compact", "compact", "suv", "suv", "compact"],
    ...    "hwy": [29, 31, 17, 19, 26],
    ... })
    >>> aggregate = AggregateNode(["class"], {"max_hwy": MaxAggregation("hwy")}, TableDataSource(data))
    >>> next(aggregate.batches()).to_pydict()
    {'class': ['compact', 'suv'], 'max_hwy': [31, 19]}
    """

    def __init__(
        self,
        keys: list[str],
        aggregations: dict[str, "Aggregation"],
        child: QueryPlanNode,
    ) -> None:
        """
        :param keys: The columns to group by.
        :param aggregations: The aggregations to compute in the form of {"new_col_name": Aggregation}.
        :param child: The child node that will provide the data to aggregate.
        """
        self.keys = keys
        self.aggregations = aggregations
        self.child = child

    def __str__(self) -> str:
        return f"AggregateNode(keys={self.keys}, aggregations={self.aggregations}, {self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        table = self.child.collect_table()
        require_columns(
            table,
            self.keys + [a.column for a in self.aggregations.values() if a.column is not None],
        )

        result: dict[str, list[Any]] = {k: [] for k in self.keys}
        result.update({name: [] for name in self.aggregations})
        for keyvalues, group in self.groups(table):
            for key, value in zip(self.keys, keyvalues):
                result[key].append(value)
            for name, aggregation in self.aggregations.items():
                result[name].append(aggregation.compute(group))

        schema = pa.schema(
            [table.schema.field(k) for k in self.keys]
            + [
                pa.field(name, aggregation.result_type(table.schema))
                for name, aggregation in self.aggregations.items()
            ]
        )
        yield pa.RecordBatch.from_pydict(
            {name: [_as_py(v) for v in values] for name, values in result.items()},
            schema=schema,
        )

    def groups(self, table: pa.Table):
        """Split ``table`` into one table for each distinct key.

        Yields ``(key_values, group_table)`` tuples.
        """
        if not self.keys:
            yield (), table
            return

        indexed = table.append_column(ROW_INDEX_COLUMN, pa.array(range(table.num_rows), pa.int64()))
        # With use_threads=False the groups keep the order of their first appearance.
        grouped = indexed.group_by(self.keys, use_threads=False).aggregate(
            [(ROW_INDEX_COLUMN, "list")]
        )
        rows_column = grouped.column(f"{ROW_INDEX_COLUMN}_list")
        for idx in range(grouped.num_rows):
            keyvalues = tuple(grouped.column(k)[idx] for k in self.keys)
            yield keyvalues, table.take(rows_column[idx].values)


def _as_py(value: Any) -> Any:
    if isinstance(value, pa.Scalar):
        return value.as_py()
    return value


class Aggregation(abc.ABC):
    """Base class for aggregations.

    An aggregation reduces a column of a group of rows
    to a single value.
    """

    #: Name used to refer to the aggregation in summaries, like ``"mean"``.
    name: str = ""

    def __init__(self, column: str | None, skip_nulls: bool = True) -> None:
        """
        :param column: The column to aggregate.
        :param skip_nulls: Ignore missing values, when ``False`` any
                           missing value makes the result missing.
        """
        self.column = column
        self.skip_nulls = skip_nulls

    def __str__(self) -> str:
        if self.skip_nulls:
            return f"{self.__class__.__name__}({self.column})"
        return f"{self.__class__.__name__}({self.column}, skip_nulls=False)"

    __repr__ = __str__

    def compute(self, group: pa.Table) -> pa.Scalar:
        """Compute the aggregation for the rows of a group."""
        data = group.column(self.column)
        if pa.types.is_decimal(data.type) and self.result_type(group.schema) == pa.float64():
            # Decimal kernels give back decimals, the result column is float64.
            data = pc.cast(data, pa.float64())
        return self._aggregate(data)

    @abc.abstractmethod
    def _aggregate(self, data: pa.ChunkedArray) -> pa.Scalar: ...

    def result_type(self, schema: pa.Schema) -> pa.DataType:
        """Type of the values produced when aggregating data of ``schema``."""
        return schema.field(self.column).type


class CountAggregation(Aggregation):
    """Count the values of a column.

    Missing values are not counted unless ``skip_nulls`` is ``False``.
    Without a column, counts the rows.
    """

    name = "n"

    def __init__(self, column: str | None = None, skip_nulls: bool = True) -> None:
        super().__init__(column, skip_nulls)

    def compute(self, group: pa.Table) -> int:
        if self.column is None:
            return group.num_rows
        return super().compute(group)

    def _aggregate(self, data: pa.ChunkedArray) -> pa.Scalar:
        return pc.count(data, mode="only_valid" if self.skip_nulls else "all")

    def result_type(self, schema: pa.Schema) -> pa.DataType:
        return pa.int64()


class CountDistinctAggregation(Aggregation):
    """Count how many different values a column has.

    When ``skip_nulls`` is ``False`` missing values count as a value.
    """

    name = "n_distinct"

    def _aggregate(self, data: pa.ChunkedArray) -> pa.Scalar:
        return pc.count_distinct(data, mode="only_valid" if self.skip_nulls else "all")

    def result_type(self, schema: pa.Schema) -> pa.DataType:
        return pa.int64()


class SumAggregation(Aggregation):
    """Compute the sum of a column."""

    name = "sum"

    def _aggregate(self, data: pa.ChunkedArray) -> pa.Scalar:
        return pc.sum(data, skip_nulls=self.skip_nulls)

    def result_type(self, schema: pa.Schema) -> pa.DataType:
        source = schema.field(self.column).type
        if pa.types.is_signed_integer(source):
            return pa.int64()
        if pa.types.is_unsigned_integer(source):
            return pa.uint64()
        return pa.float64()


class MinAggregation(Aggregation):
    """Compute the minimum of a column."""

    name = "min"

    def _aggregate(self, data: pa.ChunkedArray) -> pa.Scalar:
        return pc.min(data, skip_nulls=self.skip_nulls)


class MaxAggregation(Aggregation):
    """Compute the maximum of a column."""

    name = "max"

    def _aggregate(self, data: pa.ChunkedArray) -> pa.Scalar:
        return pc.max(data, skip_nulls=self.skip_nulls)


class FloatAggregation(Aggregation):
    """Aggregations whose result is always a floating point number."""

    def result_type(self, schema: pa.Schema) -> pa.DataType:
        return pa.float64()


class MeanAggregation(FloatAggregation):
    """Compute the arithmetic mean of a column."""

    name = "mean"

    def _aggregate(self, data: pa.ChunkedArray) -> pa.Scalar:
        return pc.mean(data, skip_nulls=self.skip_nulls)


class MedianAggregation(FloatAggregation):
    """Compute the exact median of a column.

    When the number of values is even, the median is
    the mean of the two central values.
    """

    name = "median"

    def _aggregate(self, data: pa.ChunkedArray) -> pa.Scalar:
        quantiles = pc.quantile(data, q=0.5, interpolation="linear", skip_nulls=self.skip_nulls)
        if len(quantiles) == 0:
            return None
        return quantiles[0]


class StdDevAggregation(FloatAggregation):
    """Compute the sample standard deviation of a column.

    Like most statistical tools, this divides by ``n - 1``.
    """

    name = "sd"

    def _aggregate(self, data: pa.ChunkedArray) -> pa.Scalar:
        return pc.stddev(data, ddof=1, skip_nulls=self.skip_nulls)


class VarianceAggregation(FloatAggregation):
    """Compute the sample variance of a column."""

    name = "var"

    def _aggregate(self, data: pa.ChunkedArray) -> pa.Scalar:
        return pc.variance(data, ddof=1, skip_nulls=self.skip_nulls)


#: Aggregations by their short name, as used in summaries.
AGGREGATIONS: dict[str, type[Aggregation]] = {
    cls.name: cls
    for cls in (
        CountAggregation,
        CountDistinctAggregation,
        SumAggregation,
        MeanAggregation,
        MedianAggregation,
        MinAggregation,
        MaxAggregation,
        StdDevAggregation,
        VarianceAggregation,
    )
}
