"""The Dataframe object itself."""
import logging
import os
from typing import Any, Callable, Self

import pyarrow as pa

from .. import explore, io
from ..compute import (
  AcrossProjection,
  AggregateNode,
  CountAggregation,
  CSVDataSource,
  DistinctNode,
  DropNullsNode,
  FillNullsNode,
  FilterNode,
  JoinNode,
  MapExpression,
  ParquetDataSource,
  PivotLongerNode,
  PivotWiderNode,
  ProjectNode,
  RenameNode,
  RowAggregateExpression,
  SliceNode,
  SortNode,
  TableDataSource,
)
from ..compute.aggregate import AGGREGATIONS, Aggregation
from ..compute.base import Expression, QueryPlanNode
from ..compute.expressions import FunctionCallExpression
from ..utils.tabulate import tabulate

log = logging.getLogger(__name__)

AggregationSpec = Aggregation | tuple[str, str]


def _as_aggregation(spec: AggregationSpec) -> Aggregation:
  """Accept both ``MeanAggregation("hwy")`` and ``("mean", "hwy")``."""
  if isinstance(spec, Aggregation):
    return spec
  stat, column = spec
  try:
    return AGGREGATIONS[stat](column)
  except KeyError:
    raise ValueError(f"Unknown statistic {stat!r}, expected one of {list(AGGREGATIONS)}") from None


class Dataframe:
  """Data structure that handles data in rows and columns.

  The Dataframe object allows to represent in-memory data
  and perform transformations over it.

  The dataframe is lazy, every method returns a new Dataframe
  with one more step in its plan, and the steps are executed
  only when the data is requested by :meth:`collect`,
  :meth:`to_arrow` or any of the methods saving it.

  >>> from dataidioms import datasets
  >>> from dataidioms.dataframe import Dataframe, col
  >>> df = (
  ...   Dataframe(datasets.fuel_economy())
  ...   .filter(col("manufacturer") == "honda")
  ...   .select("model", "year", "hwy")
  ... )
  >>> print(df)
  model | year | hwy
  ----- | ---- | ---
  civic | 1999 | 32
  civic | 2008 | 34
  """
  def __init__(self, node_or_table: QueryPlanNode | pa.Table | pa.RecordBatch) -> None:
    """
    :param node_or_table: A compute node expected to emit
                          the data for the dataframe or a `pyarrow.Table`.
    """
    if isinstance(node_or_table, (pa.Table, pa.RecordBatch)):
      node_or_table = TableDataSource(node_or_table)

    if not isinstance(node_or_table, QueryPlanNode):
      raise ValueError("Invalid input, expected a QueryPlanNode or a PyArrow Table")

    self.node = node_or_table

  # Construction

  @classmethod
  def open(cls, filename: str) -> Self:
    """Open a CSV or Parquet file, choosing by its extension."""
    extension = os.path.splitext(filename)[1].lower()
    if extension == ".csv":
      return cls.open_csv(filename)
    elif extension == ".parquet":
      return cls.open_parquet(filename)
    raise ValueError(f"Unsupported file extension {extension!r}, expected .csv or .parquet")

  @classmethod
  def open_csv(cls, filename: str) -> Self:
    """Open a CSV file and create a Dataframe out of its data.

    :param filename: The path to a local CSV file.
    """
    return cls(CSVDataSource(filename))

  @classmethod
  def open_parquet(cls, filename: str) -> Self:
    """Open a Parquet file and create a Dataframe out of its data.

    :param filename: The path to a local Parquet file.
    """
    return cls(ParquetDataSource(filename))

  @classmethod
  def from_pydict(cls, columns: dict[str, list[Any]]) -> Self:
    """Build a Dataframe from ``{column_name: [values]}``.

    All the lists must have the same length,
    ``None`` is a missing value.
    """
    return cls(pa.table(columns))

  @classmethod
  def from_pylist(cls, rows: list[dict[str, Any]]) -> Self:
    """Build a Dataframe from a list of rows, each a ``{column_name: value}``.

    Keys missing from a row are missing values.
    """
    return cls(pa.Table.from_pylist(rows))

  # Manipulation

  def filter(self, expression: Expression) -> Self:
    """Keep only the rows matching the predicate.

    :param expression: The expression representing the predicate.
                       for example ``col("hwy") > 30``.
    """
    return self.__class__(FilterNode(expression, self.node))

  def select(self, *columns: str) -> Self:
    """Keep only the given columns, in the given order."""
    return self.__class__(ProjectNode(list(columns), None, self.node))

  def rename(self, mapping: dict[str, str] | None = None, **renames: str) -> Self:
    """Rename columns, ``rename(hwy="highway_mpg")`` or ``rename({"hwy": "highway_mpg"})``."""
    return self.__class__(RenameNode({**(mapping or {}), **renames}, self.node))

  def mutate(self, **columns: Expression | Any) -> Self:
    """Add new columns, or replace existing ones, computed by expressions.

    Values that are not expressions are repeated on every row::

      df.mutate(avg_mpg=(col("cty") + col("hwy")) / 2, source="epa")
    """
    project = {
      name: expr if isinstance(expr, Expression) else FunctionCallExpression(_constant, expr)
      for name, expr in columns.items()
    }
    return self.__class__(ProjectNode(None, project, self.node))

  def mutate_across(self, columns: list[str], func: Callable, name_template: str = "{column}") -> Self:
    """Apply the same function to multiple columns.

    With the default ``name_template`` the columns are replaced,
    with something like ``"{column}_log"`` new ones are added.
    """
    across = AcrossProjection(columns, func, name_template)
    return self.__class__(ProjectNode(None, across.expressions(), self.node))

  def apply(self, column: str, func: Callable, into: str | None = None) -> Self:
    """Apply a Python function to each value of a column.

    :param column: The column providing the values.
    :param func: Function called with each non missing value.
    :param into: Name of the resulting column, by default replaces ``column``.
    """
    return self.__class__(ProjectNode(None, {into or column: MapExpression(func, column)}, self.node))

  def row_aggregate(self, name: str, kind: str, columns: list[str], skip_nulls: bool = False) -> Self:
    """Add a column combining multiple columns row by row.

    ``kind`` is one of ``sum``, ``mean``, ``min``, ``max``, see
    :class:`dataidioms.compute.RowAggregateExpression`.
    """
    expression = RowAggregateExpression(kind, columns, skip_nulls=skip_nulls)
    return self.__class__(ProjectNode(None, {name: expression}, self.node))

  def arrange(self, *keys: str, descending: bool | list[bool] = False) -> Self:
    """Sort rows by one or more columns.

    :param keys: The columns to sort by.
    :param descending: A single flag for all keys or one flag per key.
    """
    if isinstance(descending, bool):
      descending = [descending] * len(keys)
    return self.__class__(SortNode(list(keys), descending, self.node))

  def head(self, n: int = 5) -> Self:
    """Only the first ``n`` rows."""
    return self.slice(0, n)

  def slice(self, offset: int, length: int) -> Self:
    """Only ``length`` rows starting at ``offset``."""
    return self.__class__(SliceNode(offset, length, self.node))

  def distinct(self, *columns: str) -> Self:
    """Unique combinations of values of the given columns (all by default)."""
    return self.__class__(DistinctNode(list(columns) or None, self.node))

  # Missing values

  def drop_nulls(self, *columns: str) -> Self:
    """Drop rows with missing values in the given columns (any by default)."""
    return self.__class__(DropNullsNode(list(columns) or None, self.node))

  def fill_nulls(self, values: dict[str, Any] | None = None, **fills: Any) -> Self:
    """Replace missing values, ``fill_nulls(reviews_per_month=0)``."""
    return self.__class__(FillNullsNode({**(values or {}), **fills}, self.node))

  def impute(self, column: str, stat: str = "mean") -> Self:
    """Replace the missing values of a column with one of its statistics.

    The statistic, ``mean`` or ``median`` usually, is computed
    right away on the current data.
    """
    value = explore.summary_stat(self.to_arrow(), column, stat)
    log.debug("Imputing missing values of %s with %s=%s", column, stat, value)
    if value is None:
      return self
    return self.fill_nulls({column: value})

  # Grouping and summarizing

  def group_by(self, *keys: str) -> "GroupedDataframe":
    """Group the rows by the values of the given columns.

    The returned object must be summarized to get back a Dataframe.
    """
    return GroupedDataframe(self, list(keys))

  def summarize(self, **aggregations: AggregationSpec) -> Self:
    """Compute statistics over all the rows, giving a single row."""
    return GroupedDataframe(self, []).summarize(**aggregations)

  def count(self, *columns: str, sort: bool = False, name: str = "n") -> Self:
    """Count the rows for each combination of values of ``columns``.

    :param sort: Put the most frequent combinations first.
    :param name: Name of the column with the counts.
    """
    counted = self.group_by(*columns).summarize(**{name: CountAggregation()})
    if sort:
      counted = counted.arrange(name, descending=True)
    return counted

  # Combining

  def join(self, other: "Dataframe", on: str | list[str], right_on: str | list[str] | None = None,
           how: str = "inner") -> Self:
    """Join with another dataframe on matching keys.

    :param other: The dataframe to join with.
    :param on: The key columns of this dataframe.
    :param right_on: The key columns of ``other``, by default same as ``on``.
    :param how: ``inner``, ``left``, ``right`` or ``outer``.
    """
    left_keys = [on] if isinstance(on, str) else list(on)
    if right_on is None:
      right_keys = left_keys
    else:
      right_keys = [right_on] if isinstance(right_on, str) else list(right_on)
    return self.__class__(JoinNode(left_keys, right_keys, self.node, other.node, how=how))

  def pivot_longer(self, columns: list[str], names_to: str = "name", values_to: str = "value") -> Self:
    """Turn columns into rows, see :class:`dataidioms.compute.PivotLongerNode`."""
    return self.__class__(PivotLongerNode(columns, names_to, values_to, self.node))

  def pivot_wider(self, id_columns: list[str], names_from: str, values_from: str) -> Self:
    """Turn rows into columns, see :class:`dataidioms.compute.PivotWiderNode`."""
    return self.__class__(PivotWiderNode(id_columns, names_from, values_from, self.node))

  # Getting data out

  def collect(self) -> Self:
    """Collect all data of the dataframe in memory.

    Returns a new Dataframe that has all data from the
    previous dataframe eagerly loaded in memory.
    """
    return self.__class__(self.to_arrow())

  def to_arrow(self) -> pa.Table:
    """Collect all the data and return a pyarrow.Table"""
    return self.node.collect_table()

  def to_pandas(self) -> Any:
    """Collect all the data into a ``pandas.DataFrame``, requires pandas."""
    return self.to_arrow().to_pandas()

  def to_csv(self, path: str) -> None:
    """Save the data to a CSV file."""
    io.write_csv(self.to_arrow(), path)

  def to_parquet(self, path: str) -> None:
    """Save the data to a Parquet file."""
    io.write_parquet(self.to_arrow(), path)

  def describe(self) -> pa.Table:
    """Summary statistics of the numeric columns, see :func:`dataidioms.explore.describe`."""
    return explore.describe(self.to_arrow())

  def glimpse(self) -> str:
    """Preview of every column, see :func:`dataidioms.explore.glimpse`."""
    return explore.glimpse(self.to_arrow())

  def explain(self) -> str:
    """The plan that will be executed to produce the data."""
    return str(self.node)

  def __str__(self) -> str:
    return tabulate(self.to_arrow())


class GroupedDataframe:
  """A Dataframe whose rows are grouped by some columns.

  Created by :meth:`Dataframe.group_by`, it only allows
  to summarize the groups.

  >>> from dataidioms import datasets
  >>> from dataidioms.dataframe import Dataframe
  >>> from dataidioms.compute import MeanAggregation
  >>> df = Dataframe(datasets.fuel_economy()).group_by("drv").summarize(
  ...   mean_cty=MeanAggregation("cty"), cars=("n", None)
  ... )
  >>> df.to_arrow().column("cars").to_pylist()
  [9, 4, 3]
  """
  def __init__(self, dataframe: Dataframe, keys: list[str]) -> None:
    self.dataframe = dataframe
    self.keys = keys

  def summarize(self, **aggregations: AggregationSpec) -> Dataframe:
    """Compute one row of statistics for each group.

    Each keyword is the name of a resulting column, the value is
    either an :class:`dataidioms.compute.aggregate.Aggregation`
    or a ``(statistic_name, column)`` tuple like ``("mean", "hwy")``.
    """
    if not aggregations:
      raise ValueError("At least one aggregation is required")
    node = AggregateNode(
      self.keys,
      {name: _as_aggregation(spec) for name, spec in aggregations.items()},
      self.dataframe.node,
    )
    return self.dataframe.__class__(node)

  def count(self, name: str = "n") -> Dataframe:
    """Number of rows in each group."""
    return self.summarize(**{name: CountAggregation()})


def _constant(value: Any) -> pa.Scalar:
  return pa.scalar(value)
