"""Exploring a dataset.

Before any analysis it's worth getting to know the data:
how many rows and columns it has, what type each column is,
what typical values look like, and how many are missing.

The idioms of this module are the ones usually run
right after loading a dataset:

>>> from dataidioms import datasets
>>> from dataidioms.explore import glimpse
>>> print(glimpse(datasets.fuel_economy(), width=60))  # doctest: +ELLIPSIS
Rows: 16
Columns: 9
$ manufacturer <string> ...
...

Then summary statistics for the numeric columns
(:func:`describe`, :func:`summary_stat`),
the missing values (:func:`missing_counts`),
and how the categorical columns are distributed
(:func:`value_counts`, :func:`proportions`, :func:`crosstab`).

All the results are :class:`pyarrow.Table` objects,
which can be printed with :func:`dataidioms.utils.tabulate.tabulate`
or further transformed like any other data.
"""

from typing import Any

import pyarrow as pa
import pyarrow.compute as pc

from .compute.aggregate import AGGREGATIONS, AggregateNode, CountAggregation
from .compute.base import as_table, require_columns
from .compute.datasources import TableDataSource
from .compute.reshape import PivotWiderNode
from .utils.tabulate import format_value


def is_numeric(datatype: pa.DataType) -> bool:
    """If a column of ``datatype`` can be used in numeric statistics."""
    return (
        pa.types.is_integer(datatype)
        or pa.types.is_floating(datatype)
        or pa.types.is_decimal(datatype)
    )


def glimpse(data: pa.Table | pa.RecordBatch, width: int = 80) -> str:
    """Transposed preview: one line per column with its type and first values.

    Datasets with many columns don't fit on screen when printed
    as a table, glimpsing them shows every column instead.

    :param data: The data to preview.
    :param width: Lines are truncated to this many characters.
    """
    table = as_table(data)
    name_width = max((len(name) for name in table.column_names), default=0)
    lines = [f"Rows: {table.num_rows}", f"Columns: {table.num_columns}"]
    for field in table.schema:
        values = table.column(field.name).slice(0, width).to_pylist()
        preview = ", ".join(format_value(v) for v in values)
        line = f"$ {field.name.ljust(name_width)} <{field.type}> {preview}"
        if len(line) > width:
            line = line[: width - 3] + "..."
        lines.append(line)
    return "\n".join(lines)


def head(data: pa.Table | pa.RecordBatch, n: int = 5) -> pa.Table:
    """The first ``n`` rows."""
    return as_table(data).slice(0, n)


def summary_stat(
    data: pa.Table | pa.RecordBatch, column: str, stat: str, skip_nulls: bool = True
) -> Any:
    """Compute one statistic of a column.

    :param data: The data containing the column.
    :param column: The column to summarize.
    :param stat: Name of the statistic, any of the aggregations
                 in :data:`dataidioms.compute.AGGREGATIONS`
                 like ``mean``, ``median``, ``sd``, ``n``.
    :param skip_nulls: Ignore missing values, when ``False`` a missing
                       value makes the result missing.

    >>> import pyarrow as pa
    >>> data = pa.table({"aroma": [7.5, 8.0, None]})
    >>> summary_stat(data, "aroma", "mean")
    7.75
    >>> summary_stat(data, "aroma", "mean", skip_nulls=False) is None
    True
    """
    try:
        aggregation = AGGREGATIONS[stat](column, skip_nulls=skip_nulls)
    except KeyError:
        raise ValueError(f"Unknown statistic {stat!r}, expected one of {list(AGGREGATIONS)}") from None
    table = as_table(data)
    require_columns(table, [column])
    result = aggregation.compute(table)
    if isinstance(result, pa.Scalar):
        return result.as_py()
    return result


DESCRIBE_SCHEMA = pa.schema(
    [
        ("column", pa.string()),
        ("count", pa.int64()),
        ("missing", pa.int64()),
        ("mean", pa.float64()),
        ("std", pa.float64()),
        ("min", pa.float64()),
        ("q1", pa.float64()),
        ("median", pa.float64()),
        ("q3", pa.float64()),
        ("max", pa.float64()),
    ]
)


def describe(data: pa.Table | pa.RecordBatch, columns: list[str] | None = None) -> pa.Table:
    """Summary statistics of the numeric columns.

    Emits one row per column with the count of non missing values,
    the count of missing values, mean, standard deviation, minimum,
    quartiles and maximum. Missing values are ignored
    by all the statistics.

    :param data: The data to describe.
    :param columns: The columns to describe, by default all the numeric ones.
                    Requesting a column that is not numeric is a ``TypeError``.

    >>> import pyarrow as pa
    >>> from dataidioms.utils.tabulate import tabulate
    >>> data = pa.table({"model": ["a", "b", "c", "d"], "hwy": [20, 30, 40, None]})
    >>> print(tabulate(describe(data)))
    column | count | missing | mean  | std   | min   | q1    | median | q3    | max
    ------ | ----- | ------- | ----- | ----- | ----- | ----- | ------ | ----- | -----
    hwy    | 3     | 1       | 30.00 | 10.00 | 20.00 | 25.00 | 30.00  | 35.00 | 40.00
    """
    table = as_table(data)
    if columns is None:
        columns = [f.name for f in table.schema if is_numeric(f.type)]
    else:
        require_columns(table, columns)
        for name in columns:
            if not is_numeric(table.schema.field(name).type):
                raise TypeError(f"Column {name!r} of type {table.schema.field(name).type} is not numeric")

    rows = []
    for name in columns:
        values = pc.cast(table.column(name), pa.float64())
        quartiles = pc.quantile(values, q=[0.25, 0.5, 0.75], interpolation="linear").to_pylist()
        if len(quartiles) != 3:
            quartiles = [None, None, None]
        rows.append(
            {
                "column": name,
                "count": pc.count(values, mode="only_valid").as_py(),
                "missing": pc.count(values, mode="only_null").as_py(),
                "mean": pc.mean(values).as_py(),
                "std": pc.stddev(values, ddof=1).as_py(),
                "min": pc.min(values).as_py(),
                "q1": quartiles[0],
                "median": quartiles[1],
                "q3": quartiles[2],
                "max": pc.max(values).as_py(),
            }
        )
    return pa.Table.from_pylist(rows, schema=DESCRIBE_SCHEMA)


def missing_counts(data: pa.Table | pa.RecordBatch) -> pa.Table:
    """How many values are missing in each column.

    >>> import pyarrow as pa
    >>> data = pa.table({"variety": ["Bourbon", None], "aroma": [7.5, 7.2]})
    >>> missing_counts(data).to_pydict()
    {'column': ['variety', 'aroma'], 'missing': [1, 0], 'percent': [50.0, 0.0]}
    """
    table = as_table(data)
    missing = [table.column(name).null_count for name in table.column_names]
    percent = [
        (count * 100 / table.num_rows) if table.num_rows else 0.0 for count in missing
    ]
    return pa.table(
        {
            "column": pa.array(table.column_names, pa.string()),
            "missing": pa.array(missing, pa.int64()),
            "percent": pa.array(percent, pa.float64()),
        }
    )


def value_counts(data: pa.Table | pa.RecordBatch, column: str, dropna: bool = True) -> pa.Table:
    """How many times each value of a column appears.

    The most frequent values come first, values that
    appear the same number of times are in the order
    they first appear in the data.

    :param data: The data containing the column.
    :param column: The column whose values must be counted.
    :param dropna: Ignore missing values, when ``False``
                   they are counted as a value of their own.

    >>> import pyarrow as pa
    >>> data = pa.table({"drv": ["f", "4", "f", None, "r", "4", "f"]})
    >>> value_counts(data, "drv").to_pydict()
    {'drv': ['f', '4', 'r'], 'count': [3, 2, 1]}
    """
    table = as_table(data)
    require_columns(table, [column])
    values = table.column(column)
    counted = pc.value_counts(pc.drop_null(values))
    counts = pa.table(
        {
            column: counted.field("values"),
            "count": pc.cast(counted.field("counts"), pa.int64()),
        }
    )
    if not dropna and values.null_count:
        missing = pa.table(
            {
                column: pa.array([None], values.type),
                "count": pa.array([values.null_count], pa.int64()),
            }
        )
        # The missing values take the place of their first appearance,
        # after the distinct values that were seen before it.
        first_missing = pc.index(pc.is_null(values), True).as_py()
        position = len(pc.unique(pc.drop_null(values.slice(0, first_missing))))
        counts = pa.concat_tables([counts.slice(0, position), missing, counts.slice(position)])
    order = pc.sort_indices(counts, sort_keys=[("count", "descending")])
    return counts.take(order)


def proportions(data: pa.Table | pa.RecordBatch, column: str, dropna: bool = True) -> pa.Table:
    """Like :func:`value_counts` with the share of each value.

    >>> import pyarrow as pa
    >>> data = pa.table({"room_type": ["Private room", "Entire home/apt", "Private room", "Private room"]})
    >>> proportions(data, "room_type").column("proportion").to_pylist()
    [0.75, 0.25]
    """
    counts = value_counts(data, column, dropna=dropna)
    total = pc.sum(counts.column("count")).as_py() or 0
    if total == 0:
        shares = pa.array([], pa.float64())
    else:
        shares = pc.divide(pc.cast(counts.column("count"), pa.float64()), float(total))
    return counts.append_column("proportion", shares)


def crosstab(data: pa.Table | pa.RecordBatch, rows: str, columns: str) -> pa.Table:
    """Count the rows for each combination of two categorical columns.

    Each distinct value of ``rows`` becomes a row, each distinct value
    of ``columns`` becomes a column. Combinations that never appear
    are counted as 0. Rows with missing values in either column
    are not counted.

    >>> import pyarrow as pa
    >>> data = pa.table({
    ...     "drv": ["f", "4", "f", "4"],
    ...     "class": ["compact", "suv", "compact", "pickup"],
    ... })
    >>> crosstab(data, "class", "drv").to_pydict()
    {'class': ['compact', 'suv', 'pickup'], 'f': [2, 0, 0], '4': [0, 1, 1]}
    """
    table = as_table(data)
    require_columns(table, [rows, columns])
    table = pc.drop_null(table.select([rows, columns]))
    counts = AggregateNode([rows, columns], {"n": CountAggregation()}, TableDataSource(table))
    wide = PivotWiderNode([rows], columns, "n", counts).collect_table()
    filled = {
        name: wide.column(name) if name == rows else pc.fill_null(wide.column(name), 0)
        for name in wide.column_names
    }
    return pa.table(filled)


def distinct_values(data: pa.Table | pa.RecordBatch, column: str) -> list[Any]:
    """The distinct values of a column, in order of first appearance."""
    table = as_table(data)
    require_columns(table, [column])
    return pc.unique(table.column(column)).to_pylist()
