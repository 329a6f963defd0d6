"""Computing new values out of existing columns.

Most transformations boil down to calling a function
on one or more columns: adding the city and highway mileage,
checking if the price is above a threshold, converting
a rating to a label.

:class:`FunctionCallExpression` calls a :mod:`pyarrow.compute`
function (or any function accepting arrays) on its arguments.

Applying the same operation to many columns, or combining
many columns together row by row, is the subject of the
"applying functions across columns" idioms:

* :class:`AcrossProjection` applies one function to each of a set of columns.
* :class:`RowAggregateExpression` reduces a set of columns to one value per row.
* :class:`MapExpression` applies a plain Python function to each value.

>>> import pyarrow as pa
>>> import pyarrow.compute as pc
>>> batch = pa.record_batch({"revenue_men": [10, 20], "revenue_women": [5, None]})
>>> RowAggregateExpression("sum", ["revenue_men", "revenue_women"], skip_nulls=True).apply(batch).to_pylist()
[15, 20]
"""

import functools
from typing import Any, Callable

import pyarrow as pa
import pyarrow.compute as pc

from .. import utils
from .base import ColumnRef, Expression


def apply_expression_if_needed(batch: pa.RecordBatch, o: Any) -> Any:
    """Apply ``o`` to the batch when it is an expression.

    Anything else is considered to be already data,
    like a literal number or string, and returned as is.
    """
    if isinstance(o, Expression):
        o = o.apply(batch)
    return o


class FunctionCallExpression(Expression):
    """Call a compute function on its arguments.

    For example to compute the average mileage of each car::

        FunctionCallExpression(pc.divide, FunctionCallExpression(pc.add, col("cty"), col("hwy")), 2)
    """

    def __init__(self, func: Callable, *args: Any) -> None:
        """
        :param func: The function accepting the arguments.
        :param args: The arguments for the function, expressions or values.
        """
        self.func = func
        self.args = args

    def __str__(self) -> str:
        func_qualname = utils.inspect.get_qualname(self.func)
        return f"{func_qualname}({','.join(map(str, self.args))})"

    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        args = tuple(apply_expression_if_needed(batch, arg) for arg in self.args)
        return self.func(*args)


class MapExpression(Expression):
    """Apply a Python function to every value of a column.

    This is the slowest way to compute a column, as each
    value has to be converted to a Python object, but it
    allows to use any Python function. Missing values
    are not passed to the function and stay missing.

    >>> import pyarrow as pa
    >>> batch = pa.record_batch({"room_type": ["Entire home/apt", None]})
    >>> MapExpression(str.upper, "room_type").apply(batch).to_pylist()
    ['ENTIRE HOME/APT', None]
    """

    def __init__(self, func: Callable, column: str | Expression) -> None:
        self.func = func
        self.column = ColumnRef(column) if isinstance(column, str) else column

    def __str__(self) -> str:
        return f"map({utils.inspect.get_qualname(self.func)}, {self.column})"

    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        values = self.column.apply(batch).to_pylist()
        return pa.array([None if v is None else self.func(v) for v in values])


class RowAggregateExpression(Expression):
    """Reduce multiple columns to a single value for each row.

    Supported reductions are ``sum``, ``mean``, ``min`` and ``max``.

    When ``skip_nulls`` is ``False`` a missing value in any of the
    columns makes the result for that row missing. When it is ``True``
    missing values are ignored and the result is missing only if
    all the values in the row are.
    """

    KINDS = ("sum", "mean", "min", "max")

    def __init__(self, kind: str, columns: list[str], skip_nulls: bool = False) -> None:
        """
        :param kind: The reduction to apply, one of ``sum``, ``mean``, ``min``, ``max``.
        :param columns: The columns to combine.
        :param skip_nulls: Ignore missing values instead of propagating them.
        """
        if kind not in self.KINDS:
            raise ValueError(f"Unsupported row aggregation {kind!r}, expected one of {self.KINDS}")
        if not columns:
            raise ValueError("Row aggregation requires at least one column")
        self.kind = kind
        self.columns = columns
        self.skip_nulls = skip_nulls

    def __str__(self) -> str:
        return f"row_{self.kind}({','.join(self.columns)}, skip_nulls={self.skip_nulls})"

    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        arrays = [ColumnRef(name).apply(batch) for name in self.columns]
        if self.kind in ("min", "max"):
            func = pc.min_element_wise if self.kind == "min" else pc.max_element_wise
            return func(*arrays, skip_nulls=self.skip_nulls)

        if not self.skip_nulls:
            total = functools.reduce(pc.add, arrays)
            if self.kind == "mean":
                return pc.divide(pc.cast(total, pa.float64()), len(arrays))
            return total

        valid_counts = functools.reduce(
            pc.add, [pc.cast(pc.is_valid(a), pa.int64()) for a in arrays]
        )
        total = functools.reduce(pc.add, [pc.fill_null(a, 0) for a in arrays])
        # Rows where every value was missing stay missing.
        all_missing = pc.equal(valid_counts, 0)
        total = pc.if_else(all_missing, pa.scalar(None, total.type), total)
        if self.kind == "mean":
            return pc.divide(pc.cast(total, pa.float64()), pc.cast(valid_counts, pa.float64()))
        return total


class AcrossProjection:
    """Apply the same function to multiple columns.

    Not an expression by itself, but a factory of expressions:
    one for each column, named after ``name_template``.

    >>> import pyarrow.compute as pc
    >>> across = AcrossProjection(["cty", "hwy"], pc.sqrt, "{column}_sqrt")
    >>> sorted(across.expressions())
    ['cty_sqrt', 'hwy_sqrt']
    """

    def __init__(self, columns: list[str], func: Callable, name_template: str = "{column}") -> None:
        """
        :param columns: The columns the function must be applied to.
        :param func: A function accepting a single array.
        :param name_template: Name of the resulting columns, ``{column}``
                              is replaced by the source column name.
                              The default replaces the columns in place.
        """
        self.columns = columns
        self.func = func
        self.name_template = name_template

    def __str__(self) -> str:
        return f"across({self.columns}, {utils.inspect.get_qualname(self.func)})"

    def expressions(self) -> dict[str, Expression]:
        """The ``{new_column_name: expression}`` for each column."""
        return {
            self.name_template.format(column=name): FunctionCallExpression(self.func, ColumnRef(name))
            for name in self.columns
        }
