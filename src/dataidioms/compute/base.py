"""Building blocks of every idiom.

Every idiom in the guide is a step applied to tabular data:
load it, filter it, group it, summarize it...

Each step is represented by a node, and the steps applied
one after the other form a plan. Nodes receive
:class:`pyarrow.RecordBatch` objects from the previous
step and emit new ones for the next step.

Where a node needs to compute something out of a batch,
like a predicate for a filter or a new column,
it relies on an :class:`Expression`.
"""

import abc
from typing import Any, Iterator

import pyarrow as pa


class ColumnNotFoundError(KeyError):
    """A column that does not exist in the data was referenced."""

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(name)
        self.name = name
        self.available = available

    def __str__(self) -> str:
        return f"Column {self.name!r} not found, available columns: {self.available}"


def require_columns(schema_or_batch: Any, columns: list[str]) -> None:
    """Ensure the given columns are part of a schema, table or batch.

    Raises :class:`ColumnNotFoundError` for the first missing column.
    """
    schema = schema_or_batch if isinstance(schema_or_batch, pa.Schema) else schema_or_batch.schema
    available = list(schema.names)
    for name in columns:
        if name not in available:
            raise ColumnNotFoundError(name, available)


def as_table(data: pa.Table | pa.RecordBatch) -> pa.Table:
    """Accept both tables and record batches where a whole table is needed."""
    if isinstance(data, pa.RecordBatch):
        return pa.Table.from_batches([data])
    return data


class QueryPlanNode(abc.ABC):
    """A step of an analysis.

    Steps are chained by giving each node the previous
    one as its ``child``. So loading a CSV file and keeping
    only some rows looks like::

        FilterNode(predicate, child=CSVDataSource("cars.csv"))

    Nodes that combine multiple inputs, like joins,
    simply accept more than one child.

    Subclasses must implement :meth:`batches`, which is
    where the work happens, and ``__str__`` so that a
    plan can be printed and understood.
    """

    RecordBatchesGenerator = Iterator[pa.RecordBatch]

    @abc.abstractmethod
    def batches(self) -> Iterator[pa.RecordBatch]:
        """Emit the data resulting from this step.

        Usually consumes the batches of the child node,
        transforms them and yields the result.
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the step."""
        ...

    def collect_table(self) -> pa.Table:
        """Run the plan up to this node and gather the result in a Table.

        Steps like sorting or grouping need to see all
        the rows at once, so they use this to materialise
        their input.
        """
        batches = list(self.batches())
        if not batches:
            raise ValueError(f"{self} emitted no data")
        return pa.Table.from_batches(batches)


class Expression(abc.ABC):
    """Compute a column out of a batch of data.

    Applying an expression to a :class:`pyarrow.RecordBatch`
    always produces a :class:`pyarrow.Array`, one value per row.
    For example the ``cty + hwy`` expression would give back
    the sum of the city and highway mileage for each car.
    """

    @abc.abstractmethod
    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        """Compute the expression over ``batch``."""
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the expression."""
        ...

    # Operators build new expressions, so that ``col("hwy") > 30``
    # can be written instead of calling ``pc.greater`` explicitly.
    __hash__ = object.__hash__

    def _call(self, funcname: str, *args: Any) -> "Expression":
        from . import expressions, operators

        return expressions.FunctionCallExpression(getattr(operators, funcname), self, *args)

    def __eq__(self, other: Any) -> "Expression":  # type: ignore[override]
        return self._call("equal", other)

    def __ne__(self, other: Any) -> "Expression":  # type: ignore[override]
        return self._call("not_equal", other)

    def __lt__(self, other: Any) -> "Expression":
        return self._call("less", other)

    def __le__(self, other: Any) -> "Expression":
        return self._call("less_equal", other)

    def __gt__(self, other: Any) -> "Expression":
        return self._call("greater", other)

    def __ge__(self, other: Any) -> "Expression":
        return self._call("greater_equal", other)

    def __add__(self, other: Any) -> "Expression":
        return self._call("add", other)

    def __sub__(self, other: Any) -> "Expression":
        return self._call("subtract", other)

    def __mul__(self, other: Any) -> "Expression":
        return self._call("multiply", other)

    def __truediv__(self, other: Any) -> "Expression":
        return self._call("true_divide", other)

    def __and__(self, other: Any) -> "Expression":
        return self._call("and_kleene", other)

    def __or__(self, other: Any) -> "Expression":
        return self._call("or_kleene", other)

    def __invert__(self) -> "Expression":
        return self._call("invert")

    def is_null(self) -> "Expression":
        """``true`` where the value is missing."""
        return self._call("is_null")

    def is_in(self, values: list[Any]) -> "Expression":
        """``true`` where the value is one of ``values``."""
        return self._call("is_in", values)


class ColumnRef(Expression):
    """Reference to a column by its name.

    >>> import pyarrow as pa
    >>> batch = pa.record_batch({"hwy": [29, 31]})
    >>> col("hwy").apply(batch).to_pylist()
    [29, 31]
    """

    def __init__(self, name: str) -> None:
        """
        :param name: The name of the column being referenced.
        """
        self.name = name

    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        require_columns(batch, [self.name])
        return batch.column(self.name)

    def __str__(self) -> str:
        return f"ColumnRef({self.name})"


class Literal(Expression):
    """A constant value.

    Compute functions broadcast scalars against arrays,
    so a literal is applied as a :class:`pyarrow.Scalar`
    and not repeated for each row.
    """

    def __init__(self, value: Any) -> None:
        self.value = value

    def apply(self, batch: pa.RecordBatch) -> pa.Scalar:
        return pa.scalar(self.value)

    def __str__(self) -> str:
        return f"Literal({self.value!r})"


col = ColumnRef
lit = Literal
