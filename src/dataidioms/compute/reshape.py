"""Reshaping between wide and long data.

The same information can be laid out in two ways.
*Wide*, one column per measure::

    institution, revenue_men, revenue_women
    Alpha,       100,         80

or *long*, one row per measure::

    institution, gender,        revenue
    Alpha,       revenue_men,   100
    Alpha,       revenue_women, 80

Plotting and grouping tools usually prefer the long layout,
while people usually prefer reading the wide one.
:class:`PivotLongerNode` and :class:`PivotWiderNode` convert
from one to the other.
"""

import pyarrow as pa
import pyarrow.compute as pc

from .base import QueryPlanNode, require_columns


class PivotLongerNode(QueryPlanNode):
    """Turn columns into rows.

    All columns not being pivoted are repeated for each
    of the generated rows.

    >>> import pyarrow as pa
    >>> from dataidioms.compute import TableDataSource
    >>> data = pa.table({"institution": ["Alpha"], "revenue_men": [100], "revenue_women": [80]})
    >>> longer = PivotLongerNode(["revenue_men", "revenue_women"], "gender", "revenue", TableDataSource(data))
    >>> next(longer.batches()).to_pydict()
    {'institution': ['Alpha', 'Alpha'], 'gender': ['revenue_men', 'revenue_women'], 'revenue': [100, 80]}
    """

    def __init__(self, columns: list[str], names_to: str, values_to: str, child: QueryPlanNode) -> None:
        """
        :param columns: The columns to turn into rows.
        :param names_to: Name of the column that will hold the original column names.
        :param values_to: Name of the column that will hold the values.
        :param child: The node emitting the data.
        """
        if not columns:
            raise ValueError("At least one column is required to pivot")
        self.columns = columns
        self.names_to = names_to
        self.values_to = values_to
        self.child = child

    def __str__(self) -> str:
        return (
            f"PivotLongerNode(columns={self.columns}, names_to={self.names_to}, "
            f"values_to={self.values_to}, child={self.child})"
        )

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        for batch in self.child.batches():
            require_columns(batch, self.columns)
            value_type = common_type([batch.schema.field(c).type for c in self.columns])
            id_columns = [c for c in batch.column_names if c not in self.columns]

            n_rows, n_columns = batch.num_rows, len(self.columns)
            # Row major: all the pivoted values of the first row, then the second row...
            row_indices = pa.array([i for i in range(n_rows) for _ in range(n_columns)], pa.int64())
            value_indices = pa.array(
                [j * n_rows + i for i in range(n_rows) for j in range(n_columns)], pa.int64()
            )
            stacked = pa.concat_arrays(
                [pc.cast(batch.column(c), value_type) for c in self.columns]
            )

            longer = {c: batch.column(c).take(row_indices) for c in id_columns}
            longer[self.names_to] = pa.array(self.columns * n_rows, pa.string())
            longer[self.values_to] = stacked.take(value_indices)
            yield pa.RecordBatch.from_pydict(longer)


class PivotWiderNode(QueryPlanNode):
    """Turn rows into columns.

    One row is emitted for each distinct combination of the ``id_columns``,
    and one column for each distinct value of ``names_from``.
    Combinations that don't appear in the data are missing values.

    >>> import pyarrow as pa
    >>> from dataidioms.compute import TableDataSource
    >>> data = pa.table({
    ...     "institution": ["Alpha", "Alpha", "Beta"],
    ...     "gender": ["men", "women", "men"],
    ...     "revenue": [100, 80, 70],
    ... })
    >>> wider = PivotWiderNode(["institution"], "gender", "revenue", TableDataSource(data))
    >>> next(wider.batches()).to_pydict()
    {'institution': ['Alpha', 'Beta'], 'men': [100, 70], 'women': [80, None]}
    """

    def __init__(self, id_columns: list[str], names_from: str, values_from: str, child: QueryPlanNode) -> None:
        """
        :param id_columns: The columns identifying each output row.
        :param names_from: The column whose values become the new column names.
        :param values_from: The column providing the values of the new columns.
        :param child: The node emitting the data.
        """
        self.id_columns = id_columns
        self.names_from = names_from
        self.values_from = values_from
        self.child = child

    def __str__(self) -> str:
        return (
            f"PivotWiderNode(id_columns={self.id_columns}, names_from={self.names_from}, "
            f"values_from={self.values_from}, child={self.child})"
        )

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        table = self.child.collect_table()
        require_columns(table, self.id_columns + [self.names_from, self.values_from])

        ids = list(zip(*(table.column(c).to_pylist() for c in self.id_columns))) or [()] * table.num_rows
        names = [str(n) for n in table.column(self.names_from).to_pylist()]
        values = table.column(self.values_from).to_pylist()

        rows: dict[tuple, dict[str, object]] = {}
        new_columns: list[str] = []
        for rowid, name, value in zip(ids, names, values):
            if name in self.id_columns:
                raise ValueError(f"Pivoted column {name!r} clashes with an id column")
            if name not in new_columns:
                new_columns.append(name)
            cells = rows.setdefault(rowid, {})
            if name in cells:
                raise ValueError(f"Multiple values for {rowid} and {name!r}, aggregate them first")
            cells[name] = value

        value_type = table.schema.field(self.values_from).type
        fields = [table.schema.field(c) for c in self.id_columns]
        fields += [pa.field(name, value_type) for name in new_columns]
        data = {c: [rowid[i] for rowid in rows] for i, c in enumerate(self.id_columns)}
        data.update({name: [cells.get(name) for cells in rows.values()] for name in new_columns})
        yield pa.RecordBatch.from_pydict(data, schema=pa.schema(fields))


def common_type(types: list[pa.DataType]) -> pa.DataType:
    """Find a type able to hold values of all ``types``.

    Numbers of different kinds are promoted to float64,
    anything else must have the same type.
    """
    if all(t == types[0] for t in types):
        return types[0]
    if all(pa.types.is_integer(t) or pa.types.is_floating(t) for t in types):
        return pa.float64()
    raise ValueError(f"Can't combine columns of types {[str(t) for t in types]}")
