"""Choosing, renaming and creating columns.

Datasets often come with more columns than needed
for an analysis and with names that are not
convenient to type. This module implements selecting
columns, creating new columns out of expressions
(what is frequently called *mutate*) and renaming them.
"""

import pyarrow as pa

from .base import QueryPlanNode, require_columns
from .expressions import Expression


class ProjectNode(QueryPlanNode):
    """Select specific columns and compute new ones.

    >>> import pyarrow as pa
    >>> import pyarrow.compute as pc
    >>> from dataidioms.compute import col, FunctionCallExpression, TableDataSource
    >>> data = pa.record_batch({"model": ["a4", "civic"], "cty": [18, 24], "hwy": [29, 32]})
    >>> avg = FunctionCallExpression(pc.divide, FunctionCallExpression(pc.add, col("cty"), col("hwy")), 2)
    >>> next(ProjectNode(["model"], {"avg_mpg": avg}, TableDataSource(data)).batches()).to_pydict()
    {'model': ['a4', 'civic'], 'avg_mpg': [23, 28]}
    """

    def __init__(
        self,
        select: list[str] | None,
        project: dict[str, Expression] | None,
        child: QueryPlanNode,
    ) -> None:
        """
        :param select: The list of column names to keep.
                       ``None`` keeps all columns,
                       ``[]`` keeps only the projected columns.
        :param project: The ``{name: Expression}`` of the columns to compute.
                        When the name of an existing column is used,
                        that column is replaced in place.
        :param child: The node emitting the data to be projected.
        """
        self.select = select
        self.project = project or {}
        self.child = child

    def __str__(self) -> str:
        return f"ProjectNode(select={self.select}, project={self.project}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        for batch in self.child.batches():
            if self.select is not None:
                require_columns(batch, self.select)

            # Expressions are computed on the original columns,
            # so replacing a column doesn't affect the others.
            computed = {name: expr.apply(batch) for name, expr in self.project.items()}
            for name, values in computed.items():
                if isinstance(values, pa.Scalar):
                    values = pa.array([values.as_py()] * batch.num_rows, type=values.type)
                if name in batch.column_names:
                    batch = batch.set_column(batch.schema.get_field_index(name), name, values)
                else:
                    batch = batch.append_column(name, values)

            if self.select is not None:
                keep = self.select + [n for n in self.project if n not in self.select]
                batch = batch.select(keep)
            yield batch


class RenameNode(QueryPlanNode):
    """Rename columns, keeping their position.

    >>> import pyarrow as pa
    >>> from dataidioms.compute import TableDataSource
    >>> data = pa.record_batch({"hwy": [29], "cty": [18]})
    >>> next(RenameNode({"hwy": "highway_mpg"}, TableDataSource(data)).batches()).column_names
    ['highway_mpg', 'cty']
    """

    def __init__(self, mapping: dict[str, str], child: QueryPlanNode) -> None:
        """
        :param mapping: ``{old_name: new_name}`` for the columns to rename.
        :param child: The node emitting the data.
        """
        self.mapping = mapping
        self.child = child

    def __str__(self) -> str:
        return f"RenameNode({self.mapping}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        for batch in self.child.batches():
            require_columns(batch, list(self.mapping))
            yield batch.rename_columns([self.mapping.get(n, n) for n in batch.column_names])
