"""The steps of an analysis.

Each idiom of the guide that transforms data is
a node of a plan. Nodes are chained by passing
the previous node as the ``child`` of the next one,
and the data flows through them as :class:`pyarrow.RecordBatch`::

    (RecordBatch)-->Node1--(RecordBatch)-->Node2--(RecordBatch)-->...

The nodes themselves do very little: each one is a thin
wrapper around one or two calls to :mod:`pyarrow.compute`
or to the :class:`pyarrow.Table` methods. The point of
wrapping them is to give each idiom a name and a place
where it is documented.

The plan starts from a data source, for example to look at the
cars with a highway mileage of at least 30:

>>> import pyarrow as pa
>>> import pyarrow.compute as pc
>>> from dataidioms.compute import col, lit, TableDataSource
>>> from dataidioms.compute import FilterNode, FunctionCallExpression
>>> data = pa.table({
...    "model": ["a4", "civic", "c1500 suburban 2wd", "corolla"],
...    "hwy": [29, 33, 17, 35],
... })
>>> query = FilterNode(
...     FunctionCallExpression(pc.greater_equal, col("hwy"), lit(30)),
...     child=TableDataSource(data)
... )
>>> for batch in query.batches():
...     print(batch.to_pydict())
{'model': ['civic', 'corolla'], 'hwy': [33, 35]}

Most users will prefer the :class:`dataidioms.dataframe.Dataframe`
API, which builds these plans one method call at a time.
"""

from .aggregate import (
    AGGREGATIONS,
    AggregateNode,
    CountAggregation,
    CountDistinctAggregation,
    MaxAggregation,
    MeanAggregation,
    MedianAggregation,
    MinAggregation,
    StdDevAggregation,
    SumAggregation,
    VarianceAggregation,
)
from .base import ColumnNotFoundError, ColumnRef, col, lit
from .datasources import CSVDataSource, ParquetDataSource, TableDataSource
from .distinct import DistinctNode
from .expressions import (
    AcrossProjection,
    FunctionCallExpression,
    MapExpression,
    RowAggregateExpression,
)
from .filtering import FilterNode
from .join import JoinNode
from .missing import DropNullsNode, FillNullsNode
from .pagination import SliceNode
from .reshape import PivotLongerNode, PivotWiderNode
from .selection import ProjectNode, RenameNode
from .sorting import SortNode

__all__ = (
    "CSVDataSource",
    "ParquetDataSource",
    "TableDataSource",
    "FilterNode",
    "FunctionCallExpression",
    "MapExpression",
    "RowAggregateExpression",
    "AcrossProjection",
    "col",
    "lit",
    "ColumnRef",
    "ColumnNotFoundError",
    "SliceNode",
    "SortNode",
    "ProjectNode",
    "RenameNode",
    "DropNullsNode",
    "FillNullsNode",
    "DistinctNode",
    "JoinNode",
    "PivotLongerNode",
    "PivotWiderNode",
    "AggregateNode",
    "AGGREGATIONS",
    "CountAggregation",
    "CountDistinctAggregation",
    "MaxAggregation",
    "MeanAggregation",
    "MedianAggregation",
    "MinAggregation",
    "StdDevAggregation",
    "SumAggregation",
    "VarianceAggregation",
)
