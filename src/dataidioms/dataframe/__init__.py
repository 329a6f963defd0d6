"""A dataframe API over the guide idioms.

Dataframes are the most widespread way to perform analyses
on tabular data, the most commonly used ones are probably
``pandas`` and ``polars`` in Python and ``dplyr`` in R.

Their success comes from the fact that each idiom is
a single method call, and that method calls can be chained
into a readable pipeline::

    (
        Dataframe(datasets.fuel_economy())
        .filter(col("year") == 2008)
        .group_by("class")
        .summarize(mean_hwy=MeanAggregation("hwy"))
        .arrange("mean_hwy", descending=True)
    )

The :class:`Dataframe` here builds, one method call
at a time, a plan made of :mod:`dataidioms.compute` nodes.
Nothing is computed until the data is requested with
:meth:`Dataframe.collect`, :meth:`Dataframe.to_arrow` or
by printing the dataframe.
"""

from ..compute import col, lit
from .dataframe import Dataframe, GroupedDataframe

__all__ = ("Dataframe", "GroupedDataframe", "col", "lit")
