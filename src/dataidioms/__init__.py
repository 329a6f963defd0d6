"""DataIdioms

A study guide of the most common data analysis idioms,
written as a Python package so that every idiom can be run.

Each idiom is a short, documented step that relies on
Apache Arrow for the tabular data and on matplotlib for charts.
The guide doesn't implement any algorithm of its own, the interesting
part is seeing which library call answers which question.

The idioms are grouped by topic, each in its own module and
each self documented in literate programming style:

* Exploring the data -- :mod:`dataidioms.explore`
  (structure, summary statistics, missing values, categorical summaries).
* Visualizing the data -- :mod:`dataidioms.plotting`.
* Manipulating the data -- :mod:`dataidioms.compute`, filtering, selecting,
  sorting, grouping, joining, reshaping and applying functions across columns.
* Building and chaining it all together -- :mod:`dataidioms.dataframe`.
* Saving the results -- :mod:`dataidioms.io`.

The examples use the small datasets in :mod:`dataidioms.datasets`,
and the ``idioms-explore`` command runs the exploration idioms
on any CSV or Parquet file (see :mod:`dataidioms.commands`).
"""

from . import compute, datasets, explore, io

__all__ = ("compute", "datasets", "explore", "io")
