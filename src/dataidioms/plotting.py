"""Visualizing data.

A chart often tells more than a table of statistics:
the shape of a distribution, outliers, the relation
between two measures.

Each function here draws one kind of chart with
:mod:`matplotlib` and returns the :class:`matplotlib.figure.Figure`,
which can be shown in a notebook or saved with :func:`save_figure`.

Figures are created directly from :class:`matplotlib.figure.Figure`
instead of :mod:`matplotlib.pyplot`, so no window is ever opened
and no global state is involved::

    from dataidioms import datasets, plotting

    cars = datasets.fuel_economy()
    plotting.save_figure(plotting.histogram(cars, "hwy", bins=10), "hwy.png")
    plotting.save_figure(plotting.scatter(cars, "displ", "hwy", color_by="drv"), "displ_hwy.png")

Missing values can't be drawn, so they are always left out.
"""

import logging

import pyarrow as pa
import pyarrow.compute as pc
from matplotlib.figure import Figure

from .compute.base import as_table, require_columns
from .explore import is_numeric, value_counts

log = logging.getLogger(__name__)

DEFAULT_FIGSIZE = (8, 5)


def _require_numeric(table: pa.Table, *columns: str) -> None:
    require_columns(table, list(columns))
    for name in columns:
        datatype = table.schema.field(name).type
        if not is_numeric(datatype):
            raise TypeError(f"Column {name!r} of type {datatype} can't be plotted as a number")


def _new_axes(title: str | None, xlabel: str, ylabel: str):
    figure = Figure(figsize=DEFAULT_FIGSIZE)
    ax = figure.add_subplot()
    if title:
        ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    return figure, ax


def histogram(
    data: pa.Table | pa.RecordBatch, column: str, bins: int = 30, title: str | None = None
) -> Figure:
    """Distribution of a numeric column.

    :param data: The data containing the column.
    :param column: The numeric column to draw.
    :param bins: In how many intervals to split the range of values.
    :param title: Title of the chart.
    """
    table = as_table(data)
    _require_numeric(table, column)
    values = pc.drop_null(table.column(column)).to_pylist()
    figure, ax = _new_axes(title, column, "count")
    ax.hist(values, bins=bins)
    log.debug("Histogram of %s with %d values in %d bins", column, len(values), bins)
    return figure


def bar_chart(
    data: pa.Table | pa.RecordBatch,
    column: str,
    dropna: bool = True,
    horizontal: bool = False,
    title: str | None = None,
) -> Figure:
    """How many times each value of a categorical column appears.

    Bars are sorted from the most frequent value to the least frequent.

    :param data: The data containing the column.
    :param column: The categorical column to count.
    :param dropna: Don't draw a bar for missing values.
    :param horizontal: Draw horizontal bars, useful with long labels.
    :param title: Title of the chart.
    """
    counts = value_counts(data, column, dropna=dropna)
    labels = [str(v) if v is not None else "missing" for v in counts.column(column).to_pylist()]
    heights = counts.column("count").to_pylist()
    if horizontal:
        figure, ax = _new_axes(title, "count", column)
        ax.barh(labels, heights)
        ax.invert_yaxis()
    else:
        figure, ax = _new_axes(title, column, "count")
        ax.bar(labels, heights)
    return figure


def scatter(
    data: pa.Table | pa.RecordBatch,
    x: str,
    y: str,
    color_by: str | None = None,
    title: str | None = None,
) -> Figure:
    """Relation between two numeric columns.

    :param data: The data containing the columns.
    :param x: Column for the horizontal axis.
    :param y: Column for the vertical axis.
    :param color_by: Categorical column, each of its values
                     gets a different color and a legend entry.
    :param title: Title of the chart.
    """
    table = as_table(data)
    _require_numeric(table, x, y)
    table = table.filter(pc.and_(pc.is_valid(table.column(x)), pc.is_valid(table.column(y))))
    figure, ax = _new_axes(title, x, y)

    if color_by is None:
        ax.scatter(table.column(x).to_pylist(), table.column(y).to_pylist())
        return figure

    require_columns(table, [color_by])
    for group in pc.unique(table.column(color_by)).to_pylist():
        if group is None:
            mask = pc.is_null(table.column(color_by))
        else:
            mask = pc.equal(table.column(color_by), pa.scalar(group))
        rows = table.filter(mask)
        ax.scatter(
            rows.column(x).to_pylist(),
            rows.column(y).to_pylist(),
            label="missing" if group is None else str(group),
        )
    ax.legend(title=color_by)
    return figure


def boxplot(
    data: pa.Table | pa.RecordBatch,
    column: str,
    by: str | None = None,
    title: str | None = None,
) -> Figure:
    """Median, quartiles and outliers of a numeric column.

    :param data: The data containing the column.
    :param column: The numeric column to draw.
    :param by: Categorical column, a box is drawn for each of its values.
               Rows where it is missing are left out.
    :param title: Title of the chart.
    """
    table = as_table(data)
    _require_numeric(table, column)
    figure, ax = _new_axes(title, by or "", column)

    if by is None:
        ax.boxplot([pc.drop_null(table.column(column)).to_pylist()])
        ax.set_xticks([1], [column])
        return figure

    require_columns(table, [by])
    groups = [g for g in pc.unique(table.column(by)).to_pylist() if g is not None]
    values = [
        pc.drop_null(table.filter(pc.equal(table.column(by), pa.scalar(g))).column(column)).to_pylist()
        for g in groups
    ]
    ax.boxplot(values)
    ax.set_xticks(range(1, len(groups) + 1), [str(g) for g in groups])
    return figure


def line_chart(
    data: pa.Table | pa.RecordBatch,
    x: str,
    y: str,
    group_by: str | None = None,
    title: str | None = None,
) -> Figure:
    """Evolution of a numeric column, typically over time.

    Points are joined in the order of ``x``, one line
    for each value of ``group_by`` when provided.
    """
    table = as_table(data)
    _require_numeric(table, y)
    require_columns(table, [x] + ([group_by] if group_by else []))
    table = table.filter(pc.and_(pc.is_valid(table.column(x)), pc.is_valid(table.column(y))))
    table = table.take(pc.sort_indices(table, sort_keys=[(x, "ascending")]))
    figure, ax = _new_axes(title, x, y)

    if group_by is None:
        ax.plot(table.column(x).to_pylist(), table.column(y).to_pylist(), marker="o")
        return figure

    for group in pc.unique(table.column(group_by)).to_pylist():
        if group is None:
            continue
        rows = table.filter(pc.equal(table.column(group_by), pa.scalar(group)))
        ax.plot(rows.column(x).to_pylist(), rows.column(y).to_pylist(), marker="o", label=str(group))
    ax.legend(title=group_by)
    return figure


def save_figure(figure: Figure, path: str, dpi: int = 100) -> None:
    """Save a chart, the format is chosen by the file extension (png, svg, pdf...)."""
    log.debug("Saving figure to %s", path)
    figure.savefig(path, dpi=dpi)
