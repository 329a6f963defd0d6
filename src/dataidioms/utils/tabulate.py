"""Format tabular data into a text table for print.

Looking at the data is the first step of any analysis,
:func:`tabulate` renders a :class:`pyarrow.RecordBatch` or
:class:`pyarrow.Table` as text. Long strings are truncated,
floats are rounded and missing values are shown as ``null``:

    >>> import pyarrow as pa
    >>> table = pa.table({
    ...     "model": ["a4", "civic", "corolla"],
    ...     "hwy": [29, 33, None],
    ...     "displ": [1.8, 1.6, 1.8],
    ... })
    >>> print(tabulate(table))
    model   | hwy  | displ
    ------- | ---- | -----
    a4      | 29   | 1.80
    civic   | 33   | 1.60
    corolla | null | 1.80
"""

from typing import Any

import pyarrow as pa

MAX_STRING_LENGTH = 30


def tabulate(data: pa.RecordBatch | pa.Table, max_rows: int = 20, float_precision: int = 2) -> str:
    """Format a RecordBatch or Table into a text table.

    :param data: The data to format.
    :param max_rows: Rows after this one are not printed,
                     a footer reports how many were omitted.
    :param float_precision: Digits to print after the decimal point.
    """
    cols = data.column_names
    rows = [
        [format_value(row[c], float_precision) for c in cols]
        for row in data.slice(0, max_rows).to_pylist()
    ]

    widths = column_widths(cols, rows)
    lines = [format_row(cols, widths), format_row(["-" * w for w in widths], widths)]
    lines += [format_row(row, widths) for row in rows]

    table = "\n".join(line.rstrip() for line in lines)
    if data.num_rows > max_rows:
        table += f"\n... and {data.num_rows - max_rows} more rows"
    return table


def column_widths(cols: list[str], rows: list[list[str]]) -> list[int]:
    """Width of each column, enough for the header and every value."""
    return [max([len(name)] + [len(row[idx]) for row in rows]) for idx, name in enumerate(cols)]


def format_row(values: list[str], widths: list[int]) -> str:
    return " | ".join(value.ljust(width) for value, width in zip(values, widths))


def format_value(v: Any, float_precision: int = 2) -> str:
    """Format a single value to be printed in the table."""
    if v is None:
        return "null"
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, float):
        return f"{v:.{float_precision}f}"

    v = str(v)
    if len(v) > MAX_STRING_LENGTH:
        v = v[: MAX_STRING_LENGTH - 3] + "..."
    return v
