"""Compute functions behind the expression operators.

``col("hwy") > 30`` calls :func:`pyarrow.compute.greater`,
``col("cty") + col("hwy")`` calls :func:`pyarrow.compute.add` and so on.
Most operators map directly to a :mod:`pyarrow.compute` function,
the few that need some adaptation are implemented here.
"""

from typing import Any

import pyarrow as pa
import pyarrow.compute as pc

equal = pc.equal
not_equal = pc.not_equal
less = pc.less
less_equal = pc.less_equal
greater = pc.greater
greater_equal = pc.greater_equal
add = pc.add
subtract = pc.subtract
multiply = pc.multiply
and_kleene = pc.and_kleene
or_kleene = pc.or_kleene
invert = pc.invert
is_null = pc.is_null


def _to_float(value: Any) -> Any:
    if isinstance(value, (int, float)):
        return float(value)
    return pc.cast(value, pa.float64())


def true_divide(left: Any, right: Any) -> Any:
    """Divide as floating point numbers.

    :func:`pyarrow.compute.divide` truncates the division of
    two integers, which is rarely what an analysis wants.
    """
    return pc.divide(_to_float(left), _to_float(right))


def is_in(values: Any, value_set: list[Any]) -> Any:
    """``true`` where the value is part of ``value_set``."""
    return pc.is_in(values, value_set=pa.array(value_set))
