"""Generic utilities and helpers.

Helpers that are used by the other parts of the
package but are not idioms of data analysis themselves,
like printing a table in the terminal.
"""

from . import inspect, tabulate

__all__ = ("inspect", "tabulate")
