"""Naming Python objects for humans."""

import inspect
from typing import Any


def get_qualname(obj: Any) -> str:
    """Get the dotted name of a function, method, class or module.

    Used to print the functions involved in expressions,
    so that ``pc.add`` shows up as ``pyarrow.compute.add``.

    >>> get_qualname(get_qualname)
    'dataidioms.utils.inspect.get_qualname'
    """
    module = inspect.getmodule(obj)
    module_name = module.__name__ if module is not None else "builtins"
    if inspect.ismodule(obj):
        return obj.__name__
    if inspect.ismethod(obj) and getattr(obj, "__self__", None) is not None:
        return f"{module_name}.{obj.__self__.__class__.__name__}.{obj.__name__}"
    qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None)
    if qualname is None:
        qualname = obj.__class__.__name__
    return f"{module_name}.{qualname}"
