"""
Null propagation for the query-facing operations.

A ``None`` argument means SQL NULL: the operation is skipped and ``None`` is
returned without raising.
"""

import functools
from typing import Callable, TypeVar

F = TypeVar("F", bound=Callable)


def propagate_nulls(func: F) -> F:
    """Return ``None`` from ``func`` whenever a positional argument is ``None``."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if any(arg is None for arg in args):
            return None
        return func(*args, **kwargs)

    return wrapper
