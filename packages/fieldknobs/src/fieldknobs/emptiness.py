"""Default emptiness predicate.

A value is empty when it is the zero value of its kind: ``None``, ``False``,
numeric zero, an empty string or bytes, or any empty sized container.
Records (dataclasses, named tuples) and other objects are never empty unless
they define ``__len__``.
"""

from __future__ import annotations

from collections.abc import Callable, Sized
from numbers import Number
from typing import Any

from .kinds import is_record

EmptinessCheck = Callable[[Any], bool]


def is_empty(value: Any) -> bool:
    """Check whether a value is empty.

    Args:
        value: Value to check

    Returns:
        True if the value is the zero value of its kind
    """
    if value is None or value is False:
        return True
    if isinstance(value, Number):
        return value == 0
    if is_record(value):
        return False
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def is_not_empty(value: Any) -> bool:
    return not is_empty(value)
