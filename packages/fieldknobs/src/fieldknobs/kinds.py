"""Structural categories of values, used by ``typeof`` rules."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence, Set
from enum import Enum
from typing import Any


class Kind(Enum):
    """Type category of a value."""

    NONE = "none"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    COMPLEX = "complex"
    STRING = "string"
    BYTES = "bytes"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    SET = "set"
    RECORD = "record"
    OTHER = "other"


def is_record(value: Any) -> bool:
    """Check whether a value is a record (dataclass or named tuple instance)."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return True
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def kind_of(value: Any) -> Kind:
    """Get the category of a value.

    ``bool`` is checked before ``int`` and records before sequences, so a
    named tuple is a ``RECORD`` and ``True`` is a ``BOOL``.

    Args:
        value: Value to categorize

    Returns:
        The value's Kind
    """
    if value is None:
        return Kind.NONE
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, int):
        return Kind.INT
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, complex):
        return Kind.COMPLEX
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (bytes, bytearray)):
        return Kind.BYTES
    if is_record(value):
        return Kind.RECORD
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if isinstance(value, Set):
        return Kind.SET
    if isinstance(value, Sequence):
        return Kind.SEQUENCE
    return Kind.OTHER
