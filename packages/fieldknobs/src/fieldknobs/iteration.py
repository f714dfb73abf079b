"""Collection iteration engine behind ``Valuer.every`` and ``Valuer.some``.

A subject is iterated element by element as one of a closed set of shapes:

- ``Shape.SEQUENCE``: lists, tuples, ranges and other non-text sequences;
  items carry an ``index``
- ``Shape.MAPPING``: any mapping; items carry the stringified ``key``
- ``Shape.RECORD``: dataclass or named tuple instances; items carry the
  field name as ``key``

Any other subject is a ``RuleContractError``.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import RuleContractError
from .kinds import is_record
from .outcome import Outcome, Status, Validatable, to_outcome

logger = logging.getLogger(__name__)


class Shape(Enum):
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    RECORD = "record"


class Policy(Enum):
    """Aggregation policy over item outcomes."""

    EVERY = "every"
    SOME = "some"


@dataclass(frozen=True)
class Item:
    """One element of an iterated collection.

    Attributes:
        value: The element
        index: Position, for sequences
        key: Key or field name, for mappings and records
    """

    value: Any
    index: int | None = None
    key: str | None = None


ItemHandler = Callable[[Item], Any]


def shape_of(subject: Any) -> Shape:
    """Get the iteration shape of a subject.

    Raises:
        RuleContractError: If the subject cannot be iterated
    """
    if is_record(subject):
        return Shape.RECORD
    if isinstance(subject, Mapping):
        return Shape.MAPPING
    if isinstance(subject, Sequence) and not isinstance(subject, (str, bytes, bytearray)):
        return Shape.SEQUENCE
    logger.error(f"Cannot iterate over {type(subject).__name__}")
    raise RuleContractError(
        f"Expected a sequence, a mapping or a record, got {type(subject).__name__}",
        context={"type": type(subject).__name__},
    )


def iter_items(subject: Any) -> Iterator[Item]:
    """Yield the items of a subject according to its shape."""
    shape = shape_of(subject)
    if shape is Shape.SEQUENCE:
        for index, value in enumerate(subject):
            yield Item(value=value, index=index)
    elif shape is Shape.MAPPING:
        for key, value in subject.items():
            yield Item(value=value, key=str(key))
    elif dataclasses.is_dataclass(subject):
        for f in dataclasses.fields(subject):
            yield Item(value=getattr(subject, f.name), key=f.name)
    else:
        for name in type(subject)._fields:
            yield Item(value=getattr(subject, name), key=name)


def evaluate(subject: Any, handler: ItemHandler, policy: Policy) -> tuple[Outcome, Item | None]:
    """Run a handler over every item of a subject.

    Under ``EVERY`` the first failing item ends the run. Under ``SOME`` the
    first passing item ends the run; a plain ``False`` or a failing nested
    validator does not count as a pass but does not end the run either. A
    returned exception always ends the run.

    Args:
        subject: Sequence, mapping or record
        handler: Called with each Item
        policy: Aggregation policy

    Returns:
        The outcome (PASS, FAIL or FAIL_WITH) and the item that decided it,
        or None when the run was decided by exhausting the items
    """
    for item in iter_items(subject):
        result = handler(item)
        nested = isinstance(result, Validatable) and not isinstance(result, (BaseException, Outcome))
        outcome = to_outcome(result, allow_validatable=True)

        if outcome.ok:
            if policy is Policy.SOME:
                return outcome, item
            continue

        if outcome.status is Status.FAIL_WITH and not nested:
            return outcome, item
        if policy is Policy.EVERY:
            return outcome, item

    if policy is Policy.EVERY:
        return Outcome.passed(), None
    return Outcome.failed(), None
