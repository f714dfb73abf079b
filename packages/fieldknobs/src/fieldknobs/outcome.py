"""Handler outcomes.

Rule handlers (``Valuer.custom`` checks and ``every``/``some`` item
handlers) may answer with a plain value:

- ``True`` or ``None``: pass
- ``False``: fail
- an exception: fail with that exception
- a validatable (anything with ``validate()``): its own outcome

or with an explicit :class:`Outcome` built by ``Outcome.passed()``,
``Outcome.failed()`` or ``Outcome.failed_with(error)``. Anything else breaks
the handler contract and raises ``RuleContractError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from .exceptions import RuleContractError

logger = logging.getLogger(__name__)


@runtime_checkable
class Validatable(Protocol):
    """Anything that can be validated on its own."""

    def validate(self) -> BaseException | None: ...


class Status(Enum):
    PASS = "pass"
    FAIL = "fail"
    FAIL_WITH = "fail_with"


@dataclass(frozen=True)
class Outcome:
    """Tagged result of a rule handler."""

    status: Status
    error: BaseException | None = None

    @classmethod
    def passed(cls) -> Outcome:
        return cls(Status.PASS)

    @classmethod
    def failed(cls) -> Outcome:
        return cls(Status.FAIL)

    @classmethod
    def failed_with(cls, error: BaseException) -> Outcome:
        return cls(Status.FAIL_WITH, error)

    @property
    def ok(self) -> bool:
        return self.status is Status.PASS


def to_outcome(result: Any, *, allow_validatable: bool = False) -> Outcome:
    """Interpret a handler's return value.

    Args:
        result: What the handler returned
        allow_validatable: Whether a validatable is an acceptable answer; it
            is validated immediately

    Returns:
        The explicit Outcome

    Raises:
        RuleContractError: If the value is outside the handler contract
    """
    if isinstance(result, Outcome):
        return result
    if result is None or result is True:
        return Outcome.passed()
    if result is False:
        return Outcome.failed()
    if isinstance(result, BaseException):
        return Outcome.failed_with(result)
    if allow_validatable and isinstance(result, Validatable):
        error = result.validate()
        if error is None:
            return Outcome.passed()
        return Outcome.failed_with(error)

    expected = "a bool, None, an exception or a validatable" if allow_validatable else "a bool, None or an exception"
    logger.error(f"Rule handler returned {type(result).__name__}, expected {expected}")
    raise RuleContractError(
        f"Rule handler must return {expected}, got {result!r}",
        context={"returned_type": type(result).__name__},
    )
