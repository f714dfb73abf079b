"""Value-driven dispatch to sub-validators."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, List

from .emptiness import EmptinessCheck
from .exceptions import RuleContractError
from .outcome import Validatable
from .valuer import Valuer

logger = logging.getLogger(__name__)

Handler = Callable[[Valuer], Any]
Compare = Callable[[Any, Any], bool]


def strict_equal(a: Any, b: Any) -> bool:
    """Equality that also requires identical types, so ``1`` never matches ``True`` or ``1.0``."""
    return type(a) is type(b) and bool(a == b)


@dataclass(frozen=True)
class Branch:
    candidate: Any
    handler: Handler


class Matcher:
    """Pick the first branch whose candidate equals the value.

    The chosen handler receives a fresh ``Valuer`` over the matched value. It
    may configure that validator and return ``None`` (the validator is then
    evaluated), return an error or ``None`` from its own evaluation, or
    return another validatable.

    Args:
        value: The value to dispatch on
        field: Machine name passed to the branch validators
        label: Display name passed to the branch validators
        compare: Equality function (default: ``strict_equal``)
        is_empty: Emptiness predicate for the branch validators

    Example:
        ```python
        Matcher(kind, "kind", "Kind") \\
            .branch("email", lambda v: v.required()) \\
            .fallback(lambda v: v.one_of(["sms", "push"])) \\
            .validate()
        ```
    """

    def __init__(
        self,
        value: Any,
        field: str = "",
        label: str = "",
        compare: Compare | None = None,
        *,
        is_empty: EmptinessCheck | None = None,
    ):
        self._value = value
        self._field = field
        self._label = label
        self._compare: Compare = compare or strict_equal
        self._is_empty = is_empty
        self._branches: List[Branch] = []
        self._fallback: Handler | None = None

    @property
    def branches(self) -> List[Branch]:
        return list(self._branches)

    def branch(self, candidate: Any, handler: Handler) -> Matcher:
        self._branches.append(Branch(candidate, handler))
        return self

    def fallback(self, handler: Handler) -> Matcher:
        self._fallback = handler
        return self

    def compare_with(self, compare: Compare) -> Matcher:
        """Replace the equality function."""
        self._compare = compare
        return self

    def validate(self) -> BaseException | None:
        for branch in self._branches:
            if self._compare(self._value, branch.candidate):
                return self._run(branch.handler)

        if self._fallback is not None:
            return self._run(self._fallback)

        return None

    def _run(self, handler: Handler) -> BaseException | None:
        valuer = Valuer(self._value, self._field, self._label, is_empty=self._is_empty)
        result = handler(valuer)
        if result is None:
            return valuer.validate()
        if isinstance(result, BaseException):
            return result
        if isinstance(result, Validatable):
            return result.validate()
        logger.error(f"Match handler for {self._field!r} returned {type(result).__name__}")
        raise RuleContractError(
            f"Match handler must return None, an exception or a validatable, got {result!r}",
            context={"field": self._field, "returned_type": type(result).__name__},
        )
