"""Combinators over independent validators.

Example:
    ```python
    from fieldknobs import check, from_mapping, validate

    field = from_mapping(request.json)
    errs = validate(
        field("name", "Name").required().max_length(50),
        field("age", "Age").required().between(0, 150),
    )
    if errs is not None:
        return {"errors": {k: [str(e) for e in v] for k, v in errs.to_map().items()}}
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from .emptiness import is_empty
from .errors import ErrorOption, ValidationError, ValidationErrors
from .exceptions import CompositeError
from .outcome import Validatable
from .valuer import Valuer

SOME_HEADER = "at least one of the following must pass:"


class Checker:
    """Adapt a zero-argument callable to the validatable protocol."""

    def __init__(self, func: Callable[[], BaseException | None]):
        self._func = func

    def validate(self) -> BaseException | None:
        return self._func()

    def __call__(self) -> BaseException | None:
        return self._func()


def wrap(value: Any, check: Callable[[Any], BaseException | None]) -> Checker:
    """Bind a value to a one-argument check."""
    return Checker(lambda: check(value))


def validate(*validators: Validatable | None) -> ValidationErrors | None:
    """Run every validator and collect all failures.

    ``None`` entries are skipped, which allows conditional validators inline.

    Returns:
        None if nothing failed, otherwise the collected failures
    """
    errors = ValidationErrors()
    for validator in validators:
        if validator is None:
            continue
        errors.add(validator.validate())
    if errors.is_empty():
        return None
    return errors


def check(*validators: Validatable | None) -> BaseException | None:
    """Run validators in order and return the first failure."""
    for validator in validators:
        if validator is None:
            continue
        error = validator.validate()
        if error is not None:
            return error
    return None


def every(*validators: Validatable) -> Checker:
    """A validatable that passes only if every validator passes, stopping at the first failure."""
    return Checker(lambda: check(*validators))


def some(*validators: Validatable) -> Checker:
    """A validatable that passes if at least one validator passes.

    When all fail, the result is a ``some_of`` failure whose cause is a
    ``CompositeError`` listing every failure under a common header.
    """

    def run() -> BaseException | None:
        errors = ValidationErrors()
        for validator in validators:
            error = validator.validate()
            if error is None:
                return None
            errors.add(error)
        if errors.is_empty():
            return None
        lines = [SOME_HEADER]
        lines.extend(f"  {line}" for line in str(errors).split("\n"))
        return ValidationError("some_of", cause=CompositeError("\n".join(lines).strip(), errors))

    return Checker(run)


class IndexBy:
    """Select the first group of values that is completely filled in.

    After a successful ``validate()`` the position of the chosen group is
    available as ``index``; it stays None when no group qualifies.

    Args:
        groups: Candidate groups of values
        *options: Options for the ``index_by`` failure
    """

    def __init__(self, groups: Iterable[Sequence[Any]], *options: ErrorOption):
        self._groups = [list(group) for group in groups]
        self._options = options
        self.index: int | None = None

    def validate(self) -> ValidationError | None:
        for position, group in enumerate(self._groups):
            if group and not any(is_empty(item) for item in group):
                self.index = position
                return None
        return ValidationError("index_by", *self._options)


def index_by(groups: Iterable[Sequence[Any]], *options: ErrorOption) -> IndexBy:
    return IndexBy(groups, *options)


def from_mapping(data: Mapping[str, Any]) -> Callable[[str, str], Valuer]:
    """Build validators from the entries of a mapping.

    Args:
        data: Source mapping, e.g. a parsed request body

    Returns:
        A factory ``(name, label) -> Valuer`` bound to ``data.get(name)``
    """

    def factory(name: str, label: str = "") -> Valuer:
        return Valuer(data.get(name), name, label)

    return factory
