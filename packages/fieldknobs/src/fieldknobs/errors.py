"""Validation error model.

``ValidationError`` is one failed rule; ``ValidationErrors`` aggregates the
failures of several independent validators. Both are exceptions, so callers
can raise what a validator returned, but validators themselves only ever
*return* them.

Example:
    ```python
    from fieldknobs.errors import ValidationError, ValidationErrors, with_param

    err = ValidationError("min_length", with_param("min", 3))
    errs = ValidationErrors()
    errs.add(err)
    errs.first() is err
    # True
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, Dict, List

from .exceptions import FieldknobsError
from .translations import TranslationRegistry, get_registry

ErrorOption = Callable[["ValidationError"], None]


def with_format(format: str) -> ErrorOption:
    """Override the message template of an error."""

    def option(error: ValidationError) -> None:
        error._format = format

    return option


def with_param(key: str, value: Any) -> ErrorOption:
    """Add or overwrite one named template parameter."""

    def option(error: ValidationError) -> None:
        error._params[key] = value

    return option


def with_code(code: str) -> ErrorOption:
    """Override the error code."""

    def option(error: ValidationError) -> None:
        error._code = code

    return option


def merge_options(options: tuple[ErrorOption, ...] | list[ErrorOption], *presets: ErrorOption) -> list[ErrorOption]:
    """Put presets ahead of caller options so the caller's win."""
    return [*presets, *options]


class ValidationError(FieldknobsError):
    """A single validation failure.

    Attributes:
        code: Stable rule identifier, e.g. ``"required"``
        field: Machine name of the validated value
        label: Display name of the validated value
        value: The offending value
        format: Explicit message template, or None
        params: Template parameters (a copy)
        cause: Wrapped low-level exception, or None

    Args:
        code: Rule identifier
        *options: Options applied left to right (``with_format``,
            ``with_param``, ``with_code``)
        field: Machine name
        label: Display name
        value: The offending value
        cause: Low-level exception to wrap
    """

    def __init__(
        self,
        code: str = "",
        *options: ErrorOption,
        field: str = "",
        label: str = "",
        value: Any = None,
        cause: BaseException | None = None,
    ):
        super().__init__(code)
        self._code = code
        self._format: str | None = None
        self._params: Dict[str, Any] = {}
        self._field = field
        self._label = label
        self._value = value
        self.cause = cause
        for option in options:
            option(self)
        self.args = (self._code,)
        self.context = {"code": self._code, "field": self._field}

    @property
    def code(self) -> str:
        return self._code

    @property
    def format(self) -> str | None:
        return self._format

    @property
    def params(self) -> Dict[str, Any]:
        return dict(self._params)

    @property
    def field(self) -> str:
        return self._field

    @property
    def label(self) -> str:
        return self._label

    @property
    def value(self) -> Any:
        return self._value

    def render(self, translations: TranslationRegistry | None = None) -> str:
        """Render the templated message.

        The wrapped cause is ignored here; ``str()`` is the form that prefers
        it.

        Args:
            translations: Registry to resolve with (default: process-wide)

        Returns:
            The message text
        """
        params = self.params
        params["label"] = self._label
        params["value"] = self._value
        registry = translations if translations is not None else get_registry()
        return registry.resolve(self._code, self._format, params)

    def __str__(self) -> str:
        if self.cause is not None:
            return str(self.cause)
        return self.render()

    def __repr__(self) -> str:
        return f"ValidationError(code={self._code!r}, field={self._field!r})"


class ValidationErrors(FieldknobsError):
    """Ordered collection of validation failures.

    Nested collections are flattened on ``add``, so the collection only ever
    holds ``ValidationError`` instances. Field groups are reported in the
    order their field first appeared.
    """

    def __init__(self, errors: list[ValidationError] | None = None):
        super().__init__("")
        self._errors: List[ValidationError] = []
        for error in errors or []:
            self.add(error)

    def is_empty(self) -> bool:
        return len(self._errors) == 0

    def add(self, error: BaseException | None) -> None:
        """Add a failure.

        Args:
            error: A ValidationError, another ValidationErrors (its elements
                are appended), any other exception (wrapped as an opaque
                ValidationError) or None (ignored)
        """
        if error is None:
            return
        if isinstance(error, ValidationErrors):
            self._errors.extend(error._errors)
        elif isinstance(error, ValidationError):
            self._errors.append(error)
        else:
            self._errors.append(ValidationError(cause=error))

    def first(self) -> ValidationError | None:
        if self.is_empty():
            return None
        return self._errors[0]

    def get(self, field: str) -> list[ValidationError]:
        """Get all errors of a field, in insertion order."""
        return [error for error in self._errors if error.field == field]

    def all(self) -> list[ValidationError]:
        return list(self._errors)

    def to_map(self) -> Dict[str, list[ValidationError]]:
        """Group errors by field.

        Returns:
            Dict of field to errors, keys in first-seen order
        """
        groups: Dict[str, list[ValidationError]] = {}
        for error in self._errors:
            groups.setdefault(error.field, []).append(error)
        return groups

    def render(self, translations: TranslationRegistry | None = None) -> str:
        """Render one paragraph per field, joined by newlines."""
        paragraphs = []
        for errors in self.to_map().values():
            paragraphs.append("\n".join(_display(error, translations) for error in errors))
        return "\n".join(paragraphs)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"ValidationErrors({self._errors!r})"

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[ValidationError]:
        return iter(list(self._errors))

    def __bool__(self) -> bool:
        return not self.is_empty()


def _display(error: ValidationError, translations: TranslationRegistry | None) -> str:
    if error.cause is not None:
        return str(error.cause)
    return error.render(translations)


def is_builtin_error(error: BaseException) -> bool:
    """Check whether an exception is one of the engine's own failure types."""
    return isinstance(error, (ValidationError, ValidationErrors))
