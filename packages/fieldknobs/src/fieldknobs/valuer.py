"""Value validator: an ordered rule chain bound to one field.

A ``Valuer`` holds two ordered lists:

- *requirements*, checked only when the value is empty
- *rules*, checked only when the value is not empty

Evaluation is short-circuit, so one ``validate()`` call reports at most one
error. Aggregating the errors of several fields is the job of
:func:`fieldknobs.compose.validate`.

Example:
    ```python
    from fieldknobs import value

    err = (
        value(form.get("name"), "name", "Name")
        .required()
        .min_length(3)
        .max_length(20)
        .validate()
    )
    if err is not None:
        print(err)
    ```
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable, Sized
from typing import TYPE_CHECKING, Any, List

from .emptiness import EmptinessCheck
from .emptiness import is_empty as default_is_empty
from .errors import (
    ErrorOption,
    ValidationError,
    is_builtin_error,
    merge_options,
    with_code,
    with_param,
)
from .iteration import Item, ItemHandler, Policy, evaluate
from .kinds import Kind, kind_of
from .outcome import Status, to_outcome

if TYPE_CHECKING:
    from .matcher import Matcher

Rule = Callable[[Any], "BaseException | None"]
Requirement = Callable[[], "BaseException | None"]


def to_string(val: Any) -> str:
    if isinstance(val, str):
        return val
    return str(val)


def _length(val: Any) -> int:
    if isinstance(val, Sized):
        return len(val)
    return len(to_string(val))


def _compare(op: Callable[[Any, Any], bool], a: Any, b: Any) -> bool:
    try:
        return bool(op(a, b))
    except TypeError:
        return False


class Valuer:
    """Rule-chain builder and evaluator for one (value, field, label).

    Builder methods append to the chain and return ``self`` so calls can be
    chained. Every builder accepts trailing error options (``with_format``,
    ``with_param``, ``with_code``) that customise the failure it produces.

    Args:
        value: The value under validation
        field: Machine name, e.g. ``"username"``
        label: Display name, e.g. ``"User name"``
        is_empty: Emptiness predicate (default: ``fieldknobs.emptiness.is_empty``)
    """

    def __init__(
        self,
        value: Any,
        field: str = "",
        label: str = "",
        *,
        is_empty: EmptinessCheck | None = None,
    ):
        self._value = value
        self._field = field
        self._label = label
        self._is_empty: EmptinessCheck = is_empty or default_is_empty
        self._requires: List[Requirement] = []
        self._rules: List[Rule] = []

    @property
    def value(self) -> Any:
        return self._value

    @property
    def field(self) -> str:
        return self._field

    @property
    def label(self) -> str:
        return self._label

    def __repr__(self) -> str:
        return (
            f"Valuer(field={self._field!r}, requires={len(self._requires)}, "
            f"rules={len(self._rules)})"
        )

    def validate(self) -> BaseException | None:
        """Evaluate the chain.

        Returns:
            None if the value passes, otherwise the first failure
        """
        if self._is_empty(self._value):
            for require in self._requires:
                error = require()
                if error is not None:
                    return error
            return None

        # an emptiness predicate may accept None as a value
        if self._value is None:
            return None

        for rule in self._rules:
            error = rule(self._value)
            if error is not None:
                return error
        return None

    def new_error(self, code: str, options: Iterable[ErrorOption] = (), cause: BaseException | None = None) -> ValidationError:
        """Create a failure bound to this validator's field, label and value."""
        return ValidationError(
            code,
            *options,
            field=self._field,
            label=self._label,
            value=self._value,
            cause=cause,
        )

    def _mistake(self, error: BaseException, code: str, options: Iterable[ErrorOption]) -> BaseException:
        if is_builtin_error(error):
            return error
        return self.new_error(code, options, cause=error)

    def spawn(self) -> Valuer:
        """Create a fresh validator over the same value, field and label."""
        return Valuer(self._value, self._field, self._label, is_empty=self._is_empty)

    def add_rule(self, rule: Rule) -> Valuer:
        self._rules.append(rule)
        return self

    def add_requirement(self, require: Requirement) -> Valuer:
        self._requires.append(require)
        return self

    # Building blocks

    def rule(self, code: str, predicate: Callable[[Any], bool], *options: ErrorOption) -> Valuer:
        """Add a rule that fails with ``code`` when ``predicate`` is falsy."""

        def check(val: Any) -> ValidationError | None:
            if predicate(val):
                return None
            return self.new_error(code, options)

        return self.add_rule(check)

    def _string(self, code: str, predicate: Callable[[str], bool], options: Iterable[ErrorOption]) -> Valuer:
        return self.rule(code, lambda val: predicate(to_string(val)), *options)

    def custom(self, code: str, check: Callable[[Any], Any], *options: ErrorOption) -> Valuer:
        """Add a rule driven by a check with a three-way answer.

        The check returns ``True``/``None`` to pass, ``False`` to fail with
        ``code``, or an exception. The engine's own errors are returned
        unchanged; any other exception is wrapped as the cause of a ``code``
        failure. An ``Outcome`` may be returned instead of the plain values.

        Raises:
            RuleContractError: At evaluation time, if the check returns
                anything else
        """

        def rule(val: Any) -> BaseException | None:
            outcome = to_outcome(check(val))
            if outcome.ok:
                return None
            if outcome.status is Status.FAIL or outcome.error is None:
                return self.new_error(code, options)
            return self._mistake(outcome.error, code, options)

        return self.add_rule(rule)

    # Requirements

    def required(self, *options: ErrorOption) -> Valuer:
        """Fail with ``required`` when the value is empty."""
        return self.add_requirement(lambda: self.new_error("required", options))

    def required_if(self, condition: bool, *options: ErrorOption) -> Valuer:
        """Fail with ``required_if`` when the value is empty and ``condition`` holds."""

        def require() -> ValidationError | None:
            if condition:
                return self.new_error("required_if", options)
            return None

        return self.add_requirement(require)

    def required_with(self, values: Iterable[Any], *options: ErrorOption) -> Valuer:
        """Fail with ``required_with`` when the value is empty and every other value is present.

        An empty ``values`` never triggers the requirement.
        """
        others = list(values)

        def require() -> ValidationError | None:
            if others and not any(self._is_empty(other) for other in others):
                return self.new_error("required_with", options)
            return None

        return self.add_requirement(require)

    # Branching

    def when(self, condition: bool, configure: Callable[[Valuer], Any] | None) -> Valuer:
        """Apply extra rules only if ``condition`` holds.

        ``configure`` receives a nested validator over the same value; its
        outcome becomes the outcome of this rule.
        """
        if condition and configure is not None:

            def rule(_: Any) -> BaseException | None:
                nested = self.spawn()
                configure(nested)
                return nested.validate()

            self.add_rule(rule)
        return self

    def match(self, configure: Callable[[Matcher], Any]) -> Valuer:
        """Dispatch on the value through a ``Matcher`` configured by ``configure``."""
        from .matcher import Matcher

        def rule(_: Any) -> BaseException | None:
            matcher = Matcher(self._value, self._field, self._label, is_empty=self._is_empty)
            configure(matcher)
            return matcher.validate()

        return self.add_rule(rule)

    # Types

    def typeof(self, kind: Kind, *options: ErrorOption) -> Valuer:
        """Require the value to be of the given ``Kind``."""
        return self.rule(
            "typeof",
            lambda val: kind_of(val) is kind,
            *merge_options(options, with_param("kind", kind)),
        )

    def is_string(self, *options: ErrorOption) -> Valuer:
        return self.typeof(Kind.STRING, *options, with_code("is_string"))

    # Strings

    def is_lower(self, *options: ErrorOption) -> Valuer:
        return self._string("is_lower", lambda s: s == s.lower(), options)

    def is_upper(self, *options: ErrorOption) -> Valuer:
        return self._string("is_upper", lambda s: s == s.upper(), options)

    def contains(self, substr: str, *options: ErrorOption) -> Valuer:
        return self._string(
            "contains",
            lambda s: substr in s,
            merge_options(options, with_param("substr", substr)),
        )

    def contains_any(self, chars: str, *options: ErrorOption) -> Valuer:
        return self._string(
            "contains_any",
            lambda s: any(c in s for c in chars),
            merge_options(options, with_param("chars", chars)),
        )

    def excludes(self, substr: str, *options: ErrorOption) -> Valuer:
        return self._string(
            "excludes",
            lambda s: substr not in s,
            merge_options(options, with_param("substr", substr)),
        )

    def excludes_all(self, chars: str, *options: ErrorOption) -> Valuer:
        return self._string(
            "excludes_all",
            lambda s: not any(c in s for c in chars),
            merge_options(options, with_param("chars", chars)),
        )

    def starts_with(self, prefix: str, *options: ErrorOption) -> Valuer:
        return self._string(
            "starts_with",
            lambda s: s.startswith(prefix),
            merge_options(options, with_param("prefix", prefix)),
        )

    def starts_not_with(self, prefix: str, *options: ErrorOption) -> Valuer:
        return self._string(
            "starts_not_with",
            lambda s: not s.startswith(prefix),
            merge_options(options, with_param("prefix", prefix)),
        )

    def ends_with(self, suffix: str, *options: ErrorOption) -> Valuer:
        return self._string(
            "ends_with",
            lambda s: s.endswith(suffix),
            merge_options(options, with_param("suffix", suffix)),
        )

    def ends_not_with(self, suffix: str, *options: ErrorOption) -> Valuer:
        return self._string(
            "ends_not_with",
            lambda s: not s.endswith(suffix),
            merge_options(options, with_param("suffix", suffix)),
        )

    # Membership and length

    def one_of(self, items: Iterable[Any], *options: ErrorOption) -> Valuer:
        choices = list(items)
        return self.rule(
            "one_of",
            lambda val: val in choices,
            *merge_options(options, with_param("items", ", ".join(to_string(c) for c in choices))),
        )

    def not_empty(self, *options: ErrorOption) -> Valuer:
        return self.rule("not_empty", lambda val: not self._is_empty(val), *options)

    def length(self, n: int, *options: ErrorOption) -> Valuer:
        return self.rule(
            "length",
            lambda val: _length(val) == n,
            *merge_options(options, with_param("length", n)),
        )

    def min_length(self, min: int, *options: ErrorOption) -> Valuer:
        return self.rule(
            "min_length",
            lambda val: _length(val) >= min,
            *merge_options(options, with_param("min", min)),
        )

    def max_length(self, max: int, *options: ErrorOption) -> Valuer:
        return self.rule(
            "max_length",
            lambda val: _length(val) <= max,
            *merge_options(options, with_param("max", max)),
        )

    def length_between(self, min: int, max: int, *options: ErrorOption) -> Valuer:
        return self.rule(
            "length_between",
            lambda val: min <= _length(val) <= max,
            *merge_options(options, with_param("min", min), with_param("max", max)),
        )

    # Comparisons

    def greater_than(self, min: Any, *options: ErrorOption) -> Valuer:
        return self.rule(
            "greater_than",
            lambda val: _compare(operator.gt, val, min),
            *merge_options(options, with_param("min", min)),
        )

    def greater_equal_than(self, min: Any, *options: ErrorOption) -> Valuer:
        return self.rule(
            "greater_equal_than",
            lambda val: _compare(operator.ge, val, min),
            *merge_options(options, with_param("min", min)),
        )

    def less_than(self, max: Any, *options: ErrorOption) -> Valuer:
        return self.rule(
            "less_than",
            lambda val: _compare(operator.lt, val, max),
            *merge_options(options, with_param("max", max)),
        )

    def less_equal_than(self, max: Any, *options: ErrorOption) -> Valuer:
        return self.rule(
            "less_equal_than",
            lambda val: _compare(operator.le, val, max),
            *merge_options(options, with_param("max", max)),
        )

    def equal(self, another: Any, *options: ErrorOption) -> Valuer:
        return self.rule(
            "equal",
            lambda val: val == another,
            *merge_options(options, with_param("another", another)),
        )

    def not_equal(self, another: Any, *options: ErrorOption) -> Valuer:
        return self.rule(
            "not_equal",
            lambda val: val != another,
            *merge_options(options, with_param("another", another)),
        )

    def between(self, min: Any, max: Any, *options: ErrorOption) -> Valuer:
        return self.rule(
            "between",
            lambda val: _compare(operator.ge, val, min) and _compare(operator.le, val, max),
            *merge_options(options, with_param("min", min), with_param("max", max)),
        )

    def not_between(self, min: Any, max: Any, *options: ErrorOption) -> Valuer:
        return self.rule(
            "not_between",
            lambda val: _compare(operator.lt, val, min) or _compare(operator.gt, val, max),
            *merge_options(options, with_param("min", min), with_param("max", max)),
        )

    # Collections

    def every(self, handler: ItemHandler, *options: ErrorOption) -> Valuer:
        """Require every element of the value to pass ``handler``.

        Fails with ``every`` on the first element answering ``False``; a
        failing nested validator or a returned exception fails with that
        error instead. The failing element's ``index`` or ``key`` is added to
        the error params.
        """
        return self._itemize(handler, Policy.EVERY, options)

    def some(self, handler: ItemHandler, *options: ErrorOption) -> Valuer:
        """Require at least one element of the value to pass ``handler``.

        Fails with ``some`` once every element was tried without a pass. A
        returned exception still fails immediately.
        """
        return self._itemize(handler, Policy.SOME, options)

    def _itemize(self, handler: ItemHandler, policy: Policy, options: tuple[ErrorOption, ...]) -> Valuer:
        code = policy.value

        def rule(val: Any) -> BaseException | None:
            outcome, item = evaluate(val, handler, policy)
            if outcome.ok:
                return None
            merged = merge_options(options, *_item_params(item))
            if outcome.status is Status.FAIL or outcome.error is None:
                return self.new_error(code, merged)
            return self._mistake(outcome.error, code, merged)

        return self.add_rule(rule)


def _item_params(item: Item | None) -> list[ErrorOption]:
    if item is None:
        return []
    if item.index is not None:
        return [with_param("index", item.index)]
    return [with_param("key", item.key)]


def value(value: Any, field: str = "", label: str = "") -> Valuer:
    """Create a validator for a value.

    Args:
        value: The value under validation
        field: Machine name
        label: Display name

    Returns:
        A Valuer with an empty rule chain
    """
    return Valuer(value, field, label)
