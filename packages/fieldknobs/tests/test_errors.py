"""Tests for the validation error model."""

import pytest

from fieldknobs.errors import (
    ValidationError,
    ValidationErrors,
    is_builtin_error,
    merge_options,
    with_code,
    with_format,
    with_param,
)
from fieldknobs.exceptions import FieldknobsError
from fieldknobs.valuer import value


class TestValidationError:
    """Test single errors and their options."""

    def test_construct_with_code(self):
        error = ValidationError("required", field="name", label="Name", value="")
        assert error.code == "required"
        assert error.field == "name"
        assert error.label == "Name"
        assert error.value == ""
        assert error.format is None
        assert error.params == {}
        assert error.cause is None

    def test_is_an_exception(self):
        error = ValidationError("required")
        assert isinstance(error, FieldknobsError)
        with pytest.raises(ValidationError):
            raise error

    def test_options_apply_left_to_right(self):
        error = ValidationError(
            "min_length",
            with_format("first"),
            with_param("min", 3),
            with_format("second"),
            with_param("min", 5),
            with_param("max", 9),
            with_code("too_short"),
        )
        assert error.code == "too_short"
        assert error.format == "second"
        assert error.params == {"min": 5, "max": 9}

    def test_params_is_a_copy(self):
        error = ValidationError("x", with_param("min", 1))
        params = error.params
        params["min"] = 100
        assert error.params == {"min": 1}

    def test_merge_options_puts_presets_first(self):
        options = merge_options([with_param("min", 10)], with_param("min", 1), with_param("max", 2))
        error = ValidationError("x", *options)
        assert error.params == {"min": 10, "max": 2}

    def test_literal_substitution(self, bare_registry):
        error = ValidationError(
            "greater_than",
            with_format("{label}必须大于{min}"),
            with_param("min", 18),
            label="age",
        )
        assert error.render(bare_registry) == "age必须大于18"

    def test_unresolved_placeholders_stay(self, bare_registry):
        error = ValidationError("x", with_format("{label} needs {unknown}"), label="Age")
        assert error.render(bare_registry) == "Age needs {unknown}"

    def test_substitution_is_not_recursive(self, bare_registry):
        error = ValidationError(
            "x",
            with_format("{a} and {b}"),
            with_param("a", "{b}"),
            with_param("b", "B"),
        )
        assert error.render(bare_registry) == "{b} and B"

    def test_value_is_available_as_param(self, bare_registry):
        error = ValidationError("x", with_format("got {value}"), value=42)
        assert error.render(bare_registry) == "got 42"

    def test_own_label_and_value_win_over_params(self, bare_registry):
        error = ValidationError(
            "x",
            with_format("{label}: {value}"),
            with_param("label", "Other"),
            with_param("value", 0),
            label="Name",
            value=7,
        )
        assert error.render(bare_registry) == "Name: 7"
        assert error.params == {"label": "Other", "value": 0}

    def test_required_keeps_own_label(self):
        error = value("", "name", "Name").required(with_param("label", "OTHER")).validate()
        assert str(error) == "Name is required"

    def test_str_uses_registered_template(self):
        error = ValidationError("required", label="Name")
        assert str(error) == "Name is required"

    def test_str_prefers_cause(self):
        error = ValidationError("custom", with_format("templated"), cause=ValueError("low level"))
        assert str(error) == "low level"
        assert error.render() == "templated"

    def test_is_builtin_error(self):
        assert is_builtin_error(ValidationError("x"))
        assert is_builtin_error(ValidationErrors())
        assert not is_builtin_error(ValueError("x"))


class TestValidationErrors:
    """Test the error collection."""

    def _error(self, field, code="required"):
        return ValidationError(code, field=field, label=field.title())

    def test_empty(self):
        errors = ValidationErrors()
        assert errors.is_empty()
        assert len(errors) == 0
        assert not errors
        assert errors.first() is None
        assert errors.get("name") == []
        assert errors.all() == []
        assert errors.to_map() == {}
        assert str(errors) == ""

    def test_add_none_is_noop(self):
        errors = ValidationErrors()
        errors.add(None)
        assert errors.is_empty()

    def test_add_flattens_collections(self):
        inner = ValidationErrors([self._error("a"), self._error("b")])
        errors = ValidationErrors([self._error("c")])
        errors.add(inner)
        assert len(errors) == 3
        assert all(isinstance(e, ValidationError) for e in errors)
        assert [e.field for e in errors.all()] == ["c", "a", "b"]

    def test_add_wraps_foreign_exceptions(self):
        errors = ValidationErrors()
        cause = RuntimeError("boom")
        errors.add(cause)
        error = errors.first()
        assert isinstance(error, ValidationError)
        assert error.cause is cause
        assert error.field == ""
        assert error.label == ""
        assert str(error) == "boom"

    def test_duplicates_are_kept(self):
        error = self._error("name")
        errors = ValidationErrors()
        errors.add(error)
        errors.add(error)
        assert len(errors) == 2

    def test_get_by_field(self):
        first = self._error("name")
        second = self._error("name", "min_length")
        errors = ValidationErrors([first, self._error("age"), second])
        assert errors.get("name") == [first, second]
        assert errors.get("missing") == []

    def test_to_map_groups_preserving_order(self):
        first = self._error("name")
        second = self._error("name", "min_length")
        age = self._error("age")
        errors = ValidationErrors([first, second, age])
        groups = errors.to_map()
        assert set(groups) == {"name", "age"}
        assert groups["name"] == [first, second]
        assert groups["age"] == [age]

    def test_to_map_uses_first_seen_field_order(self):
        errors = ValidationErrors([self._error("b"), self._error("a"), self._error("b")])
        assert list(errors.to_map()) == ["b", "a"]

    def test_render_paragraph_per_field(self):
        errors = ValidationErrors([
            ValidationError("x", with_format("name one"), field="name"),
            ValidationError("x", with_format("age one"), field="age"),
            ValidationError("x", with_format("name two"), field="name"),
        ])
        assert str(errors) == "name one\nname two\nage one"
