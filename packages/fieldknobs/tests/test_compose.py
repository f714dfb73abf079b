"""Tests for composition primitives."""

from fieldknobs.compose import (
    SOME_HEADER,
    Checker,
    IndexBy,
    check,
    every,
    from_mapping,
    index_by,
    some,
    validate,
    wrap,
)
from fieldknobs.errors import ValidationError, ValidationErrors, with_format
from fieldknobs.exceptions import CompositeError
from fieldknobs.outcome import Validatable
from fieldknobs.valuer import Valuer, value


class Counter:
    """Validatable that counts evaluations."""

    def __init__(self, error=None):
        self.error = error
        self.calls = 0

    def validate(self):
        self.calls += 1
        return self.error


def failing(field, message="bad"):
    return Counter(ValidationError("x", with_format(message), field=field))


class TestChecker:
    def test_checker_is_validatable(self):
        checker = Checker(lambda: None)
        assert isinstance(checker, Validatable)
        assert checker.validate() is None
        assert checker() is None

    def test_wrap(self):
        seen = []

        def check_value(val):
            seen.append(val)
            return ValidationError("wrapped")

        assert wrap(5, check_value).validate().code == "wrapped"
        assert seen == [5]


class TestValidate:
    """Test aggregate-all evaluation."""

    def test_all_pass(self):
        assert validate(Counter(), Counter()) is None
        assert validate() is None

    def test_collects_every_failure(self):
        a, b, c = failing("a"), Counter(), failing("c")
        errors = validate(a, b, c)
        assert isinstance(errors, ValidationErrors)
        assert [e.field for e in errors.all()] == ["a", "c"]
        assert (a.calls, b.calls, c.calls) == (1, 1, 1)

    def test_skips_none(self):
        assert validate(None, Counter(), None) is None

    def test_flattens_nested_collections(self):
        nested = Counter(ValidationErrors([ValidationError("x", field="a"), ValidationError("y", field="b")]))
        errors = validate(nested, failing("c"))
        assert len(errors) == 3

    def test_fields_from_valuers(self):
        field = from_mapping({"name": "", "age": 12, "email": "a@b"})
        errors = validate(
            field("name", "Name").required(),
            field("age", "Age").greater_equal_than(18),
            field("email", "Email").contains("@"),
        )
        assert set(errors.to_map()) == {"name", "age"}
        assert str(errors) == "Name is required\nAge must be greater than or equal to 18"


class TestCheck:
    """Test fail-fast evaluation."""

    def test_returns_first_failure(self):
        a, b, c = Counter(), failing("b"), failing("c")
        error = check(a, b, c)
        assert error.field == "b"
        assert (a.calls, b.calls, c.calls) == (1, 1, 0)

    def test_all_pass(self):
        assert check(Counter(), None) is None


class TestEvery:
    def test_every(self):
        a, b, c = Counter(), failing("b"), Counter()
        error = every(a, b, c).validate()
        assert error.field == "b"
        assert c.calls == 0

    def test_every_pass(self):
        assert every(Counter(), Counter()).validate() is None


class TestSome:
    def test_passes_when_one_passes(self):
        assert some(failing("a"), failing("b"), Counter()).validate() is None

    def test_stops_at_first_pass(self):
        a, b, c = failing("a"), Counter(), Counter()
        assert some(a, b, c).validate() is None
        assert c.calls == 0

    def test_lists_every_failure(self):
        error = some(failing("a", "first problem"), failing("b", "second problem")).validate()
        assert isinstance(error, ValidationError)
        assert error.code == "some_of"
        assert isinstance(error.cause, CompositeError)
        assert len(error.cause.errors) == 2
        assert str(error) == f"{SOME_HEADER}\n  first problem\n  second problem"

    def test_no_validators(self):
        assert some().validate() is None


class TestIndexBy:
    """Test selection of the first complete group."""

    def test_selects_populated_group(self):
        selector = index_by([["", ""], ["a", "b"]])
        assert isinstance(selector, IndexBy)
        assert selector.validate() is None
        assert selector.index == 1

    def test_first_complete_group_wins(self):
        selector = index_by([["a", 1], ["b", 2]])
        assert selector.validate() is None
        assert selector.index == 0

    def test_partial_group_fails(self):
        selector = index_by([["a", ""]])
        error = selector.validate()
        assert error.code == "index_by"
        assert selector.index is None
        assert str(error) == "incomplete parameters"

    def test_empty_groups_fail(self):
        assert index_by([[], [None]]).validate().code == "index_by"

    def test_options(self):
        error = index_by([["", "x"]], with_format("give all of a, b")).validate()
        assert str(error) == "give all of a, b"

    def test_inside_validate(self):
        selector = index_by([["", ""]])
        errors = validate(selector)
        assert errors.first().code == "index_by"


class TestFromMapping:
    def test_bound_to_entry(self):
        field = from_mapping({"name": "ann"})
        v = field("name", "Name")
        assert isinstance(v, Valuer)
        assert (v.value, v.field, v.label) == ("ann", "name", "Name")

    def test_missing_key_is_empty(self):
        field = from_mapping({})
        v = field("name", "Name")
        assert v.value is None
        assert v.required().validate().code == "required"


class TestAcceptance:
    """End-to-end behaviour across components."""

    def test_required_checks_run_in_order(self):
        error = (
            value(None, "f", "F")
            .required(with_format("A failed"))
            .required(with_format("B failed"))
            .validate()
        )
        assert str(error) == "A failed"

    def test_nested_collection_with_match(self):
        contacts = [
            {"type": "email", "value": "a@b"},
            {"type": "phone", "value": "12"},
        ]

        def contact(item):
            entry = item.value
            return value(entry["type"], f"contacts.{item.index}", "Contact").match(
                lambda m: m.branch("email", lambda v: value(entry["value"], v.field, v.label).contains("@"))
                .branch("phone", lambda v: value(entry["value"], v.field, v.label).min_length(5))
            )

        error = value(contacts, "contacts", "Contacts").every(contact).validate()
        assert error.field == "contacts.1"
        assert error.code == "min_length"
