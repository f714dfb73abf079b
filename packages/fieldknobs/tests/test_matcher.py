"""Tests for value-driven dispatch."""

import pytest

from fieldknobs.errors import ValidationError
from fieldknobs.exceptions import RuleContractError
from fieldknobs.matcher import Matcher, strict_equal
from fieldknobs.valuer import Valuer


class Handler:
    """Handler that records its calls and returns a fixed result."""

    def __init__(self, name, result=None):
        self.name = name
        self.result = result
        self.received = []

    def __call__(self, valuer):
        self.received.append(valuer)
        return self.result


class TestMatcher:
    """Test branch selection."""

    def test_matching_branch_only(self):
        h1, h2 = Handler("h1"), Handler("h2")
        assert Matcher(2, "f", "F").branch(1, h1).branch(2, h2).validate() is None
        assert h1.received == []
        assert len(h2.received) == 1

    def test_no_match_no_fallback(self):
        h1, h2 = Handler("h1"), Handler("h2")
        assert Matcher(3, "f", "F").branch(1, h1).branch(2, h2).validate() is None
        assert h1.received == [] and h2.received == []

    def test_first_matching_branch_wins(self):
        first, second = Handler("first"), Handler("second")
        Matcher("a").branch("a", first).branch("a", second).validate()
        assert len(first.received) == 1
        assert second.received == []

    def test_fallback(self):
        branch, fallback = Handler("branch"), Handler("fallback")
        Matcher(3).branch(1, branch).fallback(fallback).validate()
        assert branch.received == []
        assert len(fallback.received) == 1

    def test_handler_gets_fresh_bound_valuer(self):
        handler = Handler("h")
        matcher = Matcher("x", "kind", "Kind").branch("x", handler)
        matcher.validate()
        matcher.validate()
        first, second = handler.received
        assert isinstance(first, Valuer)
        assert first is not second
        assert (first.value, first.field, first.label) == ("x", "kind", "Kind")

    def test_handler_error_is_outcome(self):
        error = ValidationError("custom")
        assert Matcher(1).branch(1, Handler("h", error)).validate() is error

    def test_configured_valuer_is_evaluated(self):
        def handler(v):
            v.min_length(5)

        error = Matcher("abc", "code", "Code").branch("abc", handler).validate()
        assert error.code == "min_length"
        assert error.field == "code"

    def test_returned_validatable_is_evaluated(self):
        error = Matcher("abc", "code", "Code").branch("abc", lambda v: v.max_length(1)).validate()
        assert error.code == "max_length"

    def test_handler_contract(self):
        with pytest.raises(RuleContractError):
            Matcher(1).branch(1, lambda v: "oops").validate()

    def test_strict_equality_by_default(self):
        handler = Handler("h")
        Matcher(1).branch(True, handler).branch(1.0, handler).validate()
        assert handler.received == []

    def test_custom_compare(self):
        handler = Handler("h")
        Matcher("1", compare=lambda a, b: str(a) == str(b)).branch(1, handler).validate()
        assert len(handler.received) == 1

    def test_compare_with(self):
        handler = Handler("h")
        Matcher(1).compare_with(lambda a, b: a == b).branch(1.0, handler).validate()
        assert len(handler.received) == 1

    def test_branches_are_listed_in_order(self):
        matcher = Matcher(0).branch(1, Handler("a")).branch(2, Handler("b"))
        assert [b.candidate for b in matcher.branches] == [1, 2]


class TestStrictEqual:
    def test_strict_equal(self):
        assert strict_equal(1, 1)
        assert strict_equal("a", "a")
        assert not strict_equal(1, 1.0)
        assert not strict_equal(1, True)
        assert not strict_equal(1, 2)
