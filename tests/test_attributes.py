"""Tests for attribute value comparison."""

import pytest

from cssquery import AttributeOperator, AttributeTest, SelectorError
from cssquery.attributes import match_attribute_test, matches


class TestMatches:
    @pytest.mark.parametrize(
        "operator,needle,haystack,expected",
        [
            ("*=", "ell", "Hello", True),
            ("^=", "He", "Hello", True),
            ("$=", "lo", "Hello", True),
            ("|=", "en", "en-US", True),
            ("=", "en", "en-US", False),
            ("=", "x", "Hi", False),
            ("=", "Hello", "Hi", False),
            ("=", "Hello", "Hello", True),
            ("~=", "b", "a  b\tc", True),
            ("~=", "a b", "a b c", False),
            ("~=", "ab", "a b", False),
            ("|=", "US", "en-US", True),
            ("|=", "e", "en-US", False),
            ("*=", "xyz", "Hello", False),
            ("^=", "lo", "Hello", False),
            ("$=", "He", "Hello", False),
        ],
    )
    def test_operator_semantics(self, operator, needle, haystack, expected):
        assert matches(operator, needle, haystack) is expected

    def test_case_sensitive(self):
        assert not matches("=", "hello", "Hello")
        assert not matches("*=", "ELL", "Hello")

    @pytest.mark.parametrize("operator", list(AttributeOperator))
    def test_short_haystack_never_matches(self, operator):
        """A haystack shorter than the needle fails every operator."""
        assert matches(operator, "longer", "short") is False

    def test_accepts_enum_members(self):
        assert matches(AttributeOperator.BEGINS_WITH, "He", "Hello")

    def test_unknown_operator(self):
        with pytest.raises(SelectorError):
            matches("!=", "a", "b")


class TestMatchAttributeTest:
    def test_missing_attribute_fails_every_operator(self):
        for operator in [None, *AttributeOperator]:
            test = AttributeTest("lang", operator, "en" if operator else None)
            assert not match_attribute_test({"id": "x"}, test)

    def test_presence(self):
        assert match_attribute_test({"lang": ""}, AttributeTest("lang"))
        assert not match_attribute_test(None, AttributeTest("lang"))

    def test_value_comparison(self):
        test = AttributeTest("lang", AttributeOperator.CONTAINS_WITH_HYPHEN, "en")
        assert match_attribute_test({"lang": "en-GB"}, test)
        assert not match_attribute_test({"lang": "fr-CA"}, test)

    def test_valueless_attribute_treated_as_empty(self):
        test = AttributeTest("checked", AttributeOperator.IS_EXACTLY, "")
        assert match_attribute_test({"checked": None}, test)
