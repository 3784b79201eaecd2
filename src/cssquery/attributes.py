"""Attribute value comparison for ``[attr op value]`` selector clauses.

All comparisons are case-sensitive; no language-dependent case folding is
attempted.
"""

from __future__ import annotations

from collections.abc import Mapping

from .errors import SelectorError
from .selector import AttributeOperator, AttributeTest


def _operator(operator: AttributeOperator | str) -> AttributeOperator:
    if isinstance(operator, AttributeOperator):
        return operator
    try:
        return AttributeOperator(operator)
    except ValueError:
        raise SelectorError(f"Unknown attribute operator: {operator!r}") from None


def matches(operator: AttributeOperator | str, needle: str, haystack: str) -> bool:
    """Compare an attribute value (``haystack``) against a selector value (``needle``).

    ``operator`` is an AttributeOperator or its CSS spelling (``"^="`` etc.).
    A haystack shorter than the needle never matches.
    """
    op = _operator(operator)

    if len(haystack) < len(needle):
        return False

    if op is AttributeOperator.IS_EXACTLY:
        return needle == haystack

    if op is AttributeOperator.CONTAINS_WITH_SPACE:
        # Whitespace-separated word match
        return needle in haystack.split()

    if op is AttributeOperator.CONTAINS_WITH_HYPHEN:
        # Hyphen-separated segment match (lang|="en" matches lang="en-US")
        return needle in haystack.split("-")

    if op is AttributeOperator.CONTAINS_IN_STRING:
        return needle in haystack

    if op is AttributeOperator.BEGINS_WITH:
        return haystack.startswith(needle)

    # AttributeOperator.ENDS_WITH
    return haystack.endswith(needle)


def match_attribute_test(attrs: Mapping[str, str | None] | None, test: AttributeTest) -> bool:
    """Check one attribute clause against a node's attribute mapping.

    A missing attribute always fails. A clause without an operator only
    checks presence.
    """
    if not attrs or test.name not in attrs:
        return False
    if test.operator is None:
        return True
    value = attrs[test.name]
    return matches(test.operator, test.value or "", value or "")
