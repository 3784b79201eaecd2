"""Exception types and centralized error messages for selector handling.

Every selector syntax error carries a kebab-case code. The human-readable
message for a code lives in one table so the tokenizer, the parser and the
builder report problems consistently.
"""

from __future__ import annotations


def generate_error_message(code: str, detail: str | None = None) -> str:
    """Generate human-readable error message from error code.

    Args:
        code: The error code string (kebab-case format)
        detail: Optional offending text to include in the message for context

    Returns:
        Human-readable error message string
    """
    messages = {
        # ================================================================
        # TOKENIZER ERRORS
        # ================================================================
        "empty-selector": "Empty selector",
        "unexpected-character": f"Unexpected character {detail!r}",
        "expected-id-name": "Expected identifier after #",
        "expected-class-name": "Expected identifier after .",
        "expected-pseudo-class-name": "Expected pseudo-class name after :",
        "expected-pseudo-element-name": "Expected pseudo-element name after ::",
        "expected-name-after-namespace": "Expected name after namespace separator |",
        "expected-attribute-name": "Expected attribute name after [",
        "expected-equals-after-operator": f"Expected = after {detail}",
        "unexpected-character-in-attribute": f"Unexpected character {detail!r} in attribute selector",
        "expected-attribute-value": "Expected attribute value after operator",
        "unterminated-attribute": "Attribute selector is missing its closing ]",
        "unterminated-string": "Unterminated string in attribute value",
        "unbalanced-parentheses": "Pseudo-class argument is missing its closing )",
        # ================================================================
        # PARSER ERRORS
        # ================================================================
        "leading-combinator": f"Selector cannot start with combinator {detail!r}",
        "trailing-combinator": f"Expected selector after combinator {detail!r}",
        "consecutive-combinators": f"Unexpected combinator {detail!r} after another combinator",
        "empty-selector-list-member": "Empty selector in selector list",
        "misplaced-element-name": f"Element name {detail!r} must come first in a compound selector",
        "multiple-ids": f"Compound selector already has a different id than {detail!r}",
        "unexpected-token": f"Unexpected {detail}",
    }

    # Return message or fall back to the code itself if not found
    return messages.get(code, code)


class SelectorError(ValueError):
    """Raised when a CSS selector is invalid."""


class SelectorSyntaxError(SelectorError, SyntaxError):
    """Raised when selector text does not conform to the selector grammar.

    Inherits from SyntaxError to provide Python 3.11+ enhanced error display
    with the offending column highlighted.
    """

    selector: str
    position: int
    code: str

    def __init__(self, code: str, selector: str, position: int, detail: str | None = None) -> None:
        message = generate_error_message(code, detail)
        super().__init__(f"{message} at position {position}")
        self.code = code
        self.selector = selector
        self.position = position
        self.msg = f"{message} at position {position}"
        self.filename = "<selector>"
        self.lineno = 1
        self.text = selector
        self.offset = position + 1
        self.end_lineno = 1
        self.end_offset = position + 2

    def __str__(self) -> str:
        return f"{self.msg}: {self.selector!r}"


class UnsupportedFeatureError(SelectorError, NotImplementedError):
    """Raised for selector features the engine refuses to guess at (namespaces)."""


class TypeMismatchError(TypeError):
    """Raised when a tree handle does not look like a node."""


class XMLLoadError(ValueError):
    """Raised when XML text cannot be turned into a node tree."""
