# CSS selector tokenizer and parser for cssquery
# Turns selector text into a SelectorList via SelectorBuilder events

from __future__ import annotations

from .errors import SelectorSyntaxError
from .selector import AttributeOperator, Combinator, SelectorBuilder, SelectorList

_WHITESPACE = " \t\n\r\f"


# Token types for the CSS selector lexer
class TokenType:
    TAG: str = "TAG"  # div, span, or an attribute name inside [...]
    NAMESPACE: str = "NAMESPACE"  # svg| or *| or | (value is the prefix)
    ID: str = "ID"  # #foo
    CLASS: str = "CLASS"  # .bar
    UNIVERSAL: str = "UNIVERSAL"  # *
    ATTR_START: str = "ATTR_START"  # [
    ATTR_END: str = "ATTR_END"  # ]
    ATTR_OP: str = "ATTR_OP"  # =, ~=, |=, ^=, $=, *=
    STRING: str = "STRING"  # "value" or 'value' or unquoted
    PSEUDO_CLASS: str = "PSEUDO_CLASS"  # :hover, :nth-child(2n+1)
    PSEUDO_ELEMENT: str = "PSEUDO_ELEMENT"  # ::before
    COMBINATOR: str = "COMBINATOR"  # >, +, ~, or whitespace (descendant)
    COMMA: str = "COMMA"  # ,
    EOF: str = "EOF"


class Token:
    __slots__ = ("pos", "type", "value")

    type: str
    value: str | None
    pos: int

    def __init__(self, token_type: str, value: str | None = None, pos: int = 0) -> None:
        self.type = token_type
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, pos={self.pos})"


class SelectorTokenizer:
    """Tokenizes a CSS selector string into tokens."""

    __slots__ = ("length", "pos", "selector")

    selector: str
    pos: int
    length: int

    def __init__(self, selector: str) -> None:
        self.selector = selector
        self.pos = 0
        self.length = len(selector)

    def _error(self, code: str, detail: str | None = None, pos: int | None = None) -> SelectorSyntaxError:
        return SelectorSyntaxError(code, self.selector, self.pos if pos is None else pos, detail)

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < self.length:
            return self.selector[pos]
        return ""

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.selector[self.pos] in _WHITESPACE:
            self.pos += 1

    def _is_name_start(self, ch: str) -> bool:
        # CSS identifier start: letter, underscore, hyphen, or non-ASCII
        return ch.isalpha() or ch == "_" or ch == "-" or ord(ch) > 127

    def _is_name_char(self, ch: str) -> bool:
        return self._is_name_start(ch) or ch.isdigit()

    def _read_name(self) -> str:
        start = self.pos
        while self.pos < self.length and self._is_name_char(self.selector[self.pos]):
            self.pos += 1
        return self.selector[start : self.pos]

    def _starts_namespace(self) -> bool:
        # A lone "|" separates a namespace prefix; "|=" is an attribute operator
        return self._peek() == "|" and self._peek(1) != "="

    def _read_string(self, quote: str) -> str:
        opening = self.pos
        # Skip opening quote
        self.pos += 1
        start = self.pos
        parts: list[str] = []

        while self.pos < self.length:
            ch = self.selector[self.pos]
            if ch == quote:
                if self.pos > start:
                    parts.append(self.selector[start : self.pos])
                self.pos += 1
                return "".join(parts)
            if ch == "\\":
                if self.pos > start:
                    parts.append(self.selector[start : self.pos])
                self.pos += 1
                if self.pos < self.length:
                    parts.append(self.selector[self.pos])
                    self.pos += 1
                start = self.pos
            else:
                self.pos += 1

        raise self._error("unterminated-string", pos=opening)

    def _read_unquoted_attr_value(self) -> str:
        start = self.pos
        while self.pos < self.length:
            ch = self.selector[self.pos]
            if ch in _WHITESPACE or ch == "]":
                break
            self.pos += 1
        return self.selector[start : self.pos]

    def _tokenize_attribute(self, tokens: list[Token]) -> None:
        tokens.append(Token(TokenType.ATTR_START, pos=self.pos))
        self.pos += 1
        self._skip_whitespace()
        if self.pos >= self.length:
            raise self._error("unterminated-attribute")

        # Optional namespace prefix: [|name], [*|name], [ns|name]
        if self._peek() == "*" and self._peek(1) == "|":
            tokens.append(Token(TokenType.NAMESPACE, "*", self.pos))
            self.pos += 2
        elif self._starts_namespace():
            tokens.append(Token(TokenType.NAMESPACE, "", self.pos))
            self.pos += 1

        name_pos = self.pos
        attr_name = self._read_name()
        if not attr_name:
            raise self._error("expected-attribute-name")
        if self._starts_namespace():
            tokens.append(Token(TokenType.NAMESPACE, attr_name, name_pos))
            self.pos += 1
            name_pos = self.pos
            attr_name = self._read_name()
            if not attr_name:
                raise self._error("expected-name-after-namespace")
        tokens.append(Token(TokenType.TAG, attr_name, name_pos))
        self._skip_whitespace()

        ch = self._peek()
        if ch == "]":
            tokens.append(Token(TokenType.ATTR_END, pos=self.pos))
            self.pos += 1
            return
        if not ch:
            raise self._error("unterminated-attribute")

        op_pos = self.pos
        if ch == "=":
            self.pos += 1
            tokens.append(Token(TokenType.ATTR_OP, "=", op_pos))
        elif ch in "~|^$*":
            self.pos += 1
            if self._peek() != "=":
                raise self._error("expected-equals-after-operator", ch)
            self.pos += 1
            tokens.append(Token(TokenType.ATTR_OP, ch + "=", op_pos))
        else:
            raise self._error("unexpected-character-in-attribute", ch)

        self._skip_whitespace()
        value_pos = self.pos
        ch = self._peek()
        if ch == '"' or ch == "'":
            value = self._read_string(ch)
        else:
            value = self._read_unquoted_attr_value()
            if not value:
                if self.pos >= self.length:
                    raise self._error("unterminated-attribute")
                raise self._error("expected-attribute-value")
        tokens.append(Token(TokenType.STRING, value, value_pos))

        self._skip_whitespace()
        if self._peek() != "]":
            if self.pos >= self.length:
                raise self._error("unterminated-attribute")
            raise self._error("unexpected-character-in-attribute", self._peek())
        tokens.append(Token(TokenType.ATTR_END, pos=self.pos))
        self.pos += 1

    def _tokenize_pseudo(self, tokens: list[Token]) -> None:
        start = self.pos
        self.pos += 1
        if self._peek() == ":":
            self.pos += 1
            name = self._read_name()
            if not name:
                raise self._error("expected-pseudo-element-name")
            tokens.append(Token(TokenType.PSEUDO_ELEMENT, name, start))
            return

        name = self._read_name()
        if not name:
            raise self._error("expected-pseudo-class-name")

        # Functional pseudo-class: keep the argument text verbatim
        if self._peek() == "(":
            paren_pos = self.pos
            self.pos += 1
            paren_depth = 1
            arg_start = self.pos
            while self.pos < self.length:
                c = self.selector[self.pos]
                if c == "(":
                    paren_depth += 1
                elif c == ")":
                    paren_depth -= 1
                    if paren_depth == 0:
                        break
                self.pos += 1
            if paren_depth:
                raise self._error("unbalanced-parentheses", pos=paren_pos)
            arg = self.selector[arg_start : self.pos].strip()
            self.pos += 1
            name = f"{name}({arg})"

        tokens.append(Token(TokenType.PSEUDO_CLASS, name, start))

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        pending_whitespace = False

        while self.pos < self.length:
            ch = self.selector[self.pos]

            # Skip whitespace but remember it for combinator detection
            if ch in _WHITESPACE:
                pending_whitespace = True
                self._skip_whitespace()
                continue

            # Handle combinators: >, +, ~
            if ch in ">+~":
                pending_whitespace = False
                tokens.append(Token(TokenType.COMBINATOR, ch, self.pos))
                self.pos += 1
                self._skip_whitespace()
                continue

            # Whitespace followed by anything but a comma is a descendant
            # combinator. Combinators and commas consume trailing whitespace.
            if pending_whitespace and tokens and ch != ",":
                tokens.append(Token(TokenType.COMBINATOR, " ", self.pos - 1))
            pending_whitespace = False

            if ch == "*":
                if self._peek(1) == "|":
                    tokens.append(Token(TokenType.NAMESPACE, "*", self.pos))
                    self.pos += 2
                    continue
                tokens.append(Token(TokenType.UNIVERSAL, "*", self.pos))
                self.pos += 1
                continue

            if ch == "|":
                tokens.append(Token(TokenType.NAMESPACE, "", self.pos))
                self.pos += 1
                continue

            if ch == "#":
                start = self.pos
                self.pos += 1
                name = self._read_name()
                if not name:
                    raise self._error("expected-id-name")
                tokens.append(Token(TokenType.ID, name, start))
                continue

            if ch == ".":
                start = self.pos
                self.pos += 1
                name = self._read_name()
                if not name:
                    raise self._error("expected-class-name")
                tokens.append(Token(TokenType.CLASS, name, start))
                continue

            if ch == "[":
                self._tokenize_attribute(tokens)
                continue

            # Comma (selector grouping)
            if ch == ",":
                tokens.append(Token(TokenType.COMMA, ",", self.pos))
                self.pos += 1
                self._skip_whitespace()
                continue

            if ch == ":":
                self._tokenize_pseudo(tokens)
                continue

            # Tag name, possibly a namespace prefix
            if self._is_name_start(ch):
                start = self.pos
                name = self._read_name()
                if self._peek() == "|":
                    tokens.append(Token(TokenType.NAMESPACE, name, start))
                    self.pos += 1
                    continue
                tokens.append(Token(TokenType.TAG, name, start))
                continue

            raise self._error("unexpected-character", ch)

        tokens.append(Token(TokenType.EOF, pos=self.length))
        return tokens


class SelectorParser:
    """Parses a list of tokens, reporting each part to a SelectorBuilder."""

    __slots__ = ("builder", "pos", "selector", "tokens")

    tokens: list[Token]
    pos: int
    selector: str
    builder: SelectorBuilder

    def __init__(self, tokens: list[Token], builder: SelectorBuilder) -> None:
        self.tokens = tokens
        self.pos = 0
        self.builder = builder
        self.selector = builder.selector_text

    def _peek(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return Token(TokenType.EOF, pos=len(self.selector))

    def _advance(self) -> Token:
        token = self._peek()
        self.pos += 1
        return token

    def _expect(self, token_type: str, code: str = "unexpected-token") -> Token:
        token = self._peek()
        if token.type != token_type:
            raise SelectorSyntaxError(code, self.selector, token.pos, token.type.lower())
        return self._advance()

    def parse(self) -> SelectorList:
        """Parse a complete selector (possibly comma-separated list)."""
        builder = self.builder
        while True:
            token = self._peek()
            if token.type == TokenType.EOF:
                return builder.build(token.pos)
            if token.type == TokenType.COMBINATOR:
                self._advance()
                builder.combinator(Combinator(token.value), token.pos)
            elif token.type == TokenType.COMMA:
                self._advance()
                builder.next_selector(token.pos)
            elif not self._parse_compound_selector():
                raise SelectorSyntaxError("unexpected-token", self.selector, token.pos, token.type.lower())

    def _parse_compound_selector(self) -> bool:
        """Parse a compound selector; return False if nothing was consumed."""
        builder = self.builder
        consumed = False

        while True:
            token = self._peek()

            if token.type == TokenType.NAMESPACE:
                self._advance()
                name = self._peek()
                if name.type not in (TokenType.TAG, TokenType.UNIVERSAL):
                    raise SelectorSyntaxError("expected-name-after-namespace", self.selector, name.pos)
                self._advance()
                builder.element(name.value, namespace=token.value, position=token.pos)

            elif token.type in (TokenType.TAG, TokenType.UNIVERSAL):
                self._advance()
                builder.element(token.value, position=token.pos)

            elif token.type == TokenType.ID:
                self._advance()
                builder.add_id(token.value or "", token.pos)

            elif token.type == TokenType.CLASS:
                self._advance()
                builder.add_class(token.value or "")

            elif token.type == TokenType.ATTR_START:
                self._parse_attribute_selector()

            elif token.type == TokenType.PSEUDO_CLASS:
                self._advance()
                builder.add_pseudo_class(token.value or "")

            elif token.type == TokenType.PSEUDO_ELEMENT:
                self._advance()
                builder.add_pseudo_element(token.value or "")

            else:
                return consumed

            consumed = True

    def _parse_attribute_selector(self) -> None:
        """Parse an attribute selector [attr], [attr=value], etc."""
        self._expect(TokenType.ATTR_START)

        namespace: str | None = None
        if self._peek().type == TokenType.NAMESPACE:
            namespace = self._advance().value
        attr_name = self._expect(TokenType.TAG).value or ""

        if self._peek().type == TokenType.ATTR_END:
            self._advance()
            self.builder.add_attribute(attr_name, namespace=namespace)
            return

        operator = AttributeOperator(self._expect(TokenType.ATTR_OP).value)
        value = self._expect(TokenType.STRING).value
        self._expect(TokenType.ATTR_END)
        self.builder.add_attribute(attr_name, operator, value, namespace)


def parse(selector_string: str) -> SelectorList:
    """Parse a CSS selector string into a SelectorList.

    Raises:
        SelectorSyntaxError: If the text is empty or not a valid selector
    """
    if not selector_string or not selector_string.strip():
        raise SelectorSyntaxError("empty-selector", selector_string or "", 0)

    builder = SelectorBuilder(selector_string)
    tokens = SelectorTokenizer(selector_string).tokenize()
    return SelectorParser(tokens, builder).parse()
