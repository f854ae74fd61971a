"""
Arithmetic expression evaluator.

Input is first sanitized by dropping every character outside
``0-9 + - * / . ( )`` and space, then tokenized and parsed with a
recursive-descent parser. Nothing is ever handed to eval/compile.

Grammar::

    expr    := term (('+' | '-') term)*
    term    := unary (('*' | '/') unary)*
    unary   := ('+' | '-') unary | primary
    primary := NUMBER | '(' expr ')'

Adjacent "++" and "--" are rejected; separated signs ("- -2") are unary.

Arithmetic is IEEE double precision. Division by zero and any non-finite
intermediate or final value raise InvalidExpression.
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from calcsaas.core.errors import InvalidExpression

_DISALLOWED = re.compile(r"[^0-9+\-*/.() ]")
# Digits with an optional single fraction part: "12", "1.5", ".5", "5."
_NUMBER = re.compile(r"\d+\.?\d*|\.\d+")

MAX_NESTING_DEPTH = 100

TokenKind = Literal["num", "op", "lparen", "rparen"]


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    pos: int


def sanitize(raw: str) -> str:
    """Remove every character that is not a digit, operator, dot, parenthesis or space."""
    return _DISALLOWED.sub("", raw)


def tokenize(source: str) -> list[Token]:
    """Split a sanitized expression into tokens. Spaces only separate tokens."""
    tokens: list[Token] = []
    i = 0
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == " ":
            i += 1
            continue
        if ch in "+-*/":
            # "++" and "--" with no space between are increment/decrement, a syntax error.
            if ch in "+-" and i + 1 < n and source[i + 1] == ch:
                raise InvalidExpression()
            tokens.append(Token("op", ch, i))
            i += 1
            continue
        if ch == "(":
            tokens.append(Token("lparen", ch, i))
            i += 1
            continue
        if ch == ")":
            tokens.append(Token("rparen", ch, i))
            i += 1
            continue
        match = _NUMBER.match(source, i)
        if match is None:
            raise InvalidExpression()
        text = match.group()
        # Legacy octal-looking literals ("01", "007") are syntax errors in strict mode.
        if len(text) > 1 and text[0] == "0" and text[1].isdigit():
            raise InvalidExpression()
        i = match.end()
        # "1.2.3": a second dot directly after a literal.
        if i < n and source[i] == ".":
            raise InvalidExpression()
        tokens.append(Token("num", text, match.start()))
    return tokens


class _Parser:
    """Recursive-descent evaluator over a token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._depth = 0

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise InvalidExpression()
        self._pos += 1
        return token

    def parse(self) -> float:
        value = self._expr()
        if self._peek() is not None:
            raise InvalidExpression()
        return value

    def _expr(self) -> float:
        value = self._term()
        while (token := self._peek()) is not None and token.kind == "op" and token.text in "+-":
            self._advance()
            right = self._term()
            value = _finite(value + right if token.text == "+" else value - right)
        return value

    def _term(self) -> float:
        value = self._unary()
        while (token := self._peek()) is not None and token.kind == "op" and token.text in "*/":
            self._advance()
            right = self._unary()
            if token.text == "*":
                value = _finite(value * right)
            else:
                if right == 0:
                    raise InvalidExpression()
                value = _finite(value / right)
        return value

    def _unary(self) -> float:
        token = self._peek()
        if token is not None and token.kind == "op" and token.text in "+-":
            self._advance()
            self._enter()
            operand = self._unary()
            self._depth -= 1
            return -operand if token.text == "-" else operand
        return self._primary()

    def _primary(self) -> float:
        token = self._advance()
        if token.kind == "num":
            return _finite(float(token.text))
        if token.kind == "lparen":
            self._enter()
            value = self._expr()
            closing = self._advance()
            if closing.kind != "rparen":
                raise InvalidExpression()
            self._depth -= 1
            return value
        raise InvalidExpression()

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > MAX_NESTING_DEPTH:
            raise InvalidExpression()


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise InvalidExpression()
    return value


def evaluate(raw_expression: str) -> float:
    """
    Sanitize and evaluate an arithmetic expression.

    Raises InvalidExpression when nothing survives sanitization, the
    remainder does not parse, or the result is not finite.
    """
    sanitized = sanitize(raw_expression)
    if not sanitized:
        raise InvalidExpression()
    tokens = tokenize(sanitized)
    if not tokens:
        raise InvalidExpression()
    result = _Parser(tokens).parse()
    # Normalize -0.0 so "-0" and "0" compare and format the same way.
    return result + 0.0


def format_number(value: float) -> str:
    """
    Render a finite float the way ECMAScript Number#toString does:
    shortest round-trip digits, no trailing ".0", fixed notation for
    1e-7 <= |x| < 1e21 and exponent notation ("1e+21", "1.5e-7") otherwise.
    """
    if not math.isfinite(value):
        raise ValueError("Only finite numbers can be formatted")
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    # repr gives the shortest digit string that round-trips.
    digits_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()[1:]
    digits = "".join(str(d) for d in digits_tuple)
    k = len(digits)
    n = exponent + k  # position of the decimal point relative to the digits

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        body = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        exp_text = ("+" if e >= 0 else "-") + str(abs(e))
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        body = mantissa + "e" + exp_text
    return sign + body
