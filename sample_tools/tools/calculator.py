"""
Arithmetic evaluation for the `calculate` tool.

Expressions are restricted to decimal literals, `+ - * /`, parentheses and
whitespace. They are evaluated by a small recursive-descent parser:

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := ("+" | "-") unary | primary
    primary    := NUMBER | "(" expression ")"
"""

import math
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sample_tools.errors import ToolError
from sample_tools.tools.base import parse_arguments

TOOL_NAME = "calculate"

_DIGITS = frozenset("0123456789")
_OPERATORS = frozenset("+-*/()")
_ALLOWED_HINT = "Only numbers and basic operators (+, -, *, /, parentheses) are allowed."


class CalculateArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    expression: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("expression", mode="before")
    @classmethod
    def require_expression(cls, v: Any) -> str:
        if not isinstance(v, str) or not v:
            raise ValueError("Expression is required and must be a string")
        return v


class ExpressionError(ToolError):
    """Raised when an expression cannot be parsed or evaluated."""


def _is_allowed(ch: str) -> bool:
    return ch in _DIGITS or ch in _OPERATORS or ch == "." or ch.isspace()


def find_invalid_characters(expression: str) -> List[str]:
    """Return disallowed characters in order of first appearance."""
    seen: List[str] = []
    for ch in expression:
        if not _is_allowed(ch) and ch not in seen:
            seen.append(ch)
    return seen


def _tokenize(expression: str) -> List[Tuple[str, Any]]:
    tokens: List[Tuple[str, Any]] = []
    i = 0
    length = len(expression)
    while i < length:
        ch = expression[i]
        if ch.isspace():
            i += 1
            continue
        if ch in _OPERATORS:
            tokens.append(("op", ch))
            i += 1
            continue
        start = i
        dots = 0
        while i < length and (expression[i] in _DIGITS or expression[i] == "."):
            if expression[i] == ".":
                dots += 1
            i += 1
        literal = expression[start:i]
        if dots > 1 or literal == ".":
            raise ValueError(f"malformed number {literal!r}")
        tokens.append(("num", float(literal)))
    return tokens


class _Parser:
    def __init__(self, tokens: List[Tuple[str, Any]]):
        self.tokens = tokens
        self.pos = 0

    def _peek(self) -> Optional[Tuple[str, Any]]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _accept(self, *ops: str) -> Optional[str]:
        token = self._peek()
        if token is not None and token[0] == "op" and token[1] in ops:
            self.pos += 1
            return token[1]
        return None

    def parse(self) -> float:
        value = self._expression()
        if self._peek() is not None:
            raise ValueError(f"unexpected token {self._peek()[1]!r}")
        return value

    def _expression(self) -> float:
        value = self._term()
        while True:
            op = self._accept("+", "-")
            if op is None:
                return value
            rhs = self._term()
            value = value + rhs if op == "+" else value - rhs

    def _term(self) -> float:
        value = self._unary()
        while True:
            op = self._accept("*", "/")
            if op is None:
                return value
            rhs = self._unary()
            if op == "*":
                value = value * rhs
            else:
                if rhs == 0:
                    raise ZeroDivisionError("division by zero")
                value = value / rhs

    def _unary(self) -> float:
        op = self._accept("+", "-")
        if op is not None:
            operand = self._unary()
            return -operand if op == "-" else operand
        return self._primary()

    def _primary(self) -> float:
        token = self._peek()
        if token is None:
            raise ValueError("unexpected end of expression")
        if token[0] == "num":
            self.pos += 1
            return token[1]
        if self._accept("("):
            value = self._expression()
            if not self._accept(")"):
                raise ValueError("missing closing parenthesis")
            return value
        raise ValueError(f"unexpected token {token[1]!r}")


def format_number(value: float) -> str:
    """
    Render a result the way a JavaScript number prints.

    Shortest round-trip digits; plain decimal notation for magnitudes in
    [1e-6, 1e21), otherwise exponent notation without zero padding (1e-7, 1e+21).
    """
    magnitude = abs(value)
    if value == int(value) and magnitude < 1e21:
        return str(int(value))
    shortest = repr(value)
    if 1e-6 <= magnitude < 1e21:
        return format(Decimal(shortest), "f")
    mantissa, exponent = shortest.split("e")
    sign = "-" if exponent.startswith("-") else "+"
    return f"{mantissa}e{sign}{int(exponent.lstrip('+-'))}"


def evaluate(expression: str) -> float:
    invalid = find_invalid_characters(expression)
    if invalid:
        listed = ", ".join(repr(ch) for ch in invalid)
        raise ExpressionError(
            f"Invalid characters in expression: {listed}. {_ALLOWED_HINT}",
            tool_name=TOOL_NAME,
        )
    try:
        value = _Parser(_tokenize(expression)).parse()
    except ZeroDivisionError:
        raise ExpressionError(f"Division by zero in expression: {expression}", tool_name=TOOL_NAME)
    except (ValueError, OverflowError):
        raise ExpressionError(f"Invalid mathematical expression: {expression}", tool_name=TOOL_NAME)
    if not math.isfinite(value):
        raise ExpressionError(f"Result is not a finite number: {expression}", tool_name=TOOL_NAME)
    return value


def calculate(arguments: Dict[str, Any]) -> str:
    args = parse_arguments(CalculateArgs, arguments, TOOL_NAME)
    return f"{args.expression} = {format_number(evaluate(args.expression))}"
