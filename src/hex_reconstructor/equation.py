# hex_reconstructor/equation.py

"""Linear calibration equations such as ``X*0.1-40`` or ``(X+2)/4``.

Grammar::

    expr   := term (("+" | "-") term)*
    term   := unary (("*" | "/") unary)*
    unary  := ("+" | "-") unary | atom
    atom   := NUMBER | "X" | "(" expr ")"

Every sub-expression is kept as a pair ``(a, b)`` meaning ``a*X + b``, so the
result is directly the calibration ``factor = a``, ``offset = b``. Products of
two X terms, division by an X term and division by zero are rejected.
"""

from __future__ import annotations

import re
from typing import Tuple

from .errors import EquationError
from .layout import Calibration

TOKEN = re.compile(r"\s*(?:(\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)|([xX])|([-+*/()]))")

Linear = Tuple[float, float]


def tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        m = TOKEN.match(text, pos)
        if not m:
            raise EquationError(f"unexpected character {text[pos:].lstrip()[:1]!r} in {text!r}")
        tokens.append(m.group(m.lastindex).upper() if m.group(2) else m.group(m.lastindex))
        pos = m.end()
    return tokens


class _LinearParser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self) -> str:
        tok = self.peek()
        if tok is None:
            raise EquationError(f"unexpected end of equation {self.text!r}")
        self.pos += 1
        return tok

    def parse(self) -> Linear:
        value = self.expr()
        if self.peek() is not None:
            raise EquationError(f"unexpected {self.peek()!r} in {self.text!r}")
        return value

    def expr(self) -> Linear:
        a, b = self.term()
        while self.peek() in ("+", "-"):
            op = self.take()
            c, d = self.term()
            a, b = (a + c, b + d) if op == "+" else (a - c, b - d)
        return a, b

    def term(self) -> Linear:
        a, b = self.unary()
        while self.peek() in ("*", "/"):
            op = self.take()
            c, d = self.unary()
            if op == "*":
                if a and c:
                    raise EquationError(f"{self.text!r} is not linear in X")
                a, b = a * d + c * b, b * d
            else:
                if c:
                    raise EquationError(f"{self.text!r} divides by X")
                if d == 0:
                    raise EquationError(f"{self.text!r} divides by zero")
                a, b = a / d, b / d
        return a, b

    def unary(self) -> Linear:
        if self.peek() in ("+", "-"):
            sign = -1.0 if self.take() == "-" else 1.0
            a, b = self.unary()
            return sign * a, sign * b
        return self.atom()

    def atom(self) -> Linear:
        tok = self.take()
        if tok == "X":
            return 1.0, 0.0
        if tok == "(":
            value = self.expr()
            if self.take() != ")":
                raise EquationError(f"missing ')' in {self.text!r}")
            return value
        if tok in ("+", "-", "*", "/", ")"):
            raise EquationError(f"unexpected {tok!r} in {self.text!r}")
        return 0.0, float(tok)


def parse_linear_equation(text: str) -> Calibration:
    """Turn ``X*factor + offset`` style text into a Calibration.

    >>> parse_linear_equation("X*0.5-10")
    Calibration(factor=0.5, offset=-10.0)
    """
    factor, offset = _LinearParser(text).parse()
    if factor == 0:
        raise EquationError(f"{text!r} does not depend on X")
    return Calibration(factor, offset)
