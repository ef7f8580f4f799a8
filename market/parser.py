"""
Linear equation parser for supply and demand curves.

Turns text such as ``"-P + 16"``, ``"2P+10"`` or ``"50 - 3P"`` into a
``(slope, intercept)`` pair for ``Q = slope·P + intercept``.

The text is scanned by a small explicit tokenizer that yields signed
numeric / price-variable terms; the terms are then summed.
"""

import math
from dataclasses import dataclass
from typing import Optional

PRICE_VAR = "p"

FORMAT_HINT = "Use the form 'aP + b' or 'b - aP' (e.g. '2P + 10' or '50 - 3P')."


class EquationError(ValueError):
    """Raised when an equation cannot be tokenized or accumulated."""


@dataclass(frozen=True)
class Term:
    """One signed term of a linear expression."""

    sign: int
    coefficient: Optional[float]
    is_price: bool

    @property
    def value(self) -> float:
        # A bare price marker (``P``, ``+P``, ``-P``) carries an implicit 1
        coef = 1.0 if self.coefficient is None else self.coefficient
        return self.sign * coef


@dataclass(frozen=True)
class ParsedEquation:
    slope: float = 0.0
    intercept: float = 0.0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _normalize(text: str) -> str:
    """Drop all whitespace and lower-case the price marker."""
    return "".join(text.split()).lower()


def _read_number(s: str, i: int) -> tuple[Optional[float], int]:
    """Read a decimal literal starting at *i*. Returns (value | None, next_i)."""
    start = i
    dots = 0
    digits = 0
    while i < len(s) and (s[i].isdigit() or s[i] == "."):
        if s[i] == ".":
            dots += 1
        else:
            digits += 1
        i += 1
    if i == start:
        return None, i
    literal = s[start:i]
    if dots > 1 or digits == 0:
        raise EquationError(f"'{literal}' is not a valid number. {FORMAT_HINT}")
    return float(literal), i


def tokenize(text: str) -> list[Term]:
    """Scan *text* into a list of signed terms.

    Grammar (after whitespace removal and lower-casing)::

        expr := term (('+' | '-') term)*
        term := number? '*'? 'p'?        -- at least one of number / 'p'

    A leading sign on the first term is optional.
    """
    s = _normalize(text)
    if not s:
        raise EquationError(f"The equation is empty. {FORMAT_HINT}")

    terms: list[Term] = []
    i = 0
    while i < len(s):
        sign = 1
        if s[i] in "+-":
            sign = -1 if s[i] == "-" else 1
            i += 1
        elif terms:
            raise EquationError(
                f"Expected '+' or '-' before '{s[i:]}'. {FORMAT_HINT}"
            )

        coefficient, i = _read_number(s, i)

        if i < len(s) and s[i] == "*":
            if coefficient is None:
                raise EquationError(f"Missing coefficient before '*'. {FORMAT_HINT}")
            i += 1
            if i >= len(s) or s[i] != PRICE_VAR:
                raise EquationError(f"Expected 'P' after '*'. {FORMAT_HINT}")

        is_price = False
        if i < len(s) and s[i] == PRICE_VAR:
            is_price = True
            i += 1

        if coefficient is None and not is_price:
            if i < len(s):
                raise EquationError(f"Unexpected character '{s[i]}'. {FORMAT_HINT}")
            raise EquationError(f"The equation ends with a dangling sign. {FORMAT_HINT}")

        terms.append(Term(sign=sign, coefficient=coefficient, is_price=is_price))

        if i < len(s) and s[i] not in "+-":
            raise EquationError(f"Unexpected character '{s[i]}'. {FORMAT_HINT}")

    return terms


def accumulate(terms: list[Term]) -> tuple[float, float]:
    """Sum price terms into the slope and the rest into the intercept."""
    if not terms:
        raise EquationError(f"No terms found. {FORMAT_HINT}")
    slope = 0.0
    intercept = 0.0
    for term in terms:
        if term.is_price:
            slope += term.value
        else:
            intercept += term.value
    if not (math.isfinite(slope) and math.isfinite(intercept)):
        raise EquationError(f"Coefficients must be finite numbers. {FORMAT_HINT}")
    return slope, intercept


def parse_equation(text: str) -> ParsedEquation:
    """Parse *text* into a :class:`ParsedEquation`.

    Never raises for malformed input: the message goes into ``error`` and
    slope / intercept are 0.
    """
    try:
        slope, intercept = accumulate(tokenize(text or ""))
    except EquationError as exc:
        return ParsedEquation(0.0, 0.0, str(exc))
    return ParsedEquation(slope, intercept, None)
