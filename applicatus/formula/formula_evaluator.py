"""
Cost Formula Evaluator.

Evaluates the small arithmetic formulas used for spell costs, e.g. "16-ZfP/2"
or "(3+5)*2". The token ``ZfP`` stands for the extra points of the check.

Rules:
- ``*`` and ``/`` bind tighter than ``+`` and ``-``, parentheses override
- Division rounds up (7/2 = 4)
- Unparseable formulas evaluate to None so callers fall back to a base cost
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union
import logging
import re

logger = logging.getLogger(__name__)


VARIABLE_NAME = "ZfP"

TOKEN_PATTERN = re.compile(r"\s*(?:(\d+)|(ZfP)|([-+*/()]))", re.IGNORECASE)


class FormulaSyntaxError(ValueError):
    """Raised internally while parsing; never escapes evaluate()."""


def ceil_div(numerator: int, denominator: int) -> int:
    """Integer division rounded toward positive infinity."""
    return -(-numerator // denominator)


# =============================================================================
# SYNTAX TREE
# =============================================================================


@dataclass(frozen=True)
class Number:
    value: int

    def evaluate(self, variable: int) -> int:
        return self.value


@dataclass(frozen=True)
class Variable:
    name: str = VARIABLE_NAME

    def evaluate(self, variable: int) -> int:
        return variable


@dataclass(frozen=True)
class Negate:
    operand: "FormulaAST"

    def evaluate(self, variable: int) -> int:
        return -self.operand.evaluate(variable)


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "FormulaAST"
    right: "FormulaAST"

    def evaluate(self, variable: int) -> int:
        lhs = self.left.evaluate(variable)
        rhs = self.right.evaluate(variable)
        if self.op == "+":
            return lhs + rhs
        if self.op == "-":
            return lhs - rhs
        if self.op == "*":
            return lhs * rhs
        # ZeroDivisionError surfaces to evaluate(), which maps it to None
        return ceil_div(lhs, rhs)


FormulaAST = Union[Number, Variable, Negate, BinaryOp]


# =============================================================================
# PARSER
# =============================================================================


def tokenize(text: str) -> list[str]:
    """
    Split a formula into tokens.

    Raises:
        FormulaSyntaxError: On any character that is not part of a token
    """
    tokens = []
    position = 0
    stripped = text.rstrip()
    while position < len(stripped):
        match = TOKEN_PATTERN.match(stripped, position)
        if not match:
            raise FormulaSyntaxError(f"Unexpected input at {position}: {stripped[position:]!r}")
        number, variable, symbol = match.groups()
        if number is not None:
            tokens.append(number)
        elif variable is not None:
            tokens.append(VARIABLE_NAME)
        else:
            tokens.append(symbol)
        position = match.end()
    return tokens


class _Parser:
    """Recursive descent parser: sum := product (('+'|'-') product)*."""

    def __init__(self, tokens: list[str]):
        self._tokens = tokens
        self._index = 0

    def parse(self) -> FormulaAST:
        node = self._parse_sum()
        if self._index != len(self._tokens):
            raise FormulaSyntaxError(f"Unexpected token {self._tokens[self._index]!r}")
        return node

    def _peek(self) -> Optional[str]:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _advance(self) -> str:
        token = self._peek()
        if token is None:
            raise FormulaSyntaxError("Unexpected end of formula")
        self._index += 1
        return token

    def _parse_sum(self) -> FormulaAST:
        node = self._parse_product()
        while self._peek() in ("+", "-"):
            op = self._advance()
            node = BinaryOp(op, node, self._parse_product())
        return node

    def _parse_product(self) -> FormulaAST:
        node = self._parse_factor()
        while self._peek() in ("*", "/"):
            op = self._advance()
            node = BinaryOp(op, node, self._parse_factor())
        return node

    def _parse_factor(self) -> FormulaAST:
        token = self._advance()
        if token == "-":
            return Negate(self._parse_factor())
        if token == "+":
            return self._parse_factor()
        if token == "(":
            node = self._parse_sum()
            if self._advance() != ")":
                raise FormulaSyntaxError("Missing closing parenthesis")
            return node
        if token == VARIABLE_NAME:
            return Variable()
        if token.isdigit():
            return Number(int(token))
        raise FormulaSyntaxError(f"Unexpected token {token!r}")


# Formulas may be user-entered, so the cache is bounded
FORMULA_CACHE_SIZE = 256


@lru_cache(maxsize=FORMULA_CACHE_SIZE)
def compile_formula(formula: str) -> Optional[FormulaAST]:
    """
    Parse a formula into its syntax tree.

    Results are memoized per formula text; the trees are immutable.

    Returns:
        The syntax tree, or None for blank or invalid formulas
    """
    if formula is None or not formula.strip():
        return None

    try:
        return _Parser(tokenize(formula)).parse()
    except FormulaSyntaxError as e:
        logger.debug(f"Invalid cost formula {formula!r}: {e}")
        return None


def evaluate(formula: str, variable_value: int) -> Optional[int]:
    """
    Evaluate a cost formula with ZfP bound to ``variable_value``.

    Args:
        formula: Formula text, e.g. "16-ZfP/2"
        variable_value: Extra points of the check

    Returns:
        The integer result, or None if the formula is empty or invalid
    """
    tree = compile_formula(formula)
    if tree is None:
        return None
    try:
        return tree.evaluate(variable_value)
    except ZeroDivisionError:
        logger.debug(f"Division by zero in formula {formula!r} with ZfP={variable_value}")
        return None
