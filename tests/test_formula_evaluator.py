"""
Unit tests for the cost formula evaluator.
"""

import pytest

from applicatus.formula import BinaryOp, Number, Variable, ceil_div, compile_formula, evaluate
from applicatus.formula.formula_evaluator import FORMULA_CACHE_SIZE


class TestEvaluate:
    """Tests for evaluating cost formulas."""

    def test_subtracting_half_points(self):
        """Test the typical "16-ZfP/2" cost."""
        assert evaluate("16-ZfP/2", 6) == 13

    def test_division_rounds_up(self):
        """Test ceiling division."""
        assert evaluate("7/2", 0) == 4
        assert evaluate("16-ZfP/2", 3) == 14

    def test_empty_formula(self):
        """Test that blank formulas evaluate to None."""
        assert evaluate("", 5) is None
        assert evaluate("   ", 5) is None

    def test_integer_literal(self):
        """Test a single literal."""
        assert evaluate("8", 3) == 8

    def test_precedence(self):
        """Test that * and / bind tighter than + and -."""
        assert evaluate("2+3*4", 0) == 14
        assert evaluate("(2+3)*4", 0) == 20

    def test_variable_times_number(self):
        """Test that ZfP*2 multiplies."""
        assert evaluate("ZfP*2", 5) == 10
        assert evaluate("5+ZfP", 3) == 8

    def test_variable_case_insensitive(self):
        """Test lowercase variable names."""
        assert evaluate("zfp+1", 4) == 5

    def test_whitespace_insignificant(self):
        """Test spaces between tokens."""
        assert evaluate(" 16 - ZfP / 2 ", 6) == 13

    def test_unary_minus(self):
        """Test negation."""
        assert evaluate("-3+10", 0) == 7
        assert evaluate("-(ZfP)", 4) == -4

    def test_negative_division_rounds_toward_positive_infinity(self):
        """Test ceiling for negative quotients."""
        assert evaluate("-7/2", 0) == -3

    @pytest.mark.parametrize("formula", ["16-X/2", "(3+4", "3+4)", "3 4", "3+", "*3", "2**3"])
    def test_invalid_formulas_return_none(self, formula):
        """Test that invalid formulas never raise."""
        assert evaluate(formula, 1) is None

    def test_division_by_zero(self):
        """Test that division by zero evaluates to None."""
        assert evaluate("10/ZfP", 0) is None
        assert evaluate("10/ZfP", 3) == 4


class TestCompileFormula:
    """Tests for the syntax tree."""

    def test_tree_shape(self):
        """Test the tree of a simple formula."""
        tree = compile_formula("16-ZfP/2")
        assert tree == BinaryOp("-", Number(16), BinaryOp("/", Variable(), Number(2)))

    def test_memoized(self):
        """Test that the same text compiles to the same tree object."""
        assert compile_formula("3*ZfP+1") is compile_formula("3*ZfP+1")

    def test_evaluate_many_times(self):
        """Test a compiled tree with several bindings."""
        tree = compile_formula("ZfP*3+2")
        assert [tree.evaluate(v) for v in (0, 1, 5)] == [2, 5, 17]

    def test_invalid_compiles_to_none(self):
        """Test invalid text compiles to None."""
        assert compile_formula("abc") is None

    def test_cache_is_bounded(self):
        """Test many distinct formulas do not grow the cache without limit."""
        for n in range(FORMULA_CACHE_SIZE + 50):
            compile_formula(f"{n}+ZfP")
            compile_formula(f"{n}+X")
        info = compile_formula.cache_info()
        assert info.maxsize == FORMULA_CACHE_SIZE
        assert info.currsize <= FORMULA_CACHE_SIZE


def test_ceil_div():
    """Test ceiling division helper."""
    assert ceil_div(7, 2) == 4
    assert ceil_div(6, 2) == 3
    assert ceil_div(-7, 2) == -3
