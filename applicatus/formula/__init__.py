"""Cost formula evaluation ("16-ZfP/2", "ZfP*3+2")."""

from applicatus.formula.formula_evaluator import (
    BinaryOp,
    FormulaAST,
    Negate,
    Number,
    Variable,
    ceil_div,
    compile_formula,
    evaluate,
)

__all__ = [
    "BinaryOp",
    "FormulaAST",
    "Negate",
    "Number",
    "Variable",
    "ceil_div",
    "compile_formula",
    "evaluate",
]
