"""
Conversion to and from SymPy's boolean logic.

SymPy serves as an independent reference: `sympy_equivalent` decides
equivalence by satisfiability instead of enumeration, and
`sympy_simplified` gives a second opinion on what a reduced form looks like.
"""

from typing import Optional

import sympy
from sympy.logic.boolalg import BooleanFalse, BooleanTrue, Equivalent, ITE, Implies, simplify_logic
from sympy.logic.inference import satisfiable

from boolalg import expression as ex


def to_sympy(expression: ex.Expression) -> sympy.Basic:
    """Translate an expression into a SymPy boolean, e.g. a * ¬b -> a & ~b."""
    if isinstance(expression, ex.Variable):
        return sympy.Symbol(expression.name)
    if isinstance(expression, ex.TrueConstant):
        return sympy.true
    if isinstance(expression, ex.FalseConstant):
        return sympy.false
    if isinstance(expression, ex.Parenthesized):
        return to_sympy(expression.operand)
    if isinstance(expression, ex.Not):
        return sympy.Not(to_sympy(expression.operand))
    if isinstance(expression, ex.And):
        return sympy.And(to_sympy(expression.left), to_sympy(expression.right))
    if isinstance(expression, ex.Or):
        return sympy.Or(to_sympy(expression.left), to_sympy(expression.right))
    if isinstance(expression, ex.Xor):
        return sympy.Xor(to_sympy(expression.left), to_sympy(expression.right))
    raise TypeError(f"Unknown expression type {type(expression).__name__}")


def _chain(cls: type, args) -> ex.Expression:
    # right-associative, as the parser builds it
    operands = [from_sympy(arg) for arg in args]
    current = operands[-1]
    for operand in reversed(operands[:-1]):
        current = cls(operand, current)
    return current


def from_sympy(value: sympy.Basic) -> ex.Expression:
    """Translate a SymPy boolean back into an expression."""
    if isinstance(value, BooleanTrue):
        return ex.TRUE
    if isinstance(value, BooleanFalse):
        return ex.FALSE
    if isinstance(value, sympy.Symbol):
        return ex.Variable(value.name)
    if isinstance(value, sympy.Not):
        return ex.Not(from_sympy(value.args[0]))
    if isinstance(value, sympy.And):
        return _chain(ex.And, value.args)
    if isinstance(value, sympy.Or):
        return _chain(ex.Or, value.args)
    if isinstance(value, sympy.Xor):
        return _chain(ex.Xor, value.args)
    if isinstance(value, (Implies, Equivalent, ITE)):
        return from_sympy(value.to_nnf())
    raise TypeError(f"Cannot convert {value!r} into a boolean expression")


def sympy_equivalent(lhs: ex.Expression, rhs: ex.Expression) -> bool:
    """True when lhs ^ rhs is unsatisfiable."""
    return satisfiable(sympy.Xor(to_sympy(lhs), to_sympy(rhs))) is False


def sympy_simplified(expression: ex.Expression, form: Optional[str] = None) -> ex.Expression:
    """SymPy's own minimal form of `expression`; `form` is "dnf", "cnf" or None."""
    return from_sympy(simplify_logic(to_sympy(expression), form=form))
