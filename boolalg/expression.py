"""
Public boolean expression tree.

Expressions are immutable and strictly binary; they are what the parser
produces and what the reducer hands back. Rewriting never happens on this
type directly, see `boolalg.ir` for the mutable form used by the engine.

Operators build expressions from plain Python values:

    >>> e = Variable("a") & ~Variable("b") | True
    >>> str(e)
    'a * ¬b + 1'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Union

from boolalg.errors import UndefinedVariableError
from boolalg.truth_table import TruthTable, generate_truth_table

Operand = Union["Expression", str, bool]


def expression_from(value: Operand) -> Expression:
    """Coerce a string into a Variable and a bool into a constant."""
    if isinstance(value, Expression):
        return value
    if isinstance(value, bool):
        return TRUE if value else FALSE
    if isinstance(value, str):
        return Variable(value)
    raise TypeError(f"Cannot build a boolean expression from {value!r}")


@dataclass(frozen=True)
class Expression:
    """Base class of all public expression variants."""

    def evaluate(self, bindings: Mapping[str, bool]) -> bool:
        """
        Evaluate under `bindings`. And/Or short-circuit, so an unbound
        variable on a branch that is never reached does not raise.
        """
        raise NotImplementedError

    def variables(self) -> set[str]:
        raise NotImplementedError

    def generate_truth_table(self) -> TruthTable:
        return generate_truth_table(self)

    def debug_description(self) -> str:
        raise NotImplementedError

    # Printing helpers: how this expression renders as an operand of
    # an And / a Not.
    def _and_operand(self) -> str:
        return str(self)

    def _not_operand(self) -> str:
        return str(self)

    def __and__(self, other: Operand) -> And:
        return And(self, expression_from(other))

    def __rand__(self, other: Operand) -> And:
        return And(expression_from(other), self)

    def __or__(self, other: Operand) -> Or:
        return Or(self, expression_from(other))

    def __ror__(self, other: Operand) -> Or:
        return Or(expression_from(other), self)

    def __xor__(self, other: Operand) -> Xor:
        return Xor(self, expression_from(other))

    def __rxor__(self, other: Operand) -> Xor:
        return Xor(expression_from(other), self)

    def __invert__(self) -> Not:
        return Not(self)


@dataclass(frozen=True)
class Variable(Expression):
    name: str

    def evaluate(self, bindings: Mapping[str, bool]) -> bool:
        try:
            return bool(bindings[self.name])
        except KeyError:
            raise UndefinedVariableError(self.name) from None

    def variables(self) -> set[str]:
        return {self.name}

    def debug_description(self) -> str:
        return f".variable({self.name})"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TrueConstant(Expression):
    def evaluate(self, bindings: Mapping[str, bool]) -> bool:
        return True

    def variables(self) -> set[str]:
        return set()

    def debug_description(self) -> str:
        return ".true"

    def __str__(self) -> str:
        return "1"


@dataclass(frozen=True)
class FalseConstant(Expression):
    def evaluate(self, bindings: Mapping[str, bool]) -> bool:
        return False

    def variables(self) -> set[str]:
        return set()

    def debug_description(self) -> str:
        return ".false"

    def __str__(self) -> str:
        return "0"


TRUE = TrueConstant()
FALSE = FalseConstant()


@dataclass(frozen=True)
class BinaryExpression(Expression):
    left: Expression
    right: Expression

    # e.g. "and"; used by debug_description
    tag = ""

    def variables(self) -> set[str]:
        return self.left.variables() | self.right.variables()

    def debug_description(self) -> str:
        return (
            f".{self.tag}({self.left.debug_description()}, "
            f"{self.right.debug_description()})"
        )

    def _not_operand(self) -> str:
        return f"({self})"


@dataclass(frozen=True)
class And(BinaryExpression):
    tag = "and"

    def evaluate(self, bindings: Mapping[str, bool]) -> bool:
        return self.left.evaluate(bindings) and self.right.evaluate(bindings)

    def __str__(self) -> str:
        return f"{self.left._and_operand()} * {self.right._and_operand()}"


@dataclass(frozen=True)
class Or(BinaryExpression):
    tag = "or"

    def evaluate(self, bindings: Mapping[str, bool]) -> bool:
        return self.left.evaluate(bindings) or self.right.evaluate(bindings)

    def _and_operand(self) -> str:
        return f"({self})"

    def __str__(self) -> str:
        return f"{self.left} + {self.right}"


@dataclass(frozen=True)
class Xor(BinaryExpression):
    tag = "xor"

    def evaluate(self, bindings: Mapping[str, bool]) -> bool:
        lhs = self.left.evaluate(bindings)
        rhs = self.right.evaluate(bindings)
        return (lhs or rhs) and not (lhs and rhs)

    def __str__(self) -> str:
        return f"{self.left} ^ {self.right}"


@dataclass(frozen=True)
class Not(Expression):
    operand: Expression

    def evaluate(self, bindings: Mapping[str, bool]) -> bool:
        return not self.operand.evaluate(bindings)

    def variables(self) -> set[str]:
        return self.operand.variables()

    def debug_description(self) -> str:
        return f".not({self.operand.debug_description()})"

    def _not_operand(self) -> str:
        return f"({self})"

    def __str__(self) -> str:
        if isinstance(self.operand, Not):
            return f"¬({self.operand})"
        return f"¬{self.operand._not_operand()}"


@dataclass(frozen=True)
class Parenthesized(Expression):
    operand: Expression

    def evaluate(self, bindings: Mapping[str, bool]) -> bool:
        return self.operand.evaluate(bindings)

    def variables(self) -> set[str]:
        return self.operand.variables()

    def debug_description(self) -> str:
        return f".parenthesized({self.operand.debug_description()})"

    def __str__(self) -> str:
        return f"({self.operand})"
