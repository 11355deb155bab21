"""
Fixpoint reduction of boolean expressions.

`ExpressionReducer` applies a pipeline of rewrite laws to the canonical IR:
  0) xor expansion  → a ^ b  ==  (a + b) * ¬(a * b), until no xor is left
  1) expansion      → distributive law, towards sum-of-products by default
  2) reduction      → De Morgan, negation, idempotence, null, identity,
                      inverse, absorption and inverse distribution
Steps 1) and 2) repeat until a full cycle leaves the expression unchanged.

The working tree is owned by the reducer alone, so laws edit it in place and
only the path they touched is re-canonicalized. Subtrees where no law of a
phase applies are marked settled for that phase and skipped until edited.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from boolalg.canonicalizer import canonicalize_node, recanonicalize, spine
from boolalg.collector import CommonTermCollector
from boolalg.errors import ContractViolation, ReductionLimitError
from boolalg.expression import Expression
from boolalg.ir import (
    ROOT,
    And,
    Constant,
    ExpressionPath,
    Node,
    Not,
    Or,
    Xor,
    and_of,
    from_expression,
    not_of,
    or_of,
)
from boolalg.querier import ExpressionQuerier

logger = logging.getLogger(__name__)

Law = Callable[[ExpressionPath], bool]


class Expansion(Enum):
    """Which way the distributive law expands."""

    # a * (b + c)  ->  a*b + a*c
    SUM_OF_PRODUCTS = "sum-of-products"
    # a + b*c  ->  (a + b) * (a + c)
    PRODUCT_OF_SUMS = "product-of-sums"


@dataclass(frozen=True)
class ReducerConfig:
    max_rewrites: int = 2_000
    max_size: int = 5_000
    max_cycles: int = 100
    expansion: Expansion = Expansion.SUM_OF_PRODUCTS


def _contains_sorted(operands: tuple[Node, ...], node: Node) -> bool:
    i = bisect_left(operands, node)
    return i < len(operands) and operands[i] == node


def _covers(counts: Counter, required: Counter) -> bool:
    return all(counts[key] >= n for key, n in required.items())


class ExpressionReducer:
    """
    Rewrites `expression` into a simpler equivalent one. The working tree is
    held by `self.querier` in canonical form; every law takes the path of
    the node to rewrite, returns True if it changed the tree, and leaves the
    tree canonical again.
    """

    def __init__(self, expression: Expression, config: Optional[ReducerConfig] = None):
        self.config = config or ReducerConfig()
        self.querier = ExpressionQuerier(
            canonicalize_node(from_expression(expression)), in_place=True
        )
        self.rewrites = 0

    @property
    def expression(self) -> Node:
        return self.querier.expression

    @property
    def reduction_laws(self) -> list[Law]:
        return [
            self.de_morgan_law,
            self.negation_of_constant,
            self.double_negation,
            self.idempotent_law,
            self.null_law,
            self.identity_law,
            self.inverse_law,
            self.absorption_law,
            self.inverse_distributive_law,
        ]

    def to_expression(self) -> Expression:
        return canonicalize_node(self.expression).to_expression()

    def reduce(self) -> Expression:
        # 0) xor is rewritten away once, up front
        self._run_phase("xor expansion", [self.expand_exclusive_disjunction])

        seen: list[Node] = []
        for cycle in range(1, self.config.max_cycles + 1):
            start = self.expression.copy()
            seen.append(start)

            # 1) expand, 2) reduce
            self._run_phase("expansion", [self.distributive_law])
            self._run_phase("reduction", self.reduction_laws)

            if self.expression == start:
                logger.debug(f"Fixpoint reached after {cycle} cycle(s), {self.rewrites} rewrite(s)")
                return self.to_expression()
            if self.expression in seen:
                # back at an earlier cycle's starting point: stop there
                logger.debug(f"Reduction cycles back after {cycle} cycle(s); stopping")
                return self.to_expression()

        self._exceeded("max_cycles", self.config.max_cycles)

    # --- traversal -------------------------------------------------------

    def _run_phase(self, name: str, laws: list[Law]):
        passes = 0
        while self._visit(self.expression, ROOT, name, laws):
            passes += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"{name}: {passes} rewrite(s), {self.expression.size()} node(s)")

    def _visit(self, node: Node, path: ExpressionPath, phase: str, laws: list[Law]) -> bool:
        """Post-order: the first law to fire, deepest node first, ends the pass."""
        if phase in node.settled:
            return False
        for child, child_path in node.children_with_paths(path):
            if self._visit(child, child_path, phase, laws):
                return True

        for law in laws:
            if law(path):
                self._record(law, path)
                return True
        node.settled.add(phase)
        return False

    def _record(self, law: Law, path: ExpressionPath):
        self.rewrites += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"{law.__name__} at {path}")
        if self.rewrites > self.config.max_rewrites:
            self._exceeded("max_rewrites", self.config.max_rewrites)

    def _check_size(self):
        if self.expression.size() > self.config.max_size:
            self._exceeded("max_size", self.config.max_size)

    def _exceeded(self, limit: str, value: int):
        logger.warning(f"Reduction stopped: {limit} of {value} exceeded")
        raise ReductionLimitError(limit, value)

    def _node(self, path: ExpressionPath) -> Node:
        node = self.expression.node_at(path)
        if node is None:
            raise ContractViolation(f"Path {path} does not exist in {self.expression!r}")
        return node

    # --- edits -----------------------------------------------------------

    def _settle(self, path: ExpressionPath, deep: bool = True):
        for node in spine(self.expression, path):
            node.settled.clear()
        recanonicalize(self.expression, path, deep)

    def _replace(self, path: ExpressionPath, node: Node):
        self.querier.replace(path, node)
        self._settle(path)

    def _remove(self, location: ExpressionPath, path: ExpressionPath):
        """Remove the operand at `location` of the node at `path`."""
        self.querier.remove_recursive(location)
        self._settle(path, deep=False)

    # --- laws ------------------------------------------------------------

    def expand_exclusive_disjunction(self, path: ExpressionPath = ROOT) -> bool:
        """a ^ b ^ c  ->  a ^ (b ^ c), each a ^ x as (a + x) * ¬(a * x)"""
        node = self._node(path)
        if not isinstance(node, Xor):
            return False

        operands = node.operands
        result = operands[-1]
        for operand in reversed(operands[:-1]):
            result = and_of([or_of([operand, result]), not_of(and_of([operand, result]))])
        self._replace(path, result)
        self._check_size()
        return True

    def distributive_law(self, path: ExpressionPath = ROOT) -> bool:
        """
        Sum of products: a * (b + c)  ->  a*b + a*c
        Product of sums: a + b*c      ->  (a + b) * (a + c)
        """
        node = self._node(path)
        if self.config.expansion is Expansion.SUM_OF_PRODUCTS:
            outer, inner, build_outer, build_inner = And, Or, and_of, or_of
        else:
            outer, inner, build_outer, build_inner = Or, And, or_of, and_of

        if not isinstance(node, outer) or not any(isinstance(op, inner) for op in node.operands):
            return False

        collector = CommonTermCollector(node, path, canonical=True)
        count = collector.distributed_term_count()
        if count > self.config.max_size:
            self._exceeded("max_size", self.config.max_size)

        terms = [build_outer(combination.nodes()) for combination in collector.distributed_terms()]
        self._replace(path, build_inner(terms).flattened())
        self._check_size()
        return True

    def de_morgan_law(self, path: ExpressionPath = ROOT) -> bool:
        """¬(a * b)  ->  ¬a + ¬b,  ¬(a + b)  ->  ¬a * ¬b"""
        node = self._node(path)
        if not isinstance(node, Not):
            return False

        inner = node.operand
        if isinstance(inner, And):
            build = or_of
        elif isinstance(inner, Or):
            build = and_of
        else:
            return False

        self._replace(path, build([not_of(op) for op in inner.operands]))
        return True

    def negation_of_constant(self, path: ExpressionPath = ROOT) -> bool:
        node = self._node(path)
        if not (isinstance(node, Not) and isinstance(node.operand, Constant)):
            return False
        self._replace(path, Constant(not node.operand.value))
        return True

    def double_negation(self, path: ExpressionPath = ROOT) -> bool:
        node = self._node(path)
        if not (isinstance(node, Not) and isinstance(node.operand, Not)):
            return False
        self._replace(path, node.operand.operand.copy())
        return True

    def idempotent_law(self, path: ExpressionPath = ROOT) -> bool:
        """a * a  ->  a,  a + a  ->  a"""
        node = self._node(path)
        if not isinstance(node, (And, Or)):
            return False

        # operands are sorted, so duplicates sit next to each other
        children = node.children_with_paths(path)
        for (previous, _), (current, location) in zip(children, children[1:]):
            if previous == current:
                self._remove(location, path)
                return True
        return False

    def null_law(self, path: ExpressionPath = ROOT) -> bool:
        """a * 0  ->  0,  a + 1  ->  1"""
        node = self._node(path)
        if isinstance(node, And):
            absorbing = Constant(False)
        elif isinstance(node, Or):
            absorbing = Constant(True)
        else:
            return False

        if not node.contains(absorbing):
            return False
        self._replace(path, absorbing)
        return True

    def identity_law(self, path: ExpressionPath = ROOT) -> bool:
        """a * 1  ->  a,  a + 0  ->  a"""
        node = self._node(path)
        if isinstance(node, And):
            unit, build = Constant(True), and_of
        elif isinstance(node, Or):
            unit, build = Constant(False), or_of
        else:
            return False

        if not node.contains(unit):
            return False
        remaining = [op for op in node.operands if op != unit]
        self._replace(path, build(remaining) if remaining else unit)
        return True

    def inverse_law(self, path: ExpressionPath = ROOT) -> bool:
        """a * ¬a  ->  0,  a + ¬a  ->  1"""
        node = self._node(path)
        if isinstance(node, And):
            result = Constant(False)
        elif isinstance(node, Or):
            result = Constant(True)
        else:
            return False

        operands = node.operands
        if not any(isinstance(op, Not) and _contains_sorted(operands, op.operand) for op in operands):
            return False
        self._replace(path, result)
        return True

    def absorption_law(self, path: ExpressionPath = ROOT) -> bool:
        """a * (a + b)  ->  a,  a + a*b  ->  a"""
        node = self._node(path)
        if isinstance(node, And):
            compound = Or
        elif isinstance(node, Or):
            compound = And
        else:
            return False

        children = node.children_with_paths(path)
        # positions of the compound operands holding each term
        holders: dict[tuple, list[int]] = {}
        counts: dict[int, Counter] = {}
        for j, (other, _) in enumerate(children):
            if not isinstance(other, compound):
                continue
            counts[j] = Counter(op.key() for op in other.operands)
            for key in counts[j]:
                holders.setdefault(key, []).append(j)

        for i, (term, _) in enumerate(children):
            if isinstance(term, compound):
                # every operand of the term, each matched by a distinct operand
                required = Counter(op.key() for op in term.operands)
                candidates = [
                    j for j in holders.get(next(iter(required)), []) if _covers(counts[j], required)
                ]
            else:
                candidates = holders.get(term.key(), [])
            match = next((j for j in candidates if j != i), None)
            if match is not None:
                self._remove(children[match][1], path)
                return True
        return False

    def inverse_distributive_law(self, path: ExpressionPath = ROOT) -> bool:
        """
        Factor a term shared by two or more compound operands:
            a*b + a*c + d          ->  a * (b + c) + d
            (a + b) * (a + c) * d  ->  (a + b*c) * d
        Terms shared by every compound operand are preferred.
        """
        node = self._node(path)
        if isinstance(node, And):
            build, build_compound, unit = and_of, or_of, Constant(False)
        elif isinstance(node, Or):
            build, build_compound, unit = or_of, and_of, Constant(True)
        else:
            return False

        collector = CommonTermCollector(node, path, canonical=True)
        candidates = collector.maximal_compound_terms() + collector.compound_terms()
        shared = next(
            (group for group in candidates if len({loc.parent for loc in group.locations}) > 1),
            None,
        )
        if shared is None:
            return False

        holders = {loc.parent for loc in shared.locations}
        factored = set(shared.locations)
        factors: list[Node] = []
        remaining: list[Node] = []
        for operand, location in node.children_with_paths(path):
            if location not in holders:
                remaining.append(operand)
                continue
            rest = [sub for sub, sub_location in operand.children_with_paths(location) if sub_location not in factored]
            factors.append(build_compound(rest) if rest else unit.copy())

        factored_term = build_compound([shared.term, build(factors)])
        self._replace(path, build([factored_term] + remaining).flattened())
        return True


def reduce(expression: Expression, config: Optional[ReducerConfig] = None) -> Expression:
    """Shortcut for `ExpressionReducer(expression, config).reduce()`."""
    return ExpressionReducer(expression, config).reduce()
