"""
Common term collection over one n-ary IR node.

Terms are grouped by transitive equivalence (same canonical form), in order
of first appearance, each group remembering every location it was seen at.
These groupings drive the idempotent, distributive and inverse-distributive
rewrites of the reducer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import product
from math import prod

from boolalg.canonicalizer import canonicalize_node
from boolalg.ir import ROOT, Discriminant, ExpressionPath, NaryNode, Node

# Operator whose operands distribute over / factor out of a given operator
OPPOSITE = {
    Discriminant.AND: Discriminant.OR,
    Discriminant.OR: Discriminant.AND,
}


@dataclass
class CollectedTerm:
    term: Node
    locations: list[ExpressionPath] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.term} @ {', '.join(map(str, self.locations))}"


@dataclass
class DistributedTerms:
    """One product term of a fully distributed expression."""

    terms: list[CollectedTerm]

    def nodes(self) -> list[Node]:
        return [t.term for t in self.terms]


class _TermGroups:
    def __init__(self, canonical: bool = False):
        self.canonical = canonical
        self.groups: list[CollectedTerm] = []
        # which compound operands each group was found in
        self.sources: list[set[int]] = []
        self._index: dict[tuple, int] = {}

    def add(self, term: Node, location: ExpressionPath, source: int = 0):
        key = (term if self.canonical else canonicalize_node(term)).key()
        i = self._index.get(key)
        if i is not None:
            self.groups[i].locations.append(location)
            self.sources[i].add(source)
            return
        self._index[key] = len(self.groups)
        self.groups.append(CollectedTerm(term, [location]))
        self.sources.append({source})

    def repeated(self) -> list[CollectedTerm]:
        return [g for g in self.groups if len(g.locations) > 1]


class CommonTermCollector:
    """
    Finds shared terms among the operands of `expression`, an And/Or/Xor
    located at `path`. Every location reported is relative to the root
    `path` is relative to. Pass `canonical=True` when `expression` is in
    canonical form already: terms are then grouped as they stand.
    """

    def __init__(self, expression: NaryNode, path: ExpressionPath = ROOT, canonical: bool = False):
        self.expression = expression
        self.path = path
        self.canonical = canonical

    @property
    def opposite(self):
        return OPPOSITE.get(self.expression.discriminant)

    def terms(self) -> list[CollectedTerm]:
        """Every direct operand, repeated or not, with its own location."""
        return [
            CollectedTerm(operand, [location])
            for operand, location in self.expression.children_with_paths(self.path)
        ]

    def minimal_terms(self) -> list[CollectedTerm]:
        """Direct operands that occur more than once: a * b * a -> [a]."""
        groups = _TermGroups(self.canonical)
        for operand, location in self.expression.children_with_paths(self.path):
            groups.add(operand, location)
        return groups.repeated()

    def compound_operands(self) -> list[tuple[Node, ExpressionPath]]:
        """Direct operands of the opposite operator, e.g. the Ors of an And."""
        return [
            (operand, location)
            for operand, location in self.expression.children_with_paths(self.path)
            if operand.discriminant == self.opposite
        ]

    def _group_compound_terms(self) -> tuple[_TermGroups, int]:
        groups = _TermGroups(self.canonical)
        compounds = self.compound_operands()
        for index, (operand, location) in enumerate(compounds):
            for term, term_location in operand.children_with_paths(location):
                groups.add(term, term_location, index)
        return groups, len(compounds)

    def compound_terms(self) -> list[CollectedTerm]:
        """
        Terms repeated across the compound operands:
        a*b + a*c + d  ->  [a]  (found in both products)
        """
        groups, _ = self._group_compound_terms()
        return groups.repeated()

    def maximal_compound_terms(self) -> list[CollectedTerm]:
        """Like `compound_terms`, but only terms present in every compound operand."""
        groups, count = self._group_compound_terms()
        return [
            group
            for group, sources in zip(groups.groups, groups.sources)
            if len(group.locations) > 1 and len(sources) == count
        ]

    def _distribution_lists(self) -> list[list[CollectedTerm]]:
        lists = []
        for term in self.terms():
            if self.opposite is not None and term.term.discriminant == self.opposite:
                inner = CommonTermCollector(term.term, term.locations[0])
                lists.append(inner.terms())
            else:
                lists.append([term])
        return lists

    def distributed_term_count(self) -> int:
        """Number of entries `distributed_terms()` would return."""
        return prod(len(terms) for terms in self._distribution_lists())

    def distributed_terms(self) -> list[DistributedTerms]:
        """
        Product terms of the fully distributed form:
        a * (b + c) * (d + e)  ->  [a,b,d], [a,b,e], [a,c,d], [a,c,e]
        """
        return [DistributedTerms(list(combination)) for combination in product(*self._distribution_lists())]
