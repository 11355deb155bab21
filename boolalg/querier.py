"""
Bounded queries and mutations over one IR node.

An `ExpressionQuerier` wraps a node together with the path that locates it
inside some larger tree. Locations it reports are expressed relative to that
larger tree's root, and `replace`/`remove` take locations in the same frame,
so results of one query can be fed straight into a mutation.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from boolalg.canonicalizer import canonicalize_node
from boolalg.errors import ContractViolation
from boolalg.ir import ROOT, ExpressionPath, NaryNode, Node, Not


class EquivalenceMode(Enum):
    """How strictly two nodes must match, from strictest to loosest."""

    # same node instance
    IDENTITY = "identity"
    # same structure, operand order included
    LAYOUT = "layout"
    # same canonical form: order and nesting of associative chains ignored
    TRANSITIVE = "transitive"
    # same result for every assignment of the union of both sides' variables
    TRUTH_TABLE = "truth-table"


def are_equivalent(lhs: Node, rhs: Node, mode: EquivalenceMode) -> bool:
    if mode is EquivalenceMode.IDENTITY:
        return lhs is rhs
    if mode is EquivalenceMode.LAYOUT:
        return lhs == rhs
    if mode is EquivalenceMode.TRANSITIVE:
        return canonicalize_node(lhs) == canonicalize_node(rhs)

    lhs_table = lhs.to_expression().generate_truth_table()
    rhs_table = rhs.to_expression().generate_truth_table()
    return lhs_table.same_function(rhs_table)


class ExpressionQuerier:
    """
    Queries and copy-on-write edits of `expression`, which lives at `path`
    within an implicit outer tree. With `in_place=True`, `replace` and
    `remove_recursive` edit the tree directly instead; the caller must own
    it exclusively.
    """

    def __init__(self, expression: Node, path: ExpressionPath = ROOT, in_place: bool = False):
        self.expression = expression
        self.path = path
        self.in_place = in_place

    def _querier(self, node: Node, path: ExpressionPath) -> ExpressionQuerier:
        return ExpressionQuerier(node, path)

    def _local(self, location: ExpressionPath) -> ExpressionPath:
        local = location.relative_to(self.path)
        if local is None:
            raise ContractViolation(f"Location {location} is not below {self.path}")
        return local

    # --- lookups ---------------------------------------------------------

    def contains(self, node: Node, mode: EquivalenceMode = EquivalenceMode.TRANSITIVE) -> bool:
        """True if `node` matches one of the immediate children."""
        return any(are_equivalent(node, child, mode) for child in self.expression.children)

    def deep_contains(self, node: Node, mode: EquivalenceMode = EquivalenceMode.TRANSITIVE) -> bool:
        """True if `node` matches a descendant at any depth, excluding the expression itself."""
        for sub in self.expression.walk():
            if sub is not self.expression and are_equivalent(sub, node, mode):
                return True
        return False

    def location(
        self, node: Node, mode: EquivalenceMode = EquivalenceMode.TRANSITIVE
    ) -> Optional[ExpressionPath]:
        """Location of the first immediate child matching `node`."""
        for child, location in self.expression.children_with_paths(self.path):
            if are_equivalent(node, child, mode):
                return location
        return None

    def deep_location(
        self, node: Node, mode: EquivalenceMode = EquivalenceMode.TRANSITIVE
    ) -> Optional[ExpressionPath]:
        """Location of the first descendant matching `node`, in pre-order."""
        for sub, location in self.expression.walk_with_paths(self.path):
            found = self._querier(sub, location).location(node, mode)
            if found is not None:
                return found
        return None

    def locations(
        self, node: Node, mode: EquivalenceMode = EquivalenceMode.TRANSITIVE
    ) -> list[ExpressionPath]:
        """Locations of every immediate child matching `node`."""
        return [
            location
            for child, location in self.expression.children_with_paths(self.path)
            if are_equivalent(node, child, mode)
        ]

    def has_superset_of(self, node: Node, mode: EquivalenceMode = EquivalenceMode.TRANSITIVE) -> bool:
        """
        True if the expression's operands include `node`. When `node` is an
        operation of the same kind, each of its operands must match a
        distinct operand of the expression instead:

            a + b + c  has a superset of  a + c
            a + b + c  has a superset of  a
            a + b      has no superset of a + a
        """
        if not isinstance(self.expression, NaryNode):
            return False

        if not (isinstance(node, NaryNode) and node.discriminant == self.expression.discriminant):
            return self.contains(node, mode)

        used: set[ExpressionPath] = set()
        candidates = self.expression.children_with_paths(self.path)
        for term in node.operands:
            match = next(
                (
                    location
                    for child, location in candidates
                    if location not in used and are_equivalent(term, child, mode)
                ),
                None,
            )
            if match is None:
                return False
            used.add(match)
        return True

    # --- mutations -------------------------------------------------------

    def replace(self, location: ExpressionPath, node: Node):
        """Substitute the node at `location`; the root location swaps the whole expression."""
        local = self._local(location)
        if local.is_root:
            node = node.copy_if_parented()
        if self.in_place:
            self.expression = self.expression.replace_at(local, node)
        else:
            self.expression = self.expression.replacing(local, node)

    def remove_recursive(self, location: ExpressionPath):
        """
        Remove the node at `location`, collapsing two-operand parents into
        the surviving operand and taking Not parents along upwards. Removing
        the root, or a removal that propagates up to it, leaves the
        expression unchanged.
        """
        local = self._local(location)
        if self.in_place:
            result = self.expression.remove_at(local)
        else:
            result = self.expression.removing(local)
        if result is not None:
            self.expression = result

    def remove(self, location: ExpressionPath, placeholder: Node):
        """
        Remove the node at `location` where its parent can absorb the
        removal (an n-ary operation); otherwise, at the root or below a Not,
        put `placeholder` in its place.
        """
        local = self._local(location)
        if local.is_root:
            self.expression = placeholder.copy_if_parented()
            return

        parent = self.expression.node_at(local.parent)
        if parent is None or parent.node_at(ExpressionPath((local.last,))) is None:
            raise ContractViolation(f"Path {location} does not exist in {self.expression!r}")

        if isinstance(parent, NaryNode):
            self.expression = self.expression.removing(local)
        else:
            self.expression = self.expression.replacing(local, placeholder)

    def replace_matching(
        self, node: Node, substitute: Node, mode: EquivalenceMode = EquivalenceMode.TRANSITIVE
    ):
        """Substitute every immediate child matching `node`, in place."""
        expression = self.expression
        if isinstance(expression, NaryNode):
            for i, operand in enumerate(expression.operands):
                if are_equivalent(operand, node, mode):
                    expression.replace_operand(i, substitute.copy_if_parented())
        elif isinstance(expression, Not):
            if are_equivalent(expression.operand, node, mode):
                expression.set_operand(substitute.copy_if_parented())

    def deep_replace_matching(
        self, node: Node, substitute: Node, mode: EquivalenceMode = EquivalenceMode.TRANSITIVE
    ):
        """Substitute every descendant matching `node`, excluding the expression itself."""
        # Substituted subtrees are not searched again
        pending = [self.expression]
        while pending:
            current = pending.pop()
            kept = [c for c in current.children if not are_equivalent(c, node, mode)]
            self._querier(current, ROOT).replace_matching(node, substitute, mode)
            pending.extend(kept)
