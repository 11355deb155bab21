"""
Canonical form: flatten every same-operator chain, then sort every operand
list by the IR total order. Two expressions that differ only in operand
order or in how an associative chain is nested share one canonical form.
"""

from boolalg.expression import Expression
from boolalg.ir import ExpressionPath, Node, from_expression


def canonicalize_node(node: Node) -> Node:
    """Canonical copy of an IR tree; `node` itself is left untouched."""
    return node.flattened().deep_sorted()


def canonicalize(expression: Expression) -> Expression:
    """
    Return the canonical form of `expression`, e.g. `b * (c + a)` and
    `(a + c) * b` both become `b * (a + c)`.
    """
    return canonicalize_node(from_expression(expression)).to_expression()


def spine(root: Node, path: ExpressionPath) -> list[Node]:
    """Nodes from `root` down along `path`, as far as the path exists."""
    nodes = [root]
    for step in path.steps:
        child = nodes[-1].node_at(ExpressionPath((step,)))
        if child is None:
            break
        nodes.append(child)
    return nodes


def recanonicalize(root: Node, path: ExpressionPath, deep: bool = True):
    """
    Restore, in place, the canonical form of `root` after the subtree at
    `path` changed, the rest of the tree being canonical already. The
    subtree is canonicalized (only its top node with `deep=False`), then
    every ancestor is re-flattened and re-sorted, innermost first.
    """
    nodes = spine(root, path)
    nodes[-1].canonicalize_in_place(deep)
    for node in reversed(nodes[:-1]):
        node.canonicalize_in_place(deep=False)
