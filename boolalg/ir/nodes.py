"""
Internal representation (IR) used by the rewriting engine.

Unlike the public `Expression` tree, IR nodes are mutable and n-ary: nested
chains of the same operator are merged into one operand list by
`flattened()`. Every node keeps a weak back-reference to the node that owns
it. A node can be owned by one parent at a time; attaching an owned node
anywhere else raises `ContractViolation`. Use `copy_if_parented()` (or the
`and_of`/`or_of`/`xor_of`/`not_of` factories, which do it for you) when
reusing a node that already sits in a tree.

`replacing`/`removing` copy owned nodes along the path they edit;
`replace_at`/`remove_at` edit in place and are meant for a tree that a
single owner, such as the reducer, holds exclusively.

Ordering across variants follows `Discriminant`:

    Constant < Variable < Not < And < Xor < Or
"""

from __future__ import annotations

import weakref
from enum import IntEnum
from functools import total_ordering
from typing import Iterable, Iterator, Optional

from boolalg import expression as ex
from boolalg.errors import ContractViolation
from boolalg.ir.path import ROOT, ExpressionPath, PathStep, StepKind


class Discriminant(IntEnum):
    CONSTANT = 0
    VARIABLE = 1
    NOT = 2
    AND = 3
    XOR = 4
    OR = 5


@total_ordering
class Node:
    """Base class of all IR variants."""

    discriminant: Discriminant

    # Nodes are mutable and compare by value
    __hash__ = None

    def __init__(self):
        self._parent_ref: Optional[weakref.ref] = None
        # Names of rule sets known not to apply anywhere in this subtree.
        # Filled in by tree rewriters, emptied by in-place edits of the node.
        self.settled: set[str] = set()

    # --- ownership -------------------------------------------------------

    @property
    def parent(self) -> Optional[Node]:
        """The node currently owning this one, if any."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def _attach_to(self, parent: Node):
        if self.parent is not None:
            raise ContractViolation(
                f"Attempting to re-parent {self!r}, which already has a parent"
            )
        self._parent_ref = weakref.ref(parent)

    def _detach(self):
        self._parent_ref = None

    def _adopt(self, child: Node) -> Node:
        if child.is_subexpression(self):
            raise ContractViolation(f"Adopting {child!r} would create a cycle")
        child._attach_to(self)
        return child

    def copy_if_parented(self) -> Node:
        """A deep copy when this node is owned elsewhere, otherwise self."""
        if self.parent is not None:
            return self.copy()
        return self

    # --- structure -------------------------------------------------------

    @property
    def children(self) -> list[Node]:
        return []

    def children_with_paths(self, parent: ExpressionPath = ROOT) -> list[tuple[Node, ExpressionPath]]:
        """Direct children, each with its path below `parent`."""
        return []

    def _child_at(self, step: PathStep) -> Optional[Node]:
        return None

    def _set_child(self, step: PathStep, node: Node):
        raise ContractViolation(f"{self!r} has no child at {step}")

    def node_at(self, path: ExpressionPath) -> Optional[Node]:
        """The node at `path` below self, or None when the path does not exist."""
        current: Optional[Node] = self
        for step in path.steps:
            if current is None:
                return None
            current = current._child_at(step)
        return current

    def walk(self) -> Iterator[Node]:
        """Pre-order traversal of self and every descendant."""
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def walk_with_paths(self, parent: ExpressionPath = ROOT) -> Iterator[tuple[Node, ExpressionPath]]:
        """Pre-order traversal yielding each node with its path below `parent`."""
        stack: list[tuple[Node, ExpressionPath]] = [(self, parent)]
        while stack:
            node, path = stack.pop()
            yield node, path
            stack.extend(reversed(node.children_with_paths(path)))

    def is_subexpression(self, node: Node) -> bool:
        """True if `node` is self or one of its descendants, by identity."""
        return any(n is node for n in self.walk())

    def size(self) -> int:
        return sum(1 for _ in self.walk())

    def key(self) -> tuple:
        """Hashable structural value: equal nodes have equal keys."""
        raise NotImplementedError

    # --- transformations -------------------------------------------------

    def copy(self) -> Node:
        """Deep copy; the copy has no parent."""
        raise NotImplementedError

    def flattened(self) -> Node:
        """
        Copy of this tree where directly nested operations of the same
        n-ary kind share one operand list: And(And(a, b), c) -> And(a, b, c).
        """
        return self.copy()

    def deep_sort(self):
        """Sort every n-ary operand list in place, innermost first."""
        for child in self.children:
            child.deep_sort()

    def deep_sorted(self) -> Node:
        result = self.copy()
        result.deep_sort()
        return result

    def canonicalize_in_place(self, deep: bool = True) -> bool:
        """
        Flatten and sort this node without copying it. With `deep=False`
        the operands are taken to be canonical already and only this node's
        own operand list is fixed up. Returns True if anything moved.
        """
        return False

    def to_expression(self) -> ex.Expression:
        raise NotImplementedError

    def replacing(self, path: ExpressionPath, new: Node) -> Node:
        """
        Substitute the node at `path` with `new` and return the resulting
        tree. Nodes along the path are copied when they are owned by a
        parent, so an unowned root is updated in place. A root path simply
        returns `new`.
        """
        if path.is_root:
            return new

        step = path.steps[0]
        child = self._child_at(step)
        if child is None:
            raise ContractViolation(f"Path {path} does not exist in {self!r}")

        new_child = child.replacing(ExpressionPath(path.steps[1:]), new)
        target = self.copy_if_parented()
        target._set_child(step, new_child)
        return target

    def removing(self, path: ExpressionPath) -> Optional[Node]:
        """
        Remove the node at `path` and return the resulting tree.

        - an operand of an n-ary node with more than two operands is dropped;
        - a two-operand n-ary node collapses into the surviving operand;
        - the operand of a Not takes the Not with it, recursively upwards.

        Returns None when the removal reaches the root.
        """
        if path.is_root:
            return None

        step = path.steps[0]
        child = self._child_at(step)
        if child is None:
            raise ContractViolation(f"Path {path} does not exist in {self!r}")

        return self._removing_child(step, child, ExpressionPath(path.steps[1:]))

    def _removing_child(self, step: PathStep, child: Node, rest: ExpressionPath) -> Optional[Node]:
        raise ContractViolation(f"{self!r} has no child at {step}")

    def replace_at(self, path: ExpressionPath, new: Node) -> Node:
        """
        In-place counterpart of `replacing`: the parent of `path` is edited
        directly. Only for trees nothing else holds on to.
        """
        if path.is_root:
            return new
        parent = self.node_at(path.parent)
        if parent is None or parent._child_at(path.last) is None:
            raise ContractViolation(f"Path {path} does not exist in {self!r}")
        parent._set_child(path.last, new)
        return self

    def remove_at(self, path: ExpressionPath) -> Optional[Node]:
        """
        In-place counterpart of `removing`, with the same collapsing rules.
        Returns None, leaving the tree untouched, when the removal reaches
        the root.
        """
        if self.node_at(path) is None:
            raise ContractViolation(f"Path {path} does not exist in {self!r}")

        # a Not goes along with its operand
        while True:
            if path.is_root:
                return None
            parent = self.node_at(path.parent)
            if isinstance(parent, NaryNode):
                break
            path = path.parent

        index = path.last.operand
        if len(parent.operands) > 2:
            parent.remove_operand(index)
            return self

        survivor = parent.operands[1 - index]
        parent._release_operands()
        return self.replace_at(path.parent, survivor)

    # --- comparison ------------------------------------------------------

    def _same_value(self, other: Node) -> bool:
        raise NotImplementedError

    def _less_than(self, other: Node) -> bool:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.discriminant == other.discriminant and self._same_value(other)

    def __lt__(self, other: Node) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        if self.discriminant != other.discriminant:
            return self.discriminant < other.discriminant
        return self._less_than(other)

    def __str__(self) -> str:
        return str(self.to_expression())


class NaryNode(Node):
    """Base class of And / Or / Xor: an ordered list of two or more operands."""

    step_kind: StepKind
    expression_type: type
    # result of an empty operand list
    unit: ex.Expression

    def __init__(self, operands: Iterable[Node]):
        super().__init__()
        operands = list(operands)
        if len(operands) < 2:
            raise ContractViolation(
                f"{type(self).__name__} needs at least two operands, got {len(operands)}"
            )
        self._operands: list[Node] = []
        for operand in operands:
            operand._attach_to(self)
            self._operands.append(operand)

    @property
    def operands(self) -> tuple[Node, ...]:
        return tuple(self._operands)

    @property
    def children(self) -> list[Node]:
        return list(self._operands)

    def _path_to(self, parent: ExpressionPath, index: int) -> ExpressionPath:
        return parent.child(PathStep(self.step_kind, index))

    def children_with_paths(self, parent: ExpressionPath = ROOT) -> list[tuple[Node, ExpressionPath]]:
        return [(op, self._path_to(parent, i)) for i, op in enumerate(self._operands)]

    def _child_at(self, step: PathStep) -> Optional[Node]:
        if step.kind is not self.step_kind:
            return None
        if step.operand is None or not 0 <= step.operand < len(self._operands):
            return None
        return self._operands[step.operand]

    def _set_child(self, step: PathStep, node: Node):
        if self._child_at(step) is None:
            raise ContractViolation(f"{self!r} has no child at {step}")
        self.replace_operand(step.operand, node)

    def replace_operand(self, index: int, node: Node):
        """Put `node` (copied if owned elsewhere) at operand `index`, in place."""
        node = node.copy_if_parented()
        self._operands[index]._detach()
        self._operands[index] = self._adopt(node)
        self.settled.clear()

    def remove_operand(self, index: int):
        if len(self._operands) <= 2:
            raise ContractViolation(
                f"Removing an operand of {self!r} would leave fewer than two operands"
            )
        self._operands.pop(index)._detach()
        self.settled.clear()

    def _release_operands(self) -> list[Node]:
        # Leaves self unusable; only for nodes about to be discarded
        operands, self._operands = self._operands, []
        for operand in operands:
            operand._detach()
        self.settled.clear()
        return operands

    def contains(self, node: Node) -> bool:
        """Plain structural membership among the direct operands."""
        return any(op == node for op in self._operands)

    def copy(self) -> NaryNode:
        return type(self)(op.copy() for op in self._operands)

    def flattened(self) -> NaryNode:
        operands: list[Node] = []
        for operand in self._operands:
            flat = operand.flattened()
            if flat.discriminant == self.discriminant:
                operands.extend(flat._release_operands())
            else:
                operands.append(flat)
        return type(self)(operands)

    def deep_sort(self):
        for operand in self._operands:
            operand.deep_sort()
        self._operands.sort()

    def canonicalize_in_place(self, deep: bool = True) -> bool:
        changed = False
        if deep:
            for operand in self._operands:
                if operand.canonicalize_in_place():
                    changed = True

        operands: list[Node] = []
        for operand in self._operands:
            if operand.discriminant != self.discriminant:
                operands.append(operand)
                continue
            operand._detach()
            for inner in operand._release_operands():
                inner._attach_to(self)
                operands.append(inner)
            changed = True

        ordered = sorted(operands)
        if any(a is not b for a, b in zip(ordered, operands)):
            changed = True
        self._operands = ordered
        if changed:
            self.settled.clear()
        return changed

    def key(self) -> tuple:
        return (self.discriminant, tuple(op.key() for op in self._operands))

    def to_expression(self) -> ex.Expression:
        if not self._operands:
            return self.unit
        current = self._operands[-1].to_expression()
        for operand in reversed(self._operands[:-1]):
            current = self.expression_type(operand.to_expression(), current)
        return current

    def _removing_child(self, step: PathStep, child: Node, rest: ExpressionPath) -> Optional[Node]:
        replacement = child.removing(rest)
        if replacement is not None:
            target = self.copy_if_parented()
            target._set_child(step, replacement)
            return target

        if len(self._operands) > 2:
            target = self.copy_if_parented()
            target.remove_operand(step.operand)
            return target

        return self._operands[1 - step.operand].copy()

    def _same_value(self, other: Node) -> bool:
        return self._operands == other._operands

    def _less_than(self, other: Node) -> bool:
        return self._operands < other._operands

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(map(repr, self._operands))})"


class And(NaryNode):
    discriminant = Discriminant.AND
    step_kind = StepKind.AND
    expression_type = ex.And
    unit = ex.TRUE


class Or(NaryNode):
    discriminant = Discriminant.OR
    step_kind = StepKind.OR
    expression_type = ex.Or
    unit = ex.FALSE


class Xor(NaryNode):
    discriminant = Discriminant.XOR
    step_kind = StepKind.XOR
    expression_type = ex.Xor
    unit = ex.FALSE


class Not(Node):
    discriminant = Discriminant.NOT

    def __init__(self, operand: Node):
        super().__init__()
        operand._attach_to(self)
        self._operand = operand

    @property
    def operand(self) -> Node:
        return self._operand

    def set_operand(self, node: Node):
        """Replace the operand (copied if owned elsewhere), in place."""
        node = node.copy_if_parented()
        self._operand._detach()
        self._operand = self._adopt(node)
        self.settled.clear()

    @property
    def children(self) -> list[Node]:
        return [self._operand]

    def children_with_paths(self, parent: ExpressionPath = ROOT) -> list[tuple[Node, ExpressionPath]]:
        return [(self._operand, parent.not_operand())]

    def _child_at(self, step: PathStep) -> Optional[Node]:
        if step.kind is not StepKind.NOT:
            return None
        return self._operand

    def _set_child(self, step: PathStep, node: Node):
        if step.kind is not StepKind.NOT:
            raise ContractViolation(f"{self!r} has no child at {step}")
        self.set_operand(node)

    def copy(self) -> Not:
        return Not(self._operand.copy())

    def flattened(self) -> Not:
        return Not(self._operand.flattened())

    def canonicalize_in_place(self, deep: bool = True) -> bool:
        if not (deep and self._operand.canonicalize_in_place()):
            return False
        self.settled.clear()
        return True

    def key(self) -> tuple:
        return (self.discriminant, self._operand.key())

    def to_expression(self) -> ex.Expression:
        return ex.Not(self._operand.to_expression())

    def _removing_child(self, step: PathStep, child: Node, rest: ExpressionPath) -> Optional[Node]:
        replacement = child.removing(rest)
        if replacement is None:
            return None
        target = self.copy_if_parented()
        target.set_operand(replacement)
        return target

    def _same_value(self, other: Node) -> bool:
        return self._operand == other._operand

    def _less_than(self, other: Node) -> bool:
        return self._operand < other._operand

    def __repr__(self) -> str:
        return f"Not({self._operand!r})"


class Variable(Node):
    discriminant = Discriminant.VARIABLE

    def __init__(self, name: str):
        super().__init__()
        self.name = name

    def copy(self) -> Variable:
        return Variable(self.name)

    def key(self) -> tuple:
        return (self.discriminant, self.name)

    def to_expression(self) -> ex.Expression:
        return ex.Variable(self.name)

    def _same_value(self, other: Node) -> bool:
        return self.name == other.name

    def _less_than(self, other: Node) -> bool:
        return self.name < other.name

    def __repr__(self) -> str:
        return f"Variable({self.name!r})"


class Constant(Node):
    discriminant = Discriminant.CONSTANT

    def __init__(self, value: bool):
        super().__init__()
        self.value = value

    def copy(self) -> Constant:
        return Constant(self.value)

    def key(self) -> tuple:
        return (self.discriminant, self.value)

    def to_expression(self) -> ex.Expression:
        return ex.TRUE if self.value else ex.FALSE

    def _same_value(self, other: Node) -> bool:
        return self.value == other.value

    def _less_than(self, other: Node) -> bool:
        # false < true
        return not self.value and other.value

    def __repr__(self) -> str:
        return f"Constant({self.value})"


# --- factories -------------------------------------------------------------

def _owned(operands: Iterable[Node]) -> list[Node]:
    """Copy operands that are owned elsewhere or listed more than once."""
    result: list[Node] = []
    seen: set[int] = set()
    for operand in operands:
        if operand.parent is not None or id(operand) in seen:
            operand = operand.copy()
        seen.add(id(operand))
        result.append(operand)
    return result


def _nary_of(cls: type, operands: Iterable[Node]) -> Node:
    operands = _owned(operands)
    if not operands:
        raise ContractViolation(f"{cls.__name__} needs at least one operand")
    if len(operands) == 1:
        return operands[0]
    return cls(operands)


def and_of(operands: Iterable[Node]) -> Node:
    """And of `operands`; a single operand is returned as is."""
    return _nary_of(And, operands)


def or_of(operands: Iterable[Node]) -> Node:
    """Or of `operands`; a single operand is returned as is."""
    return _nary_of(Or, operands)


def xor_of(operands: Iterable[Node]) -> Node:
    """Xor of `operands`; a single operand is returned as is."""
    return _nary_of(Xor, operands)


def not_of(operand: Node) -> Not:
    return Not(operand.copy_if_parented())


# --- conversion ------------------------------------------------------------

def _lower(expression: ex.Expression) -> Node:
    if isinstance(expression, ex.And):
        return And([_lower(expression.left), _lower(expression.right)])
    if isinstance(expression, ex.Or):
        return Or([_lower(expression.left), _lower(expression.right)])
    if isinstance(expression, ex.Xor):
        return Xor([_lower(expression.left), _lower(expression.right)])
    if isinstance(expression, ex.Not):
        return Not(_lower(expression.operand))
    if isinstance(expression, ex.Parenthesized):
        return _lower(expression.operand)
    if isinstance(expression, ex.Variable):
        return Variable(expression.name)
    if isinstance(expression, ex.TrueConstant):
        return Constant(True)
    if isinstance(expression, ex.FalseConstant):
        return Constant(False)
    raise TypeError(f"Unknown expression type {type(expression).__name__}")


def from_expression(expression: ex.Expression) -> Node:
    """Lower a public expression into flattened IR, dropping parentheses."""
    return _lower(expression).flattened()
