"""
Structural addresses of nodes inside an IR tree.

A path is the ordered list of edges taken from a root down to a target node.
Paths are plain values: they compare and hash by content and stay valid
across structurally identical copies of a tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, NamedTuple, Optional


class StepKind(Enum):
    AND = "and"
    OR = "or"
    XOR = "xor"
    NOT = "not"


class PathStep(NamedTuple):
    kind: StepKind
    operand: Optional[int] = None

    def __str__(self) -> str:
        if self.kind is StepKind.NOT:
            return "not"
        return f"{self.kind.value}[{self.operand}]"


@dataclass(frozen=True)
class ExpressionPath:
    steps: tuple[PathStep, ...] = ()

    @property
    def is_root(self) -> bool:
        return not self.steps

    @property
    def parent(self) -> Optional[ExpressionPath]:
        """The path one edge up, or None for the root."""
        if self.is_root:
            return None
        return ExpressionPath(self.steps[:-1])

    @property
    def last(self) -> Optional[PathStep]:
        return self.steps[-1] if self.steps else None

    def child(self, step: PathStep) -> ExpressionPath:
        return ExpressionPath(self.steps + (step,))

    def and_operand(self, index: int) -> ExpressionPath:
        return self.child(PathStep(StepKind.AND, index))

    def or_operand(self, index: int) -> ExpressionPath:
        return self.child(PathStep(StepKind.OR, index))

    def xor_operand(self, index: int) -> ExpressionPath:
        return self.child(PathStep(StepKind.XOR, index))

    def not_operand(self) -> ExpressionPath:
        return self.child(PathStep(StepKind.NOT))

    def inverse(self) -> list[PathStep]:
        """Steps from the root down to the target, in order."""
        return list(self.steps)

    @classmethod
    def from_inverse(cls, steps: Iterable[PathStep]) -> ExpressionPath:
        return cls(tuple(steps))

    def appending(self, parent: ExpressionPath) -> ExpressionPath:
        """
        Re-express this path, relative to some local sub-root, relative to
        the root `parent` is relative to.
        """
        return ExpressionPath(parent.steps + self.steps)

    def relative_to(self, prefix: ExpressionPath) -> Optional[ExpressionPath]:
        """Inverse of `appending`: None when `prefix` is not a prefix."""
        if self.steps[:len(prefix.steps)] != prefix.steps:
            return None
        return ExpressionPath(self.steps[len(prefix.steps):])

    @property
    def depth(self) -> int:
        return len(self.steps)

    def __str__(self) -> str:
        return "/".join(["root"] + [str(step) for step in self.steps])


ROOT = ExpressionPath()
