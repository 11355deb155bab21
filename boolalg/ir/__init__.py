from boolalg.ir.nodes import (
    And,
    Constant,
    Discriminant,
    NaryNode,
    Node,
    Not,
    Or,
    Variable,
    Xor,
    and_of,
    from_expression,
    not_of,
    or_of,
    xor_of,
)
from boolalg.ir.path import ROOT, ExpressionPath, PathStep, StepKind
