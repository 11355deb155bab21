from boolalg.canonicalizer import canonicalize
from boolalg.errors import (
    BooleanAlgebraError,
    ContractViolation,
    ExpressionSyntaxError,
    ReductionLimitError,
    UndefinedVariableError,
)
from boolalg.expression import (
    FALSE,
    TRUE,
    And,
    Expression,
    FalseConstant,
    Not,
    Or,
    Parenthesized,
    TrueConstant,
    Variable,
    Xor,
)
from boolalg.parser import ExpressionParser, parse
from boolalg.reducer import Expansion, ExpressionReducer, ReducerConfig, reduce
from boolalg.truth_table import Row, TruthTable, generate_truth_table

__version__ = "0.1.0"
