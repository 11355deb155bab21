class BooleanAlgebraError(Exception):
    """Base class for the recoverable errors raised by boolalg."""


class UndefinedVariableError(BooleanAlgebraError, KeyError):
    """Raised when evaluation meets a variable with no bound value."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Undefined variable '{self.name}'"


class ExpressionSyntaxError(BooleanAlgebraError):
    """
    Raised when a boolean expression cannot be parsed.

    `position` is the 0-based character offset of the offending token
    within `source`.
    """

    def __init__(self, description: str, position: int, source: str = ""):
        super().__init__(description, position)
        self.description = description
        self.position = position
        self.source = source

    def __str__(self) -> str:
        msg = f"{self.description} at position {self.position}"
        if self.source:
            msg += f"\n  {self.source}\n  {' ' * self.position}^"
        return msg


class ReductionLimitError(BooleanAlgebraError):
    """Raised when a reduction exceeds one of the configured resource caps."""

    def __init__(self, limit: str, value: int):
        super().__init__(limit, value)
        self.limit = limit
        self.value = value

    def __str__(self) -> str:
        return f"Reduction exceeded {self.limit} ({self.value})"


class ContractViolation(AssertionError):
    """
    A programming error inside the rewriting engine: re-parenting an owned
    node, addressing a path that does not exist, building an empty n-ary
    node. These are never meant to be caught.
    """
