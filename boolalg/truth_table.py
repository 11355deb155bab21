"""
Truth tables: brute-force enumeration of an expression over all assignments
of its variables, and an equivalence check that serves as an independent
oracle for the reducer.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boolalg.expression import Expression


@dataclass(frozen=True)
class Row:
    values: tuple[bool, ...]
    result: bool

    def __str__(self) -> str:
        return f"Row(values: {list(self.values)}, result: {self.result})"


@dataclass(frozen=True)
class TruthTable:
    expression: Expression
    variables: tuple[str, ...]
    rows: tuple[Row, ...]

    def _restrictions(self, other: TruthTable) -> tuple[list[int], list[int]]:
        """Column indexes of the shared variables, in self and in `other`."""
        shared = [v for v in self.variables if v in other.variables]
        return (
            [self.variables.index(v) for v in shared],
            [other.variables.index(v) for v in shared],
        )

    def equivalent(self, other: TruthTable) -> bool:
        """
        Both tables are restricted to their shared variables. Every row of
        the smaller table with a true result must find the matching rows of
        the larger one true as well. A table without variables is a constant
        compared against every row of the other.
        """
        if not self.variables or not other.variables:
            constant, table = (self, other) if not self.variables else (other, self)
            value = constant.rows[0].result
            return all(row.result == value for row in table.rows)

        smaller, larger = (self, other) if len(self.rows) <= len(other.rows) else (other, self)
        mine, theirs = smaller._restrictions(larger)
        for row in smaller.rows:
            if not row.result:
                continue
            key = tuple(row.values[i] for i in mine)
            for candidate in larger.rows:
                if tuple(candidate.values[i] for i in theirs) == key and not candidate.result:
                    return False
        return True

    def same_function(self, other: TruthTable) -> bool:
        """
        Stricter than `equivalent`: every pair of rows that agrees on the
        shared variables must agree on the result, whatever the result is.
        Variables present on one side only are free.
        """
        mine, theirs = self._restrictions(other)

        # results seen on `other`, keyed by the shared-variable restriction
        results: dict[tuple[bool, ...], set[bool]] = {}
        for row in other.rows:
            key = tuple(row.values[i] for i in theirs)
            results.setdefault(key, set()).add(row.result)

        for row in self.rows:
            key = tuple(row.values[i] for i in mine)
            if results.get(key, {row.result}) != {row.result}:
                return False
        return True

    def to_ascii_table(self, include_expression: bool = False) -> str:
        """Render as box-drawn text, one column per variable plus '='."""

        def pad(text: str, width: int) -> str:
            half = " " * (width // 2)
            cell = half + text + half
            return cell[len(cell) - width:]

        def bit(value: bool) -> str:
            return "1" if value else "0"

        lines: list[str] = []
        if include_expression:
            lines.append(str(self.expression))

        columns = [f" {name} " for name in self.variables] + [" = "]
        widths = [len(c) for c in columns]

        lines.append("│".join(columns))
        lines.append("┼".join("─" * w for w in widths))

        for row in self.rows:
            cells = [pad(bit(v), widths[i]) for i, v in enumerate(row.values)]
            cells.append(pad(bit(row.result), widths[-1]))
            lines.append("│".join(cells))

        return "\n".join(lines)


def generate_truth_table(expression: Expression) -> TruthTable:
    """
    Enumerate all 2^n assignments of the expression's variables.

    Variables are sorted lexicographically; bit i of the row index sets
    variable i, so the first variable toggles fastest.
    """
    variables = tuple(sorted(expression.variables()))
    rows = []
    # product() varies its last position fastest, reverse to make bit 0 the first variable
    for combination in product((False, True), repeat=len(variables)):
        values = tuple(reversed(combination))
        result = expression.evaluate(dict(zip(variables, values)))
        rows.append(Row(values, result))
    return TruthTable(expression, variables, tuple(rows))
