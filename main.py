import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from boolalg import (
    BooleanAlgebraError,
    Expansion,
    Expression,
    ReducerConfig,
    TruthTable,
    canonicalize,
    parse,
    reduce as reduce_expression,
)
from boolalg.sympy_bridge import sympy_equivalent, sympy_simplified

app = typer.Typer(help="Parse, evaluate and simplify boolean expressions.")
console = Console()


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def fail(error: Exception):
    console.print(f"Error: {error}", style="red", markup=False)
    raise typer.Exit(code=1)


def parse_bindings(pairs: list[str]) -> dict[str, bool]:
    """Turn ['a=1', 'b=0'] into {'a': True, 'b': False}."""
    bindings = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        name, value = name.strip(), value.strip()
        if not sep or not name or value not in ("0", "1"):
            raise typer.BadParameter(f"expected name=0 or name=1, got {pair!r}", param_hint="--set")
        bindings[name] = value == "1"
    return bindings


def read_expressions(path: Path) -> list[str]:
    """One expression per line; blank lines and '#' comments are skipped."""
    lines = []
    for line in path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            lines.append(line)
    return lines


def truth_table_view(table: TruthTable) -> Table:
    view = Table(title=str(table.expression))
    for name in table.variables:
        view.add_column(name, justify="center")
    view.add_column("=", justify="center", style="bold")
    for row in table.rows:
        cells = ["1" if value else "0" for value in row.values]
        view.add_row(*cells, "1" if row.result else "0")
    return view


def process_expression(source: str, config: ReducerConfig, show_table: bool, compare_sympy: bool):
    """
    1) Parse and reduce
    2) Show the reduced form, optionally with its truth table
    3) Optionally compare against sympy
    """
    expression = parse(source)
    reduced = reduce_expression(expression, config)

    # 2) Output
    console.print(Panel(str(reduced), title=str(expression), border_style="green"))
    if show_table:
        console.print(truth_table_view(reduced.generate_truth_table()))

    # 3) sympy's opinion
    if compare_sympy:
        agrees = sympy_equivalent(expression, reduced)
        console.print(Panel(
            f"simplify_logic: {sympy_simplified(expression)}\n"
            f"equivalent: {'yes' if agrees else 'NO'}",
            title="sympy",
            border_style="blue" if agrees else "red",
        ))


@app.command("reduce")
def reduce_command(
    expressions: Optional[list[str]] = typer.Argument(
        None, help="Boolean expressions to reduce"
    ),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", exists=True, file_okay=True, dir_okay=False,
        help="Read one expression per line from FILE"
    ),
    product_of_sums: bool = typer.Option(
        False, "--product-of-sums",
        help="Distribute towards a product of sums instead of a sum of products"
    ),
    max_rewrites: int = typer.Option(
        ReducerConfig.max_rewrites, "--max-rewrites",
        help="Give up after this many rewrites"
    ),
    max_size: int = typer.Option(
        ReducerConfig.max_size, "--max-size",
        help="Give up when the expression grows past this many nodes"
    ),
    table: bool = typer.Option(
        False, "--table",
        help="Print the truth table of each result"
    ),
    compare_sympy: bool = typer.Option(
        False, "--compare-sympy",
        help="Cross-check each result with sympy"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log every rewrite"
    ),
):
    """
    Reduce each EXPR (and each line of --file) to a simpler equivalent expression.
    """
    setup_logging(verbose)
    sources = list(expressions or [])
    if file is not None:
        sources.extend(read_expressions(file))
    if not sources:
        raise typer.BadParameter("give at least one expression or --file")

    config = ReducerConfig(
        max_rewrites=max_rewrites,
        max_size=max_size,
        expansion=Expansion.PRODUCT_OF_SUMS if product_of_sums else Expansion.SUM_OF_PRODUCTS,
    )

    failed = False
    for source in sources:
        try:
            process_expression(source, config, table, compare_sympy)
        except BooleanAlgebraError as e:
            console.print(f"Error in {source!r}: {e}", style="red", markup=False)
            failed = True
    if failed:
        raise typer.Exit(code=1)


@app.command("table")
def table_command(expression: str = typer.Argument(..., help="Boolean expression")):
    """
    Print the truth table of EXPRESSION.
    """
    try:
        parsed = parse(expression)
    except BooleanAlgebraError as e:
        fail(e)
    console.print(truth_table_view(parsed.generate_truth_table()))


@app.command("evaluate")
def evaluate_command(
    expression: str = typer.Argument(..., help="Boolean expression"),
    assignments: list[str] = typer.Option(
        [], "--set", "-s",
        help="Variable binding, e.g. --set a=1"
    ),
):
    """
    Evaluate EXPRESSION with the given variable bindings.
    """
    bindings = parse_bindings(assignments)
    try:
        result = parse(expression).evaluate(bindings)
    except BooleanAlgebraError as e:
        fail(e)
    console.print("1" if result else "0")


@app.command("canonicalize")
def canonicalize_command(expression: str = typer.Argument(..., help="Boolean expression")):
    """
    Print the canonical form of EXPRESSION: flattened, with sorted operands.
    """
    try:
        parsed: Expression = parse(expression)
    except BooleanAlgebraError as e:
        fail(e)
    console.print(str(canonicalize(parsed)), markup=False)


if __name__ == "__main__":
    app()
