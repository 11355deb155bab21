# File: tests/test_truth_table.py

import pytest
from boolalg.parser import parse
from boolalg.truth_table import Row, generate_truth_table

# ─── 1) Generation ─────────────────────────────────────────────────────────────

def test_rows_toggle_first_variable_fastest():
    table = generate_truth_table(parse("b*a"))
    assert table.variables == ("a", "b")
    assert table.rows == (
        Row((False, False), False),
        Row((True, False), False),
        Row((False, True), False),
        Row((True, True), True),
    )

def test_constant_has_a_single_row():
    table = parse("1").generate_truth_table()
    assert table.variables == ()
    assert table.rows == (Row((), True),)

@pytest.mark.parametrize("src", [
    "a*b+c",
    "¬(a^b)*c+d",
    "a^b^c",
    "(a+b)*(¬a+c)",
])
def test_rows_agree_with_evaluate(src):
    expression = parse(src)
    table = expression.generate_truth_table()
    assert len(table.rows) == 2 ** len(table.variables)
    for row in table.rows:
        assert expression.evaluate(dict(zip(table.variables, row.values))) is row.result


# ─── 2) Equivalence ────────────────────────────────────────────────────────────

@pytest.mark.parametrize("lhs, rhs, expected", [
    ("a*(b+c)",  "a*b+a*c",  True),
    ("¬(a*b)",   "¬a+¬b",    True),
    ("a^b",      "a*¬b+¬a*b", True),
    ("a",        "a*b",      False),
    ("a*b",      "a",        False),
    ("a+¬a",     "1",        True),
    ("1",        "a",        False),
    ("0",        "a*¬a",     True),
    # constant functions over disjoint variables
    ("b+¬b",     "a+¬a",     True),
    ("a",        "b",        False),
    ("a*(b+¬b)", "a",        True),
])
def test_equivalent(lhs, rhs, expected):
    lhs_table = parse(lhs).generate_truth_table()
    rhs_table = parse(rhs).generate_truth_table()
    assert lhs_table.equivalent(rhs_table) is expected
    assert rhs_table.equivalent(lhs_table) is expected
    assert lhs_table.same_function(rhs_table) is expected

@pytest.mark.parametrize("lhs, rhs, expected", [
    # only the true rows of the smaller table are checked
    ("a",    "a+b",  True),
    ("a+b",  "a",    True),
    ("a*b",  "a+b",  True),
    ("a+b",  "a*b",  False),
    ("¬a",   "a+b",  False),
    ("a",    "a*b",  False),
])
def test_equivalent_checks_true_rows_of_the_smaller_table(lhs, rhs, expected):
    lhs_table = parse(lhs).generate_truth_table()
    rhs_table = parse(rhs).generate_truth_table()
    assert lhs_table.equivalent(rhs_table) is expected

@pytest.mark.parametrize("lhs, rhs", [
    ("a",    "a+b"),
    ("a*b",  "a+b"),
    ("a",    "1"),
])
def test_same_function_checks_every_row(lhs, rhs):
    lhs_table = parse(lhs).generate_truth_table()
    rhs_table = parse(rhs).generate_truth_table()
    assert not lhs_table.same_function(rhs_table)
    assert not rhs_table.same_function(lhs_table)


# ─── 3) ASCII rendering ────────────────────────────────────────────────────────

def test_to_ascii_table():
    table = parse("a*b").generate_truth_table()
    assert table.to_ascii_table() == "\n".join([
        " a │ b │ = ",
        "───┼───┼───",
        " 0 │ 0 │ 0 ",
        " 1 │ 0 │ 0 ",
        " 0 │ 1 │ 0 ",
        " 1 │ 1 │ 1 ",
    ])

def test_to_ascii_table_with_expression():
    table = parse("¬a").generate_truth_table()
    lines = table.to_ascii_table(include_expression=True).splitlines()
    assert lines[0] == "¬a"
    assert lines[-2:] == [" 0 │ 1 ", " 1 │ 0 "]
