# File: tests/test_parser.py

import pytest
from boolalg.errors import ExpressionSyntaxError
from boolalg.expression import FALSE, TRUE, And, Not, Or, Parenthesized, Variable, Xor
from boolalg.parser import EOF, IDENTIFIER, ExpressionParser, parse, tokenize

a, b, c, d = (Variable(name) for name in "abcd")

# ─── 1) Precedence & associativity ─────────────────────────────────────────────

@pytest.mark.parametrize("src, expected", [
    ("a*b+c",        Or(And(a, b), c)),
    ("a*b*c",        And(a, And(b, c))),
    ("a+b+c",        Or(a, Or(b, c))),
    ("a^b^c",        Xor(a, Xor(b, c))),
    ("!a*b",         And(Not(a), b)),
    ("a ^ b + c",    Or(Xor(a, b), c)),
    ("a + b ^ c",    Or(a, Xor(b, c))),
    ("a * b ^ c",    Xor(And(a, b), c)),
    ("¬¬a",          Not(Not(a))),
    ("1 * 0",        And(TRUE, FALSE)),
    ("(a+b)*(c+d)",  And(Parenthesized(Or(a, b)), Parenthesized(Or(c, d)))),
    ("¬(a+b)",       Not(Parenthesized(Or(a, b)))),
])
def test_precedence(src, expected):
    assert parse(src) == expected

@pytest.mark.parametrize("src", [
    "a ∧ ¬b ∨ c ⊕ d",
    "a & !b | c ^ d",
    "a * ¬b + c ^ d",
])
def test_operator_spellings(src):
    assert parse(src) == Or(And(a, Not(b)), Xor(c, d))

def test_identifiers_with_digits():
    assert parse("x1 + y22") == Or(Variable("x1"), Variable("y22"))

def test_whitespace_is_ignored():
    assert parse("  a\t*\n b ") == parse("a*b")

def test_parser_instance_is_reusable():
    parser = ExpressionParser()
    assert parser.parse("a") == a
    assert parser.parse("b*c") == And(b, c)


# ─── 2) Tokenizer ──────────────────────────────────────────────────────────────

def test_tokenize_positions():
    tokens = list(tokenize("ab + ¬c"))
    assert [(t.kind, t.text, t.position) for t in tokens] == [
        (IDENTIFIER, "ab", 0),
        ("or", "+", 3),
        ("not", "¬", 5),
        (IDENTIFIER, "c", 6),
        (EOF, "", 7),
    ]


# ─── 3) Syntax errors ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("src, position, message", [
    ("a +",     3, "Expected identifier"),
    ("(a + b",  6, "Expected ')'"),
    ("a b",     2, "Unexpected 'b'"),
    ("a $ b",   2, "Unexpected character '$'"),
    ("",        0, "Expected identifier"),
    ("a + )",   4, "Expected identifier"),
    ("10",      1, "Unexpected '0'"),
])
def test_syntax_errors(src, position, message):
    with pytest.raises(ExpressionSyntaxError) as excinfo:
        parse(src)
    assert excinfo.value.position == position
    assert message in excinfo.value.description

def test_syntax_error_points_at_column():
    with pytest.raises(ExpressionSyntaxError) as excinfo:
        parse("a * * b")
    lines = str(excinfo.value).splitlines()
    assert lines[0] == "Expected identifier, parenthesized, or constant boolean expression at position 4"
    assert lines[1] == "  a * * b"
    assert lines[2] == "      ^"
