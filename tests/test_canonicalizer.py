# File: tests/test_canonicalizer.py

import pytest
from boolalg.canonicalizer import canonicalize, canonicalize_node, recanonicalize, spine
from boolalg.ir import ROOT, And, Variable, from_expression
from boolalg.parser import parse

# ─── 1) Reordering & re-association ────────────────────────────────────────────

@pytest.mark.parametrize("variants, expected", [
    (["b*(c+a)", "(a+c)*b", "(c+a)*b"],        "b * (a + c)"),
    (["(a*b)*c", "a*(b*c)", "c*b*a", "b*(a*c)"], "a * b * c"),
    (["¬(b+a)", "¬(a+b)", "¬((b)+a)"],           "¬(a + b)"),
    (["a^c^b", "(b^a)^c"],                      "a ^ b ^ c"),
])
def test_canonical_form_ignores_order_and_nesting(variants, expected):
    for src in variants:
        assert str(canonicalize(parse(src))) == expected

def test_variant_order():
    # constants < variables < not < and < xor < or
    assert str(canonicalize(parse("a^b + a*c + ¬a + b + 1"))) == "1 + b + ¬a + a * c + a ^ b"
    assert str(canonicalize(parse("1*0"))) == "0 * 1"

def test_parentheses_are_dropped():
    assert canonicalize(parse("((a))*(b)")) == parse("a*b")


# ─── 2) Idempotence ────────────────────────────────────────────────────────────

@pytest.mark.parametrize("src", [
    "a*b+c",
    "(d+c)*(b+a)",
    "¬(c^b)*a+¬a",
    "x1*(x3+x2)*¬(x0+x1)",
    "1",
])
def test_idempotent(src):
    once = canonicalize(parse(src))
    assert canonicalize(once) == once

def test_canonicalize_node_leaves_input_untouched():
    node = from_expression(parse("b+a"))
    result = canonicalize_node(node)
    assert str(result) == "a + b"
    assert str(node) == "b + a"
    assert result is not node


# ─── 3) Restoring the canonical form in place ──────────────────────────────────

def test_spine():
    tree = canonicalize_node(from_expression(parse("a*(b+¬c)")))
    path = ROOT.and_operand(1).or_operand(1).not_operand()
    assert [str(node) for node in spine(tree, path)] == ["a * (b + ¬c)", "b + ¬c", "¬c", "c"]
    # stops where the path no longer exists
    assert len(spine(tree, ROOT.and_operand(0).not_operand())) == 2

def test_recanonicalize_after_an_edit():
    tree = canonicalize_node(from_expression(parse("a*(b+c)*d")))
    tree.replace_at(ROOT.and_operand(1), And([Variable("x"), Variable("e")]))
    recanonicalize(tree, ROOT.and_operand(1))
    assert tree == canonicalize_node(from_expression(parse("a*(b+c)*e*x")))
    assert str(tree) == "a * e * x * (b + c)"

def test_recanonicalize_matches_a_full_canonicalization():
    tree = canonicalize_node(from_expression(parse("z+a*(b+c)")))
    tree.replace_at(ROOT.or_operand(1).and_operand(1).or_operand(1), from_expression(parse("y+(x*w)")))
    recanonicalize(tree, ROOT.or_operand(1).and_operand(1).or_operand(1))
    assert tree == canonicalize_node(tree)
    assert str(tree) == "z + a * (b + y + w * x)"
