# File: tests/test_collector.py

from boolalg.canonicalizer import canonicalize_node
from boolalg.collector import CommonTermCollector
from boolalg.ir import ROOT, from_expression
from boolalg.parser import parse


def collector(src: str, path=ROOT) -> CommonTermCollector:
    return CommonTermCollector(from_expression(parse(src)), path)

def summary(groups):
    return [(str(group.term), [str(loc) for loc in group.locations]) for group in groups]

# ─── 1) Direct operands ────────────────────────────────────────────────────────

def test_terms():
    terms = collector("a*b*a").terms()
    assert summary(terms) == [
        ("a", ["root/and[0]"]),
        ("b", ["root/and[1]"]),
        ("a", ["root/and[2]"]),
    ]

def test_minimal_terms():
    assert summary(collector("a*b*a").minimal_terms()) == [("a", ["root/and[0]", "root/and[2]"])]
    assert collector("a*b*c").minimal_terms() == []

def test_minimal_terms_group_transitively():
    groups = collector("(a+b)*c*(b+a)").minimal_terms()
    assert summary(groups) == [("a + b", ["root/and[0]", "root/and[2]"])]


# ─── 2) Compound terms ─────────────────────────────────────────────────────────

def test_compound_terms_of_an_or():
    c = collector("a*b + a*c + d")
    assert [str(op) for op, _ in c.compound_operands()] == ["a * b", "a * c"]
    assert summary(c.compound_terms()) == [("a", ["root/or[0]/and[0]", "root/or[1]/and[0]"])]
    assert summary(c.maximal_compound_terms()) == [("a", ["root/or[0]/and[0]", "root/or[1]/and[0]"])]

def test_compound_terms_of_an_and():
    c = collector("(a+b)*(a+c)")
    assert summary(c.compound_terms()) == [("a", ["root/and[0]/or[0]", "root/and[1]/or[0]"])]

def test_maximal_compound_terms_need_every_compound_operand():
    c = collector("a*b + a*c + b*d")
    assert [str(group.term) for group in c.compound_terms()] == ["a", "b"]
    assert c.maximal_compound_terms() == []

def test_no_compound_terms_without_opposite_operands():
    assert collector("a*b*c").compound_terms() == []
    assert collector("a^(b*c)").compound_operands() == []

def test_locations_follow_the_collector_path():
    tree = from_expression(parse("¬(a*b + a*c)"))
    c = CommonTermCollector(tree.operand, ROOT.not_operand())
    assert summary(c.compound_terms()) == [
        ("a", ["root/not/or[0]/and[0]", "root/not/or[1]/and[0]"]),
    ]


# ─── 3) Distribution ───────────────────────────────────────────────────────────

def test_distributed_terms():
    c = collector("a*(b+c)*(d+e)")
    assert c.distributed_term_count() == 4
    assert [[str(n) for n in dt.nodes()] for dt in c.distributed_terms()] == [
        ["a", "b", "d"],
        ["a", "b", "e"],
        ["a", "c", "d"],
        ["a", "c", "e"],
    ]

def test_distributed_terms_of_an_or():
    c = collector("a + b*c")
    assert [[str(n) for n in dt.nodes()] for dt in c.distributed_terms()] == [["a", "b"], ["a", "c"]]

def test_xor_operands_are_singletons():
    c = collector("a^(b*c)")
    assert c.distributed_term_count() == 1
    assert [[str(n) for n in dt.nodes()] for dt in c.distributed_terms()] == [["a", "b * c"]]


# ─── 4) Canonical input ────────────────────────────────────────────────────────

def test_canonical_input_is_grouped_as_it_stands():
    tree = from_expression(parse("(a+b)*c*(b+a)"))
    assert CommonTermCollector(tree, canonical=True).minimal_terms() == []
    assert summary(CommonTermCollector(tree).minimal_terms()) == [("a + b", ["root/and[0]", "root/and[2]"])]

def test_canonical_compound_terms():
    tree = canonicalize_node(from_expression(parse("a*b + c*a + d")))
    c = CommonTermCollector(tree, canonical=True)
    assert summary(c.compound_terms()) == [("a", ["root/or[1]/and[0]", "root/or[2]/and[0]"])]
