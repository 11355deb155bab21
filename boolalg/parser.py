"""
Recursive-descent parser for boolean expressions.

Grammar (precedence low to high, binary operators right-associative):

    expr       := or
    or         := xor (('|' | '+' | '∨') xor)*
    xor        := and (('^' | '⊕') and)*
    and        := not (('&' | '*' | '∧') not)*
    not        := ('¬' | '!') not | atom
    atom       := identifier | '0' | '1' | '(' expr ')'
    identifier := letter (letter | digit)*
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from boolalg.errors import ExpressionSyntaxError
from boolalg.expression import (
    FALSE,
    TRUE,
    And,
    Expression,
    Not,
    Or,
    Parenthesized,
    Variable,
    Xor,
)

logger = logging.getLogger(__name__)

# Token kinds
IDENTIFIER = "identifier"
LEFT_PAREN = "("
RIGHT_PAREN = ")"
AND = "and"
XOR = "xor"
OR = "or"
NOT = "not"
CONSTANT_TRUE = "1"
CONSTANT_FALSE = "0"
EOF = "<eof>"

SYMBOLS = {
    "(": LEFT_PAREN,
    ")": RIGHT_PAREN,
    "*": AND, "&": AND, "∧": AND,
    "^": XOR, "⊕": XOR,
    "+": OR, "|": OR, "∨": OR,
    "¬": NOT, "!": NOT,
    "1": CONSTANT_TRUE,
    "0": CONSTANT_FALSE,
}


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    position: int


def tokenize(source: str) -> Iterator[Token]:
    """Yield tokens of `source`, ending with a single EOF token."""
    position = 0
    length = len(source)
    while position < length:
        char = source[position]
        if char.isspace():
            position += 1
            continue
        if char.isalpha():
            end = position + 1
            while end < length and (source[end].isalpha() or source[end].isdigit()):
                end += 1
            yield Token(IDENTIFIER, source[position:end], position)
            position = end
            continue
        kind = SYMBOLS.get(char)
        if kind is None:
            raise ExpressionSyntaxError(f"Unexpected character '{char}'", position, source)
        yield Token(kind, char, position)
        position += 1
    yield Token(EOF, "", length)


class ExpressionParser:
    """
    Parses a boolean expression string into an `Expression` tree.
    Parenthesized groups are kept as `Parenthesized` nodes.
    """

    def __init__(self):
        self.source = ""
        self.tokens: list[Token] = []
        self.index = 0

    def parse(self, source: str) -> Expression:
        """
        Tokenize and parse `source`. The whole input must form one
        expression; anything left over is a syntax error.
        """
        self.source = source
        self.tokens = list(tokenize(source))
        self.index = 0

        expression = self._parse_or()
        if self._peek().kind != EOF:
            self._fail(f"Unexpected '{self._peek().text}' after expression")

        logger.debug(f"Parsed {source!r} as {expression.debug_description()}")
        return expression

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _consume(self, kind: str) -> Optional[Token]:
        token = self._peek()
        if token.kind != kind:
            return None
        self.index += 1
        return token

    def _fail(self, description: str):
        raise ExpressionSyntaxError(description, self._peek().position, self.source)

    def _parse_or(self) -> Expression:
        lhs = self._parse_xor()
        if self._consume(OR):
            return Or(lhs, self._parse_or())
        return lhs

    def _parse_xor(self) -> Expression:
        lhs = self._parse_and()
        if self._consume(XOR):
            return Xor(lhs, self._parse_xor())
        return lhs

    def _parse_and(self) -> Expression:
        lhs = self._parse_not()
        if self._consume(AND):
            return And(lhs, self._parse_and())
        return lhs

    def _parse_not(self) -> Expression:
        if self._consume(NOT):
            return Not(self._parse_not())
        return self._parse_atom()

    def _parse_atom(self) -> Expression:
        token = self._consume(IDENTIFIER)
        if token:
            return Variable(token.text)

        if self._consume(LEFT_PAREN):
            inner = self._parse_or()
            if not self._consume(RIGHT_PAREN):
                self._fail("Expected ')'")
            return Parenthesized(inner)

        if self._consume(CONSTANT_TRUE):
            return TRUE
        if self._consume(CONSTANT_FALSE):
            return FALSE

        self._fail("Expected identifier, parenthesized, or constant boolean expression")


def parse(source: str) -> Expression:
    """Parse `source` into a public expression tree."""
    return ExpressionParser().parse(source)
