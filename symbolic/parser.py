# symbolic/parser.py
"""
Recursive-descent parser for user-entered expressions.

Grammar, lowest to highest binding::

    expr    := term (('+'|'-') term)*
    term    := factor (('*'|'/'|<implicit>) factor)*
    factor  := '-' factor | power
    power   := primary ('^' factor)?
    primary := NUMBER | IDENT | IDENT '(' expr (',' expr)* ')' | '(' expr ')'

Implicit multiplication is decided here rather than by rewriting text: when a
factor is complete and the next token can start a primary (a number, an
identifier or '('), a '*' node is synthesized. Unary minus wraps a power, so
``-x^2`` is ``-(x^2)``; the exponent is itself a factor, which makes '^'
right-associative and allows ``2^-1``.
"""
from typing import List, Sequence

from core.exceptions import (
    ArityError,
    MissingOperandError,
    NestingTooDeepError,
    TrailingTokensError,
    UnbalancedParenthesisError,
    UnknownIdentifierError,
)
from symbolic.ast_nodes import AstNode, BinaryOp, Call, Constant, UnaryOp, Variable
from symbolic.functions import CONSTANTS, FUNCTIONS, VARIABLE_NAME
from symbolic.tokenizer import Token, TokenKind, tokenize

# Bound on the depth of the tree being built. Each parenthesis level costs two
# units; each link of an operator chain (x+x+..., 2x x x ...) costs one.
MAX_NESTING_DEPTH = 200

_PRIMARY_START = (TokenKind.NUMBER, TokenKind.IDENTIFIER, TokenKind.LPAREN)


class Parser:
    def __init__(self, tokens: Sequence[Token]):
        if not tokens or tokens[-1].kind is not TokenKind.END:
            end = tokens[-1].position + 1 if tokens else 0
            tokens = list(tokens) + [Token(TokenKind.END, None, end)]
        self.tokens = tokens
        self.index = 0
        self.depth = 0

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------
    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind is not TokenKind.END:
            self.index += 1
        return token

    def _at_operator(self, *ops: str) -> bool:
        tok = self.current
        return tok.kind is TokenKind.OPERATOR and tok.value in ops

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            pos = self.current.position
            raise NestingTooDeepError(f"Expression is nested too deeply at position {pos}", pos)

    def _leave(self, units: int = 1) -> None:
        self.depth -= units

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------
    def parse(self) -> AstNode:
        if self.current.kind is TokenKind.END:
            raise MissingOperandError("Empty expression", self.current.position)
        node = self._parse_expr()
        tok = self.current
        if tok.kind is TokenKind.RPAREN:
            raise UnbalancedParenthesisError(f"Unmatched ')' at position {tok.position}", tok.position)
        if tok.kind is not TokenKind.END:
            raise TrailingTokensError(
                f"Unexpected {tok.describe()} at position {tok.position} after a complete expression",
                tok.position,
            )
        return node

    def _parse_expr(self) -> AstNode:
        self._enter()
        links = 0
        try:
            node = self._parse_term()
            while self._at_operator("+", "-"):
                op = self._advance().value
                links += 1
                self._enter()
                node = BinaryOp(op, node, self._parse_term())
            return node
        finally:
            self._leave(links + 1)

    def _parse_term(self) -> AstNode:
        node = self._parse_factor()
        links = 0
        try:
            while True:
                if self._at_operator("*", "/"):
                    op = self._advance().value
                elif self.current.kind in _PRIMARY_START:
                    op = "*"
                else:
                    return node
                links += 1
                self._enter()
                node = BinaryOp(op, node, self._parse_factor())
        finally:
            self._leave(links)

    def _parse_factor(self) -> AstNode:
        self._enter()
        try:
            if self._at_operator("-"):
                self._advance()
                return UnaryOp("-", self._parse_factor())
            return self._parse_power()
        finally:
            self._leave()

    def _parse_power(self) -> AstNode:
        base = self._parse_primary()
        if self._at_operator("^"):
            self._advance()
            return BinaryOp("^", base, self._parse_factor())
        return base

    def _parse_primary(self) -> AstNode:
        tok = self.current

        if tok.kind is TokenKind.NUMBER:
            self._advance()
            return Constant(tok.value)

        if tok.kind is TokenKind.IDENTIFIER:
            return self._parse_identifier()

        if tok.kind is TokenKind.LPAREN:
            self._advance()
            if self.current.kind is TokenKind.RPAREN:
                pos = self.current.position
                raise MissingOperandError(f"Empty parentheses at position {tok.position}", pos)
            node = self._parse_expr()
            self._expect_closing(tok)
            return node

        if tok.kind is TokenKind.RPAREN and not self._inside_parentheses():
            raise UnbalancedParenthesisError(f"Unmatched ')' at position {tok.position}", tok.position)

        previous = self.tokens[self.index - 1] if self.index > 0 else None
        if previous is not None and previous.kind is TokenKind.OPERATOR:
            msg = f"Missing operand after '{previous.value}' at position {tok.position}"
        else:
            msg = f"Expected a number, variable or '(' at position {tok.position}, found {tok.describe()}"
        raise MissingOperandError(msg, tok.position)

    def _parse_identifier(self) -> AstNode:
        tok = self._advance()
        name = tok.value

        if name == VARIABLE_NAME:
            return Variable()
        if name in CONSTANTS:
            return Constant(CONSTANTS[name])
        if name not in FUNCTIONS:
            raise UnknownIdentifierError(f"Unknown identifier '{name}' at position {tok.position}", tok.position)

        opening = self.current
        if opening.kind is not TokenKind.LPAREN:
            raise UnknownIdentifierError(
                f"Function '{name}' at position {tok.position} must be called with parentheses, e.g. {name}(x)",
                tok.position,
            )
        self._advance()

        args: List[AstNode] = []
        if self.current.kind is not TokenKind.RPAREN:
            args.append(self._parse_expr())
            while self.current.kind is TokenKind.COMMA:
                self._advance()
                args.append(self._parse_expr())
        self._expect_closing(opening)

        expected = FUNCTIONS[name].arity
        if len(args) != expected:
            plural = "" if expected == 1 else "s"
            raise ArityError(
                f"{name}() at position {tok.position} takes {expected} argument{plural}, got {len(args)}",
                tok.position,
            )
        return Call(name, tuple(args))

    def _expect_closing(self, opening: Token) -> None:
        tok = self.current
        if tok.kind is TokenKind.RPAREN:
            self._advance()
            return
        if tok.kind is TokenKind.END:
            raise UnbalancedParenthesisError(
                f"Missing ')' for '(' at position {opening.position}", opening.position
            )
        raise UnbalancedParenthesisError(
            f"Expected ')' at position {tok.position} to close '(' at position {opening.position}, "
            f"found {tok.describe()}",
            tok.position,
        )

    def _inside_parentheses(self) -> bool:
        balance = 0
        for tok in self.tokens[:self.index]:
            if tok.kind is TokenKind.LPAREN:
                balance += 1
            elif tok.kind is TokenKind.RPAREN:
                balance -= 1
        return balance > 0


def parse(tokens: Sequence[Token]) -> AstNode:
    """
    Build an expression tree from a token sequence.

    :raises ParseError: One of its subclasses, carrying the offending token position.
    """
    return Parser(tokens).parse()


def parse_expression(text: str) -> AstNode:
    """Tokenize and parse ``text`` in one step."""
    return parse(tokenize(text))
