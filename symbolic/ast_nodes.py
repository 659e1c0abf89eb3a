# symbolic/ast_nodes.py
"""
Expression tree produced by the parser.

Nodes are frozen dataclasses: two parses of the same text compare equal, trees
are hashable and picklable, and a parsed tree can be shared by many threads.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Constant:
    value: float

    def __str__(self) -> str:
        return f"{self.value:g}"


@dataclass(frozen=True)
class Variable:
    def __str__(self) -> str:
        return "x"


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: AstNode

    def __str__(self) -> str:
        return f"({self.op}{self.operand})"


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: AstNode
    right: AstNode

    def __str__(self) -> str:
        return f"({self.left} {self.op} {self.right})"


@dataclass(frozen=True)
class Call:
    name: str
    args: Tuple[AstNode, ...]

    def __str__(self) -> str:
        return f"{self.name}({', '.join(str(a) for a in self.args)})"


AstNode = Union[Constant, Variable, UnaryOp, BinaryOp, Call]
