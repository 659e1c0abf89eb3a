# symbolic/tokenizer.py
"""
Lexical analysis of user-entered expressions.

Turns text such as ``"2x^2 + 3sin(x)"`` into a flat list of tokens. Identifiers
are folded to lowercase, so ``Sin(X)`` and ``sin(x)`` tokenize identically.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from core.exceptions import LexError


class TokenKind(Enum):
    NUMBER = "number"
    IDENTIFIER = "identifier"
    OPERATOR = "operator"
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    END = "end of input"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: Union[float, str, None]
    position: int

    def describe(self) -> str:
        if self.kind is TokenKind.END:
            return "end of input"
        if self.kind is TokenKind.NUMBER:
            return f"number {self.value:g}"
        return f"'{self.value}'"


OPERATORS = frozenset("+-*/^")

_PUNCTUATION = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}

# Zero-width characters that pasted or OCR'd input commonly carries.
_INVISIBLE = frozenset("\u200b\u200c\u200d\ufeff")


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_ascii_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def tokenize(text: str) -> List[Token]:
    """
    Split ``text`` into tokens, always terminated by an END token.

    :raises LexError: On an unsupported character or a malformed number.
    """
    tokens: List[Token] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if ch.isspace() or ch in _INVISIBLE:
            i += 1
            continue

        if _is_digit(ch) or ch == ".":
            start = i
            seen_point = False
            while i < n and (_is_digit(text[i]) or text[i] == "."):
                if text[i] == ".":
                    if seen_point:
                        raise LexError(
                            f"Malformed number '{text[start:i + 1]}' at position {start}: "
                            f"more than one decimal point",
                            start,
                        )
                    seen_point = True
                i += 1
            literal = text[start:i]
            if literal == ".":
                raise LexError(f"Malformed number '.' at position {start}", start, ".")
            tokens.append(Token(TokenKind.NUMBER, float(literal), start))
            continue

        if _is_ascii_letter(ch):
            start = i
            while i < n and _is_ascii_letter(text[i]):
                i += 1
            tokens.append(Token(TokenKind.IDENTIFIER, text[start:i].lower(), start))
            continue

        if ch in OPERATORS:
            tokens.append(Token(TokenKind.OPERATOR, ch, i))
            i += 1
            continue

        if ch in _PUNCTUATION:
            tokens.append(Token(_PUNCTUATION[ch], ch, i))
            i += 1
            continue

        raise LexError(f"Unexpected character '{ch}' at position {i}", i, ch)

    tokens.append(Token(TokenKind.END, None, n))
    return tokens
