"""
Token definitions for the prattcalc lexer.

The alphabet is deliberately tiny: every token is an atom (a run of decimal
digits or a single letter), a one-character operator, or the end-of-input
sentinel that terminates every token sequence.

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass


class TokenType(Enum):
    """Enumeration of the token kinds the parser consumes."""

    ATOM = auto()                   # 42, x
    OPERATOR = auto()               # + - * / ( ) ! ? = . [ ...
    EOF = auto()                    # End of input (always last, exactly once)


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source text.

    Used for error reporting only; it never takes part in parsing decisions.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    A lexical token: its kind, the raw text it was read from, and where.
    """
    type: TokenType
    lexeme: str                     # Raw text from source ("" for EOF)
    location: SourceLocation

    def __str__(self) -> str:
        if self.type == TokenType.EOF:
            return "EOF"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.location!r})"

    @property
    def is_atom(self) -> bool:
        return self.type == TokenType.ATOM

    @property
    def is_operator(self) -> bool:
        return self.type == TokenType.OPERATOR

    @property
    def is_eof(self) -> bool:
        return self.type == TokenType.EOF

    @property
    def symbol(self) -> str:
        """The operator character, or "" for non-operator tokens."""
        return self.lexeme if self.type == TokenType.OPERATOR else ""

    def describe(self) -> str:
        """Human readable form used in diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.ATOM:
            return f"atom '{self.lexeme}'"
        return f"operator '{self.lexeme}'"


# ASCII only: str.isdigit() would also accept superscripts and other scripts.
DECIMAL_DIGITS = frozenset("0123456789")
