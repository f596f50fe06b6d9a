"""
prattcalc Lexer Package

Splits expression text into atoms (digit runs and single letters),
single-character operators and a trailing end-of-input sentinel, and
exposes a peek/next cursor for the parser.

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, TokenStream, tokenize_string

__all__ = [
    "Lexer",
    "TokenStream",
    "Token",
    "TokenType",
    "SourceLocation",
    "tokenize_string",
]
