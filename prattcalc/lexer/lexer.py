"""
prattcalc lexer - turns raw text into atoms, operators and one EOF.

Rules, applied left to right:
  1. whitespace is skipped
  2. a maximal run of decimal digits is one ATOM
  3. any other alphanumeric character is a one-character ATOM
  4. anything else is a one-character OPERATOR
  5. a single EOF token closes the sequence

Lexing cannot fail. Characters the parser has no use for still become
operator tokens and are rejected (or not) by the parser.

Author: xwest
"""

from typing import List, Optional

from .tokens import Token, TokenType, SourceLocation, DECIMAL_DIGITS


class Lexer:
    """
    prattcalc lexical analyzer.

    Materializes the whole token sequence up front; parsing then reads it
    through a TokenStream cursor.
    """

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source text.

        Args:
            source: Expression text
            filename: Name used in source locations
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens ending with exactly one EOF token
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens = []

        while self.pos < len(self.source):
            self._skip_whitespace()

            if self.pos >= len(self.source):
                break

            self.tokens.append(self._next_token())

        self.tokens.append(Token(TokenType.EOF, "", self._location()))

        return self.tokens

    def stream(self) -> "TokenStream":
        """Tokenize and return a cursor over the result."""
        return TokenStream(self.tokenize())

    def _next_token(self) -> Token:
        """Read one token starting at the current (non-whitespace) position."""
        location = self._location()
        current_char = self.source[self.pos]

        # Numbers: maximal digit run
        if current_char in DECIMAL_DIGITS:
            start = self.pos
            while self.pos < len(self.source) and self.source[self.pos] in DECIMAL_DIGITS:
                self._advance()
            return Token(TokenType.ATOM, self.source[start:self.pos], location)

        # Single letters
        if current_char.isalnum():
            self._advance()
            return Token(TokenType.ATOM, current_char, location)

        self._advance()
        return Token(TokenType.OPERATOR, current_char, location)

    def _skip_whitespace(self):
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self._advance()

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)


class TokenStream:
    """
    One-token-lookahead cursor over a lexed token sequence.

    peek() and next() never raise: once the sequence is exhausted both keep
    returning the final EOF token.
    """

    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token sequence must end with an EOF token")
        self._tokens = tokens
        self._index = 0

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return self._tokens[-1]

    def next(self) -> Token:
        """Consume and return the next token."""
        token = self.peek()
        if self._index < len(self._tokens) and token.type != TokenType.EOF:
            self._index += 1
        return token

    @property
    def at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    @property
    def position(self) -> int:
        """Number of tokens consumed so far."""
        return self._index

    def remaining(self) -> List[Token]:
        """Unconsumed tokens, EOF included."""
        return self._tokens[self._index:]


def tokenize_string(source: str, filename: str = "<input>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Expression text
        filename: Filename for source locations

    Returns:
        List of tokens ending with EOF
    """
    return Lexer(source, filename).tokenize()
