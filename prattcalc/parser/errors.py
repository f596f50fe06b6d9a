"""
Error handling for the prattcalc parser.

All parse errors are fatal: the first one aborts the whole parse and
propagates to the caller. The subclasses only make the cause explicit
for callers and tests; there is no recovery path.

Author: xwest
"""

from typing import Optional, List

from ..errors import PrattcalcError
from ..lexer.tokens import Token, SourceLocation
from .binding_power import (
    PREFIX_BINDING_POWERS, INFIX_BINDING_POWERS, POSTFIX_BINDING_POWERS,
    GROUP_OPEN, GROUP_CLOSE,
)


class ParseError(PrattcalcError):
    """
    Exception raised when the parser cannot build a tree.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation],
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message, location, code, help_text, suggestions)
        self.token = token


class UnexpectedTokenError(ParseError):
    """An operator in operand position that has no prefix meaning."""


class UnexpectedEOFError(ParseError):
    """Input ended where an operand was required."""


class UnclosedDelimiterError(ParseError):
    """A '(' whose matching ')' never arrived."""


class TrailingInputError(ParseError):
    """Tokens left over after a complete expression."""


class RPNError(PrattcalcError):
    """Raised by the RPN reader for strings that do not reduce to one tree."""

    def __init__(self, message: str, offset: Optional[int] = None, help_text: Optional[str] = None):
        location = SourceLocation("<rpn>", 1, offset + 1, offset) if offset is not None else None
        super().__init__(message, location, code="R001", help_text=help_text)
        self.offset = offset


def _operand_starters() -> List[str]:
    return sorted(set(PREFIX_BINDING_POWERS))


# Helper functions for creating common parser errors

def create_unexpected_token_error(found: Token) -> UnexpectedTokenError:
    """Create an error for an operator that cannot start an operand."""
    suggestions = []
    if found.symbol in INFIX_BINDING_POWERS or found.symbol in POSTFIX_BINDING_POWERS:
        suggestions.append(f"'{found.symbol}' needs an operand before it")
    suggestions.append(
        "An operand starts with a number, a letter or one of: "
        + " ".join(_operand_starters())
    )

    return UnexpectedTokenError(
        message=f"Unexpected token: {found.describe()}",
        location=found.location,
        token=found,
        code="P001",
        help_text=f"'{found.lexeme}' cannot start an expression.",
        suggestions=suggestions
    )


def create_unexpected_eof_error(found: Token, after: Optional[Token] = None) -> UnexpectedEOFError:
    """Create an error for input that ends where an operand is required."""
    if after is not None:
        help_text = f"Missing operand after {after.describe()}."
    else:
        help_text = "The input is empty."

    return UnexpectedEOFError(
        message="Unexpected end of input, expected an operand",
        location=found.location,
        token=found,
        code="P010",
        help_text=help_text,
        suggestions=["Add the missing operand"]
    )


def create_unclosed_delimiter_error(open_token: Token, found: Token) -> UnclosedDelimiterError:
    """Create an error for a group that is never closed."""
    return UnclosedDelimiterError(
        message=f"Unclosed delimiter '{GROUP_OPEN}', found {found.describe()}",
        location=found.location,
        token=found,
        code="P004",
        help_text=f"The opening '{GROUP_OPEN}' at {open_token.location} was never closed.",
        suggestions=[f"Add a closing '{GROUP_CLOSE}'"]
    )


def create_trailing_input_error(found: Token) -> TrailingInputError:
    """Create an error for tokens left after a complete expression."""
    if found.symbol == GROUP_CLOSE:
        message = f"Unmatched '{GROUP_CLOSE}'"
        suggestions = [f"Remove the '{GROUP_CLOSE}' or add a matching '{GROUP_OPEN}'"]
    else:
        message = f"Unexpected {found.describe()} after complete expression"
        suggestions = ["Join the operands with an operator"] if found.is_atom else []

    return TrailingInputError(
        message=message,
        location=found.location,
        token=found,
        code="P012",
        help_text="The expression ended before this token.",
        suggestions=suggestions
    )
