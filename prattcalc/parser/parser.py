"""
prattcalc Pratt Parser Implementation

A single recursive procedure, parse_expression(min_bp), turns the flat token
stream into a tree. Prefix, infix, postfix and ternary operators are all
driven by the binding-power tables in binding_power.py; there is no grammar
rule per precedence level.

Author: xwest
"""

import logging
from typing import List, Optional, Union

from ..lexer.lexer import Lexer, TokenStream
from ..lexer.tokens import Token, TokenType
from .ast_nodes import ASTNode, Atom, PrefixOp, PostfixOp, BinaryOp, TernaryOp
from .binding_power import (
    prefix_binding_power, infix_binding_power, postfix_binding_power,
    GROUP_OPEN, GROUP_CLOSE, TERNARY, TERNARY_SEPARATOR,
)
from .errors import (
    ParseError, create_unexpected_token_error, create_unexpected_eof_error,
    create_unclosed_delimiter_error, create_trailing_input_error,
)

logger = logging.getLogger(__name__)


class Parser:
    """
    prattcalc Pratt parser.

    Owns the token cursor for the duration of one parse. Not reusable across
    inputs and not thread-safe; create one parser per expression.
    """

    def __init__(self, tokens: Union[List[Token], TokenStream]):
        """
        Initialize parser with tokens from the lexer.

        Args:
            tokens: Token list ending in EOF, or a TokenStream over one
        """
        if isinstance(tokens, TokenStream):
            self.stream = tokens
        else:
            self.stream = TokenStream(tokens)
        self._previous: Optional[Token] = None

    def parse(self) -> ASTNode:
        """
        Parse one complete expression.

        Returns:
            The root of the tree

        Raises:
            ParseError: If the tokens do not form exactly one expression
        """
        try:
            root = self.parse_expression(0)
        except RecursionError:
            token = self.stream.peek()
            raise ParseError(
                "Expression is nested too deeply",
                token.location,
                token=token,
                code="P013",
                help_text="Split the expression into smaller parts."
            ) from None

        if not self.stream.at_end:
            raise create_trailing_input_error(self.stream.peek())

        return root

    def parse_expression(self, min_bp: int = 0) -> ASTNode:
        """
        Parse an expression whose trailing operators all bind at least
        as tightly as `min_bp`.
        """
        lhs = self._parse_primary()

        while True:
            lookahead = self.stream.peek()
            if lookahead.type != TokenType.OPERATOR:
                # EOF, or an atom that no operator joins to lhs
                break

            op = lookahead.symbol

            # The '(' frame that opened the group consumes its closer.
            if op == GROUP_CLOSE:
                break

            l_bp = postfix_binding_power(op)
            if l_bp is not None:
                if l_bp < min_bp:
                    break
                self._advance()
                lhs = PostfixOp(op, lhs, lookahead.location)
                continue

            powers = infix_binding_power(op)
            if powers is None:
                break
            l_bp, r_bp = powers
            if l_bp < min_bp:
                break

            self._advance()

            if op == TERNARY:
                mhs = self.parse_expression(0)
                if self.stream.peek().symbol == TERNARY_SEPARATOR:
                    self._advance()
                rhs = self.parse_expression(r_bp)
                lhs = TernaryOp(op, lhs, mhs, rhs, lookahead.location)
            else:
                rhs = self.parse_expression(r_bp)
                lhs = BinaryOp(op, lhs, rhs, lookahead.location)

        return lhs

    def _parse_primary(self) -> ASTNode:
        """Consume one token and build the left operand it starts."""
        after = self._previous
        token = self._advance()

        if token.type == TokenType.ATOM:
            return Atom(token.lexeme, token.location)

        if token.type == TokenType.EOF:
            raise create_unexpected_eof_error(token, after)

        op = token.symbol

        if op == GROUP_OPEN:
            return self._parse_group(token)

        r_bp = prefix_binding_power(op)
        if r_bp is None:
            raise create_unexpected_token_error(token)

        operand = self.parse_expression(r_bp)
        return PrefixOp(op, operand, token.location)

    def _parse_group(self, open_token: Token) -> ASTNode:
        """Parse a parenthesized expression; no node is built for the delimiters."""
        inner = self.parse_expression(0)

        closer = self.stream.peek()
        if closer.symbol != GROUP_CLOSE:
            raise create_unclosed_delimiter_error(open_token, closer)
        self._advance()

        return inner

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self.stream.next()
        self._previous = token
        return token


def parse_tokens(tokens: Union[List[Token], TokenStream]) -> ASTNode:
    """Parse an already lexed token sequence into a tree."""
    return Parser(tokens).parse()


def parse_string(source: str, filename: str = "<input>") -> ASTNode:
    """
    Convenience function to parse a source string.

    Args:
        source: Expression text
        filename: Filename for error reporting

    Returns:
        Root of the AST

    Raises:
        ParseError: If parsing fails
    """
    tokens = Lexer(source, filename).tokenize()
    logger.debug("lexed %d tokens from %s", len(tokens), filename)
    root = Parser(tokens).parse()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("parsed %s into %s", filename, root.to_sexpr())
    return root
