"""
prattcalc Parser Package

Implements a precedence-climbing (Pratt) parser over the lexer's token
stream and the linear (reverse-Polish) forms of the resulting tree.

Key Features:
- Table-driven prefix, infix, postfix and ternary operators
- Immutable, structurally comparable AST nodes with source locations
- RPN serialization and an independent RPN reader
- Fatal, explicitly classified parse errors

Author: xwest
"""

from .ast_nodes import (
    ASTNode, ASTNodeType, ASTVisitor, Atom, PrefixOp, PostfixOp, BinaryOp,
    TernaryOp, iter_nodes, depth,
)
from .binding_power import (
    prefix_binding_power, infix_binding_power, postfix_binding_power,
)
from .parser import Parser, parse_string, parse_tokens
from .rpn import to_rpn, to_sexpr, read_rpn, RPNReader, RPNSerializer
from .errors import (
    ParseError, UnexpectedTokenError, UnexpectedEOFError,
    UnclosedDelimiterError, TrailingInputError, RPNError,
)

__all__ = [
    # Core parser
    "Parser", "parse_string", "parse_tokens",

    # Binding powers
    "prefix_binding_power", "infix_binding_power", "postfix_binding_power",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor",
    "Atom", "PrefixOp", "PostfixOp", "BinaryOp", "TernaryOp",
    "iter_nodes", "depth",

    # Linear forms
    "to_rpn", "to_sexpr", "read_rpn", "RPNReader", "RPNSerializer",

    # Error handling
    "ParseError", "UnexpectedTokenError", "UnexpectedEOFError",
    "UnclosedDelimiterError", "TrailingInputError", "RPNError",
]
