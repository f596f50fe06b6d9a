"""
prattcalc

A minimal expression evaluator: text is lexed, parsed by a precedence
climbing (Pratt) parser, serialized to reverse-Polish notation and compiled
to native code with LLVM.

Architecture:
    prattcalc/
    ├── lexer/           # Atoms, operators, EOF and the peek/next cursor
    ├── parser/          # Binding powers, Pratt parser, AST, RPN forms
    ├── backend/         # RPN -> LLVM IR -> native code (llvmlite)
    ├── evaluator.py     # The whole pipeline
    └── repl.py          # Command line and interactive loop

Author: xwest
License: MIT
"""

from .version import __version__
from .config import EvaluatorConfig, OptimizationLevel
from .errors import PrattcalcError, Diagnostic
from .lexer import Lexer, TokenStream
from .parser import Parser, ASTNode, ParseError, to_rpn, read_rpn
from .evaluator import Evaluator, EvaluationResult

__author__ = "xwest"
__license__ = "MIT"


def parse(text: str, filename: str = "<input>") -> ASTNode:
    """Parse expression text into a tree, or raise ParseError."""
    from .parser import parse_string
    return parse_string(text, filename)


def compile_expression(text: str, config: EvaluatorConfig = None):
    """Parse `text` and JIT-compile its RPN form."""
    evaluator = Evaluator(config)
    return evaluator.compiler.compile(to_rpn(evaluator.parse(text)))


def evaluate(text: str, config: EvaluatorConfig = None) -> int:
    """Parse, compile and run `text`, returning its integer value."""
    return Evaluator(config).evaluate(text).value


__all__ = [
    # Entry points
    "parse",
    "compile_expression",
    "evaluate",
    "to_rpn",
    "read_rpn",

    # Core classes
    "Lexer",
    "TokenStream",
    "Parser",
    "ASTNode",
    "Evaluator",
    "EvaluationResult",
    "EvaluatorConfig",
    "OptimizationLevel",

    # Errors
    "PrattcalcError",
    "ParseError",
    "Diagnostic",

    # Version info
    "__version__",
]
