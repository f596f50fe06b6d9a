"""
The text -> tree -> RPN -> native code pipeline.

Author: xwest
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import EvaluatorConfig
from .parser import ASTNode, parse_string, to_rpn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationResult:
    """Everything one evaluation produced."""
    source: str
    tree: ASTNode
    rpn: str
    value: Optional[int] = None

    def __str__(self) -> str:
        if self.value is None:
            return self.rpn
        return f"{self.rpn} -> {self.value}"


class Evaluator:
    """
    Parses, serializes and (optionally) JIT-compiles expressions.

    The JIT compiler is created on first use, so parse-only callers never
    touch LLVM.
    """

    def __init__(self, config: Optional[EvaluatorConfig] = None):
        self.config = config or EvaluatorConfig()
        self._compiler = None

    @property
    def compiler(self):
        if self._compiler is None:
            from .backend import JITCompiler
            self._compiler = JITCompiler(self.config)
        return self._compiler

    def parse(self, source: str) -> ASTNode:
        return parse_string(source, self.config.filename)

    def translate(self, source: str) -> EvaluationResult:
        """Parse and serialize without compiling."""
        tree = self.parse(source)
        return EvaluationResult(source, tree, to_rpn(tree))

    def evaluate(self, source: str) -> EvaluationResult:
        """
        Parse, serialize, compile and run one expression.

        Raises:
            ParseError: If the text is not a single expression
            CodegenError: If the RPN cannot be compiled
            EvaluationError: If the compiled code faults
        """
        tree = self.parse(source)
        rpn = to_rpn(tree)
        compiled = self.compiler.compile(rpn)
        value = compiled()
        logger.debug("%r -> %r -> %d", source, rpn, value)
        return EvaluationResult(source, tree, rpn, value)
