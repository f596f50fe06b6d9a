"""
prattcalc Backend Package

Native code generation for reverse-Polish expression strings through
llvmlite's MCJIT.

Author: xwest
"""

from .jit_compiler import JITCompiler, CompiledExpression, IREmitter
from .errors import CodegenError, EvaluationError

__all__ = [
    "JITCompiler",
    "CompiledExpression",
    "IREmitter",
    "CodegenError",
    "EvaluationError",
]
