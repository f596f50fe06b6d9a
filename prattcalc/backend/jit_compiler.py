"""
prattcalc JIT Compiler
======================

Compiles a reverse-Polish expression string to native code with LLVM
(through llvmlite's MCJIT) and runs it.

The compiler sees only the RPN string, never the parser's tree: the string
is re-read with the RPN reader, lowered to one LLVM function returning the
value and a companion function returning a fault flag, and both are linked
into a single execution engine owned by the compiler.

Arithmetic is signed 64-bit and wraps on overflow. Division truncates
toward zero; division by zero and INT64_MIN / -1 set the fault flag
instead of trapping.
"""

import time
import weakref
import ctypes
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import llvmlite.binding as llvm
import llvmlite.ir as ir

from ..config import EvaluatorConfig, OptimizationLevel
from ..parser.ast_nodes import ASTNode, ASTVisitor, Atom, PrefixOp, BinaryOp
from ..parser.errors import RPNError
from ..parser.rpn import DEFAULT_ARITIES, read_rpn
from .errors import CodegenError, EvaluationError

logger = logging.getLogger(__name__)


INT64 = ir.IntType(64)
INT32 = ir.IntType(32)
INT1 = ir.IntType(1)

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

# Operators the generated code understands.
JIT_ARITIES = {op: DEFAULT_ARITIES[op] for op in "+-*/"}

_VALUE_CFUNC = ctypes.CFUNCTYPE(ctypes.c_int64)
_FAULT_CFUNC = ctypes.CFUNCTYPE(ctypes.c_int32)

_llvm_ready = False


def _initialize_llvm():
    """Initialize the native target once per process."""
    global _llvm_ready
    if not _llvm_ready:
        llvm.initialize_native_target()
        llvm.initialize_native_asmprinter()
        _llvm_ready = True


class IREmitter(ASTVisitor):
    """
    Lowers an expression tree into the current basic block.

    visit() returns the i64 value of the tree; `fault` accumulates an i1
    that is true if any division on the path was invalid.
    """

    def __init__(self, builder: ir.IRBuilder):
        self.builder = builder
        self.fault = ir.Constant(INT1, 0)

    def visit_atom(self, node: Atom, operands: List[Any]) -> Any:
        if not node.is_number:
            raise CodegenError(
                f"Cannot compile name '{node.label}'",
                help_text="Only integer literals can be evaluated; names have no value."
            )
        value = int(node.label)
        if value > INT64_MAX:
            raise CodegenError(f"Integer literal {node.label} does not fit in 64 bits")
        return ir.Constant(INT64, value)

    def visit_prefix(self, node: PrefixOp, operands: List[Any]) -> Any:
        operand, = operands
        if node.label == "-":
            return self.builder.neg(operand)
        if node.label == "+":
            return operand
        return self.generic_visit(node, operands)

    def visit_binary(self, node: BinaryOp, operands: List[Any]) -> Any:
        lhs, rhs = operands
        if node.label == "+":
            return self.builder.add(lhs, rhs)
        if node.label == "-":
            return self.builder.sub(lhs, rhs)
        if node.label == "*":
            return self.builder.mul(lhs, rhs)
        if node.label == "/":
            return self._divide(lhs, rhs)
        return self.generic_visit(node, operands)

    def generic_visit(self, node: ASTNode, operands: List[Any]) -> Any:
        raise CodegenError(f"Cannot compile operator '{node.label}' with {node.arity} operand(s)")

    def _divide(self, lhs, rhs):
        builder = self.builder
        by_zero = builder.icmp_signed("==", rhs, ir.Constant(INT64, 0))
        overflow = builder.and_(
            builder.icmp_signed("==", lhs, ir.Constant(INT64, INT64_MIN)),
            builder.icmp_signed("==", rhs, ir.Constant(INT64, -1)),
        )
        invalid = builder.or_(by_zero, overflow)
        self.fault = builder.or_(self.fault, invalid)
        safe_rhs = builder.select(invalid, ir.Constant(INT64, 1), rhs)
        return builder.sdiv(lhs, safe_rhs)


@dataclass
class CompiledExpression:
    """A compiled expression; call it to run the native code."""
    name: str
    rpn: str
    llvm_ir: str
    optimization_level: OptimizationLevel
    compilation_time_ms: float = 0.0
    execution_count: int = 0
    _value_func: Any = field(default=None, repr=False)
    _fault_func: Any = field(default=None, repr=False)
    _engine: Any = field(default=None, repr=False)

    def __call__(self) -> int:
        value = self._value_func()
        self.execution_count += 1
        if self._fault_func():
            raise EvaluationError(
                f"Division by zero or overflow in '{self.rpn}'",
                help_text="The divisor is zero, or INT64_MIN is divided by -1."
            )
        return value


class JITCompiler:
    """
    Compiles RPN strings into native functions.

    One compiler owns one LLVM execution engine. Each compiled module is
    added to it and removed again once its CompiledExpression is garbage
    collected, so a long session holds only the modules still in use.
    Not thread-safe.
    """

    def __init__(self, config: Optional[EvaluatorConfig] = None):
        self.config = config or EvaluatorConfig()
        _initialize_llvm()

        target = llvm.Target.from_default_triple()
        self.triple = llvm.get_default_triple()
        # The engine takes ownership of its target machine; the pass
        # pipeline gets a separate one.
        self._opt_machine = target.create_target_machine()
        backing_module = llvm.parse_assembly("")
        self._engine = llvm.create_mcjit_compiler(backing_module, target.create_target_machine())
        self._counter = 0
        self._modules: Dict[str, Any] = {}

    @property
    def optimization_level(self) -> OptimizationLevel:
        return self.config.optimization_level

    @property
    def module_count(self) -> int:
        """Modules currently held by the execution engine."""
        return len(self._modules)

    def compile(self, rpn: str) -> CompiledExpression:
        """
        Compile an RPN string.

        Raises:
            CodegenError: If the string cannot be compiled
        """
        start_time = time.perf_counter()

        try:
            tree = read_rpn(rpn, JIT_ARITIES, reject_ambiguous=True)
        except RPNError as e:
            raise CodegenError(f"Cannot compile '{rpn}': {e.message}") from e

        self._counter += 1
        name = f"expr_{self._counter}"
        module = self.build_module(tree, name)
        llvm_ir = str(module)

        try:
            llvm_module = llvm.parse_assembly(llvm_ir)
            llvm_module.verify()
        except RuntimeError as e:
            raise CodegenError(f"LLVM rejected generated IR for '{rpn}': {e}") from e

        self._optimize(llvm_module)
        self._engine.add_module(llvm_module)
        self._modules[name] = llvm_module
        self._engine.finalize_object()
        self._engine.run_static_constructors()

        value_func = _VALUE_CFUNC(self._engine.get_function_address(name))
        fault_func = _FAULT_CFUNC(self._engine.get_function_address(f"{name}_fault"))

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug("compiled %r as %s in %.2f ms (%d bytes of IR, %s)",
                     rpn, name, elapsed_ms, len(llvm_ir), self.optimization_level.name)

        compiled = CompiledExpression(
            name=name,
            rpn=rpn,
            llvm_ir=llvm_ir,
            optimization_level=self.optimization_level,
            compilation_time_ms=elapsed_ms,
            _value_func=value_func,
            _fault_func=fault_func,
            _engine=self._engine,
        )
        # The engine is torn down with the process; nothing to remove then.
        weakref.finalize(compiled, self._release, name).atexit = False
        return compiled

    def evaluate(self, rpn: str) -> int:
        """Compile and run an RPN string once."""
        return self.compile(rpn)()

    def _release(self, name: str):
        """Take the module behind a collected CompiledExpression out of the engine."""
        llvm_module = self._modules.pop(name, None)
        if llvm_module is not None:
            self._engine.remove_module(llvm_module)
            logger.debug("released %s (%d modules left)", name, len(self._modules))

    def build_module(self, tree: ASTNode, name: str) -> ir.Module:
        """Lower a tree to an LLVM module holding `name` and `name`_fault."""
        module = ir.Module(name=name)
        module.triple = self.triple

        value_func = ir.Function(module, ir.FunctionType(INT64, []), name=name)
        emitter = IREmitter(ir.IRBuilder(value_func.append_basic_block(name="entry")))
        emitter.builder.ret(tree.accept(emitter))

        fault_func = ir.Function(module, ir.FunctionType(INT32, []), name=f"{name}_fault")
        emitter = IREmitter(ir.IRBuilder(fault_func.append_basic_block(name="entry")))
        tree.accept(emitter)
        emitter.builder.ret(emitter.builder.zext(emitter.fault, INT32))

        return module

    def _optimize(self, llvm_module):
        """Run LLVM's pass pipeline for the configured level."""
        level = self.optimization_level
        if level == OptimizationLevel.O0:
            return
        tuning = llvm.create_pipeline_tuning_options(speed_level=level.value)
        pass_builder = llvm.create_pass_builder(self._opt_machine, tuning)
        pass_builder.getModulePassManager().run(llvm_module, pass_builder)
