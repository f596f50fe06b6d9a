"""
Abstract Syntax Tree node definitions for prattcalc.

Every node is a label plus an ordered, fixed-arity tuple of children:
atoms have none, prefix/postfix operators one, infix operators two and the
ternary operator three. Nodes are built bottom-up by the parser, own their
children exclusively and cannot be modified afterwards.

Equality is structural (labels and children, recursively); source
locations are carried along for diagnostics but never compared.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator, List, Optional, Tuple
from enum import Enum

from ..lexer.tokens import SourceLocation, DECIMAL_DIGITS


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    ATOM = "Atom"
    PREFIX = "PrefixOp"
    POSTFIX = "PostfixOp"
    BINARY = "BinaryOp"
    TERNARY = "TernaryOp"


class ASTVisitor(ABC):
    """
    Bottom-up visitor over AST nodes.

    visit() walks the tree in post-order with an explicit stack, so tree
    depth is not bounded by the interpreter's recursion limit. Each node is
    handed to visit_atom, visit_prefix, visit_postfix, visit_binary or
    visit_ternary together with the results already computed for its
    children, in order; subclasses that treat every node the same way can
    override generic_visit instead.
    """

    def visit(self, node: 'ASTNode') -> Any:
        return fold(node, self._dispatch)

    def _dispatch(self, node: 'ASTNode', results: List[Any]) -> Any:
        method = getattr(self, f"visit_{node.node_type.name.lower()}", None)
        if method is None:
            return self.generic_visit(node, results)
        return method(node, results)

    @abstractmethod
    def generic_visit(self, node: 'ASTNode', results: List[Any]) -> Any:
        pass


class ASTNode(ABC):
    """Base class for all AST nodes."""

    __slots__ = ("_label", "_children", "_location")

    node_type: ASTNodeType
    arity: int

    def __init__(self, label: str, children: Tuple['ASTNode', ...],
                 location: Optional[SourceLocation] = None):
        if not isinstance(label, str) or not label:
            raise ValueError(f"{self.__class__.__name__} needs a non-empty string label")
        if len(children) != self.arity:
            raise ValueError(
                f"{self.__class__.__name__} '{label}' takes {self.arity} "
                f"children, got {len(children)}"
            )
        for child in children:
            if not isinstance(child, ASTNode):
                raise TypeError(f"child of '{label}' must be an ASTNode, got {type(child).__name__}")
        object.__setattr__(self, "_label", label)
        object.__setattr__(self, "_children", tuple(children))
        object.__setattr__(self, "_location", location)

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} nodes are immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{self.__class__.__name__} nodes are immutable")

    @property
    def label(self) -> str:
        return self._label

    @property
    def location(self) -> Optional[SourceLocation]:
        return self._location

    def children(self) -> Tuple['ASTNode', ...]:
        """Get all child nodes, in order."""
        return self._children

    @property
    def is_leaf(self) -> bool:
        return not self._children

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    def to_rpn(self) -> str:
        from .rpn import to_rpn
        return to_rpn(self)

    def to_sexpr(self) -> str:
        from .rpn import to_sexpr
        return to_sexpr(self)

    def __str__(self) -> str:
        return self.to_sexpr()

    def __repr__(self) -> str:
        def render(node, args):
            if not args:
                return f"{node.__class__.__name__}({node._label!r})"
            return f"{node.__class__.__name__}({node._label!r}, {', '.join(args)})"
        return fold(self, render)

    def __eq__(self, other) -> bool:
        """Structural equality: same node type, label and children."""
        if not isinstance(other, ASTNode):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            a, b = pending.pop()
            if a is b:
                continue
            if a.node_type != b.node_type or a._label != b._label:
                return False
            pending.extend(zip(a._children, b._children))
        return True

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return fold(self, lambda node, hashes: hash((node.node_type, node._label, tuple(hashes))))


# ============================================================================
# Concrete nodes
# ============================================================================

class Atom(ASTNode):
    """Leaf node: a numeric literal or a single-letter name."""

    __slots__ = ()
    node_type = ASTNodeType.ATOM
    arity = 0

    def __init__(self, label: str, location: Optional[SourceLocation] = None):
        super().__init__(label, (), location)

    @property
    def is_number(self) -> bool:
        return all(char in DECIMAL_DIGITS for char in self._label)


class PrefixOp(ASTNode):
    """Unary operator written before its operand (-x, +x)."""

    __slots__ = ()
    node_type = ASTNodeType.PREFIX
    arity = 1

    def __init__(self, label: str, operand: ASTNode,
                 location: Optional[SourceLocation] = None):
        super().__init__(label, (operand,), location)

    @property
    def operand(self) -> ASTNode:
        return self._children[0]


class PostfixOp(ASTNode):
    """Unary operator written after its operand (x!, x[)."""

    __slots__ = ()
    node_type = ASTNodeType.POSTFIX
    arity = 1

    def __init__(self, label: str, operand: ASTNode,
                 location: Optional[SourceLocation] = None):
        super().__init__(label, (operand,), location)

    @property
    def operand(self) -> ASTNode:
        return self._children[0]


class BinaryOp(ASTNode):
    """Infix operator with a left and a right operand."""

    __slots__ = ()
    node_type = ASTNodeType.BINARY
    arity = 2

    def __init__(self, label: str, left: ASTNode, right: ASTNode,
                 location: Optional[SourceLocation] = None):
        super().__init__(label, (left, right), location)

    @property
    def left(self) -> ASTNode:
        return self._children[0]

    @property
    def right(self) -> ASTNode:
        return self._children[1]


class TernaryOp(ASTNode):
    """Conditional: condition ? then_branch : else_branch."""

    __slots__ = ()
    node_type = ASTNodeType.TERNARY
    arity = 3

    def __init__(self, label: str, condition: ASTNode, then_branch: ASTNode,
                 else_branch: ASTNode, location: Optional[SourceLocation] = None):
        super().__init__(label, (condition, then_branch, else_branch), location)

    @property
    def condition(self) -> ASTNode:
        return self._children[0]

    @property
    def then_branch(self) -> ASTNode:
        return self._children[1]

    @property
    def else_branch(self) -> ASTNode:
        return self._children[2]


def iter_nodes(root: ASTNode) -> Iterator[ASTNode]:
    """Pre-order walk of the tree rooted at `root`."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children()))


def fold(root: ASTNode, combine: Callable[[ASTNode, List[Any]], Any]) -> Any:
    """
    Post-order reduction without recursion.

    combine(node, results) is called once per node, children before
    parents, with the list of values combine returned for the node's
    children in order. Returns the value computed for `root`.
    """
    results: List[Any] = []
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children()))
            continue
        count = len(node.children())
        args = results[len(results) - count:] if count else []
        if count:
            del results[len(results) - count:]
        results.append(combine(node, args))
    return results[0]


def depth(root: ASTNode) -> int:
    """Number of nodes on the longest root-to-leaf path."""
    return fold(root, lambda node, depths: 1 + max(depths, default=0))
