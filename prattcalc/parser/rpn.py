"""
Linear forms of the AST.

to_rpn() is the canonical serialization handed to the code generator:
every child in order, each followed by one space, then the node's label.
read_rpn() goes the other way without any access to the parser, which is
what lets the JIT backend (and the tests) treat the RPN string as the only
interface between the two halves.

Author: xwest
"""

from typing import Dict, List, Set, Tuple

from ..lexer.tokens import SourceLocation, DECIMAL_DIGITS
from .ast_nodes import (
    ASTNode, ASTVisitor, Atom, PrefixOp, PostfixOp, BinaryOp, TernaryOp,
)
from .binding_power import PREFIX_BINDING_POWERS, GROUP_OPEN, GROUP_CLOSE
from .errors import RPNError


class RPNSerializer(ASTVisitor):
    """Renders a tree in reverse-Polish order."""

    def generic_visit(self, node: ASTNode, parts: List[str]) -> str:
        return "".join(f"{part} " for part in parts) + node.label


class SExpressionPrinter(ASTVisitor):
    """Renders a tree as a parenthesized prefix form, e.g. (+ 1 (* 2 3))."""

    def visit_atom(self, node: Atom, parts: List[str]) -> str:
        return node.label

    def generic_visit(self, node: ASTNode, parts: List[str]) -> str:
        return f"({node.label} {' '.join(parts)})"


def to_rpn(node: ASTNode) -> str:
    """Serialize a tree to its reverse-Polish string."""
    return node.accept(RPNSerializer())


def to_sexpr(node: ASTNode) -> str:
    """Serialize a tree to its s-expression string."""
    return node.accept(SExpressionPrinter())


# Operand counts each operator may take, in order of preference. A sign
# is read as unary whenever the rest of the string still reduces to a
# single operand; otherwise as binary.
DEFAULT_ARITIES: Dict[str, Tuple[int, ...]] = {
    "+": (1, 2),
    "-": (1, 2),
    "*": (2,),
    "/": (2,),
    "=": (2,),
    ".": (2,),
    "?": (3,),
    "!": (1,),
    "[": (1,),
}

_SKIPPED = frozenset((GROUP_OPEN, GROUP_CLOSE))


class RPNReader:
    """
    Rebuilds a tree from a reverse-Polish string.

    Atoms are digit runs and single letters, as in the expression lexer.
    Whitespace and stray parentheses are ignored.

    With reject_ambiguous set, an operator that can be applied with more
    than one arity while still leaving a complete reading raises RPNError
    instead of taking the preferred arity.
    """

    def __init__(self, arities: Dict[str, Tuple[int, ...]] = None, reject_ambiguous: bool = False):
        self.arities = dict(DEFAULT_ARITIES if arities is None else arities)
        self.reject_ambiguous = reject_ambiguous

    def read(self, text: str) -> ASTNode:
        items = self._scan(text)
        if not items:
            raise RPNError("Empty RPN input", 0)

        suffix = self._reducible_depths(items)
        if 0 not in suffix[0]:
            self._diagnose(items)

        stack: List[ASTNode] = []
        for index, (is_atom, lexeme, offset) in enumerate(items):
            location = SourceLocation("<rpn>", 1, offset + 1, offset)
            if is_atom:
                stack.append(Atom(lexeme, location))
                continue
            # suffix[0] holds depth 0, so at least one arity fits
            feasible = [arity for arity in self.arities[lexeme]
                        if len(stack) >= arity and len(stack) - arity + 1 in suffix[index + 1]]
            if self.reject_ambiguous and len(feasible) > 1:
                raise RPNError(
                    f"Ambiguous sign '{lexeme}': it can take "
                    + " or ".join(str(arity) for arity in feasible) + " operands",
                    offset,
                    help_text="Both readings reduce to one value, and the RPN "
                              "string does not record which one was written."
                )
            arity = feasible[0]
            operands = stack[len(stack) - arity:]
            del stack[len(stack) - arity:]
            stack.append(self._build(lexeme, operands, location))

        return stack[0]

    def _scan(self, text: str) -> List[Tuple[bool, str, int]]:
        """Split into (is_atom, text, offset) items."""
        items = []
        pos = 0
        while pos < len(text):
            char = text[pos]
            if char.isspace() or char in _SKIPPED:
                pos += 1
            elif char in DECIMAL_DIGITS:
                start = pos
                while pos < len(text) and text[pos] in DECIMAL_DIGITS:
                    pos += 1
                items.append((True, text[start:pos], start))
            elif char.isalnum():
                items.append((True, char, pos))
                pos += 1
            elif char in self.arities:
                items.append((False, char, pos))
                pos += 1
            else:
                raise RPNError(f"Unknown operator '{char}'", pos,
                               help_text="Known operators: " + " ".join(sorted(self.arities)))
        return items

    def _reducible_depths(self, items: List[Tuple[bool, str, int]]) -> List[Set[int]]:
        """
        suffix[i] holds every stack depth from which items[i:] leaves
        exactly one operand.
        """
        suffix: List[Set[int]] = [set() for _ in range(len(items) + 1)]
        suffix[len(items)] = {1}
        for index in range(len(items) - 1, -1, -1):
            is_atom, text, _ = items[index]
            after = suffix[index + 1]
            if is_atom:
                suffix[index] = {depth - 1 for depth in after if depth >= 1}
            else:
                suffix[index] = {depth + arity - 1
                                 for arity in self.arities[text]
                                 for depth in after if depth >= 1}
        return suffix

    def _diagnose(self, items: List[Tuple[bool, str, int]]):
        """Find the first point where the string stops being reducible and raise."""
        depth = 0
        for is_atom, text, offset in items:
            if is_atom:
                depth += 1
                continue
            usable = [arity for arity in self.arities[text] if arity <= depth]
            if not usable:
                needed = min(self.arities[text])
                raise RPNError(
                    f"Stack underflow: '{text}' needs {needed} operand(s), found {depth}",
                    offset
                )
            depth -= max(usable) - 1
        last_offset = items[-1][2]
        raise RPNError(f"{depth} operands left on the stack, expected 1", last_offset,
                       help_text="Every operand but one must be consumed by an operator.")

    def _build(self, op: str, operands: List[ASTNode], location: SourceLocation) -> ASTNode:
        if len(operands) == 1:
            if op in PREFIX_BINDING_POWERS:
                return PrefixOp(op, operands[0], location)
            return PostfixOp(op, operands[0], location)
        if len(operands) == 2:
            return BinaryOp(op, operands[0], operands[1], location)
        if len(operands) == 3:
            return TernaryOp(op, operands[0], operands[1], operands[2], location)
        raise RPNError(f"Unsupported arity {len(operands)} for '{op}'", location.offset)


def read_rpn(text: str, arities: Dict[str, Tuple[int, ...]] = None,
             reject_ambiguous: bool = False) -> ASTNode:
    """
    Rebuild a tree from a reverse-Polish string.

    Raises:
        RPNError: If the string does not reduce to exactly one tree, or
            (with reject_ambiguous) reduces to more than one
    """
    return RPNReader(arities, reject_ambiguous).read(text)
