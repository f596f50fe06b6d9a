"""
Binding-power tables for the Pratt parser.

Each operator character has a binding power per syntactic position. Higher
numbers bind tighter. For infix operators the (left, right) pair also
encodes associativity: left < right chains to the left, left > right chains
to the right.

Author: xwest
"""

from typing import Dict, Optional, Tuple


GROUP_OPEN = "("
GROUP_CLOSE = ")"
TERNARY = "?"
TERNARY_SEPARATOR = ":"


PREFIX_BINDING_POWERS: Dict[str, int] = {
    "+": 9,
    "-": 9,
    "(": 15,
}

INFIX_BINDING_POWERS: Dict[str, Tuple[int, int]] = {
    "=": (2, 1),    # assignment, right associative
    "?": (4, 3),    # ternary, right associative
    "+": (5, 6),
    "-": (5, 6),
    "*": (7, 8),
    "/": (7, 8),
    ".": (14, 13),  # composition, right associative
}

POSTFIX_BINDING_POWERS: Dict[str, int] = {
    "!": 11,
    "[": 11,
    ")": 12,
}


def prefix_binding_power(op: str) -> Optional[int]:
    """Right binding power of `op` in prefix position, or None."""
    return PREFIX_BINDING_POWERS.get(op)


def infix_binding_power(op: str) -> Optional[Tuple[int, int]]:
    """(left, right) binding powers of `op` in infix position, or None."""
    return INFIX_BINDING_POWERS.get(op)


def postfix_binding_power(op: str) -> Optional[int]:
    """Left binding power of `op` in postfix position, or None."""
    return POSTFIX_BINDING_POWERS.get(op)
