"""
Errors raised by the JIT backend.

Author: xwest
"""

from typing import Optional

from ..errors import PrattcalcError


class CodegenError(PrattcalcError):
    """The RPN string cannot be compiled."""

    def __init__(self, message: str, help_text: Optional[str] = None):
        super().__init__(message, None, code="J001", help_text=help_text)


class EvaluationError(PrattcalcError):
    """The compiled code reported a fault while running."""

    def __init__(self, message: str, help_text: Optional[str] = None):
        super().__init__(message, None, code="J002", help_text=help_text)
