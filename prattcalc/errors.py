"""
Shared diagnostics for prattcalc.

Every error raised by the package carries a Diagnostic so the REPL (or any
other caller) can render it the same way regardless of which stage failed.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass

from .lexer.tokens import SourceLocation


@dataclass
class Diagnostic:
    """A single error report with an optional location."""
    message: str
    location: Optional[SourceLocation]
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        result = f"{self.severity.upper()}"
        if self.code:
            result += f"[{self.code}]"
        result += f": {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class PrattcalcError(Exception):
    """
    Root of every error raised by prattcalc.

    The message passed to Exception is the short one-line form; str()
    renders the whole diagnostic.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.diagnostic.location

    def __str__(self) -> str:
        return str(self.diagnostic)
