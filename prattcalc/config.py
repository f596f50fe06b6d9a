"""
Runtime configuration for the evaluator.

Settings come from constructor arguments, the command line, or the
PRATTCALC_* environment variables via EvaluatorConfig.from_env().
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Tuple


class OptimizationLevel(Enum):
    """JIT optimization levels"""
    O0 = 0  # No optimization passes
    O1 = 1  # Basic optimization
    O2 = 2  # Standard optimization (default)
    O3 = 3  # Aggressive optimization

    @classmethod
    def parse(cls, value) -> "OptimizationLevel":
        """Accept 2, "2" or "O2"."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().upper()
        if text.startswith("O"):
            text = text[1:]
        try:
            return cls(int(text))
        except ValueError:
            raise ValueError(f"invalid optimization level {value!r}, expected 0-3") from None


@dataclass
class EvaluatorConfig:
    """Settings shared by the JIT compiler and the REPL."""
    optimization_level: OptimizationLevel = OptimizationLevel.O2
    filename: str = "<input>"
    prompt: str = "<rpn> "
    quit_commands: Tuple[str, ...] = ("quit", "exit")

    def __post_init__(self):
        self.optimization_level = OptimizationLevel.parse(self.optimization_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "EvaluatorConfig":
        """
        Build a config from PRATTCALC_OPT_LEVEL and PRATTCALC_PROMPT.

        Keyword overrides win over the environment.
        """
        environ = os.environ if environ is None else environ
        values = {}
        if "PRATTCALC_OPT_LEVEL" in environ:
            values["optimization_level"] = OptimizationLevel.parse(environ["PRATTCALC_OPT_LEVEL"])
        if "PRATTCALC_PROMPT" in environ:
            values["prompt"] = environ["PRATTCALC_PROMPT"]
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
