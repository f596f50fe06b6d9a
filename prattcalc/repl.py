"""
prattcalc command line: one-shot evaluation and the interactive loop.

    $ prattcalc -e "3 + 4 * 5"
    3 4 5 * + -> 23

    $ prattcalc
    <rpn> (1 + 2) * 3
    1 2 + 3 * -> 9
    <rpn> quit

Author: xwest
"""

import logging
from typing import Optional, TextIO

import click

from .config import EvaluatorConfig
from .errors import PrattcalcError
from .evaluator import Evaluator
from .version import __version__

logger = logging.getLogger(__name__)


class Repl:
    """Read a line, evaluate it, print the result; errors never end the loop."""

    def __init__(self, evaluator: Evaluator, show_tree: bool = False, parse_only: bool = False):
        self.evaluator = evaluator
        self.show_tree = show_tree
        self.parse_only = parse_only

    @property
    def config(self) -> EvaluatorConfig:
        return self.evaluator.config

    def handle(self, line: str) -> bool:
        """
        Evaluate one line and print the outcome.

        Returns:
            True if the line was evaluated, False if it failed
        """
        try:
            if self.parse_only:
                result = self.evaluator.translate(line)
            else:
                result = self.evaluator.evaluate(line)
        except PrattcalcError as e:
            logger.debug("evaluation of %r failed", line, exc_info=True)
            click.echo(str(e).rstrip(), err=True)
            return False
        except Exception as e:
            logger.exception("internal error while evaluating %r", line)
            click.echo(f"INTERNAL ERROR: {type(e).__name__}: {e}", err=True)
            return False

        if self.show_tree:
            click.echo(result.tree.to_sexpr())
        click.echo(str(result))
        return True

    def run(self, stream: Optional[TextIO] = None) -> int:
        """
        Loop until a quit command or end of input.

        Returns:
            Number of lines that failed
        """
        stream = stream or click.get_text_stream("stdin")
        failures = 0
        while True:
            click.echo(self.config.prompt, nl=False)
            line = stream.readline()
            if not line:
                click.echo()
                break
            line = line.strip()
            if not line:
                continue
            if line in self.config.quit_commands:
                break
            if not self.handle(line):
                failures += 1
        return failures


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-e", "--expression", "expressions", multiple=True, metavar="TEXT",
              help="Evaluate TEXT and exit (repeatable).")
@click.option("--tree", "show_tree", is_flag=True,
              help="Also print the parse tree as an s-expression.")
@click.option("--parse-only", is_flag=True,
              help="Print the RPN form without compiling it.")
@click.option("-O", "--opt-level", type=click.IntRange(0, 3), default=None,
              help="LLVM optimization level (default 2, or PRATTCALC_OPT_LEVEL).")
@click.option("--log-level", default="WARNING", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Logging verbosity.")
@click.version_option(__version__, prog_name="prattcalc")
def main(expressions, show_tree, parse_only, opt_level, log_level):
    """Evaluate integer expressions with a Pratt parser and an LLVM JIT."""
    logging.basicConfig(level=getattr(logging, log_level.upper()),
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        config = EvaluatorConfig.from_env(optimization_level=opt_level)
    except ValueError as e:
        raise click.UsageError(str(e))

    repl = Repl(Evaluator(config), show_tree=show_tree, parse_only=parse_only)

    if expressions:
        for expression in expressions:
            if not repl.handle(expression):
                raise SystemExit(1)
        return

    repl.run()


if __name__ == "__main__":
    main()
