"""Helper - Source transformation for REPL-style execution.

Splits a submitted script into a statement block and an optional trailing
expression whose value is displayed automatically, like the last line of a
notebook cell.
"""

import ast
import itertools
import linecache
from dataclasses import dataclass
from types import CodeType

from config import USER_CODE_PREFIX

# Allows `await` at the top level of a submission
COMPILE_FLAGS = ast.PyCF_ALLOW_TOP_LEVEL_AWAIT

_submission_ids = itertools.count(1)


@dataclass
class ExecutableUnit:
    """Compiled form of one submission."""

    block: CodeType
    candidate: CodeType | None = None
    filename: str = "<unknown>"

    @property
    def has_candidate(self) -> bool:
        return self.candidate is not None


def split_source(source: str, filename: str = "<unknown>") -> tuple[ast.Module, ast.Expression | None]:
    """Parse source and detach a trailing bare expression.

    Args:
        source: Python source text.
        filename: Pseudo filename used in diagnostics.

    Returns:
        tuple: (module without the trailing expression, expression or None)

    Raises:
        SyntaxError: If the source does not parse.

    Example:
        >>> block, last = split_source("x = 2 + 2\\nx")
        >>> len(block.body), last is not None
        (1, True)
    """
    tree = ast.parse(source, filename=filename, mode="exec")

    candidate = None
    if tree.body and isinstance(tree.body[-1], ast.Expr):
        candidate = ast.Expression(body=tree.body[-1].value)
        tree.body = tree.body[:-1]

    return tree, candidate


def next_filename() -> str:
    """Pseudo filename unique to one submission, e.g. ``<user-code-3>``."""
    return f"{USER_CODE_PREFIX}-{next(_submission_ids)}>"


def compile_source(source: str, filename: str | None = None) -> ExecutableUnit:
    """Compile a submission into an ExecutableUnit.

    Everything is compiled up front, so a syntax error anywhere in the
    script is raised before a single statement runs. Each submission gets
    its own pseudo filename so its lines stay available to tracebacks even
    after later submissions.

    Raises:
        SyntaxError: If the source does not parse or compile.
    """
    filename = filename or next_filename()
    register_source(source, filename)
    block, candidate = split_source(source, filename)

    compiled_block = compile(block, filename, "exec", flags=COMPILE_FLAGS)
    compiled_candidate = None
    if candidate is not None:
        compiled_candidate = compile(candidate, filename, "eval", flags=COMPILE_FLAGS)

    return ExecutableUnit(block=compiled_block, candidate=compiled_candidate, filename=filename)


def register_source(source: str, filename: str) -> None:
    """Make source lines available to tracebacks for a pseudo filename."""
    linecache.cache[filename] = (len(source), None, source.splitlines(True), filename)
