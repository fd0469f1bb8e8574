"""Core Errors - Failure taxonomy and result normalization.

Every failure the engine can hit is one of these kinds. Initialization,
busy, syntax, runtime and upload failures surface to the caller; encoding
and preview failures are recovered where they happen and only logged.
"""

import traceback
from contextlib import contextmanager
from enum import Enum

from config import USER_CODE_PREFIX
from core.models import ExecutionResult, OutputItem


class ErrorKind(str, Enum):
    INITIALIZATION = "initialization"
    BUSY = "busy"
    SYNTAX = "syntax"
    RUNTIME = "runtime"
    ENCODING = "encoding"
    PREVIEW = "preview"
    UPLOAD = "upload"


class SandboxError(Exception):
    """Base class for engine failures."""

    kind = ErrorKind.RUNTIME

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotReadyError(SandboxError):
    """Run or upload attempted before the runtime is ready, or after it failed."""

    kind = ErrorKind.INITIALIZATION


class SessionBusyError(SandboxError):
    """A run was requested while another one is still in progress."""

    kind = ErrorKind.BUSY


class CodeSyntaxError(SandboxError):
    kind = ErrorKind.SYNTAX


class CodeRuntimeError(SandboxError):
    kind = ErrorKind.RUNTIME


class EncodingError(SandboxError):
    kind = ErrorKind.ENCODING


class PreviewError(SandboxError):
    kind = ErrorKind.PREVIEW


class UploadError(SandboxError):
    kind = ErrorKind.UPLOAD


def syntax_error(exc: SyntaxError) -> CodeSyntaxError:
    """Wrap a parse failure, keeping the line/caret diagnostic."""
    text = "".join(traceback.format_exception_only(type(exc), exc))
    return CodeSyntaxError(text.rstrip())


def runtime_error(exc: BaseException, prefix: str = USER_CODE_PREFIX) -> CodeRuntimeError:
    """Wrap an exception raised by user code.

    The traceback starts at the first frame compiled from a submission
    (pseudo filename starting with prefix) so the engine's own frames never
    show up in the learner's diagnostic.
    """
    tb = exc.__traceback__
    while tb is not None and not tb.tb_frame.f_code.co_filename.startswith(prefix):
        tb = tb.tb_next
    text = "".join(traceback.format_exception(type(exc), exc, tb))
    return CodeRuntimeError(text.rstrip())


@contextmanager
def encoding_guard(what: str):
    """Turn any exception raised while encoding a value into EncodingError."""
    try:
        yield
    except EncodingError:
        raise
    except Exception as e:
        raise EncodingError(f"Could not encode {what}: {e}") from e


def build_result(
    stdout: str = "",
    outputs: list[OutputItem] | None = None,
    error: SandboxError | None = None,
) -> ExecutionResult:
    """Assemble a complete result, keeping whatever was captured before a failure."""
    return ExecutionResult(
        stdout=stdout,
        error=error.message if error else None,
        error_kind=error.kind.value if error else None,
        outputs=list(outputs or []),
    )
