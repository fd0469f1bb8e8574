"""Core package - code execution and rich output capture engine."""

from core.errors import (
    CodeRuntimeError,
    CodeSyntaxError,
    EncodingError,
    ErrorKind,
    NotReadyError,
    PreviewError,
    SandboxError,
    SessionBusyError,
    UploadError,
)
from core.examples import get_example, list_examples
from core.ingest import build_loader_snippet, upload_dataset
from core.models import DatasetHandle, DatasetUpload, ExecutionResult, OutputItem, RuntimeStatus, SessionState
from core.runner import execute
from core.runtime import RuntimeBootstrapper
from core.session import Session

__all__ = [
    "Session",
    "RuntimeBootstrapper",
    "execute",
    "upload_dataset",
    "build_loader_snippet",
    "get_example",
    "list_examples",
    "ExecutionResult",
    "OutputItem",
    "DatasetHandle",
    "DatasetUpload",
    "RuntimeStatus",
    "SessionState",
    "ErrorKind",
    "SandboxError",
    "NotReadyError",
    "SessionBusyError",
    "CodeSyntaxError",
    "CodeRuntimeError",
    "EncodingError",
    "PreviewError",
    "UploadError",
]
