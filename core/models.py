"""Core Models - Payloads exchanged between the engine and its host.

All results are pydantic models so the host adapter can return them
directly and tests can compare them by value.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class SessionState(str, Enum):
    """Readiness of a session's runtime."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class OutputItem(BaseModel):
    """One unit of rich output, tagged html, image (base64 PNG) or text."""

    type: Literal["html", "image", "text"]
    value: str

    @classmethod
    def html(cls, value: str) -> "OutputItem":
        return cls(type="html", value=value)

    @classmethod
    def image(cls, value: str) -> "OutputItem":
        return cls(type="image", value=value)

    @classmethod
    def text(cls, value: str) -> "OutputItem":
        return cls(type="text", value=value)


class ExecutionResult(BaseModel):
    """Everything one run produced. Replaces the previous result entirely."""

    stdout: str = ""
    error: str | None = None
    error_kind: str | None = None
    outputs: list[OutputItem] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


class DatasetHandle(BaseModel):
    """An uploaded file registered in the session sandbox."""

    path: str
    extension: str
    filename: str


class DatasetUpload(BaseModel):
    """Outcome of an upload. preview_result is None when the preview failed."""

    path: str
    extension: str
    preview_result: ExecutionResult | None = None


class RuntimeStatus(BaseModel):
    """Snapshot of the bootstrapper for the host UI."""

    state: SessionState
    manifest: dict[str, str] = Field(default_factory=dict)
    error: str | None = None
