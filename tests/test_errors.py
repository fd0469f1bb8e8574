"""Tests for error classification and result normalization."""

from __future__ import annotations

import re

import pytest

from core.errors import (
    CodeRuntimeError,
    CodeSyntaxError,
    EncodingError,
    ErrorKind,
    NotReadyError,
    PreviewError,
    SessionBusyError,
    UploadError,
    build_result,
    encoding_guard,
    runtime_error,
    syntax_error,
)
from core.models import OutputItem
from helpers.code import compile_source


class TestTaxonomy:
    """Each error class carries its kind."""

    @pytest.mark.parametrize(
        ("error_class", "kind"),
        [
            (NotReadyError, ErrorKind.INITIALIZATION),
            (SessionBusyError, ErrorKind.BUSY),
            (CodeSyntaxError, ErrorKind.SYNTAX),
            (CodeRuntimeError, ErrorKind.RUNTIME),
            (EncodingError, ErrorKind.ENCODING),
            (PreviewError, ErrorKind.PREVIEW),
            (UploadError, ErrorKind.UPLOAD),
        ],
    )
    def test_kind(self, error_class, kind: ErrorKind) -> None:
        error = error_class("message")

        assert error.kind == kind
        assert error.message == "message"
        assert str(error) == "message"


class TestSyntaxError:
    def test_keeps_line_and_caret(self) -> None:
        with pytest.raises(SyntaxError) as info:
            compile_source("x = 1\ny = (")

        error = syntax_error(info.value)

        assert isinstance(error, CodeSyntaxError)
        assert re.search(r'"<user-code-\d+>", line 2', error.message)
        assert "SyntaxError" in error.message


class TestRuntimeError:
    def test_traceback_starts_at_user_code(self) -> None:
        unit = compile_source("def f():\n    raise ValueError('bad value')\nf()")
        try:
            exec(unit.block, {})
        except ValueError as e:
            error = runtime_error(e)

        assert error.message.startswith("Traceback (most recent call last):")
        assert re.search(r'"<user-code-\d+>", line 3', error.message)
        assert "raise ValueError('bad value')" in error.message
        assert error.message.endswith("ValueError: bad value")
        assert "test_errors.py" not in error.message

    def test_exception_without_user_frames(self) -> None:
        try:
            raise KeyError("missing")
        except KeyError as e:
            error = runtime_error(e)

        assert error.message == "KeyError: 'missing'"


class TestEncodingGuard:
    def test_wraps_exceptions(self) -> None:
        with pytest.raises(EncodingError) as info:
            with encoding_guard("table"):
                raise RuntimeError("bad")

        assert "table" in info.value.message
        assert isinstance(info.value.__cause__, RuntimeError)

    def test_passes_through_on_success(self) -> None:
        with encoding_guard("table"):
            value = 1

        assert value == 1


class TestBuildResult:
    def test_success(self) -> None:
        result = build_result("out", [OutputItem.text("4")])

        assert result.stdout == "out"
        assert result.error is None
        assert result.error_kind is None
        assert result.ok

    def test_failure_keeps_captured_output(self) -> None:
        outputs = [OutputItem.text("A")]

        result = build_result("printed before", outputs, CodeRuntimeError("boom"))

        assert result.stdout == "printed before"
        assert result.outputs == outputs
        assert result.error == "boom"
        assert result.error_kind == "runtime"
        assert not result.ok

    def test_empty_result(self) -> None:
        result = build_result(error=NotReadyError("not ready"))

        assert result.stdout == ""
        assert result.outputs == []
