"""Tests for dataset upload, preview and loader snippets."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from config import HTML_MARKER
from core import NotReadyError, Session, UploadError, build_loader_snippet
from core.ingest import build_preview_code
from helpers.file import sanitize_filename
from helpers.parser import detect_extension, read_statement

CSV_BYTES = b"name,score\nAlice,85\nBob,90\nCharlie,88\n"


class TestFilenames:
    """Sanitizing and format detection."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("data.csv", "data.csv"),
            ("my data (1).csv", "my_data__1_.csv"),
            ("../../etc/passwd", ".._.._etc_passwd"),
            ("résumé.json", "r_sum_.json"),
            ("..", "dataset"),
            ("", "dataset"),
        ],
    )
    def test_sanitize(self, name: str, expected: str) -> None:
        assert sanitize_filename(name) == expected

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("data.csv", "csv"),
            ("DATA.TSV", "tsv"),
            ("records.json", "json"),
            ("points.txt", "txt"),
            ("archive.xlsx", "csv"),
            ("README", "csv"),
        ],
    )
    def test_detect_extension(self, name: str, expected: str) -> None:
        assert detect_extension(name) == expected

    def test_read_statements(self) -> None:
        assert read_statement("p", "csv") == "pd.read_csv(p)"
        assert read_statement("p", "tsv") == 'pd.read_csv(p, sep="\\t")'
        assert read_statement("p", "json") == "pd.read_json(p)"
        assert read_statement("p", "txt") == 'pd.read_csv(p, sep=r"\\s+", engine="python")'
        assert read_statement("p", "unknown") == "pd.read_csv(p)"


class TestUpload:
    """Writing files into the sandbox and previewing them."""

    @pytest.mark.asyncio
    async def test_csv_upload_with_preview(self, session: Session) -> None:
        upload = await session.upload_dataset(CSV_BYTES, "scores.csv")

        path = Path(upload.path)
        assert upload.extension == "csv"
        assert path.read_bytes() == CSV_BYTES
        assert path.parent == session.fs_root.resolve()
        assert upload.preview_result is not None
        assert upload.preview_result.error is None
        assert [item.type for item in upload.preview_result.outputs] == ["html"]
        assert "Charlie" in upload.preview_result.outputs[0].value

    @pytest.mark.asyncio
    async def test_handle_is_registered(self, session: Session) -> None:
        upload = await session.upload_dataset(CSV_BYTES, "my scores.csv")

        assert session.dataset is not None
        assert session.dataset.path == upload.path
        assert session.dataset.filename == "my scores.csv"
        assert Path(upload.path).name == "my_scores.csv"

    @pytest.mark.asyncio
    async def test_preview_is_bounded(self, session: Session) -> None:
        rows = "\n".join(str(i) for i in range(100))
        upload = await session.upload_dataset(f"n\n{rows}\n".encode(), "numbers.csv")

        html = upload.preview_result.outputs[0].value
        assert ">9<" in html
        assert ">10<" not in html

    @pytest.mark.asyncio
    async def test_preview_does_not_touch_learner_scope(self, session: Session) -> None:
        await session.upload_dataset(CSV_BYTES, "scores.csv")

        assert "_df" not in session.scope
        assert "_path" not in session.scope

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("filename", "content"),
        [
            ("scores.tsv", b"name\tscore\nAlice\t85\nBob\t90\n"),
            ("scores.json", b'[{"name": "Alice", "score": 85}, {"name": "Bob", "score": 90}]'),
            ("scores.txt", b"name score\nAlice 85\nBob   90\n"),
        ],
    )
    async def test_other_formats_preview(self, session: Session, filename: str, content: bytes) -> None:
        upload = await session.upload_dataset(content, filename)

        assert upload.preview_result is not None
        assert "Alice" in upload.preview_result.outputs[0].value
        assert "score" in upload.preview_result.outputs[0].value

    @pytest.mark.asyncio
    async def test_failed_preview_keeps_upload(self, session: Session) -> None:
        upload = await session.upload_dataset(b"this is not json", "broken.json")

        assert upload.preview_result is None
        assert Path(upload.path).exists()
        assert session.dataset is not None
        assert session.dataset.extension == "json"

    @pytest.mark.asyncio
    async def test_not_ready_rejects_upload(self, unready_session: Session) -> None:
        with pytest.raises(NotReadyError):
            await unready_session.upload_dataset(CSV_BYTES, "scores.csv")

    @pytest.mark.asyncio
    async def test_oversized_upload(self, session: Session) -> None:
        with patch("core.ingest.MAX_UPLOAD_BYTES", 10):
            with pytest.raises(UploadError):
                await session.upload_dataset(CSV_BYTES, "scores.csv")

        assert session.dataset is None

    @pytest.mark.asyncio
    async def test_write_failure_is_upload_error(self, session: Session) -> None:
        with patch("core.ingest.write_bytes", side_effect=OSError("disk full")):
            with pytest.raises(UploadError) as info:
                await session.upload_dataset(CSV_BYTES, "scores.csv")

        assert "disk full" in info.value.message
        assert session.dataset is None


class TestLoaderSnippet:
    """Snippets reuse the preview's parser strategy."""

    def test_snippet_is_deterministic(self) -> None:
        first = build_loader_snippet("/sandbox/data.tsv", "tsv")
        second = build_loader_snippet("/sandbox/data.tsv", "tsv")

        assert first == second
        assert "dataset_path = '/sandbox/data.tsv'" in first
        assert 'pd.read_csv(dataset_path, sep="\\t")' in first
        assert HTML_MARKER in first

    def test_preview_code_uses_same_strategy(self) -> None:
        code = build_preview_code("/sandbox/data.json", "json", rows=5)

        assert "pd.read_json(_path)" in code
        assert code.endswith("_df.head(5)")

    @pytest.mark.asyncio
    async def test_round_trip_row_count(self, session: Session) -> None:
        upload = await session.upload_dataset(CSV_BYTES, "scores.csv")

        result = await session.run(build_loader_snippet(upload.path, upload.extension))

        assert result.error is None
        assert "Rows: 3" in result.stdout
        assert "Dataset shape: (3, 2)" in result.stdout
        assert result.outputs[-1].type == "html"
        assert "Alice" in result.outputs[-1].value

    @pytest.mark.asyncio
    async def test_snippet_defines_df_in_session(self, session: Session) -> None:
        upload = await session.upload_dataset(CSV_BYTES, "scores.csv")
        await session.run(build_loader_snippet(upload.path, upload.extension))

        result = await session.run("int(df['score'].sum())")

        assert result.outputs[0].value == "263"
