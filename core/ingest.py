"""Core Ingest - Upload datasets into the session sandbox.

Writes the uploaded bytes into the session directory, previews the first
rows through the normal execution path and remembers the handle so a
loader snippet can be generated later.
"""

from pathlib import Path

from config import HTML_MARKER, MAX_UPLOAD_BYTES, PREVIEW_ROWS, SNIPPET_PREVIEW_ROWS
from core.errors import NotReadyError, PreviewError, UploadError
from core.models import DatasetHandle, DatasetUpload, ExecutionResult
from core.runner import execute
from helpers.file import sanitize_filename, write_bytes
from helpers.parser import detect_extension, read_statement
from logs.logger import get_logger

logger = get_logger("ingest")


async def upload_dataset(session, data: bytes, filename: str) -> DatasetUpload:
    """Write an uploaded file to the sandbox and preview it.

    Args:
        session: Ready session receiving the file.
        data: Raw file bytes.
        filename: Filename supplied by the browser.

    Returns:
        DatasetUpload: Resolved path, extension and the preview result
            (None when the preview could not be rendered).

    Raises:
        NotReadyError: If the session runtime is not ready.
        UploadError: If the file cannot be stored.

    Example:
        >>> upload = await upload_dataset(session, b"a,b\\n1,2\\n", "data.csv")
        >>> upload.extension
        'csv'
    """
    if not session.is_ready:
        raise NotReadyError("Runtime must finish initializing before you can upload a dataset.")

    if len(data) > MAX_UPLOAD_BYTES:
        raise UploadError(f"Failed to upload dataset: {len(data)} bytes exceeds the {MAX_UPLOAD_BYTES} byte limit")

    safe_name = sanitize_filename(filename)
    extension = detect_extension(filename or safe_name)

    try:
        path = write_bytes(Path(session.fs_root), safe_name, data)
    except OSError as e:
        logger.error(f"Failed to write {safe_name}: {e}")
        raise UploadError(f"Failed to upload dataset: {e}") from e

    session.dataset = DatasetHandle(path=str(path), extension=extension, filename=filename)
    logger.info(f"Dataset {filename!r} stored at {path} ({len(data)} bytes, {extension})")

    preview = None
    try:
        preview = await preview_dataset(session, str(path), extension)
    except PreviewError as e:
        logger.warning(f"PreviewError: {e.message}")

    return DatasetUpload(path=str(path), extension=extension, preview_result=preview)


async def preview_dataset(session, path: str, extension: str, rows: int = PREVIEW_ROWS) -> ExecutionResult:
    """Render the first rows of a dataset in a scratch namespace.

    Raises:
        PreviewError: If the preview run reported an error.
    """
    code = build_preview_code(path, extension, rows)
    result = await execute(session, code, scope={"__name__": "__preview__"})
    if result.error:
        raise PreviewError(f"Preview of {path} failed ({result.error_kind}): {result.error}")
    return result


def build_preview_code(path: str, extension: str, rows: int = PREVIEW_ROWS) -> str:
    """Script whose trailing expression is the first rows of the dataset."""
    return "\n".join(
        [
            "import pandas as pd",
            f"_path = {str(path)!r}",
            f"_df = {read_statement('_path', extension)}",
            f"_df.head({rows})",
        ]
    )


def build_loader_snippet(path: str, extension: str) -> str:
    """Build a ready-to-edit script that loads an uploaded dataset.

    Deterministic for a given path and extension; uses the same parser
    strategy as the upload preview.

    Example:
        >>> print(build_loader_snippet("/tmp/s/data.csv", "csv"))
        # Load uploaded dataset
        import pandas as pd
        ...
    """
    return "\n".join(
        [
            "# Load uploaded dataset",
            "import pandas as pd",
            "",
            f"dataset_path = {str(path)!r}",
            f"df = {read_statement('dataset_path', extension)}",
            "",
            'print("Dataset shape:", df.shape)',
            'print("Rows:", len(df))',
            f'print("{HTML_MARKER}" + df.head({SNIPPET_PREVIEW_ROWS}).to_html(index=False))',
        ]
    )
