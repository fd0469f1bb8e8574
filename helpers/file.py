"""Helper - Sandbox file operations.

Filename sanitizing and reading/writing files inside a session's sandbox
directory.
"""

import re
from pathlib import Path

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(name: str, default: str = "dataset") -> str:
    """Replace every character outside [A-Za-z0-9._-] with an underscore.

    Args:
        name: Original filename as supplied by the browser.
        default: Name used when nothing usable is left.

    Returns:
        str: A name that cannot leave the sandbox directory.

    Example:
        >>> sanitize_filename("my data (1).csv")
        'my_data__1_.csv'
    """
    safe = _UNSAFE_CHARS.sub("_", name or "")
    # "." and ".." would resolve outside the file itself
    if not safe.strip("."):
        return default
    return safe


def write_bytes(directory: Path, filename: str, data: bytes) -> Path:
    """Write data to directory/filename, creating the directory if needed.

    Returns:
        Path: Absolute path of the written file.

    Raises:
        OSError: If the file cannot be written.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = (directory / filename).resolve()
    path.write_bytes(data)
    return path

