"""Helper - Base64 encoding of output payloads.

Provides base64 encoding for raw bytes and rendered figures, and decoding
for uploaded file content sent as base64 text.
"""

import base64
from io import BytesIO


def encode_base64(data: str | bytes) -> str:
    """Encode string or bytes to base64.

    Args:
        data: String or bytes to encode.

    Returns:
        str: Base64 encoded string.

    Example:
        >>> encode_base64("Hello World")
        'SGVsbG8gV29ybGQ='
    """
    if isinstance(data, str):
        data = data.encode()
    return base64.b64encode(data).decode()


def decode_base64_bytes(data: str) -> bytes:
    """Decode base64 string to bytes.

    Args:
        data: Base64 encoded string.

    Returns:
        bytes: Decoded bytes.

    Raises:
        binascii.Error: If input is not valid base64.
    """
    return base64.b64decode(data, validate=True)


def figure_to_base64(figure, dpi: int = 100, fmt: str = "png") -> str:
    """Rasterize a matplotlib-like figure and return it base64 encoded.

    Args:
        figure: Any object with a ``savefig(buffer, format=..., ...)`` method.
        dpi: Resolution of the raster.
        fmt: Image format passed to savefig.

    Returns:
        str: Base64 encoded image bytes.
    """
    buf = BytesIO()
    figure.savefig(buf, format=fmt, dpi=dpi, bbox_inches="tight")
    return encode_base64(buf.getvalue())
