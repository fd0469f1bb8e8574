"""Helpers package - small utilities for the core engine."""

from helpers.bs64_encoding import decode_base64_bytes, encode_base64, figure_to_base64
from helpers.code import ExecutableUnit, compile_source, next_filename, split_source
from helpers.file import sanitize_filename, write_bytes
from helpers.parser import detect_extension, read_statement

__all__ = [
    "encode_base64",
    "decode_base64_bytes",
    "figure_to_base64",
    "ExecutableUnit",
    "next_filename",
    "compile_source",
    "split_source",
    "sanitize_filename",
    "write_bytes",
    "detect_extension",
    "read_statement",
]
