"""Helper - Dataset format detection and parser strategies.

Each supported extension maps to the pandas call that loads it. The same
statement is used for the upload preview and for the loader snippet handed
to the learner, so both always parse the file the same way.
"""

DEFAULT_EXTENSION = "csv"

# extension -> pandas read call, {path} is a Python expression
READ_STATEMENTS = {
    "csv": "pd.read_csv({path})",
    "tsv": 'pd.read_csv({path}, sep="\\t")',
    "json": "pd.read_json({path})",
    "txt": 'pd.read_csv({path}, sep=r"\\s+", engine="python")',
}


def detect_extension(filename: str) -> str:
    """Detect the dataset format from a filename.

    Args:
        filename: Original or sanitized filename.

    Returns:
        str: One of csv, tsv, json, txt. Unknown or missing extensions
            fall back to csv.

    Example:
        >>> detect_extension("Scores.TSV")
        'tsv'
        >>> detect_extension("README")
        'csv'
    """
    if "." not in filename:
        return DEFAULT_EXTENSION
    ext = filename.rsplit(".", 1)[-1].lower()
    return ext if ext in READ_STATEMENTS else DEFAULT_EXTENSION


def read_statement(path_expr: str, extension: str) -> str:
    """Build the pandas expression that loads a dataset.

    Args:
        path_expr: Python expression evaluating to the file path.
        extension: Dataset extension (see detect_extension).

    Returns:
        str: Source of a pandas read call.

    Example:
        >>> read_statement("dataset_path", "tsv")
        'pd.read_csv(dataset_path, sep="\\\\t")'
    """
    template = READ_STATEMENTS.get(extension, READ_STATEMENTS[DEFAULT_EXTENSION])
    return template.format(path=path_expr)
