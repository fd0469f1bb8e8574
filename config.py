"""Configuration - Environment variables and constants."""

import os
import tempfile

from dotenv import load_dotenv

load_dotenv()

# Sandbox filesystem
SANDBOX_ROOT = os.getenv("SANDBOX_ROOT", os.path.join(tempfile.gettempdir(), "notebook-sandbox"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(50 * 1024 * 1024)))

# Runtime libraries (import names, comma separated)
PRELOAD_PACKAGES = [p.strip() for p in os.getenv("PRELOAD_PACKAGES", "numpy,pandas,matplotlib").split(",") if p.strip()]
OPTIONAL_PACKAGES = [p.strip() for p in os.getenv("OPTIONAL_PACKAGES", "scipy,sklearn").split(",") if p.strip()]

# Output protocol
HTML_MARKER = os.getenv("HTML_MARKER", "__HTML_OUTPUT__")
# Each submission compiles under "<user-code-N>"
USER_CODE_PREFIX = "<user-code"

# Rendering bounds
TABLE_MAX_ROWS = int(os.getenv("TABLE_MAX_ROWS", "60"))
TABLE_MAX_COLS = int(os.getenv("TABLE_MAX_COLS", "20"))
TEXT_FALLBACK_ROWS = int(os.getenv("TEXT_FALLBACK_ROWS", "20"))
FIGURE_DPI = int(os.getenv("FIGURE_DPI", "100"))

# Dataset preview
PREVIEW_ROWS = int(os.getenv("PREVIEW_ROWS", "10"))
SNIPPET_PREVIEW_ROWS = int(os.getenv("SNIPPET_PREVIEW_ROWS", "20"))

# Logging
LOG_FILE = os.getenv("LOG_FILE", "logs/app.log")
