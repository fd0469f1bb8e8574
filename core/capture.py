"""Core Capture - Per-run stdout capture and the HTML marker protocol.

While any run is active, sys.stdout is a router that sends each write to the
buffer of the run executing in the current context. Runs on different
threads therefore never share a buffer and never wait for each other.

A script can print the marker token followed by an HTML fragment; that
fragment is promoted to an Html output instead of staying plain text.
"""

import io
import sys
import threading
from contextvars import ContextVar

from config import HTML_MARKER

_run_buffer: ContextVar[io.StringIO | None] = ContextVar("run_stdout", default=None)

_router_lock = threading.Lock()
_router = None
_active_captures = 0


class StdoutRouter:
    """sys.stdout stand-in writing to the active run's buffer.

    Writes from a context without an active capture (server code, threads
    started by user code) go to the stream that was installed before.
    """

    def __init__(self, fallback):
        self.fallback = fallback

    def _target(self):
        buffer = _run_buffer.get()
        return self.fallback if buffer is None else buffer

    def write(self, text: str) -> int:
        return self._target().write(text)

    def flush(self) -> None:
        self._target().flush()

    def writable(self) -> bool:
        return True

    def isatty(self) -> bool:
        return False

    def __getattr__(self, name):
        return getattr(self.fallback, name)


def _install_router() -> None:
    global _router, _active_captures
    with _router_lock:
        if _active_captures == 0:
            _router = StdoutRouter(sys.stdout)
            sys.stdout = _router
        _active_captures += 1


def _remove_router() -> None:
    global _router, _active_captures
    with _router_lock:
        _active_captures -= 1
        if _active_captures == 0:
            if sys.stdout is _router:
                sys.stdout = _router.fallback
            _router = None


class StdoutCapture:
    """Collect everything printed by the current run into one buffer.

    Example:
        >>> capture = StdoutCapture()
        >>> with capture:
        ...     print("hi")
        >>> capture.getvalue()
        'hi\\n'
    """

    def __init__(self):
        self.buffer = io.StringIO()
        self._token = None

    def __enter__(self):
        _install_router()
        self._token = _run_buffer.set(self.buffer)
        return self

    def __exit__(self, exc_type, exc, tb):
        _run_buffer.reset(self._token)
        self._token = None
        _remove_router()
        return False

    def write(self, text: str) -> None:
        self.buffer.write(text)

    def getvalue(self) -> str:
        return self.buffer.getvalue()


def split_marker(text: str, marker: str = HTML_MARKER) -> tuple[str, str | None]:
    """Split captured stdout at the first marker.

    Args:
        text: Full captured stdout of one run.
        marker: Sentinel token.

    Returns:
        tuple: (plain stdout, html fragment or None). The plain part is
            right-stripped; an empty fragment yields None.

    Example:
        >>> split_marker("plain line\\n__HTML_OUTPUT__<table></table>\\n")
        ('plain line', '<table></table>')
    """
    if marker not in text:
        return text.rstrip(), None

    before, after = text.split(marker, 1)
    html = after.strip()
    return before.rstrip(), html or None
