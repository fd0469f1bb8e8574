"""Core Display - Classify runtime values into transport-safe outputs.

Values are matched against an ordered chain of capability probes (table,
figure, custom HTML, plain text); the first probe that matches renders the
value. Rendering never raises: a probe that fails to encode hands the value
to the next one, and a value no probe can encode becomes a Text output
built from its string form.
"""

import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Callable

from config import FIGURE_DPI, TABLE_MAX_COLS, TABLE_MAX_ROWS, TEXT_FALLBACK_ROWS
from core.errors import EncodingError, encoding_guard
from core.models import OutputItem
from helpers.bs64_encoding import figure_to_base64
from logs.logger import get_logger

logger = get_logger("display")

FIGURE_NOTICE = "[Matplotlib figure displayed]"
PLOT_NOTICE = "[Matplotlib plot displayed]"


@dataclass
class Probe:
    """One step of the classification chain."""

    name: str
    matches: Callable[[Any], bool]
    render: Callable[[Any], OutputItem | None]


# ===== CAPABILITY PROBES =====


def is_series(value) -> bool:
    return not isinstance(value, type) and callable(getattr(value, "to_frame", None)) and hasattr(value, "to_string")


def is_table(value) -> bool:
    if isinstance(value, type):
        return False
    if is_series(value):
        return True
    return (
        callable(getattr(value, "to_html", None))
        and callable(getattr(value, "head", None))
        and hasattr(value, "columns")
    )


def figure_of(value):
    """Return the figure behind a figure or axes-like value, else None."""
    if isinstance(value, type):
        return None
    if callable(getattr(value, "savefig", None)):
        return value
    figure = getattr(value, "figure", None)
    if figure is not None and callable(getattr(figure, "savefig", None)):
        return figure
    return None


def is_figure(value) -> bool:
    return figure_of(value) is not None


def has_html_repr(value) -> bool:
    return not isinstance(value, type) and callable(getattr(value, "_repr_html_", None))


def close_figure(figure) -> None:
    """Release a figure from pyplot's registry if pyplot is loaded."""
    plt = sys.modules.get("matplotlib.pyplot")
    if plt is not None:
        plt.close(figure)


# ===== PYPLOT.SHOW ROUTING =====

# pyplot.show is replaced once while any run is active; each call goes to
# the multiplexer of the run executing in the calling context.
_run_display: ContextVar["DisplayMultiplexer | None"] = ContextVar("run_display", default=None)

_show_lock = threading.Lock()
_show_users = 0
_original_show = None


def _routed_show(*args, **kwargs):
    display = _run_display.get()
    if display is None:
        return _original_show(*args, **kwargs)
    return display.capture_show(*args, **kwargs)


def _install_show(plt, close_stale: bool) -> None:
    global _show_users, _original_show
    with _show_lock:
        if _show_users == 0:
            _original_show = plt.show
            plt.show = _routed_show
            if close_stale:
                plt.close("all")
        _show_users += 1


def _remove_show(plt) -> None:
    global _show_users, _original_show
    with _show_lock:
        _show_users -= 1
        if _show_users == 0:
            if plt.show is _routed_show:
                plt.show = _original_show
            _original_show = None


class DisplayMultiplexer:
    """Collects the ordered outputs of one run.

    Args:
        stdout: Writable text stream receiving the plain-text fallbacks,
            normally the run's capture buffer.
    """

    def __init__(self, stdout):
        self.stdout = stdout
        self.outputs: list[OutputItem] = []
        self.probes = [
            Probe("table", is_table, self._render_table),
            Probe("figure", is_figure, self._render_figure),
            Probe("html", has_html_repr, self._render_html),
            Probe("text", lambda value: True, self._render_text),
        ]

    # ===== PUBLIC API =====

    def display(self, *values) -> None:
        """Render each value and append it to the outputs, in call order."""
        for value in values:
            self.outputs.append(self.classify(value))

    def classify(self, value) -> OutputItem:
        """Turn a value into an OutputItem. Never raises."""
        for probe in self.probes:
            try:
                if not probe.matches(value):
                    continue
            except Exception as e:
                logger.debug(f"Probe {probe.name} could not inspect {type(value).__name__}: {e}")
                continue

            try:
                item = probe.render(value)
            except EncodingError as e:
                logger.warning(f"EncodingError: {e.message}")
                continue

            if item is not None:
                return item

        return self._degrade(value)

    def capture_show(self, *args, **kwargs) -> None:
        """Replacement for pyplot.show: capture the current figure as an image."""
        plt = sys.modules.get("matplotlib.pyplot")
        if plt is None or not plt.get_fignums():
            return
        try:
            self.outputs.append(self._render_figure(plt.gcf(), notice=False))
        except EncodingError as e:
            logger.warning(f"EncodingError: {e.message}")

    @contextmanager
    def pyplot_hook(self, close_stale: bool = False):
        """Route pyplot.show() to capture_show for the duration of the block.

        Args:
            close_stale: Close every open figure when no other run is
                currently hooked into pyplot.
        """
        try:
            import matplotlib.pyplot as plt
        except ImportError:
            plt = None

        if plt is None:
            yield self
            return

        _install_show(plt, close_stale)
        token = _run_display.set(self)
        try:
            yield self
        finally:
            _run_display.reset(token)
            _remove_show(plt)

    # ===== RENDERERS =====

    def _render_table(self, value) -> OutputItem:
        with encoding_guard(f"table {type(value).__name__}"):
            if is_series(value):
                frame = value.to_frame(name=value.name or "value")
                html = frame.to_html(max_rows=TABLE_MAX_ROWS, max_cols=TABLE_MAX_COLS)
                text = value.to_string(max_rows=TEXT_FALLBACK_ROWS)
            else:
                try:
                    html = value.to_html(index=False, max_rows=TABLE_MAX_ROWS, max_cols=TABLE_MAX_COLS)
                except TypeError:
                    html = value.to_html()
                text = value.head(TEXT_FALLBACK_ROWS).to_string()

        self._echo(text)
        return OutputItem.html(html)

    def _render_figure(self, value, notice: bool = True) -> OutputItem:
        figure = figure_of(value)
        try:
            with encoding_guard(f"figure {type(value).__name__}"):
                image = figure_to_base64(figure, dpi=FIGURE_DPI)
        finally:
            close_figure(figure)

        if notice:
            self._echo(FIGURE_NOTICE if figure is value else PLOT_NOTICE)
        return OutputItem.image(image)

    def _render_html(self, value) -> OutputItem | None:
        with encoding_guard(f"html repr of {type(value).__name__}"):
            html = value._repr_html_()
        if not html:
            return None
        self._echo(self._safe_str(value))
        return OutputItem.html(str(html))

    def _render_text(self, value) -> OutputItem:
        with encoding_guard(f"text of {type(value).__name__}"):
            text = str(value)
        self._echo(text)
        return OutputItem.text(text)

    # ===== HELPERS =====

    def _degrade(self, value) -> OutputItem:
        text = self._safe_str(value)
        self._echo(text)
        return OutputItem.text(text)

    def _echo(self, text: str) -> None:
        self.stdout.write(text + "\n")

    @staticmethod
    def _safe_str(value) -> str:
        try:
            return str(value)
        except Exception:
            return object.__repr__(value)
