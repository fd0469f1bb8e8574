"""Core Runner - Execute one submission end-to-end.

Compiles the code, installs the display and stdout hooks, runs the block
and the trailing auto-display expression against the session namespace,
removes the hooks and returns exactly one ExecutionResult. Hooks route per
run, so a run never waits for another session, even an abandoned one.
"""

import asyncio
import inspect
import time
from contextlib import ExitStack

from core.capture import StdoutCapture, split_marker
from core.display import DisplayMultiplexer
from core.errors import NotReadyError, SessionBusyError, build_result, runtime_error, syntax_error
from core.models import ExecutionResult, OutputItem, SessionState
from helpers.code import ExecutableUnit, compile_source
from logs.logger import get_logger

logger = get_logger("runner")


async def execute(session, code: str, scope: dict | None = None) -> ExecutionResult:
    """Run code in a session and return its result.

    The run happens on a worker thread so the event loop stays responsive.
    A request arriving while the session is busy is rejected, not queued.

    Args:
        session: Session to run in (must be ready).
        code: Python source submitted by the learner.
        scope: Namespace to use instead of the session's persistent scope.

    Returns:
        ExecutionResult: stdout, error and ordered outputs. Failures are
            reported in the result, never raised.

    Example:
        >>> result = await execute(session, "x = 2 + 2\\nx")
        >>> result.outputs
        [OutputItem(type='text', value='4')]
    """
    if not session.is_ready:
        error = NotReadyError(_not_ready_message(session))
        logger.warning(error.message)
        return build_result(error=error)

    if session.busy:
        error = SessionBusyError("A run is already in progress. Wait for it to finish before running again.")
        logger.warning(f"Session {session.id}: run rejected, session busy")
        return build_result(error=error)

    session.busy = True
    if scope is None:
        session.last_result = None
    try:
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, run_sync, session, code, scope)
    finally:
        session.busy = False

    if scope is None:
        session.last_result = result
    return result


def run_sync(session, code: str, scope: dict | None = None) -> ExecutionResult:
    """Blocking part of a run. Hooks are always removed before returning."""
    namespace = session.scope if scope is None else scope
    start = time.time()

    try:
        unit = compile_source(code)
    except (SyntaxError, ValueError) as e:
        error = syntax_error(e)
        logger.info(f"Session {session.id}: syntax error, nothing executed")
        return build_result(error=error)

    error = None
    capture = StdoutCapture()
    display = DisplayMultiplexer(capture)
    namespace["display"] = display.display

    with ExitStack() as hooks:
        hooks.enter_context(capture)
        hooks.enter_context(display.pyplot_hook(close_stale=True))
        try:
            _run_unit(unit, namespace, display)
        except (Exception, SystemExit) as e:
            error = runtime_error(e)

    stdout, html = split_marker(capture.getvalue())
    if html:
        display.outputs.append(OutputItem.html(html))

    elapsed = time.time() - start
    if error:
        logger.info(f"Session {session.id}: run failed after {elapsed:.2f}s ({type(error).__name__})")
    else:
        logger.info(f"Session {session.id}: run finished in {elapsed:.2f}s, {len(display.outputs)} outputs")

    return build_result(stdout, display.outputs, error)


def _run_unit(unit: ExecutableUnit, namespace: dict, display: DisplayMultiplexer) -> None:
    _evaluate(unit.block, namespace)
    if unit.candidate is not None:
        value = _evaluate(unit.candidate, namespace)
        if value is not None:
            display.display(value)


def _evaluate(code, namespace: dict):
    """Evaluate a compiled unit, driving it to completion if it uses top-level await."""
    result = eval(code, namespace)
    if code.co_flags & inspect.CO_COROUTINE:
        result = asyncio.run(result)
    return result


def _not_ready_message(session) -> str:
    if getattr(session, "closed", False):
        return "Session is closed. Reload to start a new session."
    if session.state == SessionState.FAILED:
        return f"{session.runtime.error or 'Runtime failed to initialize'}. Reload to start a new session."
    return "Runtime is not ready yet. Please wait for initialization."
