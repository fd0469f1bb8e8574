"""Core Runtime - One-time bootstrap of the scientific runtime.

Imports the preloaded library set once per session and records a manifest
of what was loaded. Initialization failure is terminal for the session and
is reported through the state, never raised to the host.
"""

import asyncio
import importlib
from typing import Callable

from config import OPTIONAL_PACKAGES, PRELOAD_PACKAGES
from core.models import RuntimeStatus, SessionState
from logs.logger import get_logger

logger = get_logger("runtime")


class RuntimeBootstrapper:
    """Drives a session's runtime from uninitialized to ready or failed.

    Args:
        packages: Import names that must load (default: config.PRELOAD_PACKAGES).
        optional: Import names loaded when available (default: config.OPTIONAL_PACKAGES).
        importer: Callable used to import a module by name.
    """

    def __init__(
        self,
        packages: list[str] | None = None,
        optional: list[str] | None = None,
        importer: Callable = importlib.import_module,
    ):
        self.packages = list(PRELOAD_PACKAGES if packages is None else packages)
        self.optional = list(OPTIONAL_PACKAGES if optional is None else optional)
        self.importer = importer
        self.state = SessionState.UNINITIALIZED
        self.manifest: dict[str, str] = {}
        self.error: str | None = None
        self._task: asyncio.Future | None = None

    @property
    def is_ready(self) -> bool:
        return self.state == SessionState.READY

    def status(self) -> RuntimeStatus:
        return RuntimeStatus(state=self.state, manifest=dict(self.manifest), error=self.error)

    async def initialize(self) -> SessionState:
        """Load the runtime once. Concurrent callers share the same attempt."""
        if self.state in (SessionState.READY, SessionState.FAILED):
            return self.state

        if self._task is None:
            self.state = SessionState.LOADING
            logger.info(f"Loading runtime libraries: {', '.join(self.packages)}")
            self._task = asyncio.ensure_future(self._load())

        await asyncio.shield(self._task)
        return self.state

    async def _load(self) -> None:
        loop = asyncio.get_running_loop()
        try:
            manifest = await loop.run_in_executor(None, self._import_all)
        except Exception as e:
            self.state = SessionState.FAILED
            self.error = f"Failed to initialize runtime: {e}"
            logger.error(self.error)
            return

        self.manifest = manifest
        self.state = SessionState.READY
        logger.info(f"Runtime ready: {', '.join(f'{k} {v}' for k, v in manifest.items())}")

    def _import_all(self) -> dict[str, str]:
        manifest = {}
        for name in self.packages:
            manifest[name] = self._version(self.importer(name))

        for name in self.optional:
            try:
                manifest[name] = self._version(self.importer(name))
            except ImportError as e:
                logger.warning(f"Optional library {name} unavailable: {e}")

        if "matplotlib" in manifest:
            self._use_headless_backend()

        return manifest

    def _use_headless_backend(self) -> None:
        try:
            matplotlib = self.importer("matplotlib")
            matplotlib.use("Agg")
        except Exception as e:
            logger.warning(f"Failed to set matplotlib backend: {e}")

    @staticmethod
    def _version(module) -> str:
        return str(getattr(module, "__version__", "unknown"))
