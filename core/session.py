"""Core Session - Per-tab execution context.

A Session bundles the runtime bootstrapper, the persistent namespace that
survives between runs, and a private sandbox directory for uploaded files.
It is passed explicitly to every operation; nothing is kept in module
globals, so two sessions never share variables or files.
"""

import shutil
import tempfile
import uuid
from pathlib import Path

from config import SANDBOX_ROOT
from core.ingest import upload_dataset
from core.models import DatasetHandle, DatasetUpload, ExecutionResult, RuntimeStatus, SessionState
from core.runner import execute
from core.runtime import RuntimeBootstrapper
from logs.logger import get_logger

logger = get_logger("session")


class Session:
    """One sandbox instance: runtime, namespace and filesystem.

    Args:
        root: Parent directory for the sandbox folder (default: config.SANDBOX_ROOT).
        runtime: Bootstrapper to use; a default one is created if omitted.
    """

    def __init__(self, root: str | Path | None = None, runtime: RuntimeBootstrapper | None = None):
        self.id = uuid.uuid4().hex[:8]
        self.runtime = runtime or RuntimeBootstrapper()

        base = Path(root or SANDBOX_ROOT)
        base.mkdir(parents=True, exist_ok=True)
        self.fs_root = Path(tempfile.mkdtemp(prefix=f"session-{self.id}-", dir=base))

        self.scope: dict = {"__name__": "__main__"}
        self.busy = False
        self.closed = False
        self.last_result: ExecutionResult | None = None
        self.dataset: DatasetHandle | None = None

        logger.debug(f"Session {self.id} created at {self.fs_root}")

    @property
    def state(self) -> SessionState:
        return self.runtime.state

    @property
    def is_ready(self) -> bool:
        return self.runtime.is_ready and not self.closed

    def status(self) -> RuntimeStatus:
        return self.runtime.status()

    async def initialize(self) -> SessionState:
        return await self.runtime.initialize()

    async def run(self, code: str) -> ExecutionResult:
        """Execute one submission. See core.runner.execute."""
        return await execute(self, code)

    async def upload_dataset(self, data: bytes, filename: str) -> DatasetUpload:
        """Store an uploaded file and preview it. See core.ingest.upload_dataset."""
        return await upload_dataset(self, data, filename)

    def close(self) -> None:
        """Destroy the namespace and the sandbox directory."""
        if self.closed:
            return
        self.closed = True
        self.scope.clear()
        self.dataset = None
        shutil.rmtree(self.fs_root, ignore_errors=True)
        logger.debug(f"Session {self.id} closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
