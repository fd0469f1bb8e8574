"""Shared test fixtures for the sandbox test suite."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import matplotlib
import pytest
import pytest_asyncio

from core import RuntimeBootstrapper, Session

matplotlib.use("Agg")


@pytest_asyncio.fixture
async def session(tmp_path: Path) -> AsyncGenerator[Session, None]:
    """A ready session with its sandbox under tmp_path."""
    session = Session(root=tmp_path, runtime=RuntimeBootstrapper(optional=[]))
    await session.initialize()
    yield session
    session.close()


@pytest.fixture
def unready_session(tmp_path: Path) -> Generator[Session, None, None]:
    """A session whose runtime was never initialized."""
    session = Session(root=tmp_path, runtime=RuntimeBootstrapper(optional=[]))
    yield session
    session.close()
