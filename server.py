"""FastAPI Server for the practice code editor.

Hosts one sandbox Session per process, the server-side counterpart of one
editor tab: the page posts code and uploaded files here and renders the
returned ExecutionResult (text panel, HTML panel, image panel).
"""

import asyncio
import binascii
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from core import (
    DatasetUpload,
    ExecutionResult,
    NotReadyError,
    RuntimeStatus,
    Session,
    UploadError,
    build_loader_snippet,
    get_example,
    list_examples,
)
from helpers.bs64_encoding import decode_base64_bytes
from helpers.parser import detect_extension
from logs.logger import get_logger

logger = get_logger("server")


class RunRequest(BaseModel):
    """Code submitted from the editor."""

    code: str


class UploadRequest(BaseModel):
    """Dataset upload; content is the file's bytes in base64."""

    filename: str
    content: str


class SnippetResponse(BaseModel):
    path: str
    extension: str
    code: str


class ExampleResponse(BaseModel):
    name: str
    code: str


def start_session(app: FastAPI) -> Session:
    """Create a fresh session and start bootstrapping it in the background."""
    session = Session()
    app.state.session = session
    app.state.init_task = asyncio.ensure_future(session.initialize())
    logger.info(f"🧪 Session {session.id} created, loading runtime...")
    return session


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    start_session(app)
    yield
    app.state.session.close()
    logger.info("👋 Sandbox shutting down...")


app = FastAPI(
    title="Notebook Sandbox API",
    description="Runs learner code against a preloaded scientific Python runtime",
    version="1.0.0",
    lifespan=lifespan,
)


def current_session(request: Request) -> Session:
    return request.app.state.session


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "notebook-sandbox"}


@app.get("/status", response_model=RuntimeStatus)
async def status(request: Request):
    return current_session(request).status()


@app.post("/initialize", response_model=RuntimeStatus)
async def initialize(request: Request):
    """Wait for the runtime bootstrap and report its outcome."""
    session = current_session(request)
    await session.initialize()
    return session.status()


@app.post("/run", response_model=ExecutionResult)
async def run_code(payload: RunRequest, request: Request):
    """Execute code; failures come back inside the result."""
    return await current_session(request).run(payload.code)


@app.post("/datasets", response_model=DatasetUpload)
async def upload(payload: UploadRequest, request: Request):
    """Store an uploaded dataset in the sandbox and preview it."""
    session = current_session(request)
    try:
        data = decode_base64_bytes(payload.content)
    except (binascii.Error, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Failed to upload dataset: invalid base64 content ({e})") from e

    try:
        return await session.upload_dataset(data, payload.filename)
    except NotReadyError as e:
        raise HTTPException(status_code=409, detail=e.message) from e
    except UploadError as e:
        raise HTTPException(status_code=400, detail=e.message) from e


@app.get("/datasets/snippet", response_model=SnippetResponse)
async def loader_snippet(request: Request, path: str | None = None, extension: str | None = None):
    """Loader snippet for the given path, or for the last uploaded dataset."""
    dataset = current_session(request).dataset
    if path is None:
        if dataset is None:
            raise HTTPException(status_code=404, detail="Upload a dataset before inserting the helper snippet.")
        path = dataset.path
        extension = extension or dataset.extension

    extension = extension or detect_extension(path)
    return SnippetResponse(path=path, extension=extension, code=build_loader_snippet(path, extension))


@app.get("/examples")
async def examples():
    return {"examples": list_examples()}


@app.get("/examples/{name}", response_model=ExampleResponse)
async def example(name: str):
    try:
        return ExampleResponse(name=name, code=get_example(name))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Unknown example: {name}") from e


@app.post("/session/reset", response_model=RuntimeStatus)
async def reset_session(request: Request):
    """Drop the current session (namespace, files, stuck run) and start a new one."""
    old = current_session(request)
    old.close()
    logger.info(f"♻️ Session {old.id} reset")
    session = start_session(request.app)
    return session.status()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
