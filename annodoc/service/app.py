"""FastAPI application entrypoint for annodoc service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError
from ..orchestrator import Orchestrator
from ..render import RunSummary


class GenerateRequest(BaseModel):
    path: str
    output_dir: Optional[str] = None
    patterns: Optional[List[str]] = None
    dry_run: bool = False


class ReportRequest(BaseModel):
    results_path: str
    root: Optional[str] = None
    output_dir: Optional[str] = None
    dry_run: bool = False


class RunResponse(BaseModel):
    status: str
    output_dir: str
    suites: int
    tests: int
    written: List[str] = []
    skipped: List[str] = []
    failed: List[str] = []
    dry_run: bool = False
    documents: Optional[Dict[str, str]] = None


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def _to_response(summary: RunSummary) -> RunResponse:
    if summary.failed:
        status = "partial"
    elif summary.suites == 0:
        status = "empty"
    else:
        status = "ok"
    return RunResponse(
        status=status,
        output_dir=str(summary.output_dir),
        suites=summary.suites,
        tests=summary.tests,
        written=[str(path) for path in summary.written],
        skipped=list(summary.skipped),
        failed=list(summary.failed),
        dry_run=summary.dry_run,
        documents=dict(summary.documents) if summary.dry_run else None,
    )


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing annodoc operations."""

    app = FastAPI(title="annodoc Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Lazy-instantiate per request to keep state predictable.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/generate", response_model=RunResponse)
    async def generate(
        payload: GenerateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> RunResponse:
        def _run_generate() -> RunSummary:
            return orchestrator.run_generate(
                payload.path,
                output_dir=payload.output_dir,
                patterns=payload.patterns,
                dry_run=payload.dry_run,
            )

        loop = asyncio.get_running_loop()
        summary = await loop.run_in_executor(None, _run_generate)
        return _to_response(summary)

    @app.post("/report", response_model=RunResponse)
    async def report(
        payload: ReportRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> RunResponse:
        def _run_report() -> RunSummary:
            return orchestrator.run_report(
                payload.results_path,
                root=payload.root,
                output_dir=payload.output_dir,
                dry_run=payload.dry_run,
            )

        loop = asyncio.get_running_loop()
        summary = await loop.run_in_executor(None, _run_report)
        return _to_response(summary)

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
