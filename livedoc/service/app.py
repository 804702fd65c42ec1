"""FastAPI application entrypoint for livedoc service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..config import ConfigError
from ..llm.client import GenerationError
from ..orchestrator import Orchestrator


class AnalyzeRequest(BaseModel):
    path: str
    top_n: Optional[int] = Field(default=None, ge=0)


class AnalyzeResponse(BaseModel):
    root: str
    total_files: int
    successfully_parsed: int
    total_functions: int
    breakdown: Dict[str, int]
    files: List[Dict[str, Any]]
    report: str


class SyncRequest(BaseModel):
    path: str
    dry_run: bool = False


class SyncFunctionResult(BaseModel):
    name: str
    file: str
    status: str


class SyncResponse(BaseModel):
    status: str
    docs_path: str
    selection: str
    results: List[SyncFunctionResult]
    warnings: List[str]
    dry_run: bool
    diff: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing livedoc operations."""

    app = FastAPI(title="LiveDoc Service", version=__version__)

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze_repo(
        payload: AnalyzeRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> AnalyzeResponse:
        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(
            None, lambda: orchestrator.run_analysis(payload.path, top_n=payload.top_n)
        )
        return AnalyzeResponse(
            root=str(outcome.root),
            total_files=outcome.summary.total_files,
            successfully_parsed=outcome.summary.successfully_parsed,
            total_functions=outcome.summary.total_functions,
            breakdown=outcome.breakdown,
            files=[analysis.to_dict() for analysis in outcome.analyses],
            report=outcome.report,
        )

    @app.post("/sync", response_model=SyncResponse)
    async def sync_docs(
        payload: SyncRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> SyncResponse:
        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(
            None, lambda: orchestrator.run_sync(payload.path, dry_run=payload.dry_run)
        )
        return SyncResponse(
            status="ok" if outcome.results else "skipped",
            docs_path=str(outcome.docs_path),
            selection=outcome.selection.state.value,
            results=[
                SyncFunctionResult(name=result.name, file=result.file_path, status=result.status.value)
                for result in outcome.results
            ],
            warnings=outcome.warnings,
            dry_run=outcome.dry_run,
            diff=outcome.diff if outcome.dry_run else None,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(GenerationError)
    async def generation_error_handler(_: Any, exc: GenerationError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
