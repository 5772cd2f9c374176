"""FastAPI application entrypoint for mdxport service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..migrator import ConversionOutcome, Migrator
from ..models import ScanResult


class ScanRequest(BaseModel):
    mdx: str


class ComponentSummary(BaseModel):
    name: str
    usages: int
    has_definition: bool
    category: str
    confidence: str
    placeholder_ids: List[str]


class ScanResponse(BaseModel):
    components: List[ComponentSummary]
    unknown_counts: Dict[str, int]
    content: str


class ConvertRequest(BaseModel):
    mdx: str
    use_ai: bool = True


class ChangeModel(BaseModel):
    type: str
    count: int
    detail: str


class ConvertResponse(BaseModel):
    converted: str
    changes: List[ChangeModel]
    warnings: List[str]
    stats: Dict[str, int]


class HealthResponse(BaseModel):
    status: str


def _default_migrator() -> Migrator:
    return Migrator()


def create_app(
    migrator_factory: Callable[[], Migrator] = _default_migrator,
) -> FastAPI:
    """Create the FastAPI application exposing mdxport operations."""

    app = FastAPI(title="mdxport Service", version="1.0.0")

    async def get_migrator() -> Migrator:
        # Lazy-instantiate per request to keep state predictable.
        return migrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/scan", response_model=ScanResponse)
    async def scan(
        payload: ScanRequest,
        migrator: Migrator = Depends(get_migrator),
    ) -> ScanResponse:
        result: ScanResult = await _in_executor(lambda: migrator.scan_text(payload.mdx))
        return ScanResponse(
            components=[
                ComponentSummary(
                    name=block.name,
                    usages=len(block.usages),
                    has_definition=block.definition is not None,
                    category=block.classification.category,
                    confidence=block.classification.confidence,
                    placeholder_ids=list(block.placeholder_ids),
                )
                for block in result.component_blocks
            ],
            unknown_counts=dict(result.unknown_counts),
            content=result.content,
        )

    @app.post("/convert", response_model=ConvertResponse)
    async def convert(
        payload: ConvertRequest,
        migrator: Migrator = Depends(get_migrator),
    ) -> ConvertResponse:
        outcome: ConversionOutcome = await _in_executor(
            lambda: migrator.convert_text(payload.mdx, use_ai=payload.use_ai)
        )
        return ConvertResponse(
            converted=outcome.content,
            changes=[
                ChangeModel(type=change.type, count=change.count, detail=change.detail)
                for change in outcome.changes
            ],
            warnings=list(outcome.warnings),
            stats=outcome.stats,
        )

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


async def _in_executor(func: Callable[[], Any]) -> Any:
    # Conversion drives its own event loop via asyncio.run, so it must run off the server loop.
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def run_service(
    host: str = "0.0.0.0", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
