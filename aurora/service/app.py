"""FastAPI application exposing the README assembly engine."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from ..config import load_config
from ..engine import EngineError, ReadmeEngine
from ..factory import build_engine
from ..generators.base import GenerationCancelledError, GenerationError
from ..locator import RepositoryLocatorError
from ..logging import get_logger
from ..prompting.constants import SECTION_TITLES

logger = get_logger("service")


class RepoDetails(BaseModel):
    owner: str
    repo: str


class StateResponse(BaseModel):
    repoUrl: Optional[str] = None
    repoDetails: Optional[RepoDetails] = None
    readmeContent: str
    logoDataUri: Optional[str] = None
    style: str
    status: Optional[str] = None


class RepositoryRequest(BaseModel):
    repoUrl: str


class SectionBody(BaseModel):
    sectionType: str
    customSectionName: Optional[str] = None
    style: Optional[str] = None


class SectionResponse(BaseModel):
    sectionContent: str
    readmeContent: str


class GenerateAllBody(BaseModel):
    style: Optional[str] = None


class GenerateAllResponse(BaseModel):
    status: str
    completed: List[str]
    failedSection: Optional[str] = None
    error: Optional[str] = None
    readmeContent: str


class LogoResponse(BaseModel):
    logoDataUri: str


class BadgeBody(BaseModel):
    kind: str
    style: Optional[str] = None


class BadgeResponse(BaseModel):
    badgeMarkdown: str
    readmeContent: str


class ImproveBody(BaseModel):
    style: Optional[str] = None


class ImproveResponse(BaseModel):
    improvedContent: str


class ReadmeBody(BaseModel):
    readmeContent: str


class StyleBody(BaseModel):
    style: str


class CancelResponse(BaseModel):
    cancelled: bool


class HealthResponse(BaseModel):
    status: str


def _default_engine() -> ReadmeEngine:
    return build_engine(load_config())


def _state_response(engine: ReadmeEngine) -> StateResponse:
    identity = engine.identity
    return StateResponse(
        repoUrl=engine.repo_url,
        repoDetails=RepoDetails(owner=identity.owner, repo=identity.repo) if identity else None,
        readmeContent=engine.document,
        logoDataUri=engine.logo_data_uri,
        style=engine.style,
        status=engine.status,
    )


def create_app(
    engine_factory: Callable[[], ReadmeEngine] = _default_engine,
) -> FastAPI:
    """Create the FastAPI application serving one README session."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.engine.close()

    app = FastAPI(title="AuroraREADME", version="0.1.0", lifespan=lifespan)
    app.state.engine = engine_factory()

    async def get_engine(request: Request) -> ReadmeEngine:
        return request.app.state.engine

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/state", response_model=StateResponse)
    async def state(engine: ReadmeEngine = Depends(get_engine)) -> StateResponse:
        return _state_response(engine)

    @app.post("/repository", response_model=StateResponse)
    async def set_repository(
        payload: RepositoryRequest, engine: ReadmeEngine = Depends(get_engine)
    ) -> StateResponse:
        engine.set_repository(payload.repoUrl)
        return _state_response(engine)

    @app.post("/sections", response_model=SectionResponse)
    async def generate_section(
        payload: SectionBody, engine: ReadmeEngine = Depends(get_engine)
    ) -> SectionResponse:
        try:
            fragment = await engine.generate_section(
                payload.sectionType,
                custom_section_name=payload.customSectionName,
                style=payload.style,
            )
        except GenerationCancelledError:
            raise
        except GenerationError as exc:
            raise HTTPException(
                status_code=502, detail="Failed to create section. Please try again."
            ) from exc
        return SectionResponse(sectionContent=fragment, readmeContent=engine.document)

    @app.post("/sections/all", response_model=GenerateAllResponse)
    async def generate_all(
        payload: Optional[GenerateAllBody] = None, engine: ReadmeEngine = Depends(get_engine)
    ) -> GenerateAllResponse:
        outcome = await engine.generate_all(style=payload.style if payload else None)
        if outcome.ok:
            status, error = "ok", None
        elif outcome.cancelled:
            status, error = "cancelled", outcome.error
        else:
            title = SECTION_TITLES.get(outcome.failed_section or "", outcome.failed_section)
            status, error = "failed", f"Failed to create {title}"
        return GenerateAllResponse(
            status=status,
            completed=outcome.completed,
            failedSection=outcome.failed_section,
            error=error,
            readmeContent=engine.document,
        )

    @app.post("/logo", response_model=LogoResponse)
    async def generate_logo(engine: ReadmeEngine = Depends(get_engine)) -> LogoResponse:
        try:
            logo = await engine.generate_logo()
        except GenerationCancelledError:
            raise
        except GenerationError as exc:
            raise HTTPException(
                status_code=502, detail="Failed to create logo. Please try again."
            ) from exc
        return LogoResponse(logoDataUri=logo)

    @app.post("/badges", response_model=BadgeResponse)
    async def add_badge(
        payload: BadgeBody, engine: ReadmeEngine = Depends(get_engine)
    ) -> BadgeResponse:
        markdown = engine.add_badge(payload.kind, payload.style)
        return BadgeResponse(badgeMarkdown=markdown, readmeContent=engine.document)

    @app.post("/improve", response_model=ImproveResponse)
    async def improve(
        payload: Optional[ImproveBody] = None, engine: ReadmeEngine = Depends(get_engine)
    ) -> ImproveResponse:
        try:
            improved = await engine.revise_all(style=payload.style if payload else None)
        except GenerationCancelledError:
            raise
        except GenerationError as exc:
            raise HTTPException(
                status_code=502, detail="Failed to improve README. Please try again."
            ) from exc
        return ImproveResponse(improvedContent=improved)

    @app.put("/readme", response_model=StateResponse)
    async def set_readme(
        payload: ReadmeBody, engine: ReadmeEngine = Depends(get_engine)
    ) -> StateResponse:
        engine.set_document(payload.readmeContent)
        return _state_response(engine)

    @app.put("/style", response_model=StateResponse)
    async def set_style(
        payload: StyleBody, engine: ReadmeEngine = Depends(get_engine)
    ) -> StateResponse:
        engine.set_style(payload.style)
        return _state_response(engine)

    @app.get("/readme/preview")
    async def preview(engine: ReadmeEngine = Depends(get_engine)) -> Response:
        return Response(content=engine.compose_for_display(), media_type="text/markdown")

    @app.get("/readme/download")
    async def download(engine: ReadmeEngine = Depends(get_engine)) -> Response:
        return Response(
            content=engine.document,
            media_type="text/markdown",
            headers={"Content-Disposition": 'attachment; filename="README.md"'},
        )

    @app.post("/cancel", response_model=CancelResponse)
    async def cancel(engine: ReadmeEngine = Depends(get_engine)) -> CancelResponse:
        return CancelResponse(cancelled=engine.cancel())

    @app.exception_handler(RepositoryLocatorError)
    async def locator_error_handler(_: Any, exc: RepositoryLocatorError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "detail": "Invalid URL",
                "message": "Please provide a valid GitHub repository URL or owner/repo string.",
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(EngineError)
    async def engine_error_handler(_: Any, exc: EngineError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(GenerationCancelledError)
    async def cancelled_handler(_: Any, exc: GenerationCancelledError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    logger.info("Serving AuroraREADME on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
