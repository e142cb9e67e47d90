"""Editor gateway FastAPI application."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Any, Callable

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ValidationError

from editor_gateway.api.limits import BodySizeLimitMiddleware
from editor_gateway.api.rendering import (
    render_file_list,
    render_message,
    render_pull_requests,
)
from editor_gateway.api.schemas import (
    CommitRequest,
    CreatePullRequestRequest,
    MergePullRequestRequest,
    UploadImageRequest,
)
from editor_gateway.auth import ResolvedToken, resolve_token
from editor_gateway.config import Settings, load_settings
from editor_gateway.models.results import WorkflowResult
from editor_gateway.providers.scm.errors import (
    ContentStoreError,
    NotFoundError,
    UnauthenticatedError,
)
from editor_gateway.workflows import (
    CommitWorkflow,
    ImageProxy,
    MergeWorkflow,
    PullRequestWorkflow,
    RepositoryBrowser,
    SessionWorkflow,
    StoreFactory,
    UploadWorkflow,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Gateway:
    settings: Settings
    session: SessionWorkflow
    commits: CommitWorkflow
    uploads: UploadWorkflow
    pull_requests: PullRequestWorkflow
    merges: MergeWorkflow
    images: ImageProxy
    browser: RepositoryBrowser

    @classmethod
    def build(
        cls,
        settings: Settings,
        store_factory: StoreFactory | None = None,
        clock: Callable[[], float] | None = None,
    ) -> "Gateway":
        kwargs: dict[str, Any] = {"store_factory": store_factory}
        if clock is not None:
            kwargs["clock"] = clock
        return cls(
            settings=settings,
            session=SessionWorkflow(settings, **kwargs),
            commits=CommitWorkflow(settings, **kwargs),
            uploads=UploadWorkflow(settings, **kwargs),
            pull_requests=PullRequestWorkflow(settings, **kwargs),
            merges=MergeWorkflow(settings, **kwargs),
            images=ImageProxy(settings, **kwargs),
            browser=RepositoryBrowser(settings, **kwargs),
        )


def _gateway(request: Request) -> Gateway:
    return request.app.state.gateway


async def _read_payload(request: Request) -> dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}
    return {}


def _resolve(request: Request, payload: dict[str, Any] | None = None) -> ResolvedToken | None:
    return resolve_token(_gateway(request).settings, payload, request.query_params)


def _parse(model: type[BaseModel], payload: dict[str, Any]) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ValueError(f"Invalid request field {field}: {first.get('msg')}") from exc


async def _envelope(func: Callable[..., WorkflowResult], *args: Any) -> dict[str, Any]:
    # Mutating endpoints always answer 200; failures travel in the body.
    try:
        result = await asyncio.to_thread(func, *args)
    except Exception as exc:
        logger.exception("Workflow %s raised", getattr(func, "__name__", func))
        return {"error": str(exc)}
    return result.to_payload()


def _register_routes(app: FastAPI) -> None:
    @app.get("/favicon.ico")
    async def favicon() -> Response:
        return Response(status_code=204)

    @app.post("/auth")
    async def auth(request: Request) -> dict[str, Any]:
        payload = await _read_payload(request)
        token = _resolve(request, payload)
        return _gateway(request).session.check_connection(token).to_payload()

    @app.post("/test-token")
    async def test_token(request: Request) -> dict[str, Any]:
        payload = await _read_payload(request)
        token = _resolve(request, payload)
        return await _envelope(_gateway(request).session.test_token, token)

    @app.get("/og-image.png")
    async def og_image(request: Request) -> Response:
        token = _resolve(request)
        name = request.query_params.get("name")
        try:
            image = await asyncio.to_thread(_gateway(request).images.fetch_image, token, name)
        except UnauthenticatedError as exc:
            return PlainTextResponse(str(exc), status_code=401)
        except NotFoundError:
            return PlainTextResponse("Image not found", status_code=404)
        except Exception as exc:
            logger.exception("Image proxy failed for %s", name)
            return PlainTextResponse(str(exc), status_code=500)
        return Response(content=image.content, media_type=image.media_type, headers=image.headers)

    @app.post("/upload-image")
    async def upload_image(request: Request) -> dict[str, Any]:
        payload = await _read_payload(request)
        token = _resolve(request, payload)
        try:
            data = _parse(UploadImageRequest, payload)
        except ValueError as exc:
            return WorkflowResult.fail(str(exc)).to_payload()
        return await _envelope(
            _gateway(request).uploads.upload, token, data.filename, data.content
        )

    @app.post("/commit")
    async def commit(request: Request) -> dict[str, Any]:
        payload = await _read_payload(request)
        token = _resolve(request, payload)
        try:
            data = _parse(CommitRequest, payload)
        except ValueError as exc:
            return WorkflowResult.fail(str(exc)).to_payload()
        return await _envelope(
            _gateway(request).commits.commit, token, data.file_path, data.content, data.sha
        )

    @app.post("/create-pr")
    async def create_pr(request: Request) -> dict[str, Any]:
        payload = await _read_payload(request)
        token = _resolve(request, payload)
        try:
            data = _parse(CreatePullRequestRequest, payload)
        except ValueError as exc:
            return WorkflowResult.fail(str(exc)).to_payload()
        return await _envelope(
            _gateway(request).pull_requests.create,
            token,
            data.file_path,
            data.content,
            data.title,
            data.body,
        )

    @app.post("/merge-pr")
    async def merge_pr(request: Request) -> dict[str, Any]:
        payload = await _read_payload(request)
        token = _resolve(request, payload)
        try:
            data = _parse(MergePullRequestRequest, payload)
        except ValueError as exc:
            return WorkflowResult.fail(str(exc)).to_payload()
        return await _envelope(_gateway(request).merges.merge, token, data.pr_number)

    @app.get("/files", response_class=HTMLResponse)
    async def list_files(request: Request) -> str:
        token = _resolve(request)
        try:
            entries = await asyncio.to_thread(_gateway(request).browser.list_files, token)
        except UnauthenticatedError:
            return render_message("Set GITHUB_TOKEN env var")
        except ContentStoreError as exc:
            return render_message(f"Error: {exc.status or exc.message}")
        return render_file_list(entries)

    @app.get("/prs", response_class=HTMLResponse)
    async def list_prs(request: Request) -> str:
        token = _resolve(request)
        try:
            pulls = await asyncio.to_thread(_gateway(request).browser.list_pull_requests, token)
        except UnauthenticatedError:
            return render_message("Set GITHUB_TOKEN env var")
        except ContentStoreError as exc:
            return render_message(f"Error: {exc.message}")
        return render_pull_requests(pulls)

    @app.get("/file/{file_path:path}")
    async def load_file(request: Request, file_path: str) -> dict[str, Any]:
        token = _resolve(request)
        return await asyncio.to_thread(_gateway(request).browser.load_file, token, file_path)


def create_app(
    settings: Settings | None = None,
    store_factory: StoreFactory | None = None,
    clock: Callable[[], float] | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="editor-gateway")
    app.state.gateway = Gateway.build(settings, store_factory=store_factory, clock=clock)

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_routes(app)

    if settings.static_dir and Path(settings.static_dir).is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
    uvicorn.run(
        "editor_gateway.api.main:app",
        host="0.0.0.0",
        port=app.state.gateway.settings.port,
    )
