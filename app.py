"""
Web application: the score API and the page that drives it.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Iterator, Optional

import uvicorn
from fastapi import Depends, FastAPI, Form, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from config import Settings, get_settings
from errors import INVALID_BODY_MESSAGE, InvalidInput, MissingCredential, ScoreError
from llm_client import LLMClient
from models import EvaluationResult, ErrorResponse, ScoreRequest
from presentation import ScoreApiClient, ScoreView
from scoring.scorer import score_subject
from tracing import create_tracer

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_llm_client(settings: Settings = Depends(get_settings)) -> Iterator[LLMClient]:
    client = LLMClient(settings)
    try:
        yield client
    finally:
        client.close()


def get_tracer(request: Request):
    return request.app.state.tracer


async def get_score_api_client(
    request: Request, settings: Settings = Depends(get_settings)
) -> AsyncIterator[ScoreApiClient]:
    api = ScoreApiClient(settings.api_base_url or str(request.base_url))
    try:
        yield api
    finally:
        await api.aclose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI startup/shutdown"""
    logger.info("Ethical Product Scorer started")
    yield
    app.state.tracer.flush()
    logger.info("Ethical Product Scorer shutting down")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    app = FastAPI(title="Ethical Product Scorer", lifespan=lifespan)
    app.state.tracer = create_tracer(settings)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.exception_handler(ScoreError)
    async def score_error_handler(request: Request, exc: ScoreError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.post(
        "/api/score",
        response_model=EvaluationResult,
        response_model_by_alias=True,
        responses={
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
            502: {"model": ErrorResponse},
        },
    )
    async def score(
        request: Request,
        settings: Settings = Depends(get_settings),
        client: LLMClient = Depends(get_llm_client),
        tracer=Depends(get_tracer),
    ):
        """Rate one product or company. Body: {"productName": "..."}."""
        # Credential first, before the body is even read
        if not settings.has_credential:
            logger.error("OpenRouter API key not found.")
            raise MissingCredential()

        try:
            body = await request.json()
        except ValueError as e:
            logger.error("Error parsing request body: %s", e)
            raise InvalidInput(INVALID_BODY_MESSAGE) from e

        if not isinstance(body, dict):
            raise InvalidInput(INVALID_BODY_MESSAGE)

        try:
            score_request = ScoreRequest.model_validate(body)
        except ValidationError as e:
            raise InvalidInput() from e

        return await run_in_threadpool(
            score_subject, score_request.product_name, settings, client, tracer
        )

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request):
        return templates.TemplateResponse(request, "index.html", {"view": ScoreView()})

    @app.post("/", response_class=HTMLResponse)
    async def submit(
        request: Request,
        product_name: str = Form("", alias="productName"),
        api: ScoreApiClient = Depends(get_score_api_client),
    ):
        view = ScoreView(product_input=product_name)
        await view.submit(api)
        return templates.TemplateResponse(request, "index.html", {"view": view})

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
