"""Main entrypoint and application factory for the Finance Assistant bot.

This module initializes the FastAPI application, configures logging, builds the process-wide clients in the lifespan
handler, maps assistant errors to plain text responses, and exposes the Scalar API reference endpoint. It also
includes the main entrypoint for running the app with Uvicorn.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from scalar_fastapi import get_scalar_api_reference

from app.api.dependencies import build_services
from app.api.routes import router
from app.core.errors import AssistantError
from app.core.settings import get_settings
from app.core.utils import get_logger

DEFAULT_LOG_FILE = "logs/assistant.log"


# --- Logging Setup ---
def setup_logging(log_file: str = DEFAULT_LOG_FILE) -> None:
    """Configure the project logger to also write plain (not colorized) lines to a log file."""
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    logger = get_logger("finance-assistant")
    logger.setLevel(logging.INFO)
    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(file_handler)
    logger.propagate = False


setup_logging()
logger = get_logger("finance-assistant.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the clients once per process and release them on shutdown."""
    services = build_services(get_settings())
    await services.bot.initialize()
    app.state.services = services
    logger.info("Finance assistant started")
    try:
        yield
    finally:
        await services.bot.shutdown()
        await services.aclose()


app = FastAPI(
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    title="Finance Assistant Bot API",
    description="""
    The Finance Assistant Bot turns bank transaction emails and receipt photos into structured records with an LLM,
    stores them for later questions, and reports to a single Telegram chat.

    **Endpoints:**
    - `POST /assistant`: Telegram bot webhook.
    - `POST /scheduled`: Cron trigger for daily, weekly and monthly reports.
    - `POST /email`: Raw MIME email trigger.
    - `GET /health`: Health check endpoint.
    - `GET /scalar`: Interactive Scalar OpenAPI documentation.
    """,
    version="1.0.0",
)
app.include_router(router)


@app.exception_handler(AssistantError)
async def assistant_error_handler(request: Request, exc: AssistantError) -> PlainTextResponse:
    """Return assistant errors as plain text with their status code."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return PlainTextResponse(str(exc), status_code=exc.status_code)


@app.get("/scalar", include_in_schema=False)
async def scalar_docs() -> HTMLResponse:
    """Return Scalar API reference."""
    return get_scalar_api_reference(openapi_url=app.openapi_url, title=app.title)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port, reload=True)
