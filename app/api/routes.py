"""FastAPI endpoints for the Finance Assistant bot.

This module defines the Telegram webhook, the cron and mail triggers and the health check. Every trigger is
authenticated with the bot's webhook secret and answers with a plain text acknowledgment; chat messages are sent as
side effects.
"""

import secrets

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from app.api.dependencies import Services, get_services
from app.core.models import ScheduledTrigger, TelegramUpdate
from app.core.utils import get_logger

router = APIRouter()
logger = get_logger("finance-assistant.api")

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"
TEXT_EXAMPLE = {"text/plain": {"example": "Request completed"}}


def _unauthorized() -> PlainTextResponse:
    logger.error("Authentication failed. You are not welcome here")
    return PlainTextResponse("Unauthorized", status_code=401)


def _is_authenticated(services: Services, token: str | None) -> bool:
    expected = services.settings.telegram_bot_secret_token
    return token is not None and secrets.compare_digest(token.encode(), expected.encode())


@router.post(
    "/assistant",
    response_class=PlainTextResponse,
    summary="Telegram bot webhook",
    description=(
        "Receives Telegram updates for the bot.\n\n"
        f"**Header:** `{SECRET_HEADER}` must match the configured webhook secret.\n\n"
        "Messages from anyone but the owner are rejected. A photo without text is read as a receipt; a text message "
        "is routed to a question, a photo or a manual transaction by the model."
    ),
    responses={
        200: {"description": "Update handled.", "content": TEXT_EXAMPLE},
        401: {"description": "Missing or wrong webhook secret."},
    },
)
async def assistant_webhook(
    request: Request,
    secret_token: str | None = Header(default=None, alias=SECRET_HEADER),
    services: Services = Depends(get_services),
) -> PlainTextResponse:
    """Authenticate, authorize and dispatch one Telegram update."""
    if not _is_authenticated(services, secret_token):
        return _unauthorized()
    try:
        update = TelegramUpdate.model_validate(await request.json())
    except (ValueError, ValidationError):
        logger.warning("Ignoring malformed Telegram update")
        return PlainTextResponse("Ignored")
    message = update.message
    if message is None:
        return PlainTextResponse("Ignored")

    pipeline = services.pipeline
    if not pipeline.is_owner(message):
        return PlainTextResponse(await pipeline.reject(message))
    return PlainTextResponse(await pipeline.handle_message(message))


@router.post(
    "/scheduled",
    response_class=PlainTextResponse,
    summary="Cron trigger for scheduled reports",
    description=(
        'Body: `{"cron": "<expression>"}`. The daily, weekly and monthly cron expressions from the settings each '
        "send their report; any other expression is ignored."
    ),
    responses={401: {"description": "Missing or wrong webhook secret."}},
)
async def scheduled(
    request: Request,
    secret_token: str | None = Header(default=None, alias=SECRET_HEADER),
    services: Services = Depends(get_services),
) -> PlainTextResponse:
    """Run the report registered for a cron tick."""
    if not _is_authenticated(services, secret_token):
        return _unauthorized()
    try:
        trigger = ScheduledTrigger.model_validate(await request.json())
    except (ValueError, ValidationError):
        return PlainTextResponse("Invalid schedule trigger", status_code=422)
    return PlainTextResponse(await services.scheduler.dispatch(trigger.cron))


@router.post(
    "/email",
    response_class=PlainTextResponse,
    summary="Mail trigger",
    description="Body: the raw MIME message of a forwarded email, e.g. a bank transaction alert.",
    responses={
        401: {"description": "Missing or wrong webhook secret."},
        422: {"description": "The email has no content."},
        502: {"description": "Storing the transaction failed."},
    },
)
async def email(
    request: Request,
    secret_token: str | None = Header(default=None, alias=SECRET_HEADER),
    services: Services = Depends(get_services),
) -> PlainTextResponse:
    """Extract, store and notify the transaction in a forwarded email."""
    if not _is_authenticated(services, secret_token):
        return _unauthorized()
    raw = await request.body()
    return PlainTextResponse(await services.pipeline.process_email(raw))


@router.get(
    "/health",
    summary="Health check",
    description="Simple health check endpoint. Returns status ok.",
    response_description="Status ok.",
    responses={200: {"description": "API is healthy.", "content": {"application/json": {"example": {"status": "ok"}}}}},
)
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
