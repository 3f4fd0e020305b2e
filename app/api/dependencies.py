"""Composition root and FastAPI dependencies.

Clients are built once per process by ``build_services`` (called from the application lifespan or the cron
entrypoint) and handed to every component by parameter. Tests pass fakes for the three clients.
"""

from dataclasses import dataclass
from typing import Any

import httpx
from fastapi import Request
from openai import AsyncOpenAI
from telegram import Bot

from app.agents.assistant_agent import AssistantAgent
from app.agents.intent_agent import IntentAgent
from app.agents.transaction_agent import TransactionAgent
from app.core.settings import Settings, get_settings
from app.services.file_service import TransactionSink
from app.services.telegram_service import TelegramNotifier
from app.workers.job_runner import JobPoller
from app.workers.pipeline import TransactionPipeline
from app.workers.scheduler import ReportScheduler


@dataclass
class Services:
    """Every long-lived client and component of the bot."""

    settings: Settings
    llm_client: Any
    bot: Any
    http_client: httpx.AsyncClient
    pipeline: TransactionPipeline
    scheduler: ReportScheduler

    async def aclose(self) -> None:
        """Release the network clients."""
        await self.http_client.aclose()
        close = getattr(self.llm_client, "close", None)
        if close is not None:
            await close()


def create_llm_client(settings: Settings) -> AsyncOpenAI:
    """Create the async OpenAI client, honoring the optional AI gateway."""
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        project=settings.openai_project_id or None,
        base_url=settings.ai_api_base,
    )


def build_services(
    settings: Settings | None = None,
    *,
    llm_client: Any = None,
    bot: Any = None,
    http_client: httpx.AsyncClient | None = None,
) -> Services:
    """Build all components from settings, creating any client that is not supplied."""
    settings = settings or get_settings()
    llm_client = llm_client or create_llm_client(settings)
    bot = bot or Bot(token=settings.telegram_bot_token)
    http_client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(60.0))

    notifier = TelegramNotifier(bot, settings.telegram_chat_id)
    assistant = AssistantAgent(llm_client, settings, JobPoller.from_settings(llm_client, settings))
    pipeline = TransactionPipeline(
        settings=settings,
        extractor=TransactionAgent(llm_client, settings),
        intents=IntentAgent(llm_client, settings),
        assistant=assistant,
        sink=TransactionSink(http_client, settings),
        notifier=notifier,
    )
    scheduler = ReportScheduler(settings, assistant, notifier)
    return Services(
        settings=settings,
        llm_client=llm_client,
        bot=bot,
        http_client=http_client,
        pipeline=pipeline,
        scheduler=scheduler,
    )


def get_services(request: Request) -> Services:
    """Provide the process-wide services built at startup."""
    return request.app.state.services
