"""Scheduled spending reports.

Cron ticks are delivered either over HTTP (``POST /scheduled``) or from the command line, e.g. from a crontab::

    python -m app.workers.scheduler "0 15 * * *"
"""

import argparse
import asyncio

from app.agents.assistant_agent import AssistantAgent
from app.agents.prompts import DATETIME_PLACEHOLDER, REPORT_HEADER, SEPARATOR
from app.core.models import ReportGranularity
from app.core.settings import Settings
from app.core.utils import format_report_date, get_logger
from app.services.telegram_service import TelegramNotifier

logger = get_logger("finance-assistant.scheduler")

SCHEDULED_COMPLETED = "⏰ Scheduled process completed"
SCHEDULED_IGNORED = "⏰ Unknown schedule, nothing to do"


class ReportScheduler:
    """Builds report prompts, asks the assistant and sends the report to the chat."""

    def __init__(self, settings: Settings, assistant: AssistantAgent, notifier: TelegramNotifier) -> None:
        """Initialize the scheduler with its collaborators."""
        self.settings = settings
        self.assistant = assistant
        self.notifier = notifier

    def cron_table(self) -> dict[str, ReportGranularity]:
        """Map each configured cron expression to its report granularity."""
        return {
            self.settings.cron_daily: ReportGranularity.DAY,
            self.settings.cron_weekly: ReportGranularity.WEEK,
            self.settings.cron_monthly: ReportGranularity.MONTH,
        }

    def build_prompt(self, granularity: ReportGranularity) -> str:
        """Substitute the report date into the scheduled prompt template."""
        date_text = format_report_date(granularity, utc_offset_hours=self.settings.report_utc_offset_hours)
        return self.settings.openai_assistant_scheduled_prompt.replace(DATETIME_PLACEHOLDER, date_text)

    async def run_report(self, granularity: ReportGranularity) -> str:
        """Generate one report and send it to the chat."""
        prompt = self.build_prompt(granularity)
        logger.info(f"⏰ Processing {granularity.value} report for prompt {prompt}")
        reply = await self.assistant.ask(prompt)
        header = REPORT_HEADER.format(label=granularity.label)
        await self.notifier.send(f"{header}\n\n{reply}\n{SEPARATOR}")
        logger.info(f"⏰ {granularity.value.capitalize()} report sent successfully")
        return SCHEDULED_COMPLETED

    async def dispatch(self, cron: str) -> str:
        """Run the report registered for a cron expression; unknown expressions do nothing."""
        granularity = self.cron_table().get(cron.strip())
        if granularity is None:
            logger.warning(f"⏰ No report registered for cron '{cron}'")
            return SCHEDULED_IGNORED
        logger.info(f"⏰ {granularity.value.capitalize()} scheduler triggered")
        return await self.run_report(granularity)


async def run_cron(cron: str) -> str:
    """Build the services for a single cron tick, dispatch it and release the clients."""
    from app.api.dependencies import build_services

    services = build_services()
    try:
        async with services.bot:
            return await services.scheduler.dispatch(cron)
    finally:
        await services.aclose()


def main(argv: list[str] | None = None) -> None:
    """Command line entrypoint for crontab-driven reports."""
    parser = argparse.ArgumentParser(description="Send the scheduled spending report for a cron expression.")
    parser.add_argument("cron", help='cron expression of the tick, e.g. "0 15 * * *"')
    args = parser.parse_args(argv)
    logger.info(asyncio.run(run_cron(args.cron)))


if __name__ == "__main__":
    main()
