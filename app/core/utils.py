"""Shared utility functions for the Finance Assistant bot."""

import logging
import re
from datetime import UTC, datetime, timedelta, timezone

import colorlog

from app.core.models import ReportGranularity

ROOT_LOGGER_NAME = "finance-assistant"

# Characters reserved by Telegram MarkdownV2; "*" is left alone so bold labels keep working.
MARKDOWN_RESERVED_RE = re.compile(r"[_\[\]~`>#+\-=|{}.!]")
CITATION_MARKER_RE = re.compile(r"【\d+:\d+†source】")


def get_logger(name: str) -> logging.Logger:
    """Get a project logger; handlers live on the project root logger and children propagate to it."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    root.propagate = False
    return logging.getLogger(name)


def normalize(text: str) -> str:
    """Escape MarkdownV2 reserved characters and strip assistant citation markers."""
    escaped = MARKDOWN_RESERVED_RE.sub(lambda match: "\\" + match.group(0), text)
    return CITATION_MARKER_RE.sub("", escaped)


def utcnow_iso() -> str:
    """Get the current UTC time as an ISO8601 string."""
    return datetime.now(UTC).isoformat()


def _vi_date(value: datetime) -> str:
    return f"{value.day}/{value.month}/{value.year}"


def format_report_date(
    granularity: ReportGranularity | str | None = None,
    now: datetime | None = None,
    utc_offset_hours: int = 7,
) -> str:
    """Return the date expression substituted into a scheduled report prompt.

    Dates use the Vietnamese day/month/year order in a fixed UTC offset. The week range runs from the Monday to
    the most recent Sunday, which is today when called on a Sunday. A naive ``now`` is read as UTC.
    """
    tz = timezone(timedelta(hours=utc_offset_hours))
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    current = now.astimezone(tz)
    clock = current.strftime("%H:%M:%S")
    if granularity is None:
        return f"{_vi_date(current)} lúc {clock}"
    granularity = ReportGranularity(granularity)
    if granularity is ReportGranularity.HOUR:
        return clock
    if granularity is ReportGranularity.DAY:
        return _vi_date(current)
    if granularity is ReportGranularity.WEEK:
        sunday = current - timedelta(days=(current.weekday() + 1) % 7)
        monday = sunday - timedelta(days=6)
        return f" từ {_vi_date(monday)} đến {_vi_date(sunday)}"
    return f"{current.month}/{current.year}"
