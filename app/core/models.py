"""Pydantic models for the Finance Assistant bot.

This module defines the transaction record extracted by the LLM, the tagged extraction result returned by the
extractor, the subset of the Telegram update payload the webhook consumes, and the report granularities.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TransactionRecord(BaseModel):
    """Structured transaction details extracted from an email, a photo or a typed description."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    result: Literal["ok", "failed"] = "ok"
    datetime: str = ""
    message: str = ""
    amount: str = ""
    currency: str = ""
    bank_name: str = ""
    plain_data: str = ""


@dataclass(frozen=True)
class ExtractionSuccess:
    """The input was a transaction."""

    record: TransactionRecord

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class NotATransaction:
    """The model answered that the input is not a transaction."""

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class ExtractionParseError:
    """The model reply was empty or not a JSON object."""

    raw: str

    def __bool__(self) -> bool:
        return False


ExtractionResult = ExtractionSuccess | NotATransaction | ExtractionParseError


class ReportGranularity(str, Enum):
    """Granularity of a scheduled report."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @property
    def label(self) -> str:
        """Vietnamese label used in report prompts and headers."""
        return {"hour": "giờ", "day": "ngày", "week": "tuần", "month": "tháng"}[self.value]


class TelegramUser(BaseModel):
    """Sender of a Telegram message."""

    model_config = ConfigDict(extra="ignore")

    id: int
    first_name: str | None = None
    username: str | None = None


class TelegramChat(BaseModel):
    """Chat a Telegram message belongs to."""

    model_config = ConfigDict(extra="ignore")

    id: int


class TelegramPhotoSize(BaseModel):
    """One resolution of a photo attached to a Telegram message."""

    model_config = ConfigDict(extra="ignore")

    file_id: str
    width: int = 0
    height: int = 0
    file_size: int | None = None


class TelegramMessage(BaseModel):
    """Inbound Telegram message as delivered by the bot webhook."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    message_id: int
    from_user: TelegramUser = Field(alias="from")
    chat: TelegramChat | None = None
    text: str | None = None
    caption: str | None = None
    photo: list[TelegramPhotoSize] | None = None
    reply_to_message: "TelegramMessage | None" = None

    def largest_photo(self) -> TelegramPhotoSize | None:
        """Return the highest resolution photo attached to this message, if any."""
        if not self.photo:
            return None
        return max(self.photo, key=lambda size: size.width * size.height)


class TelegramUpdate(BaseModel):
    """Telegram webhook update; only new messages are handled."""

    model_config = ConfigDict(extra="ignore")

    update_id: int | None = None
    message: TelegramMessage | None = None


class ScheduledTrigger(BaseModel):
    """Body of a cron tick delivered over HTTP."""

    cron: str


TelegramMessage.model_rebuild()
