"""TelegramNotifier delivers messages to the bot owner's chat."""

from telegram import Bot, ReplyParameters
from telegram.constants import ParseMode

from app.agents.prompts import SEPARATOR, TRANSACTION_HEADER
from app.core.models import TransactionRecord
from app.core.utils import get_logger, normalize

logger = get_logger("finance-assistant.notifier")


def format_transaction(record: TransactionRecord) -> str:
    """Format a transaction record as a chat message."""
    amount = " ".join(part for part in (record.amount, record.currency) if part) or "N/A"
    return (
        f"{TRANSACTION_HEADER}\n\n"
        f"{record.message}\n\n"
        f"*Số tiền:* {amount}\n"
        f"*Từ:* {record.bank_name or 'N/A'}\n"
        f"*Ngày:* {record.datetime or 'N/A'}\n"
        f"{SEPARATOR}"
    )


def format_error(error: object) -> str:
    """Format a processing error as a chat message."""
    return f"Transaction error: {error}"


class TelegramNotifier:
    """Sends normalized MarkdownV2 messages to exactly one configured chat."""

    def __init__(self, bot: Bot, chat_id: str) -> None:
        """Initialize the notifier with a bot client and the owner's chat id."""
        self.bot = bot
        self.chat_id = chat_id

    async def send(self, text: str, reply_to_message_id: int | None = None) -> None:
        """Normalize and send a message to the configured chat."""
        reply_parameters = ReplyParameters(message_id=reply_to_message_id) if reply_to_message_id else None
        await self.bot.send_message(
            chat_id=self.chat_id,
            text=normalize(text),
            parse_mode=ParseMode.MARKDOWN_V2,
            reply_parameters=reply_parameters,
        )
        logger.info(f"Telegram message sent to chat {self.chat_id}")

    async def notify_transaction(self, record: TransactionRecord) -> None:
        """Send a new transaction notification."""
        await self.send(format_transaction(record))

    async def notify_error(self, error: object) -> None:
        """Send a processing error notification."""
        await self.send(format_error(error))

    async def download_photo(self, file_id: str) -> bytes:
        """Download a photo sent to the bot."""
        tg_file = await self.bot.get_file(file_id)
        data = await tg_file.download_as_bytearray()
        logger.info(f"Downloaded photo {file_id} ({len(data)} bytes)")
        return bytes(data)
