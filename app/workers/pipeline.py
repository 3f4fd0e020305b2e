"""Orchestration of the mail and chat triggers.

Each trigger runs as one sequence of awaited remote calls. The only concurrent step is storing and notifying a
confirmed transaction, where both calls are gathered and either failure fails the trigger.
"""

import asyncio

from app.agents.assistant_agent import AssistantAgent
from app.agents.intent_agent import ASK_QUESTION, PROCESS_IMAGE, RECORD_TRANSACTION, IntentAgent
from app.agents.prompts import MISSING_PHOTO_NOTICE, NO_TRANSACTION_NOTICE, UNKNOWN_USER_NOTICE
from app.agents.transaction_agent import TransactionAgent
from app.core.errors import AssistantError, EmptyInputError
from app.core.models import ExtractionResult, ExtractionSuccess, TelegramMessage, TransactionRecord
from app.core.settings import Settings
from app.core.utils import get_logger
from app.services.file_service import TransactionSink
from app.services.mail_service import parse_email
from app.services.telegram_service import TelegramNotifier

logger = get_logger("finance-assistant.pipeline")

REQUEST_COMPLETED = "Request completed"
NOT_A_TRANSACTION = "Not a transaction"
EMAIL_PROCESSED = "📬 Email processed successfully"
TRANSACTION_RECORDED = "Transaction recorded"
UNAUTHORIZED_USER = "Unauthorized user"


class TransactionPipeline:
    """Runs the extraction, storage and notification steps for every trigger."""

    def __init__(
        self,
        settings: Settings,
        extractor: TransactionAgent,
        intents: IntentAgent,
        assistant: AssistantAgent,
        sink: TransactionSink,
        notifier: TelegramNotifier,
    ) -> None:
        """Wire the pipeline to its collaborators."""
        self.settings = settings
        self.extractor = extractor
        self.intents = intents
        self.assistant = assistant
        self.sink = sink
        self.notifier = notifier

    async def store_and_notify(self, record: TransactionRecord) -> None:
        """Store the record and notify the chat concurrently; both calls finish before the first error is raised."""
        results = await asyncio.gather(
            self.sink.store(record),
            self.notifier.notify_transaction(record),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

    async def handle_extraction(self, result: ExtractionResult) -> bool:
        """Store and notify a successful extraction; return whether one happened."""
        if not isinstance(result, ExtractionSuccess):
            return False
        await self.store_and_notify(result.record)
        return True

    async def process_email(self, raw: bytes) -> str:
        """Decode an email, extract a transaction from it and store and notify it."""
        email = parse_email(raw)
        result = await self.extractor.extract(email.to_payload())
        if not await self.handle_extraction(result):
            return NOT_A_TRANSACTION
        return EMAIL_PROCESSED

    def is_owner(self, message: TelegramMessage) -> bool:
        """Return whether the message comes from the single allowed user."""
        return str(message.from_user.id) == str(self.settings.telegram_chat_id)

    async def reject(self, message: TelegramMessage) -> str:
        """Warn the owner's chat about a message from an unknown sender."""
        logger.warning(f"⚠️ Received new assistant request from unknown user: {message.from_user.id}")
        await self.notifier.send(UNKNOWN_USER_NOTICE)
        return UNAUTHORIZED_USER

    async def handle_message(self, message: TelegramMessage) -> str:
        """Route an authorized chat message to the OCR path or to the intent selected by the model."""
        try:
            if not message.text and message.photo:
                return await self.process_photo(message)
            if message.text:
                return await self.dispatch_text(message)
        except EmptyInputError:
            raise
        except AssistantError as exc:
            await self.notifier.notify_error(exc)
            raise
        return REQUEST_COMPLETED

    async def dispatch_text(self, message: TelegramMessage) -> str:
        """Classify a text message and run the selected intent."""
        text = message.text or ""
        logger.info(f"🔫 Received new assistant request: {text}")
        intent = await self.intents.classify(text)
        if intent.name == ASK_QUESTION:
            return await self.answer_question(message, intent.arguments.get("question") or text)
        if intent.name == PROCESS_IMAGE:
            return await self.process_photo(message)
        if intent.name == RECORD_TRANSACTION:
            return await self.record_transaction(message, intent.arguments.get("description") or text)
        return REQUEST_COMPLETED

    async def answer_question(self, message: TelegramMessage, question: str) -> str:
        """Answer a question about stored transactions in reply to the user's message."""
        reply = await self.assistant.ask(question)
        await self.notifier.send(reply, reply_to_message_id=message.message_id)
        logger.info("🔫 Telegram response sent successfully")
        return REQUEST_COMPLETED

    async def process_photo(self, message: TelegramMessage) -> str:
        """Read the photo of the message, or of the message it replies to, and record its transaction."""
        photo = message.largest_photo()
        if photo is None and message.reply_to_message is not None:
            photo = message.reply_to_message.largest_photo()
        if photo is None:
            await self.notifier.send(MISSING_PHOTO_NOTICE, reply_to_message_id=message.message_id)
            return REQUEST_COMPLETED
        image = await self.notifier.download_photo(photo.file_id)
        result = await self.extractor.extract_from_image(image)
        return await self._finish_chat_extraction(message, result)

    async def record_transaction(self, message: TelegramMessage, description: str) -> str:
        """Record a transaction typed by the user."""
        result = await self.extractor.extract(description)
        return await self._finish_chat_extraction(message, result)

    async def _finish_chat_extraction(self, message: TelegramMessage, result: ExtractionResult) -> str:
        if await self.handle_extraction(result):
            return TRANSACTION_RECORDED
        await self.notifier.send(NO_TRANSACTION_NOTICE, reply_to_message_id=message.message_id)
        return NOT_A_TRANSACTION
