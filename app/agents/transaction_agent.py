"""TransactionAgent: LLM-based extraction of transaction details.

This module defines the TransactionAgent class, which sends raw email, OCR or user-typed text to a chat completion
endpoint together with a fixed system and user prompt, and decides from the JSON reply whether the input was a
financial transaction. Photos are first turned into text by a vision completion.
"""

import base64
import json
from typing import Any

from app.core.models import (
    ExtractionParseError,
    ExtractionResult,
    ExtractionSuccess,
    NotATransaction,
    TransactionRecord,
)
from app.core.settings import Settings
from app.core.utils import get_logger

MAX_RAW_LOG_LEN = 300
REQUIRED_FIELDS = ("amount", "message")

logger = get_logger("finance-assistant.extractor")


def _truncate(text: str) -> str:
    if len(text) > MAX_RAW_LOG_LEN:
        return text[: MAX_RAW_LOG_LEN - 3] + "..."
    return text


class TransactionAgent:
    """Agent responsible for turning unstructured text into a transaction record."""

    def __init__(self, llm_client: Any, settings: Settings) -> None:
        """Initialize the TransactionAgent with an async OpenAI client and settings."""
        self.llm_client = llm_client
        self.settings = settings

    async def extract(self, payload: str) -> ExtractionResult:
        """Run one completion over the payload and classify the reply.

        Transport errors propagate. An empty or non-JSON reply, or one without an amount and a message, is reported
        as ``ExtractionParseError`` and a ``{"result": "failed"}`` reply as ``NotATransaction``; neither is raised.
        """
        completion = await self.llm_client.chat.completions.create(
            model=self.settings.openai_process_email_model,
            messages=[
                {"role": "system", "content": self.settings.openai_process_email_system_prompt},
                {"role": "user", "content": f"{self.settings.openai_process_email_user_prompt}\n\n{payload}"},
            ],
            store=False,
        )
        content = self._first_content(completion)
        return self.parse_reply(content)

    def parse_reply(self, content: str | None) -> ExtractionResult:
        """Classify a raw completion reply into an extraction result."""
        raw = (content or "").replace("`", "").strip()
        # Fenced replies keep the fence info string on the first line.
        if raw[:4].lower() == "json":
            raw = raw[4:].lstrip()
        if not raw:
            logger.error("🤖 Failed to parse transaction details: empty reply")
            return ExtractionParseError(raw="")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error(f"🤖 Failed to parse transaction details: {exc}; reply={_truncate(raw)!r}")
            return ExtractionParseError(raw=raw)
        if not isinstance(data, dict):
            logger.error(f"🤖 Transaction reply is not a JSON object: {_truncate(raw)!r}")
            return ExtractionParseError(raw=raw)
        if data.get("result") == "failed":
            logger.warning("🤖 Not a transaction")
            return NotATransaction()
        # Amounts sometimes come back as numbers; every field is kept as text.
        fields = {key: str(value) for key, value in data.items() if value is not None and key != "result"}
        missing = [name for name in REQUIRED_FIELDS if not fields.get(name, "").strip()]
        if missing:
            logger.error(f"🤖 Transaction reply is missing {missing}: {_truncate(raw)!r}")
            return ExtractionParseError(raw=raw)
        record = TransactionRecord(**fields)
        logger.info(f"🤖 Processed content: {record.model_dump_json()}")
        return ExtractionSuccess(record)

    async def describe_image(self, image: bytes, mime_type: str = "image/jpeg") -> str:
        """Turn a receipt photo or banking screenshot into plain text."""
        data_url = f"data:{mime_type};base64,{base64.b64encode(image).decode()}"
        completion = await self.llm_client.chat.completions.create(
            model=self.settings.openai_ocr_model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": self.settings.openai_ocr_prompt},
                        {"type": "image_url", "image_url": {"url": data_url}},
                    ],
                },
            ],
            store=False,
        )
        text = self._first_content(completion) or ""
        logger.info(f"🤖 Image described: {_truncate(text)!r}")
        return text

    async def extract_from_image(self, image: bytes, mime_type: str = "image/jpeg") -> ExtractionResult:
        """Describe an image, then extract a transaction from the description."""
        description = await self.describe_image(image, mime_type)
        if not description.strip():
            logger.error("🤖 Image description is empty")
            return ExtractionParseError(raw="")
        return await self.extract(f"Receipt content:\n{description}")

    @staticmethod
    def _first_content(completion: Any) -> str | None:
        if not completion.choices:
            return None
        return completion.choices[0].message.content
