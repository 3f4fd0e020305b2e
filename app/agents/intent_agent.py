"""IntentAgent: classifies a chat message into one of the bot's intents with LLM tool calling."""

import json
from dataclasses import dataclass, field
from typing import Any

from app.agents.prompts import INTENT_SYSTEM_PROMPT, INTENT_TOOLS
from app.core.settings import Settings
from app.core.utils import get_logger

logger = get_logger("finance-assistant.intent")

ASK_QUESTION = "ask_question"
PROCESS_IMAGE = "process_image"
RECORD_TRANSACTION = "record_transaction"


@dataclass(frozen=True)
class Intent:
    """The tool chosen by the model, with its parsed arguments."""

    name: str | None
    arguments: dict[str, Any] = field(default_factory=dict)


class IntentAgent:
    """Offers the three intents as tools and reports which one the model selected."""

    def __init__(self, llm_client: Any, settings: Settings) -> None:
        """Initialize the IntentAgent with an async OpenAI client and settings."""
        self.llm_client = llm_client
        self.settings = settings

    async def classify(self, text: str) -> Intent:
        """Return the intent selected for the text; ``Intent(None)`` when the model calls no tool."""
        completion = await self.llm_client.chat.completions.create(
            model=self.settings.openai_intent_model,
            messages=[
                {"role": "system", "content": INTENT_SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
            tools=INTENT_TOOLS,
            store=False,
        )
        message = completion.choices[0].message if completion.choices else None
        tool_calls = getattr(message, "tool_calls", None) or []
        if not tool_calls:
            logger.info("🔫 No intent selected")
            return Intent(None)
        call = tool_calls[0]
        try:
            arguments = json.loads(call.function.arguments or "{}")
        except json.JSONDecodeError:
            logger.warning(f"🔫 Ignoring malformed arguments for {call.function.name}: {call.function.arguments!r}")
            arguments = {}
        if not isinstance(arguments, dict):
            arguments = {}
        logger.info(f"🔫 Intent selected: {call.function.name}")
        return Intent(call.function.name, arguments)
