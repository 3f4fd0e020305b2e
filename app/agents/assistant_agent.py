"""AssistantAgent: questions and scheduled reports answered by a hosted OpenAI assistant.

The assistant searches the vector store the transaction sink feeds, so it can answer questions about past
spending. Each call creates a thread with one user message, waits for the run and returns the first reply.
"""

from typing import Any

from app.core.errors import EmptyInputError, RemoteCallError
from app.core.settings import Settings
from app.core.utils import get_logger
from app.workers.job_runner import JobPoller

logger = get_logger("finance-assistant.assistant")


class AssistantAgent:
    """Runs prompts against the configured assistant."""

    def __init__(self, llm_client: Any, settings: Settings, poller: JobPoller) -> None:
        """Initialize the agent with an async OpenAI client, settings and a run poller."""
        self.llm_client = llm_client
        self.settings = settings
        self.poller = poller

    async def ask(self, prompt: str) -> str:
        """Send a prompt to the assistant and return the text of its first reply."""
        run = await self.llm_client.beta.threads.create_and_run(
            assistant_id=self.settings.openai_assistant_id,
            thread={"messages": [{"role": "user", "content": prompt}]},
        )
        logger.info(f"🔫 Thread created successfully: {run.thread_id}")
        run = await self.poller.wait(run.thread_id, run.id)
        if run.status != "completed":
            detail = getattr(getattr(run, "last_error", None), "message", None) or run.status
            msg = f"Assistant run {run.id} ended with status '{run.status}': {detail}"
            logger.error(f"🔫 {msg}")
            raise RemoteCallError(msg, status_text=run.status)

        page = await self.llm_client.beta.threads.messages.list(run.thread_id, run_id=run.id)
        reply = self._first_text(page.data)
        if not reply:
            msg = f"Assistant run {run.id} produced no reply"
            logger.error(f"🔫 {msg}")
            raise EmptyInputError(msg)
        logger.info(f"🔫 Message processed successfully: {len(reply)} characters")
        return reply

    @staticmethod
    def _first_text(messages: list[Any]) -> str | None:
        for message in messages[:1]:
            for part in message.content:
                text = getattr(part, "text", None)
                if text is not None and text.value:
                    return text.value
        return None
