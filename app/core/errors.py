"""Error types raised by the Finance Assistant bot.

Each error maps to one HTTP status in the API layer, so a failed trigger surfaces as a plain text
response instead of a stack trace.
"""


class AssistantError(Exception):
    """Base class for all errors raised by the assistant."""

    status_code = 500


class EmptyInputError(AssistantError):
    """An input that must carry content was empty (email body, assistant reply)."""

    status_code = 422


class RemoteCallError(AssistantError):
    """A remote API answered with a non-success status."""

    status_code = 502

    def __init__(self, message: str, status_text: str = "") -> None:
        """Keep the remote status text next to the message."""
        super().__init__(message)
        self.status_text = status_text


class JobTimeoutError(AssistantError):
    """An assistant run did not finish within the configured poll bounds."""

    status_code = 504

    def __init__(self, thread_id: str, run_id: str, attempts: int, elapsed: float) -> None:
        """Record which run timed out and how long it was polled."""
        super().__init__(f"Run {run_id} on thread {thread_id} still pending after {attempts} polls in {elapsed:.1f}s")
        self.thread_id = thread_id
        self.run_id = run_id
        self.attempts = attempts
        self.elapsed = elapsed
