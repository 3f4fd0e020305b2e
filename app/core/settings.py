"""Configuration and environment settings for the Finance Assistant bot."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.agents.prompts import (
    OCR_PROMPT,
    PROCESS_EMAIL_SYSTEM_PROMPT,
    PROCESS_EMAIL_USER_PROMPT,
    SCHEDULED_PROMPT,
)

DEFAULT_AI_API_BASE = "https://api.openai.com/v1"


class Settings(BaseSettings):
    """Application settings for the Finance Assistant bot."""

    telegram_chat_id: str
    telegram_bot_token: str
    telegram_bot_secret_token: str

    # Optional AI gateway, e.g. https://gateway.ai.cloudflare.com/v1/{account_id}/{gateway_id}/openai
    ai_api_gateway: str = ""

    openai_project_id: str
    openai_api_key: str

    openai_process_email_system_prompt: str = PROCESS_EMAIL_SYSTEM_PROMPT
    openai_process_email_user_prompt: str = PROCESS_EMAIL_USER_PROMPT
    openai_process_email_model: str = "gpt-4o-mini"
    openai_ocr_model: str = "gpt-4o-mini"
    openai_ocr_prompt: str = OCR_PROMPT
    openai_intent_model: str = "gpt-4o-mini"

    openai_assistant_vectorstore_id: str
    openai_assistant_id: str
    openai_assistant_scheduled_prompt: str = SCHEDULED_PROMPT

    poll_interval: float = 0.5
    poll_max_attempts: int = 240
    poll_timeout: float = 120.0

    report_utc_offset_hours: int = 7
    cron_daily: str = "0 15 * * *"
    cron_weekly: str = "58 16 * * 1"
    cron_monthly: str = "0 15 1 * *"

    transaction_file_prefix: str = "ArgusChiTieu"
    server_host: str = "127.0.0.1"
    server_port: int = 8000

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def ai_api_base(self) -> str:
        """Return the AI API base URL, preferring the configured gateway."""
        return (self.ai_api_gateway or DEFAULT_AI_API_BASE).rstrip("/")


def get_settings() -> "Settings":
    """Return an instance of the application settings."""
    return Settings()
