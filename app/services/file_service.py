"""TransactionSink stores transaction records in the AI provider's file store and vector collection.

Uploads go through the plain HTTP API so the record can be sent from memory as a named file without touching disk.
"""

import json

import httpx

from app.core.errors import RemoteCallError
from app.core.models import TransactionRecord
from app.core.settings import Settings
from app.core.utils import get_logger, utcnow_iso

logger = get_logger("finance-assistant.sink")


class TransactionSink:
    """Service that uploads a record as a file and attaches it to the assistant's vector store."""

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        """Initialize the sink with a shared async HTTP client and settings."""
        self.http = http_client
        self.settings = settings
        self.base_url = settings.ai_api_base

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.settings.openai_api_key}"}
        if self.settings.openai_project_id:
            headers["OpenAI-Project"] = self.settings.openai_project_id
        headers.update(extra)
        return headers

    def file_name(self) -> str:
        """Return a unique file name for a new transaction file."""
        return f"{self.settings.transaction_file_prefix}_transaction_{utcnow_iso()}.txt"

    async def store(self, record: TransactionRecord) -> str:
        """Upload the record and attach it to the vector store; return the uploaded file id.

        If attaching fails, the uploaded file is deleted before the error is raised again.
        """
        name = self.file_name()
        content = json.dumps(record.model_dump(), indent=2, ensure_ascii=False).encode("utf-8")
        file_id = await self.upload(name, content)
        try:
            await self.attach(file_id)
        except RemoteCallError:
            await self.delete(file_id)
            raise
        logger.info(f"🤖 Add {name} to vector store successfully")
        return file_id

    async def upload(self, name: str, content: bytes) -> str:
        """Upload a file for assistants and return its id."""
        response = await self.http.post(
            f"{self.base_url}/files",
            headers=self._headers(),
            data={"purpose": "assistants"},
            files={"file": (name, content, "application/json")},
        )
        if not response.is_success:
            msg = f"Upload transaction file error: {response.reason_phrase}"
            logger.error(msg)
            raise RemoteCallError(msg, status_text=response.reason_phrase)
        logger.info(f"🤖 Upload {name} successfully")
        return response.json()["id"]

    async def attach(self, file_id: str) -> None:
        """Attach an uploaded file to the configured vector store."""
        response = await self.http.post(
            f"{self.base_url}/vector_stores/{self.settings.openai_assistant_vectorstore_id}/files",
            headers=self._headers(**{"OpenAI-Beta": "assistants=v2"}),
            json={"file_id": file_id},
        )
        if not response.is_success:
            msg = f"Error adding file to vector store: {response.reason_phrase}"
            logger.error(msg)
            raise RemoteCallError(msg, status_text=response.reason_phrase)

    async def delete(self, file_id: str) -> None:
        """Delete an uploaded file; failures are logged and not raised."""
        try:
            response = await self.http.delete(f"{self.base_url}/files/{file_id}", headers=self._headers())
        except httpx.HTTPError:
            logger.exception(f"Could not delete orphaned file {file_id}")
            return
        if not response.is_success:
            logger.error(f"Could not delete orphaned file {file_id}: {response.reason_phrase}")
            return
        logger.warning(f"Deleted orphaned file {file_id} after vector store attach failed")
