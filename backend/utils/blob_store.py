# backend/utils/blob_store.py
import httpx
from fastapi import Request
import logging
from typing import List, Optional
from urllib.parse import quote

from config import Settings
from utils.errors import IngestError, UpstreamError

logger = logging.getLogger(__name__)


def _error_text(response: httpx.Response) -> str:
    # Supabase Storage answers {"statusCode", "error", "message"}
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or response.text
    return response.text


class BlobStore:
    """Thin client for the Supabase Storage REST API."""

    def __init__(self, supabase_url: str, api_key: str, public_base: str,
                 timeout: float = 10.0, transport: Optional[httpx.BaseTransport] = None):
        self.public_base = public_base.rstrip("/")
        self._client = httpx.Client(
            base_url=f"{supabase_url.rstrip('/')}/storage/v1",
            headers={"Authorization": f"Bearer {api_key}", "apikey": api_key},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> "BlobStore":
        return cls(
            settings.SUPABASE_URL,
            settings.SUPABASE_KEY,
            settings.storage_public_base,
            timeout=settings.UPSTREAM_TIMEOUT,
            transport=transport,
        )

    def public_url(self, bucket: str, key: str) -> str:
        return f"{self.public_base}/{bucket}/{quote(key)}"

    def upload(self, bucket: str, key: str, content: bytes, content_type: str) -> str:
        """Store one object and return its public URL."""
        try:
            response = self._client.post(
                f"/object/{bucket}/{quote(key)}",
                content=content,
                headers={"Content-Type": content_type, "x-upsert": "false"},
            )
        except httpx.RequestError as e:
            logger.error(f"Storage upload of {key} failed: {e}")
            raise IngestError(f"Error uploading file to storage: {e}") from e

        if response.status_code >= 400:
            message = _error_text(response)
            logger.error(f"Storage rejected {key}: {response.status_code} {message}")
            raise IngestError(f"Error uploading file to storage: {message}")

        return self.public_url(bucket, key)

    def remove(self, bucket: str, keys: List[str]) -> None:
        if not keys:
            return
        try:
            response = self._client.request("DELETE", f"/object/{bucket}", json={"prefixes": keys})
        except httpx.RequestError as e:
            raise UpstreamError(f"Error removing files from storage: {e}") from e
        if response.status_code >= 400:
            raise UpstreamError(f"Error removing files from storage: {_error_text(response)}")

    def close(self) -> None:
        self._client.close()


def get_blob_store(request: Request) -> BlobStore:
    # Built once by the application lifespan in main.py
    return request.app.state.blob_store
