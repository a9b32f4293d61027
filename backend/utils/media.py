# backend/utils/media.py
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from utils.blob_store import BlobStore
from utils.errors import ApiError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class StoredImage:
    key: str
    url: str


@dataclass
class Attachment:
    """An uploaded file already read into memory."""
    filename: str
    content: bytes
    content_type: Optional[str] = None


@dataclass
class UploadOutcome:
    filename: str
    image: Optional[StoredImage] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.image is not None


@dataclass
class BatchUpload:
    outcomes: List[UploadOutcome] = field(default_factory=list)

    @property
    def images(self) -> List[StoredImage]:
        return [o.image for o in self.outcomes if o.ok]

    @property
    def urls(self) -> List[str]:
        return [img.url for img in self.images]

    @property
    def failures(self) -> List[UploadOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def status(self) -> str:
        if not self.outcomes:
            return "empty"
        failed = len(self.failures)
        if failed == 0:
            return "complete"
        if failed == len(self.outcomes):
            return "failed"
        return "partial"


def from_upload(upload) -> Attachment:
    """Read a FastAPI UploadFile fully into memory."""
    try:
        content = upload.file.read()
    finally:
        upload.file.close()
    return Attachment(
        filename=upload.filename or "upload",
        content=content,
        content_type=upload.content_type,
    )


def storage_key(original_name: str) -> str:
    # <millisecond-timestamp>_<originalName>
    return f"{int(time.time() * 1000)}_{original_name}"


def ingest(store: BlobStore, payload: bytes, original_name: str,
           mime_type: Optional[str], bucket: str) -> StoredImage:
    """
    Upload one attachment and return where it lives.

    Raises ValidationError for an empty payload and IngestError when the
    blob store refuses the upload. Nothing is stored in either case.
    """
    if not payload:
        raise ValidationError(f"Uploaded file '{original_name}' is empty")

    key = storage_key(original_name)
    url = store.upload(bucket, key, payload, mime_type or DEFAULT_CONTENT_TYPE)
    logger.info("Uploaded %s to %s/%s", original_name, bucket, key)
    return StoredImage(key=key, url=url)


def ingest_batch(store: BlobStore, attachments: List[Attachment], bucket: str) -> BatchUpload:
    """Upload each attachment independently; failures are recorded and skipped."""
    batch = BatchUpload()
    for att in attachments:
        try:
            image = ingest(store, att.content, att.filename, att.content_type, bucket)
        except ApiError as e:
            logger.warning("Skipping additional picture %s: %s", att.filename, e.message)
            batch.outcomes.append(UploadOutcome(filename=att.filename, error=e.message))
            continue
        batch.outcomes.append(UploadOutcome(filename=att.filename, image=image))
    return batch
