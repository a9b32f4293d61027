# backend/utils/cascade.py
"""
Multi-step workflows that must look like one operation to the caller.

The row store is reached one statement at a time, so neither workflow
runs inside a transaction:

* Category delete removes the products first and the category second.
  If the second step fails the products stay deleted; the error names
  the failed phase so the caller can tell.
* Create-with-images uploads first and inserts second. If the insert
  fails the uploaded blobs are removed again, best effort.
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from models.category import Category
from models.product import Product
from utils.blob_store import BlobStore
from utils.crud import EntitySpec
from utils.errors import CascadeError, NotFound, UpstreamError
from utils.gateway import TableGateway
from utils.media import Attachment, BatchUpload, ingest, ingest_batch

logger = logging.getLogger(__name__)


class CascadeState(str, enum.Enum):
    START = "start"
    VERIFIED = "verified"
    PRODUCTS_DELETED = "products_deleted"
    CATEGORY_DELETED = "category_deleted"
    FAILED = "failed"


@dataclass
class CascadeResult:
    category_id: int
    products_deleted: int = 0
    trail: List[CascadeState] = field(default_factory=lambda: [CascadeState.START])


def delete_category(db: Session, category_id: int) -> CascadeResult:
    categories = TableGateway(db, Category)
    products = TableGateway(db, Product)
    result = CascadeResult(category_id=category_id)

    # START -> VERIFIED
    if categories.select_one(id=category_id) is None:
        raise NotFound("Category not found")
    result.trail.append(CascadeState.VERIFIED)

    # VERIFIED -> PRODUCTS_DELETED (runs even when no product matches)
    try:
        result.products_deleted = products.delete(category_id=category_id)
    except UpstreamError as e:
        result.trail.append(CascadeState.FAILED)
        raise CascadeError(
            f"Error deleting products: {e.message}",
            phase=CascadeState.PRODUCTS_DELETED.value,
            products_deleted=False,
        ) from e
    result.trail.append(CascadeState.PRODUCTS_DELETED)

    # PRODUCTS_DELETED -> CATEGORY_DELETED
    try:
        categories.delete(id=category_id)
    except UpstreamError as e:
        result.trail.append(CascadeState.FAILED)
        logger.error(
            "Category %s kept after %s of its products were deleted",
            category_id, result.products_deleted,
        )
        raise CascadeError(
            f"Error deleting category after its products were removed: {e.message}",
            phase=CascadeState.CATEGORY_DELETED.value,
            products_deleted=True,
        ) from e
    result.trail.append(CascadeState.CATEGORY_DELETED)
    return result


class CreateState(str, enum.Enum):
    START = "start"
    MAIN_IMAGE_UPLOADED = "main_image_uploaded"
    ADDITIONAL_IMAGES_PROCESSED = "additional_images_processed"
    PERSISTED = "persisted"


@dataclass
class CreateResult:
    row: Any
    gallery: BatchUpload
    trail: List[CreateState]


def create_with_images(
    db: Session,
    store: BlobStore,
    bucket: str,
    spec: EntitySpec,
    values: Dict[str, Any],
    picture: Attachment,
    additional: Optional[List[Attachment]] = None,
    gallery_field: Optional[str] = None,
) -> CreateResult:
    """Upload the main picture, then the gallery, then insert one row."""
    trail = [CreateState.START]

    # Main picture failure aborts before anything is inserted
    main = ingest(store, picture.content, picture.filename, picture.content_type, bucket)
    trail.append(CreateState.MAIN_IMAGE_UPLOADED)

    gallery = ingest_batch(store, additional or [], bucket)
    trail.append(CreateState.ADDITIONAL_IMAGES_PROCESSED)

    row_values = dict(values, picture=main.url)
    if gallery_field:
        row_values[gallery_field] = gallery.urls

    try:
        row = spec.gateway(db).insert(row_values)
    except UpstreamError:
        _discard(store, bucket, [main.key] + [img.key for img in gallery.images])
        raise
    trail.append(CreateState.PERSISTED)
    return CreateResult(row=row, gallery=gallery, trail=trail)


def _discard(store: BlobStore, bucket: str, keys: List[str]) -> None:
    try:
        store.remove(bucket, keys)
    except UpstreamError as e:
        logger.warning("Could not remove orphaned uploads %s: %s", keys, e.message)
        return
    logger.info("Removed %d orphaned upload(s) after failed insert", len(keys))
