# backend/routes/product.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database import get_db
from models.product import Product
from schemas.product import CouponUpdate, DiscountUpdate, ProductCreate, ProductOut
from utils.blob_store import BlobStore, get_blob_store
from utils.cascade import create_with_images
from utils.crud import (
    EntitySpec, fetch_one, filtered_fetch, ok, parse_id, partial_update,
    prepare_create, serialize, validate_input,
)
from utils.errors import NotFound, ValidationError
from utils.media import from_upload

router = APIRouter(prefix="/product", tags=["Products"])
logger = logging.getLogger(__name__)

PRODUCT = EntitySpec(
    name="Product",
    model=Product,
    out=ProductOut,
    create=ProductCreate,
    required=("title", "description", "price", "quantity", "category_id", "picture"),
)


def _rows(rows) -> List[dict]:
    return [serialize(ProductOut, p) for p in rows]


@router.get("")
def product_status():
    return {"message": "Product API working!"}


# =========================
# ADD PRODUCT
# =========================
@router.post("/add", status_code=201)
def add_product(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None),
    discount: Optional[str] = Form(None),
    coupon: Optional[str] = Form(None),
    picture: Optional[UploadFile] = File(None),
    additionalPics: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
):
    values = prepare_create(PRODUCT, {
        "title": title,
        "description": description,
        "price": price,
        "quantity": quantity,
        "category_id": category_id,
        "picture": picture,
        # Blank optional fields fall back to their defaults
        "discount": discount or 0,
        "coupon": coupon or None,
    })

    created = create_with_images(
        db, store, settings.STORAGE_BUCKET, PRODUCT, values,
        picture=from_upload(picture),
        additional=[from_upload(f) for f in additionalPics or []],
        gallery_field="additional_pic",
    )

    extra = {}
    if created.gallery.failures:
        extra["skipped"] = [{"filename": o.filename, "error": o.error} for o in created.gallery.failures]
    logger.info("Product %s created, gallery upload %s", created.row.id, created.gallery.status)
    return ok(_rows([created.row]), message="Product added successfully", **extra)


# =========================
# PRODUCT LIST
# =========================
@router.get("/fetch")
def fetch_products(
    title: Optional[str] = Query(None, description="Case-insensitive title filter"),
    db: Session = Depends(get_db),
):
    return ok(_rows(filtered_fetch(db, PRODUCT, title=title)))


# =========================
# PARTIAL UPDATES
# =========================
@router.put("/update/coupon/{product_id}")
def update_coupon(
    product_id: str,
    coupon: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    pid = parse_id(product_id, "product")
    values = validate_input(CouponUpdate, {"coupon": coupon}, message="Coupon code is required")
    rows = partial_update(db, PRODUCT, pid, values)
    return ok(_rows(rows), message="Coupon updated successfully")


@router.put("/update/discount/{product_id}")
def update_discount(
    product_id: str,
    discount: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    pid = parse_id(product_id, "product")
    values = validate_input(
        DiscountUpdate, {"discount": discount},
        message="Discount percentage is required and should be between 0 and 100",
    )
    rows = partial_update(db, PRODUCT, pid, values)
    return ok(_rows(rows), message="Discount updated successfully")


# =========================
# SINGLE PRODUCT / BY CATEGORY
# =========================
@router.get("/{product_id}")
def get_product(product_id: str, db: Session = Depends(get_db)):
    return ok(serialize(ProductOut, fetch_one(db, PRODUCT, product_id)))


@router.get("/category/{category_id}")
def get_products_by_category(
    category_id: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        cid = parse_id(category_id, "category")
    except ValidationError:
        # Non-numeric ids match no product
        cid = None
    rows = filtered_fetch(db, PRODUCT, category_id=cid) if cid is not None else []
    if not rows and settings.EMPTY_CATEGORY_IS_NOT_FOUND:
        raise NotFound("No products found for this category")
    return ok(_rows(rows))


# =========================
# DELETE
# =========================
@router.delete("/delete/{product_id}")
def delete_product(product_id: str, db: Session = Depends(get_db)):
    pid = parse_id(product_id, "product")
    gateway = PRODUCT.gateway(db)
    if gateway.select_one(id=pid) is None:
        raise NotFound("Product not found")
    gateway.delete(id=pid)
    return ok(message="Product deleted successfully")
