# backend/routes/category.py
import logging
from collections import defaultdict
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database import get_db
from models.category import Category
from models.product import Product
from schemas.category import CategoryCreate, CategoryOut
from schemas.product import ProductOut
from utils.blob_store import BlobStore, get_blob_store
from utils.cascade import create_with_images, delete_category
from utils.crud import (
    EntitySpec, fetch_one, filtered_fetch, ok, parse_id, prepare_create, serialize,
)
from utils.gateway import TableGateway
from utils.media import from_upload

router = APIRouter(prefix="/category", tags=["Categories"])
logger = logging.getLogger(__name__)

CATEGORY = EntitySpec(
    name="Category",
    model=Category,
    out=CategoryOut,
    create=CategoryCreate,
    required=("title", "picture"),
)


# Attach to each category the products pointing at it
def _with_products(categories: List[Category], products: List[Product]) -> List[dict]:
    by_category: Dict[int, List[Product]] = defaultdict(list)
    for p in products:
        by_category[p.category_id].append(p)

    out = []
    for c in categories:
        data = serialize(CategoryOut, c)
        data["products"] = [serialize(ProductOut, p) for p in by_category.get(c.id, [])]
        out.append(data)
    return out


@router.get("")
def category_status():
    return {"message": "Category API working!"}


# =========================
# ADD CATEGORY
# =========================
@router.post("/add", status_code=201)
def add_category(
    title: Optional[str] = Form(None),
    picture: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
):
    values = prepare_create(CATEGORY, {"title": title, "picture": picture})

    created = create_with_images(
        db, store, settings.STORAGE_BUCKET, CATEGORY, values,
        picture=from_upload(picture),
    )
    logger.info("Category %s created", created.row.id)
    return ok([serialize(CategoryOut, created.row)], message="Category added successfully")


# =========================
# CATEGORY LIST WITH PRODUCTS
# =========================
@router.get("/fetch")
def fetch_categories(
    title: Optional[str] = Query(None, description="Case-insensitive title filter"),
    db: Session = Depends(get_db),
):
    categories = filtered_fetch(db, CATEGORY, title=title)
    products = TableGateway(db, Product).select()
    return ok(_with_products(categories, products))


@router.get("/{category_id}")
def get_category(category_id: str, db: Session = Depends(get_db)):
    category = fetch_one(db, CATEGORY, category_id)
    products = TableGateway(db, Product).select(category_id=category.id)
    return ok(_with_products([category], products)[0])


# =========================
# CASCADE DELETE
# =========================
@router.delete("/delete/{category_id}")
def remove_category(category_id: str, db: Session = Depends(get_db)):
    cid = parse_id(category_id, "category")
    result = delete_category(db, cid)
    return ok(
        {"id": result.category_id, "products_deleted": result.products_deleted},
        message="Category and associated products deleted successfully",
    )
