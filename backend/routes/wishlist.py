# backend/routes/wishlist.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.wishlist import Wishlist
from schemas.wishlist import WishlistCreate, WishlistOut
from utils.crud import EntitySpec, filtered_fetch, ok, require_fields, serialize, validated_create

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

WISHLIST = EntitySpec(
    name="Wishlist",
    model=Wishlist,
    out=WishlistOut,
    create=WishlistCreate,
    required=("user_id", "product_id"),
)


@router.get("")
def wishlist_status():
    return {"message": "Wishlist API working!"}


# Save a product for a user
@router.post("/add", status_code=201)
def add_to_wishlist(payload: Optional[Dict[str, Any]] = Body(None), db: Session = Depends(get_db)):
    row = validated_create(db, WISHLIST, payload or {})
    return ok([serialize(WishlistOut, row)], message="Product added to wishlist successfully")


# All wishlist entries of one user
@router.get("/fetch")
def fetch_wishlist(user_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    require_fields({"user_id": user_id}, WISHLIST.required[:1])
    rows = filtered_fetch(db, WISHLIST, user_id=user_id)
    return ok([serialize(WishlistOut, r) for r in rows])
