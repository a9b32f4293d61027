# backend/routes/review.py
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.review import Review
from schemas.review import ReviewCreate, ReviewOut
from utils.crud import EntitySpec, filtered_fetch, ok, serialize, validated_create
from utils.errors import NotFound

router = APIRouter(prefix="/reviews", tags=["Reviews"])
logger = logging.getLogger(__name__)

REVIEW = EntitySpec(
    name="Review",
    model=Review,
    out=ReviewOut,
    create=ReviewCreate,
    required=("pid", "stars", "feedback"),
)


@router.get("")
def review_status():
    return {"message": "Review API working!"}


@router.post("/add", status_code=201)
def add_review(payload: Optional[Dict[str, Any]] = Body(None), db: Session = Depends(get_db)):
    row = validated_create(db, REVIEW, payload or {})
    logger.info("Review %s added for product %s", row.id, row.pid)
    return ok(serialize(ReviewOut, row), message="Review added successfully")


# Reviews of one product; an unreviewed product is a 404
@router.get("/{pid}")
def get_reviews(pid: str, db: Session = Depends(get_db)):
    rows = filtered_fetch(db, REVIEW, pid=pid)
    if not rows:
        raise NotFound("No reviews found for this pid")
    return ok([serialize(ReviewOut, r) for r in rows])
