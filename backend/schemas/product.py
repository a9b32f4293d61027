# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Form fields accepted by POST /product/add
# 'picture' and 'additionalPics' arrive as multipart files and are not part of this schema
class ProductCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: float = Field(..., gt=0, description="Unit price > 0")
    quantity: int = Field(..., ge=0, description="Stock >= 0")
    category_id: int
    discount: float = Field(0, ge=0, le=100, description="Percent off, 0-100")
    coupon: Optional[str] = None


class CouponUpdate(BaseModel):
    coupon: str = Field(..., min_length=1)


class DiscountUpdate(BaseModel):
    discount: float = Field(..., ge=0, le=100)


# Full product representation including ID
class ProductOut(ORMBase):
    id: int
    title: str
    description: Optional[str] = None
    price: float
    quantity: int
    category_id: int
    discount: float = 0
    coupon: Optional[str] = None
    picture: str
    additional_pic: List[str] = Field(default_factory=list, serialization_alias="additionalPic")
