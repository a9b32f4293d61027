# backend/schemas/category.py
from pydantic import BaseModel, Field, ConfigDict


class CategoryCreate(BaseModel):
    title: str = Field(..., min_length=1)
    # 'picture' is uploaded separately and replaced by its public URL


class CategoryOut(BaseModel):
    id: int
    title: str
    picture: str

    model_config = ConfigDict(from_attributes=True)
