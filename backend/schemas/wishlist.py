from pydantic import BaseModel, field_validator


# Schema for adding a product to a user's wishlist
class WishlistCreate(BaseModel):
    user_id: str
    product_id: int

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id_as_text(cls, v):
        # Numeric ids from clients are stored as text
        return str(v) if isinstance(v, int) else v


class WishlistOut(BaseModel):
    id: int
    user_id: str
    product_id: int

    class Config:
        from_attributes = True
