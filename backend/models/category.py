# backend/models/category.py
from sqlalchemy import Column, Integer, String
from database import Base

# Model Category
# Top-level catalog grouping. Products point at it through category_id,
# which this layer does not declare as a foreign key.
class Category(Base):
    __tablename__ = "category"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)

    # Public URL of the uploaded cover image.
    picture = Column(String, nullable=False)
