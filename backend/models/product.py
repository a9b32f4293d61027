# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, JSON, CheckConstraint
from database import Base

# Model Product
# A single catalog item. Holds pricing, stock, promotion data
# and the public URLs of its pictures.
class Product(Base):
    __tablename__ = "product"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)

    price = Column(Float, CheckConstraint("price > 0"), nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity >= 0"), nullable=False)

    # Plain column: the category row may not exist yet or may be gone.
    category_id = Column(Integer, nullable=False, index=True)

    # Promotion data.
    discount = Column(Float, CheckConstraint("discount >= 0 AND discount <= 100"), nullable=False, default=0)
    coupon = Column(String, nullable=True)

    picture = Column(String, nullable=False)
    additional_pic = Column("additionalPic", JSON, nullable=False, default=list)
