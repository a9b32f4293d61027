from sqlalchemy import Column, Integer, String
from database import Base

# One product saved by one user; the same pair may be stored twice
class Wishlist(Base):
    __tablename__ = "wishlist"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
