from sqlalchemy import Column, Integer, String
from database import Base

# Customer feedback for a product; pid is kept as an opaque string
class Review(Base):
    __tablename__ = "review"

    id = Column(Integer, primary_key=True, index=True)
    pid = Column(String, nullable=False, index=True)
    stars = Column(Integer, nullable=False)
    feedback = Column(String, nullable=False)
