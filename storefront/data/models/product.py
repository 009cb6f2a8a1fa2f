# storefront/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Numeric, ForeignKey, JSON
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    slug = Column(String(220), nullable=False, unique=True)
    description = Column(Text, nullable=False)

    price = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    stock = Column(Integer, nullable=False, default=0)
    images = Column(JSON, nullable=False, default=list)

    rating = Column(Numeric(2, 1), nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)
    featured = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default="active")  # active, inactive, draft
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    category = relationship("CategoryModel", lazy="joined")
