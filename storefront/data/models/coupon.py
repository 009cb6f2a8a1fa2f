# storefront/data/models/coupon.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric

from storefront.data.database import Base


class CouponModel(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True)
    code = Column(String(64), nullable=False, unique=True, index=True)  # zawsze uppercase
    type = Column(String(20), nullable=False)  # percentage, fixed
    discount = Column(Numeric(10, 2), nullable=False)

    min_order_amount = Column(Numeric(10, 2), nullable=True)
    max_usages = Column(Integer, nullable=True)
    usage_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
