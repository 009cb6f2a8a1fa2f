# storefront/repos/coupon_repo.py
from datetime import datetime
from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel


class CouponRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_coupon(self, coupon_id: int) -> CouponModel | None:
        return self.db.get(CouponModel, coupon_id)

    def get_by_code(self, code: str) -> CouponModel | None:
        return self.db.execute(
            select(CouponModel).where(CouponModel.code == code)
        ).scalar_one_or_none()

    def list_coupons(self) -> List[CouponModel]:
        return list(self.db.execute(select(CouponModel).order_by(CouponModel.id)).scalars().all())

    def create_coupon(self, coupon: CouponModel) -> CouponModel:
        self.db.add(coupon)
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def save(self, coupon: CouponModel) -> CouponModel:
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def increment_usage(self, coupon_id: int, old_count: int) -> int:
        # optimistic locking na usage_count
        # np UPDATE coupons SET usage_count 4 WHERE id 1 AND usage_count 3
        result = self.db.execute(
            update(CouponModel)
            .where(CouponModel.id == coupon_id, CouponModel.usage_count == old_count)
            .values(usage_count=old_count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def deactivate_expired(self, now: datetime) -> int:
        result = self.db.execute(
            update(CouponModel)
            .where(
                CouponModel.is_active.is_(True),
                CouponModel.expires_at.is_not(None),
                CouponModel.expires_at < now,
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
