# storefront/tasks/expire.py
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.repos.coupon_repo import CouponRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def deactivate_expired_coupons(db: Session, now: datetime | None = None) -> int:
    """Wyłącza aktywne kupony, których expires_at już minął. Zwraca liczbę zmienionych."""
    now = now or datetime.now(timezone.utc)
    repo = CouponRepo(db)
    count = repo.deactivate_expired(now)
    repo.commit()
    return count


@celery_app.task(name="storefront.tasks.expire.expire_coupons_task")
def expire_coupons_task():
    logger.info("Expire coupons task started")

    db = SessionLocal()
    try:
        count = deactivate_expired_coupons(db)
        logger.info(f"Deactivated {count} expired coupons")
        return count
    finally:
        db.close()
