# storefront/services/coupon_service.py
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel
from storefront.domain import pricing
from storefront.domain.errors import BusinessRuleError, ConflictError, NotFoundError
from storefront.domain.schemas import CouponCreate, CouponUpdate
from storefront.repos.coupon_repo import CouponRepo
from storefront.services.cart_service import CartService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def normalize_code(code: str) -> str:
    return code.strip().upper()


def _as_utc(value: datetime) -> datetime:
    # SQLite zwraca naiwne daty, zapisujemy zawsze w UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def check_redeemable(coupon: Optional[CouponModel], now: datetime) -> CouponModel:
    """Aktywność, ważność i limit użyć - w tej kolejności."""
    if not coupon or not coupon.is_active:
        raise BusinessRuleError("Invalid coupon code", "INVALID_COUPON")

    if coupon.expires_at is not None and _as_utc(coupon.expires_at) < now:
        raise BusinessRuleError("Coupon has expired", "COUPON_EXPIRED")

    if coupon.max_usages is not None and coupon.usage_count >= coupon.max_usages:
        raise BusinessRuleError("Coupon has reached its usage limit", "COUPON_LIMIT_REACHED")

    return coupon


def check_min_order(coupon: CouponModel, subtotal: Decimal) -> None:
    if coupon.min_order_amount is not None and subtotal < coupon.min_order_amount:
        raise BusinessRuleError(
            f"Minimum order amount of ${pricing.to_money(coupon.min_order_amount):.2f} required",
            "MIN_ORDER_NOT_MET",
        )


@dataclass(frozen=True)
class CouponEvaluation:
    coupon: CouponModel
    subtotal: Decimal
    discount: Decimal


class CouponService:
    def __init__(self, db: Session):
        self.repo = CouponRepo(db)
        self.cart = CartService(db)

    def evaluate(self, code: str, user_id: int, now: Optional[datetime] = None) -> CouponEvaluation:
        """
        Sprawdza kupon względem aktualnego koszyka użytkownika i liczy rabat.
        Nie zmienia licznika użyć.
        """
        now = now or datetime.now(timezone.utc)
        coupon = check_redeemable(self.repo.get_by_code(normalize_code(code)), now)

        # subtotal zawsze z aktualnego koszyka, nie z cache
        subtotal = self.cart.subtotal(user_id)
        check_min_order(coupon, subtotal)

        discount = pricing.coupon_discount(coupon.type, coupon.discount, subtotal)
        return CouponEvaluation(coupon=coupon, subtotal=subtotal, discount=discount)

    def quote(self, user_id: int, code: Optional[str] = None) -> pricing.OrderTotals:
        """Podgląd sum koszyka, opcjonalnie z kuponem (bez liczenia użycia)."""
        if code and code.strip():
            evaluation = self.evaluate(code, user_id)
            return pricing.order_totals(evaluation.subtotal, evaluation.discount)
        return pricing.order_totals(self.cart.subtotal(user_id))

    def redeem(self, evaluation: CouponEvaluation) -> int:
        """
        usage_count + 1 (optimistic locking na starej wartości), bez commita -
        transakcja należy do wołającego. Zwraca nowy licznik.
        """
        coupon = evaluation.coupon
        old_count = coupon.usage_count

        if self.repo.increment_usage(coupon.id, old_count) == 0:
            raise ConflictError("Coupon was modified by a concurrent request, please retry")

        return old_count + 1

    def apply(self, code: str, user_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Use Case: zastosowanie kuponu.

        1. Walidacja kuponu i minimalnej kwoty zamówienia
        2. Obliczenie rabatu
        3. usage_count + 1
        """
        evaluation = self.evaluate(code, user_id, now)
        coupon = evaluation.coupon

        try:
            usage = self.redeem(evaluation)
        except ConflictError:
            self.repo.rollback()
            raise
        self.repo.commit()

        logger.info(
            f"Coupon {coupon.code} applied for user {user_id}: discount {evaluation.discount}, "
            f"usage now {usage}"
        )

        return {
            "code": coupon.code,
            "type": coupon.type,
            "discount": evaluation.discount,
            "totals": pricing.order_totals(evaluation.subtotal, evaluation.discount),
        }

    # admin
    def list_coupons(self) -> List[CouponModel]:
        return self.repo.list_coupons()

    def get_coupon(self, coupon_id: int) -> CouponModel:
        coupon = self.repo.get_coupon(coupon_id)
        if not coupon:
            raise NotFoundError("Coupon not found")
        return coupon

    def create_coupon(self, payload: CouponCreate) -> CouponModel:
        code = normalize_code(payload.code)
        if self.repo.get_by_code(code):
            raise BusinessRuleError("Coupon code already exists", "COUPON_EXISTS")

        created = self.repo.create_coupon(
            CouponModel(
                code=code,
                type=payload.type,
                discount=payload.discount,
                min_order_amount=payload.min_order_amount,
                max_usages=payload.max_usages,
                usage_count=0,
                is_active=payload.is_active,
                expires_at=payload.expires_at,
            )
        )
        logger.info(f"Created coupon {created.code} ({created.type} {created.discount})")
        return created

    def update_coupon(self, coupon_id: int, payload: CouponUpdate) -> CouponModel:
        coupon = self.get_coupon(coupon_id)
        data = payload.model_dump(exclude_unset=True)

        if (
            coupon.type == pricing.PERCENTAGE
            and data.get("discount") is not None
            and data["discount"] > 100
        ):
            raise BusinessRuleError("Percentage discount cannot exceed 100", "VALIDATION_ERROR")

        for field, value in data.items():
            if field in ("discount", "is_active") and value is None:
                continue
            setattr(coupon, field, value)

        return self.repo.save(coupon)
