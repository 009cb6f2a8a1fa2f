# storefront/api/routers/coupons.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, ok, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import (
    CouponApplyIn,
    CouponApplyOut,
    CouponCreate,
    CouponOut,
    CouponUpdate,
    Envelope,
)
from storefront.services.coupon_service import CouponService

router = APIRouter(prefix="/coupons", tags=["coupons"])


@router.post("/apply", response_model=Envelope[CouponApplyOut])
def apply_coupon(
    payload: CouponApplyIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Zastosowanie kuponu do aktualnego koszyka.
    Zwraca rabat i sumy zamówienia, zwiększa licznik użyć kuponu.
    """
    return ok(CouponService(db).apply(payload.code, user.id))


@router.get("", response_model=Envelope[List[CouponOut]])
def list_coupons(admin: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    return ok(CouponService(db).list_coupons())


@router.post("", response_model=Envelope[CouponOut], status_code=201)
def create_coupon(
    payload: CouponCreate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ok(CouponService(db).create_coupon(payload))


@router.put("/{coupon_id}", response_model=Envelope[CouponOut])
def update_coupon(
    coupon_id: int,
    payload: CouponUpdate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return ok(CouponService(db).update_coupon(coupon_id, payload))
