#storefront/api/routers/cart.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, ok
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import (
    CartItemIn,
    CartItemOut,
    CartItemUpdate,
    CartOut,
    Envelope,
    MessageOut,
    OrderTotalsOut,
)
from storefront.services.cart_service import CartService
from storefront.services.coupon_service import CouponService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=Envelope[CartOut])
def get_cart(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return ok(CartService(db).get_cart(user.id))


@router.get("/totals", response_model=Envelope[OrderTotalsOut])
def get_totals(
    coupon_code: Optional[str] = Query(None, max_length=64),
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(CouponService(db).quote(user.id, coupon_code))


@router.post("", response_model=Envelope[CartItemOut])
def add_item(
    payload: CartItemIn,
    response: Response,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item, created = CartService(db).add_item(user.id, payload.product_id, payload.quantity)
    response.status_code = 201 if created else 200
    return ok(item)


@router.put("/{item_id}", response_model=Envelope[CartItemOut])
def update_item(
    item_id: int,
    payload: CartItemUpdate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(CartService(db).update_item(user.id, item_id, payload.quantity))


@router.delete("/{item_id}", response_model=Envelope[MessageOut])
def remove_item(
    item_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    CartService(db).remove_item(user.id, item_id)
    return ok({"message": "Item removed from cart"})


@router.delete("", response_model=Envelope[MessageOut])
def clear_cart(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    CartService(db).clear_cart(user.id)
    return ok({"message": "Cart cleared"})
