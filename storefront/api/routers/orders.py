# storefront/api/routers/orders.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import (
    Paging,
    get_current_user,
    get_lock_service,
    get_notification_service,
    ok,
    require_admin,
)
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import (
    AdminOrderOut,
    Envelope,
    OrderCreate,
    OrderOut,
    OrderStatus,
    OrderStatusUpdate,
    Page,
)
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(db, lock_service, notification_service)


# trasy admina przed /{order_id}
@router.get("/admin", response_model=Envelope[Page[AdminOrderOut]])
def list_all_orders(
    status: Optional[OrderStatus] = Query(None),
    paging: Paging = Depends(),
    admin: UserModel = Depends(require_admin),
    svc: OrderService = Depends(get_service),
):
    return ok(svc.list_all_orders(paging.page, paging.page_size, status))


@router.put("/admin/{order_id}/status", response_model=Envelope[OrderOut])
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    admin: UserModel = Depends(require_admin),
    svc: OrderService = Depends(get_service),
):
    return ok(svc.update_status(order_id, payload.status))


@router.get("", response_model=Envelope[Page[OrderOut]])
def list_orders(
    paging: Paging = Depends(),
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    return ok(svc.list_user_orders(user.id, paging.page, paging.page_size))


@router.post("", response_model=Envelope[OrderOut], status_code=201)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    """
    Tworzy zamówienie z aktualnego koszyka użytkownika.
    Wysyła powiadomienie asynchronicznie.
    """
    return ok(svc.place_order(user.id, payload))


@router.get("/{order_id}", response_model=Envelope[OrderOut])
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    return ok(svc.get_order(order_id, user))


@router.put("/{order_id}/cancel", response_model=Envelope[OrderOut])
def cancel_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    return ok(svc.cancel_order(order_id, user.id))
