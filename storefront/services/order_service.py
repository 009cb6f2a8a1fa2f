# storefront/services/order_service.py
import uuid
from typing import Any, Dict, Iterable, Optional

import redis
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.data.models.user import UserModel
from storefront.domain import pricing
from storefront.domain.errors import BusinessRuleError, ConflictError, NotFoundError
from storefront.domain.schemas import OrderCreate
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services import page_of
from storefront.services.cart_service import cart_lines
from storefront.services.coupon_service import CouponService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import (
    NotificationService,
    ORDER_CANCELLED,
    ORDER_CREATED,
    ORDER_STATUS_CHANGED,
)
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# pending -> processing -> shipped -> delivered, cancelled tylko z pending/processing
ORDER_TRANSITIONS = {
    "pending": {"processing", "cancelled"},
    "processing": {"shipped", "cancelled"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}

CANCELLABLE = {"pending", "processing"}


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Zamówienie powstaje z aktualnego koszyka, ceny liczy moduł pricing.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        notification_service: NotificationService,
    ):
        self.repo = OrderRepo(db)
        self.cart = CartRepo(db)
        self.products = ProductRepo(db)
        self.coupons = CouponService(db)
        self.lock_service = lock_service
        self.notification_service = notification_service

    # =====================================================
    # COMMANDS
    # =====================================================
    def place_order(self, user_id: int, payload: OrderCreate) -> OrderModel:
        """
        Use Case: Tworzenie zamówienia z koszyka.

        1. Blokada checkoutu użytkownika (Redis)
        2. Weryfikacja koszyka i stanów magazynowych
        3. Rabat z kuponu (opcjonalnie) i wyliczenie sum
        4. Zamówienie + snapshot pozycji + zdjęcie ze stanu + użycie kuponu
           + czyszczenie koszyka w jednej transakcji
        5. Powiadomienie (async)
        """
        token = uuid.uuid4().hex
        locked = self.lock_service.acquire_checkout_lock(
            user_id=user_id,
            token=token,
            ttl=CHECKOUT_LOCK_TTL_SECONDS,
        )
        if not locked:
            raise ConflictError("Checkout already in progress", "CHECKOUT_IN_PROGRESS")

        try:
            order = self._create_order(user_id, payload)
        finally:
            self._release_lock(user_id, token)

        logger.info(f"Order {order.id} created for user {user_id}, total {order.total}")
        self.notification_service.notify_order_event(user_id, order.id, ORDER_CREATED, order.status)
        return order

    def _release_lock(self, user_id: int, token: str):
        # zamówienie jest już zapisane albo odrzucone, lock i tak wygaśnie po TTL
        try:
            self.lock_service.release_checkout_lock(user_id, token)
        except redis.RedisError:
            logger.exception(f"Failed to release checkout lock of user {user_id}")

    def _create_order(self, user_id: int, payload: OrderCreate) -> OrderModel:
        items = self.cart.get_cart_items(user_id)
        if not items:
            raise BusinessRuleError("Cart is empty", "EMPTY_CART")

        for item in items:
            if item.product is None or item.product.stock < item.quantity:
                name = item.product.name if item.product else "product"
                raise BusinessRuleError(f"Insufficient stock for {name}", "INSUFFICIENT_STOCK")

        subtotal = pricing.cart_subtotal(cart_lines(items))
        evaluation = None

        if payload.coupon_code and payload.coupon_code.strip():
            evaluation = self.coupons.evaluate(payload.coupon_code, user_id)

        totals = pricing.order_totals(subtotal, evaluation.discount if evaluation else pricing.ZERO)

        try:
            order = self.repo.add_order(
                OrderModel(
                    user_id=user_id,
                    status="pending",
                    subtotal=totals.subtotal,
                    discount=totals.discount,
                    coupon_code=evaluation.coupon.code if evaluation else None,
                    tax=totals.tax,
                    shipping=totals.shipping,
                    total=totals.total,
                    shipping_address=payload.shipping_address.model_dump(),
                    billing_address=payload.billing_address.model_dump(),
                    payment_method=payload.payment_method,
                    payment_status="pending",
                    notes=payload.notes,
                    items=[
                        OrderItemModel(
                            product_id=i.product_id,
                            name=i.product.name,
                            price=i.product.price,
                            quantity=i.quantity,
                        )
                        for i in items
                    ],
                )
            )

            for item in items:
                # warunek stock >= quantity w samym UPDATE
                if self.products.decrement_stock(item.product_id, item.quantity) == 0:
                    raise BusinessRuleError(
                        f"Insufficient stock for {item.product.name}", "INSUFFICIENT_STOCK"
                    )

            # rabat zapisany w zamówieniu = jedno użycie kuponu
            if evaluation:
                self.coupons.redeem(evaluation)

            self.cart.clear_cart(user_id, commit=False)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        return self.repo.refresh(order)

    def cancel_order(self, order_id: int, user_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)

        # cudze zamówienie wygląda jak nieistniejące
        if not order or order.user_id != user_id:
            raise NotFoundError("Order not found")

        if order.status not in CANCELLABLE:
            raise BusinessRuleError("Order cannot be cancelled", "CANNOT_CANCEL")

        self._cancel(order)
        self.notification_service.notify_order_event(user_id, order.id, ORDER_CANCELLED, order.status)
        return order

    def update_status(self, order_id: int, status: str) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        if status == order.status:
            return order

        if status not in ORDER_TRANSITIONS[order.status]:
            raise BusinessRuleError(
                f"Cannot change order status from {order.status} to {status}",
                "INVALID_STATUS_TRANSITION",
            )

        if status == "cancelled":
            self._cancel(order)
        else:
            self._change_status(order, {order.status}, status)
            self.repo.commit()
            self.repo.refresh(order)

        logger.info(f"Order {order.id} status -> {order.status}")
        self.notification_service.notify_order_event(
            order.user_id, order.id, ORDER_STATUS_CHANGED, order.status
        )
        return order

    def _change_status(self, order: OrderModel, expected: Iterable[str], status: str):
        # warunek na status w samym UPDATE, równoległa zmiana wygrywa tylko raz
        if self.repo.change_status(order.id, expected, status) == 0:
            self.repo.rollback()
            raise ConflictError("Order was modified by a concurrent request, please retry")

    def _cancel(self, order: OrderModel):
        self._change_status(order, CANCELLABLE, "cancelled")

        # zwróć towar na stan, w tej samej transakcji co zmiana statusu
        for item in order.items:
            self.products.increment_stock(item.product_id, item.quantity)

        self.repo.commit()
        self.repo.refresh(order)
        logger.info(f"Order {order.id} cancelled, stock restored for {len(order.items)} items")

    # =====================================================
    # QUERY
    # =====================================================
    def get_order(self, order_id: int, user: UserModel) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order or (order.user_id != user.id and user.role != "admin"):
            raise NotFoundError("Order not found")

        return order

    def list_user_orders(self, user_id: int, page: int, page_size: int) -> Dict[str, Any]:
        rows, total = self.repo.list_user_orders(user_id, (page - 1) * page_size, page_size)
        return page_of(rows, page, page_size, total)

    def list_all_orders(self, page: int, page_size: int, status: Optional[str] = None) -> Dict[str, Any]:
        rows, total = self.repo.list_orders((page - 1) * page_size, page_size, status)
        return page_of(rows, page, page_size, total)
