# storefront/services/payment_service.py
import random
import string
import time
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.domain.errors import BusinessRuleError, NotFoundError
from storefront.domain.schemas import PaymentIn
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService, ORDER_PAID
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# karta testowa, która zawsze jest odrzucana
DECLINED_TEST_CARD = "4000000000000002"

PAYMENT_METHODS: List[Dict[str, str]] = [
    {
        "id": "credit_card",
        "name": "Credit Card",
        "description": "Pay with Visa, Mastercard, or American Express",
        "icon": "credit-card",
    },
    {
        "id": "paypal",
        "name": "PayPal",
        "description": "Pay with your PayPal account",
        "icon": "paypal",
    },
    {
        "id": "bank_transfer",
        "name": "Bank Transfer",
        "description": "Direct bank transfer",
        "icon": "building-bank",
    },
]


def new_transaction_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"TXN-{int(time.time() * 1000)}-{suffix}"


class PaymentService:
    """Symulacja bramki płatności - deterministyczna względem numeru karty."""

    def __init__(self, db: Session, notification_service: NotificationService):
        self.repo = OrderRepo(db)
        self.notification_service = notification_service

    @staticmethod
    def list_methods() -> List[Dict[str, str]]:
        return PAYMENT_METHODS

    def process(self, user_id: int, payload: PaymentIn) -> Dict[str, Any]:
        order = self.repo.get_order(payload.order_id)

        if not order or order.user_id != user_id:
            raise NotFoundError("Order not found")

        if order.payment_status == "completed":
            raise BusinessRuleError("Order already paid", "ALREADY_PAID")

        if order.status == "cancelled":
            raise BusinessRuleError("Cannot pay for a cancelled order", "ORDER_CANCELLED")

        card_number = payload.payment_details.card_number if payload.payment_details else None

        if card_number == DECLINED_TEST_CARD:
            order.payment_status = "failed"
            self.repo.commit()
            logger.warning(f"Payment for order {order.id} declined")
            raise BusinessRuleError("Payment failed. Please try again.", "PAYMENT_FAILED")

        order.payment_status = "completed"
        if order.status == "pending":
            order.status = "processing"
        self.repo.commit()
        self.repo.refresh(order)

        transaction_id = new_transaction_id()
        logger.info(f"Payment for order {order.id} completed, transaction {transaction_id}")
        self.notification_service.notify_order_event(user_id, order.id, ORDER_PAID, order.status)

        return {
            "success": True,
            "transaction_id": transaction_id,
            "order": order,
        }
