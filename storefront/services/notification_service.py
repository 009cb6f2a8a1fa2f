# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.services import webhook_client
from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_CREATED = "order_created"
ORDER_PAID = "order_paid"
ORDER_CANCELLED = "order_cancelled"
ORDER_STATUS_CHANGED = "order_status_changed"


class NotificationService:
    """
    Serwis do wysyłania powiadomień o zamówieniach.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def notify_order_event(user_id: int, order_id: int, event: str, status: str | None = None):
        send_order_notification_task.delay(user_id, order_id, event, status)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, event: str, status: str | None = None):
    """
    Celery task - loguje zdarzenie i, jeśli skonfigurowano ORDER_WEBHOOK_URL,
    przekazuje je dalej przez HTTP.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} {event} (status={status})")

    payload = {"user_id": user_id, "order_id": order_id, "event": event, "status": status}

    if not settings.ORDER_WEBHOOK_URL:
        return {**payload, "delivered": False}

    webhook_client.WebhookClient(settings.ORDER_WEBHOOK_URL).post_event(payload)
    return {**payload, "delivered": True}
