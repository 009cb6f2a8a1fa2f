# storefront/services/webhook_client.py
import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import ORDER_WEBHOOK_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class WebhookClient:
    """Wysyła zdarzenia zamówień do zewnętrznego endpointu (np. ERP, mailer)."""

    def __init__(self, url: str | None = None, timeout: int = 2):
        self.url = url or ORDER_WEBHOOK_URL
        self.timeout = timeout

    @http_retry()
    def post_event(self, payload: dict) -> int:
        logger.info(f"WebhookClient POST {self.url} event={payload.get('event')}")

        resp = requests.post(self.url, json=payload, timeout=self.timeout)
        resp.raise_for_status()
        return resp.status_code
