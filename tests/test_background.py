from storefront.services import notification_service
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService, send_order_notification_task
from storefront.utils import settings


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.set_calls = []

    def set(self, name, value, nx=False, ex=None):
        self.set_calls.append({"name": name, "nx": nx, "ex": ex})
        if nx and name in self.store:
            return None
        self.store[name] = value
        return True

    def eval(self, script, numkeys, key, token):
        if self.store.get(key) == token:
            del self.store[key]
            return 1
        return 0


def _lock_service():
    service = LockService("redis://localhost:6379/0")
    service.redis = FakeRedis()
    return service


def test_checkout_lock_is_exclusive_per_user():
    locks = _lock_service()

    assert locks.acquire_checkout_lock(1, "a", ttl=30) is True
    assert locks.acquire_checkout_lock(1, "b", ttl=30) is False
    assert locks.acquire_checkout_lock(2, "c", ttl=30) is True
    assert locks.redis.set_calls[0] == {"name": "checkout:1:lock", "nx": True, "ex": 30}


def test_checkout_lock_released_only_by_owner():
    locks = _lock_service()
    locks.acquire_checkout_lock(1, "owner", ttl=30)

    assert locks.release_checkout_lock(1, "intruder") is False
    assert locks.release_checkout_lock(1, "owner") is True
    assert locks.acquire_checkout_lock(1, "next", ttl=30) is True


def test_notify_enqueues_task(monkeypatch):
    queued = []
    monkeypatch.setattr(send_order_notification_task, "delay", lambda *args: queued.append(args))

    NotificationService().notify_order_event(1, 10, "order_created", "pending")

    assert queued == [(1, 10, "order_created", "pending")]


def test_notification_without_webhook(monkeypatch):
    monkeypatch.setattr(settings, "ORDER_WEBHOOK_URL", "")

    result = send_order_notification_task.run(1, 10, "order_paid", "processing")

    assert result == {
        "user_id": 1,
        "order_id": 10,
        "event": "order_paid",
        "status": "processing",
        "delivered": False,
    }


def test_notification_forwarded_to_webhook(monkeypatch):
    posted = []

    class FakeWebhookClient:
        def __init__(self, url):
            self.url = url

        def post_event(self, payload):
            posted.append((self.url, payload))
            return 204

    monkeypatch.setattr(settings, "ORDER_WEBHOOK_URL", "https://hooks.example.com/orders")
    monkeypatch.setattr(notification_service.webhook_client, "WebhookClient", FakeWebhookClient)

    result = send_order_notification_task.run(3, 7, "order_cancelled", "cancelled")

    assert result["delivered"] is True
    assert posted == [
        (
            "https://hooks.example.com/orders",
            {"user_id": 3, "order_id": 7, "event": "order_cancelled", "status": "cancelled"},
        )
    ]


def test_webhook_client_posts_json(monkeypatch):
    from storefront.services import webhook_client

    calls = []

    class Response:
        status_code = 200

        def raise_for_status(self):
            return None

    def fake_post(url, json, timeout):
        calls.append((url, json, timeout))
        return Response()

    monkeypatch.setattr(webhook_client.requests, "post", fake_post)

    status = webhook_client.WebhookClient("https://hooks.example.com/orders").post_event({"event": "order_paid"})

    assert status == 200
    assert calls == [("https://hooks.example.com/orders", {"event": "order_paid"}, 2)]
