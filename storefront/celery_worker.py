# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
    include=[
        "storefront.tasks.expire",
        "storefront.services.notification_service",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    result_expires=3600,
    timezone="UTC",
    # wiadomość znika z kolejki dopiero po wykonaniu taska
    task_acks_late=True,
)

celery_app.conf.beat_schedule = {
    "deactivate-expired-coupons": {
        "task": "storefront.tasks.expire.expire_coupons_task",
        "schedule": 60.0,
    },
}
