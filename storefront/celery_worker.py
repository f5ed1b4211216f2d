# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

#tasks live outside this module, celery has to be told where
celery_app.conf.imports = (
    "storefront.tasks.expire",
    "storefront.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "expire-pending-orders-every-15-minutes": {
        "task": "storefront.tasks.expire.expire_pending_orders_task",
        "schedule": 15 * 60.0,
    },
}

celery_app.conf.timezone = "UTC"
