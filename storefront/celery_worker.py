# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
    ORPHAN_ORDER_GRACE_SECONDS,
)

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAŻNE: Explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = (
    "storefront.tasks.orphans",
    "storefront.services.notification_service",
)

# sprzatanie naglowkow zamowien bez pozycji (crash miedzy insertami)
celery_app.conf.beat_schedule = {
    "sweep-orphan-orders": {
        "task": "storefront.tasks.orphans.sweep_orphan_orders_task",
        "schedule": float(max(60, ORPHAN_ORDER_GRACE_SECONDS // 2)),
    },
}

celery_app.conf.timezone = "UTC"
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
