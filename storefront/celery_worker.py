# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND, CELERY_TASK_ALWAYS_EAGER

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# taski musza byc zaimportowane zeby worker je zarejestrowal
celery_app.conf.imports = (
    "storefront.tasks.expire",
    "storefront.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "purge-expired-otps-every-minute": {
        "task": "storefront.tasks.expire.purge_expired_otps_task",
        "schedule": 60.0,
    },
    "expire-guest-carts-every-minute": {
        "task": "storefront.tasks.expire.expire_guest_carts_task",
        "schedule": 60.0,
    },
}

celery_app.conf.timezone = "UTC"

# testy / lokalny dev: taski w tym samym procesie, bez brokera
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
celery_app.conf.task_eager_propagates = CELERY_TASK_ALWAYS_EAGER
