# canteen/celery_worker.py
from celery import Celery

from canteen.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "canteen",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# explicite import taskow, zeby worker je zarejestrowal
celery_app.conf.imports = (
    "canteen.services.notification_service",
)

celery_app.conf.timezone = "UTC"
