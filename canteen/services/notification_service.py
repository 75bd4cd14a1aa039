# canteen/services/notification_service.py
from typing import Protocol

from kombu.exceptions import OperationalError

from canteen.celery_worker import celery_app
from canteen.utils.logging import get_logger
from canteen.utils.settings import NOTIFICATIONS_ENABLED

logger = get_logger(__name__)


class NotificationSink(Protocol):
    def notify(self, title: str, body: str, dedupe_tag: str, user_id: str | None = None) -> None: ...


class NotificationService:
    """
    Sink powiadomien o zamowieniach.
    Fire-and-forget: wysylka idzie przez Celery, blad brokera tylko logujemy.
    Gdy powiadomienia sa wylaczone, notify() nic nie robi.
    """

    def __init__(self, enabled: bool = NOTIFICATIONS_ENABLED):
        self.enabled = enabled

    def notify(self, title: str, body: str, dedupe_tag: str, user_id: str | None = None) -> None:
        if not self.enabled:
            logger.debug(f"Notifications disabled, dropping '{title}' ({dedupe_tag})")
            return

        try:
            send_order_notification_task.delay(user_id, title, body, dedupe_tag)
        except OperationalError as e:
            logger.warning(f"Notification '{title}' for user {user_id} not queued: {e}")


@celery_app.task(name="canteen.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: str | None, title: str, body: str, dedupe_tag: str):
    """
    Celery task - docelowo web push / FCM do urzadzen uzytkownika.
    Na razie tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id} [{dedupe_tag}]: {title} - {body}")

    return {"user_id": user_id, "tag": dedupe_tag, "status": "sent"}
