# canteen/services/order_watcher.py
from typing import List

from canteen.domain.events import StatusChange, diff_order_snapshots
from canteen.domain.models import Order
from canteen.domain.status import notification_for
from canteen.repos.order_repo import OrderRepo
from canteen.repos.persistence import PersistenceService
from canteen.services.notification_service import NotificationSink
from canteen.utils.logging import get_logger

logger = get_logger(__name__)


class OrderWatcher:
    """
    Subskrypcja zamowien jednego uzytkownika.

    start() / __enter__ otwiera subskrypcje, stop() / __exit__ ja zwalnia.
    Kazdy snapshot jest porownywany z poprzednim; zmiany statusu ida do sinka
    w kolejnosci, w jakiej przyszly snapshoty. Pierwszy snapshot to baseline.
    """

    def __init__(self, store: PersistenceService, user_id: str, notification_sink: NotificationSink):
        self.repo = OrderRepo(store)
        self.user_id = user_id
        self.notification_sink = notification_sink
        self.orders: List[Order] = []
        self._previous: List[Order] | None = None
        self._unsubscribe = None

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> "OrderWatcher":
        if self.active:
            return self

        logger.info(f"Watching orders of user {self.user_id}")
        self._unsubscribe = self.repo.subscribe_for_user(self.user_id, self.on_snapshot)
        return self

    def stop(self) -> None:
        if not self.active:
            return

        self._unsubscribe()
        self._unsubscribe = None
        self._previous = None
        logger.info(f"Stopped watching orders of user {self.user_id}")

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    def on_snapshot(self, orders: List[Order]) -> List[StatusChange]:
        changes = diff_order_snapshots(self._previous, orders)
        self._previous = list(orders)
        self.orders = list(orders)

        for change in changes:
            notification = notification_for(change.order_id, change.current)
            if notification:
                self.notification_sink.notify(
                    notification.title,
                    notification.body,
                    notification.dedupe_tag,
                    user_id=change.user_id,
                )

        return changes
