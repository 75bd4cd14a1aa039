# canteen/repos/order_repo.py
from typing import Callable, List

from canteen.domain.models import Order, OrderStatus
from canteen.repos.persistence import Document, PersistenceService, Query, Unsubscribe

ORDERS = "orders"


def order_from_document(doc: Document) -> Order:
    data = {k: v for k, v in doc.items() if k != "id"}
    return Order.model_validate({**data, "order_id": doc["id"]})


class OrderRepo:
    def __init__(self, store: PersistenceService):
        self.store = store

    def create_order(self, order: Order) -> str:
        data = order.model_dump(mode="json", exclude={"order_id", "created_at", "updated_at"})
        data["created_at"] = self.store.server_timestamp()
        data["updated_at"] = self.store.server_timestamp()
        return self.store.add(ORDERS, data)

    def get_order(self, order_id: str) -> Order | None:
        doc = self.store.get(ORDERS, order_id)
        return order_from_document(doc) if doc else None

    def update_order_status(self, order_id: str, status: OrderStatus) -> None:
        self.store.update(
            ORDERS,
            order_id,
            {"status": status.value, "updated_at": self.store.server_timestamp()},
        )

    def list_for_user(self, user_id: str) -> List[Order]:
        return self._list(self.user_query(user_id))

    def list_for_canteen(self, canteen_id: str) -> List[Order]:
        return self._list(self.canteen_query(canteen_id))

    def subscribe_for_user(
        self, user_id: str, callback: Callable[[List[Order]], None]
    ) -> Unsubscribe:
        return self.store.subscribe(
            self.user_query(user_id),
            lambda docs: callback([order_from_document(d) for d in docs]),
        )

    @staticmethod
    def user_query(user_id: str) -> Query:
        return Query(ORDERS).where("user_id", user_id).ordered("created_at", descending=True)

    @staticmethod
    def canteen_query(canteen_id: str) -> Query:
        return Query(ORDERS).where("canteen_id", canteen_id).ordered("created_at", descending=True)

    def _list(self, query: Query) -> List[Order]:
        return [order_from_document(d) for d in self.store.query(query)]
