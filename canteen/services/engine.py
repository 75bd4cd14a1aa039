# canteen/services/engine.py
from decimal import Decimal

from canteen.domain.errors import UnauthenticatedError
from canteen.domain.models import CartLine, MenuItem, Order, Principal
from canteen.repos.persistence import PersistenceService
from canteen.services.cart_service import CartResult, CartService
from canteen.services.lock_service import LockService
from canteen.services.notification_service import NotificationSink
from canteen.services.order_service import OrderService
from canteen.services.order_watcher import OrderWatcher
from canteen.utils.settings import TAX_RATE


class OrderLifecycleEngine:
    """
    Sesja jednego uzytkownika: koszyk, checkout, statusy zamowien.

    Caly kontekst (principal, store, sink) przychodzi z konstruktora,
    nic nie jest brane z globalnego stanu.
    """

    def __init__(
        self,
        store: PersistenceService,
        principal: Principal | None,
        notification_sink: NotificationSink,
        tax_rate: Decimal = TAX_RATE,
        lock_service: LockService | None = None,
    ):
        self.store = store
        self.principal = principal
        self.notification_sink = notification_sink
        self.cart = CartService(store, principal.uid if principal else None)
        self.orders = OrderService(store, notification_sink, tax_rate=tax_rate, lock_service=lock_service)

    def load_cart(self) -> CartResult:
        return self.cart.load()

    def add_item(self, item: MenuItem | CartLine, quantity: int = 1) -> CartResult:
        return self.cart.add_item(item, quantity)

    def remove_item(self, item_id: str) -> CartResult:
        return self.cart.remove_item(item_id)

    def update_quantity(self, item_id: str, quantity: int) -> CartResult:
        return self.cart.update_quantity(item_id, quantity)

    def clear_cart(self) -> CartResult:
        return self.cart.clear()

    def get_total_price(self) -> Decimal:
        return self.cart.get_total_price()

    def get_total_items(self) -> int:
        return self.cart.get_total_items()

    def checkout(self, payment_method: str | None = None) -> str:
        order = self.orders.create_order_from_cart(self.cart, self.principal, payment_method)
        return order.order_id

    def transition(self, order: Order, status) -> Order:
        return self.orders.change_status(order.order_id, status, self.principal)

    def watch_orders(self) -> OrderWatcher:
        if self.principal is None:
            raise UnauthenticatedError()
        return OrderWatcher(self.store, self.principal.uid, self.notification_sink)
