# canteen/services/order_service.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from redis.exceptions import RedisError

from canteen.domain.errors import (
    CheckoutInProgressError,
    CheckoutUnavailableError,
    EmptyCartError,
    MixedCanteenError,
    NotFoundError,
    PersistenceError,
    UnauthenticatedError,
)
from canteen.domain.models import Order, OrderItem, OrderStatus, Principal, Role
from canteen.domain.pricing import compute_totals
from canteen.domain.status import notification_for, validate_transition
from canteen.repos.order_repo import OrderRepo
from canteen.repos.persistence import PersistenceService
from canteen.services.cart_service import CartService
from canteen.services.lock_service import LockService
from canteen.services.notification_service import NotificationSink
from canteen.utils.logging import get_logger
from canteen.utils.settings import TAX_RATE

logger = get_logger(__name__)

PAYMENT_COMPLETED = "completed"


def authorize_status_change(actor: Principal | None, order: Order) -> None:
    if actor is None:
        raise UnauthenticatedError()

    if not actor.is_staff:
        raise PermissionError("Only canteen staff and admins can change order status")

    if actor.role == Role.CANTEEN_STAFF and actor.canteen_id != order.canteen_id:
        raise PermissionError("Staff can only manage orders of their own canteen")


def authorize_read(actor: Principal | None, order: Order) -> None:
    if actor is None:
        raise UnauthenticatedError()

    if order.user_id == actor.uid or actor.is_admin:
        return

    if actor.role == Role.CANTEEN_STAFF and actor.canteen_id == order.canteen_id:
        return

    raise PermissionError("No access to this order")


class OrderService:
    """
    Domena zamowien: checkout (koszyk -> zamowienie) i zmiany statusu.
    """

    def __init__(
        self,
        store: PersistenceService,
        notification_sink: NotificationSink,
        tax_rate: Decimal = TAX_RATE,
        lock_service: LockService | None = None,
    ):
        self.repo = OrderRepo(store)
        self.notification_sink = notification_sink
        self.tax_rate = tax_rate
        self.lock_service = lock_service

    def create_order_from_cart(
        self,
        cart_service: CartService,
        principal: Principal | None,
        payment_method: str | None = None,
    ) -> Order:
        """
        Use Case: tworzenie zamowienia z koszyka.

        1. Walidacja: pusty koszyk, jedna stolowka, zalogowany uzytkownik
        2. Sumy (subtotal, podatek, total) zamrozone w zamowieniu
        3. Zapis zamowienia; dopiero po sukcesie czyszczenie koszyka
        """
        cart = cart_service.cart

        if not cart.lines:
            raise EmptyCartError()

        canteen_ids = cart.canteen_ids()
        if len(canteen_ids) > 1:
            raise MixedCanteenError(canteen_ids)

        if principal is None:
            raise UnauthenticatedError()

        if cart.user_id != principal.uid:
            raise PermissionError("No access to this cart")

        token = uuid.uuid4().hex
        if self.lock_service:
            try:
                acquired = self.lock_service.acquire_checkout_lock(principal.uid, token)
            except RedisError as e:
                logger.error(f"Checkout lock for {principal.uid} unavailable: {e}")
                raise CheckoutUnavailableError() from e
            if not acquired:
                raise CheckoutInProgressError(principal.uid)

        try:
            return self._place_order(cart_service, principal, payment_method)
        finally:
            if self.lock_service:
                self._release_lock(principal.uid, token)

    def _release_lock(self, user_id: str, token: str) -> None:
        # lock ma TTL; blad zwolnienia nie moze cofnac zapisanego zamowienia
        try:
            self.lock_service.release_checkout_lock(user_id, token)
        except RedisError as e:
            logger.warning(f"Checkout lock for {user_id} not released, expires by TTL: {e}")

    def _place_order(self, cart_service, principal, payment_method):
        lines = cart_service.snapshot().lines
        totals = compute_totals(lines, self.tax_rate)
        first = lines[0]

        order = Order(
            user_id=principal.uid,
            user_email=principal.email,
            customer_name=principal.display_name or principal.email,
            canteen_id=first.canteen_id,
            canteen_name=first.canteen_name,
            items=tuple(
                OrderItem(
                    item_id=line.item_id,
                    name=line.name,
                    description=line.description,
                    price=line.price,
                    quantity=line.quantity,
                    image_ref=line.image_ref,
                    category=line.category,
                )
                for line in lines
            ),
            subtotal=totals.subtotal,
            tax_amount=totals.tax_amount,
            total=totals.total,
            status=OrderStatus.PENDING,
            payment_method=payment_method,
            # platnosc symulowana: zawsze od razu zaplacone
            payment_status=PAYMENT_COMPLETED if payment_method else None,
        )

        # blad zapisu -> PersistenceError w gore, koszyk nietkniety
        order_id = self.repo.create_order(order)
        logger.info(
            f"Order {order_id} created for user {principal.uid} "
            f"at canteen {order.canteen_id}, total {order.total}"
        )

        cleared = cart_service.clear()
        if cleared.warning:
            logger.warning(f"Order {order_id} placed but cart of {principal.uid} not cleared in store")

        return self._reload(order_id, order.model_copy(update={"order_id": order_id}))

    def _reload(self, order_id: str, fallback: Order) -> Order:
        # zamowienie juz jest zapisane; nieudany odczyt nie moze zepsuc checkoutu
        try:
            return self.repo.get_order(order_id) or fallback
        except PersistenceError as e:
            logger.warning(f"Order {order_id} saved but could not be re-read: {e}")
            return fallback

    #query
    def get_order(self, order_id: str, principal: Principal | None) -> Order:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError(f"Order {order_id} not found")

        authorize_read(principal, order)
        return order

    def list_orders_for_user(self, principal: Principal | None) -> List[Order]:
        if principal is None:
            raise UnauthenticatedError()
        return self.repo.list_for_user(principal.uid)

    def list_orders_for_canteen(self, canteen_id: str, principal: Principal | None) -> List[Order]:
        if principal is None:
            raise UnauthenticatedError()

        if not (principal.is_admin or (principal.role == Role.CANTEEN_STAFF and principal.canteen_id == canteen_id)):
            raise PermissionError("No access to this canteen's orders")

        return self.repo.list_for_canteen(canteen_id)

    #status
    def transition(self, order: Order, status) -> Order:
        """
        Zmiana statusu zgodnie z maszyna stanow.
        Zmienia tylko status i updated_at; kwoty zostaja zamrozone.

        Walidacja idzie od statusu zapisanego w store; przekazany `order`
        sluzy tylko do wskazania zamowienia.
        """
        order = self._stored(order.order_id)
        target = validate_transition(order.status, status)

        self.repo.update_order_status(order.order_id, target)
        logger.info(f"Order {order.order_id}: {order.status.value} -> {target.value}")

        updated = order.model_copy(update={"status": target, "updated_at": datetime.now(timezone.utc)})

        notification = notification_for(order.order_id, target)
        if notification:
            self.notification_sink.notify(
                notification.title,
                notification.body,
                notification.dedupe_tag,
                user_id=order.user_id,
            )

        return updated

    def change_status(self, order_id: str, status, actor: Principal | None) -> Order:
        order = self._stored(order_id)
        authorize_status_change(actor, order)
        return self.transition(order, status)

    def _stored(self, order_id: str | None) -> Order:
        order = self.repo.get_order(order_id) if order_id else None

        if not order:
            raise NotFoundError(f"Order {order_id} not found")

        return order
