# tests/test_checkout.py
from decimal import Decimal

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from canteen.domain.errors import (
    CheckoutInProgressError,
    CheckoutUnavailableError,
    EmptyCartError,
    MixedCanteenError,
    PersistenceError,
    UnauthenticatedError,
)
from canteen.domain.models import OrderStatus
from canteen.repos.order_repo import ORDERS
from canteen.repos.persistence import Query
from canteen.services.cart_service import CartService
from canteen.services.engine import OrderLifecycleEngine
from canteen.services.order_service import OrderService

from tests.conftest import FakeLock, FlakyStore, make_item


def all_orders(store):
    return store.query(Query(ORDERS))


def cart_for(store, principal, *items):
    svc = CartService(store, principal.uid if principal else None)
    svc.load()
    for item, quantity in items:
        svc.add_item(item, quantity)
    return svc


def test_checkout_creates_pending_order_and_clears_cart(store, order_service, user):
    cart = cart_for(store, user, (make_item("A", price="10.00", canteen_id="C1"), 2))

    order = order_service.create_order_from_cart(cart, user, "upi")

    assert order.order_id
    assert order.subtotal == Decimal("20.00")
    assert order.tax_amount == Decimal("2.00")
    assert order.total == Decimal("22.00")
    assert order.status == OrderStatus.PENDING
    assert order.canteen_id == "C1"
    assert order.payment_method == "upi"
    assert order.payment_status == "completed"
    assert order.created_at is not None
    assert cart.cart.lines == []

    reloaded = CartService(store, user.uid)
    reloaded.load()
    assert reloaded.cart.lines == []


def test_order_snapshots_cart_lines(store, order_service, user):
    cart = cart_for(store, user, (make_item("A", price="3.25"), 1), (make_item("B", price="1.00"), 4))

    order = order_service.create_order_from_cart(cart, user)

    assert [(i.item_id, i.quantity, i.price) for i in order.items] == [
        ("A", 1, Decimal("3.25")),
        ("B", 4, Decimal("1.00")),
    ]
    assert order.customer_name == "Student One"
    assert order.user_email == "student@campus.edu"
    assert order.payment_status is None


@pytest.mark.parametrize(
    "canteens",
    [("C1", "C2"), ("C2", "C1", "C1"), ("C1", "C1", "C3")],
)
def test_mixed_canteen_cart_is_rejected_and_untouched(store, order_service, user, canteens):
    cart = cart_for(
        store,
        user,
        *[(make_item(f"I{n}", canteen_id=cid), 1) for n, cid in enumerate(canteens)],
    )
    before = cart.snapshot().lines

    with pytest.raises(MixedCanteenError) as exc:
        order_service.create_order_from_cart(cart, user)

    assert "split" in str(exc.value)
    assert cart.cart.lines == before
    assert all_orders(store) == []


def test_empty_cart_is_rejected(store, order_service, user):
    with pytest.raises(EmptyCartError):
        order_service.create_order_from_cart(cart_for(store, user), user)


def test_guest_cannot_check_out(store, order_service):
    cart = cart_for(store, None, (make_item("A"), 1))

    with pytest.raises(UnauthenticatedError):
        order_service.create_order_from_cart(cart, None)

    assert all_orders(store) == []


def test_cart_of_another_user_is_refused(store, order_service, user, admin):
    cart = cart_for(store, user, (make_item("A"), 1))

    with pytest.raises(PermissionError):
        order_service.create_order_from_cart(cart, admin)


def test_cart_survives_failed_order_write(store, sink, user):
    flaky = FlakyStore(store, failing={"add"})
    cart = cart_for(flaky, user, (make_item("A"), 2), (make_item("B"), 1))
    before = cart.snapshot().lines

    with pytest.raises(PersistenceError):
        OrderService(flaky, sink).create_order_from_cart(cart, user)

    assert cart.cart.lines == before
    persisted = CartService(store, user.uid)
    persisted.load()
    assert persisted.cart.lines == before


def test_order_placed_even_if_cart_clear_not_saved(store, sink, user):
    flaky = FlakyStore(store)
    cart = cart_for(flaky, user, (make_item("A"), 1))
    flaky.failing.add("put")

    order = OrderService(flaky, sink).create_order_from_cart(cart, user)

    assert order.order_id
    assert cart.cart.lines == []


def test_tax_rate_is_configurable(store, sink, user):
    cart = cart_for(store, user, (make_item("A", price="9.99"), 3))

    order = OrderService(store, sink, tax_rate=Decimal("0.05")).create_order_from_cart(cart, user)

    assert order.subtotal == Decimal("29.97")
    assert order.tax_amount == Decimal("1.50")
    assert order.total == order.subtotal + order.tax_amount


def test_checkout_lock_prevents_double_submit(store, sink, user):
    lock = FakeLock()
    lock.held[user.uid] = "other-request"
    cart = cart_for(store, user, (make_item("A"), 1))

    with pytest.raises(CheckoutInProgressError):
        OrderService(store, sink, lock_service=lock).create_order_from_cart(cart, user)

    assert cart.cart.lines != []


def test_checkout_lock_is_released(store, sink, user):
    lock = FakeLock()
    cart = cart_for(store, user, (make_item("A"), 1))

    OrderService(store, sink, lock_service=lock).create_order_from_cart(cart, user)

    assert lock.held == {}
    assert lock.released == [user.uid]


class BrokenReleaseLock(FakeLock):
    def release_checkout_lock(self, user_id, token):
        raise RedisConnectionError("redis went away")


class BrokenAcquireLock(FakeLock):
    def acquire_checkout_lock(self, user_id, token, ttl=30):
        raise RedisConnectionError("redis went away")


def test_order_survives_failed_lock_release(store, sink, user):
    cart = cart_for(store, user, (make_item("A"), 1))

    order = OrderService(store, sink, lock_service=BrokenReleaseLock()).create_order_from_cart(cart, user)

    assert [o["id"] for o in all_orders(store)] == [order.order_id]
    assert cart.cart.lines == []


def test_lock_outage_blocks_checkout_before_any_write(store, sink, user):
    cart = cart_for(store, user, (make_item("A"), 1))

    with pytest.raises(CheckoutUnavailableError):
        OrderService(store, sink, lock_service=BrokenAcquireLock()).create_order_from_cart(cart, user)

    assert all_orders(store) == []
    assert len(cart.cart.lines) == 1


def test_engine_checkout_returns_order_id(store, sink, user):
    engine = OrderLifecycleEngine(store, user, sink, tax_rate=Decimal("0.10"))
    engine.load_cart()
    engine.add_item(make_item("A", price="10.00"))
    engine.add_item(make_item("A", price="10.00"))

    order_id = engine.checkout()

    stored = store.get(ORDERS, order_id)
    assert stored["total"] == "22.00"
    assert stored["status"] == "pending"
    assert engine.get_total_items() == 0


def test_engine_guest_checkout_order_of_checks(store, sink):
    engine = OrderLifecycleEngine(store, None, sink)

    with pytest.raises(EmptyCartError):
        engine.checkout()

    engine.add_item(make_item("A", canteen_id="C1"))
    engine.add_item(make_item("B", canteen_id="C2"))
    with pytest.raises(MixedCanteenError):
        engine.checkout()

    engine.remove_item("B")
    with pytest.raises(UnauthenticatedError):
        engine.checkout()
