# tests/test_order_transitions.py
from decimal import Decimal

import pytest

from canteen.domain.errors import InvalidTransition, NotFoundError, UnauthenticatedError
from canteen.domain.models import OrderStatus, Principal, Role
from canteen.services.cart_service import CartService
from canteen.services.engine import OrderLifecycleEngine

from tests.conftest import make_item, make_order


@pytest.fixture
def placed(store, order_service, user):
    cart = CartService(store, user.uid)
    cart.add_item(make_item("A", price="10.00"), 2)
    return order_service.create_order_from_cart(cart, user, "card")


def test_full_pickup_lifecycle_notifies_each_step(order_service, sink, placed):
    order = placed

    for status in ("accepted", "preparing", "ready", "completed"):
        calls_before = len(sink.calls)
        order = order_service.transition(order, status)
        assert order.status.value == status
        assert len(sink.calls) == calls_before + 1
        assert sink.calls[-1]["tag"] == placed.order_id
        assert sink.calls[-1]["user_id"] == placed.user_id

    assert len({call["title"] for call in sink.calls}) == 4

    with pytest.raises(InvalidTransition):
        order_service.transition(order, "preparing")
    assert order.status == OrderStatus.COMPLETED
    assert len(sink.calls) == 4


def test_status_changes_never_touch_money(store, order_service, placed):
    order = placed
    for status in ("accepted", "preparing", "ready", "delivered", "completed"):
        order = order_service.transition(order, status)
        assert order.total == order.subtotal + order.tax_amount

    stored = order_service.repo.get_order(placed.order_id)
    assert stored.status == OrderStatus.COMPLETED
    assert (stored.subtotal, stored.tax_amount, stored.total) == (
        Decimal("20.00"),
        Decimal("2.00"),
        Decimal("22.00"),
    )
    assert stored.items == placed.items


@pytest.mark.parametrize(
    "path",
    [
        ("accepted", "preparing", "ready", "completed"),
        ("rejected",),
        ("cancelled",),
        ("accepted", "preparing", "cancelled"),
    ],
)
def test_terminal_orders_are_frozen(order_service, placed, path):
    order = placed
    for status in path:
        order = order_service.transition(order, status)

    for target in OrderStatus:
        with pytest.raises(InvalidTransition):
            order_service.transition(order, target)

    assert order_service.repo.get_order(placed.order_id).status.value == path[-1]


def test_skipping_a_step_leaves_order_unchanged(order_service, sink, placed):
    with pytest.raises(InvalidTransition):
        order_service.transition(placed, "ready")

    assert placed.status == OrderStatus.PENDING
    assert order_service.repo.get_order(placed.order_id).status == OrderStatus.PENDING
    assert sink.calls == []


def test_transition_updates_timestamp(order_service, placed):
    accepted = order_service.transition(placed, "accepted")

    assert accepted.updated_at is not None
    assert accepted.updated_at >= placed.created_at
    stored = order_service.repo.get_order(placed.order_id)
    assert stored.updated_at >= stored.created_at


def test_delivered_and_cancelled_are_silent(store, order_service, sink, user, placed):
    order = placed
    for status in ("accepted", "preparing", "ready"):
        order = order_service.transition(order, status)
    other = placed_order(store, order_service, user, "B")
    sink.calls.clear()

    order_service.transition(order, "delivered")
    order_service.transition(other, "cancelled")

    assert sink.calls == []


def test_staff_changes_status_of_own_canteen(order_service, placed, staff):
    order = order_service.change_status(placed.order_id, "accepted", staff)

    assert order.status == OrderStatus.ACCEPTED


def test_change_status_uses_stored_status(order_service, placed, admin):
    order_service.change_status(placed.order_id, "accepted", admin)

    # kopia klienta jest nieaktualna (pending), ale liczy sie stan w store
    order = order_service.change_status(placed.order_id, "preparing", admin)
    assert order.status == OrderStatus.PREPARING


@pytest.mark.parametrize(
    "actor",
    [
        Principal(uid="u2", role=Role.USER),
        Principal(uid="staff2", role=Role.CANTEEN_STAFF, canteen_id="C9"),
    ],
)
def test_change_status_requires_permission(order_service, placed, actor):
    with pytest.raises(PermissionError):
        order_service.change_status(placed.order_id, "accepted", actor)


def test_change_status_requires_login(order_service, placed):
    with pytest.raises(UnauthenticatedError):
        order_service.change_status(placed.order_id, "accepted", None)


def test_change_status_of_missing_order(order_service, admin):
    with pytest.raises(NotFoundError):
        order_service.change_status("missing", "accepted", admin)


def test_order_visibility(order_service, placed, user, staff, admin):
    assert order_service.get_order(placed.order_id, user).order_id == placed.order_id
    assert order_service.get_order(placed.order_id, staff).order_id == placed.order_id
    assert order_service.get_order(placed.order_id, admin).order_id == placed.order_id

    with pytest.raises(PermissionError):
        order_service.get_order(placed.order_id, Principal(uid="u2"))


def test_canteen_board_lists_newest_first(store, order_service, user, staff):
    first = placed_order(store, order_service, user, "A")
    second = placed_order(store, order_service, user, "B")

    board = order_service.list_orders_for_canteen("C1", staff)

    assert [o.order_id for o in board] == [second.order_id, first.order_id]
    assert [o.order_id for o in order_service.list_orders_for_user(user)] == [
        second.order_id,
        first.order_id,
    ]

    with pytest.raises(PermissionError):
        order_service.list_orders_for_canteen("C1", user)


def test_stale_copy_cannot_reopen_completed_order(store, sink, order_service, placed, admin):
    order = placed
    for status in ("accepted", "preparing", "ready", "completed"):
        order = order_service.transition(order, status)
    sink.calls.clear()

    with pytest.raises(InvalidTransition):
        OrderLifecycleEngine(store, admin, sink).transition(placed, "accepted")
    with pytest.raises(InvalidTransition):
        order_service.transition(placed, "accepted")

    assert order_service.repo.get_order(placed.order_id).status == OrderStatus.COMPLETED
    assert sink.calls == []


def test_stale_copy_follows_stored_status(order_service, placed):
    order_service.transition(placed, "accepted")

    # placed to nadal kopia "pending"; w store jest juz accepted
    order = order_service.transition(placed, "preparing")

    assert order.status == OrderStatus.PREPARING
    with pytest.raises(InvalidTransition):
        order_service.transition(placed, "rejected")


def test_transition_of_unknown_order(order_service):
    with pytest.raises(NotFoundError):
        order_service.transition(make_order(order_id="missing"), "accepted")


def test_engine_transition_checks_role(store, sink, placed, user, admin):
    with pytest.raises(PermissionError):
        OrderLifecycleEngine(store, user, sink).transition(placed, "accepted")

    order = OrderLifecycleEngine(store, admin, sink).transition(placed, "accepted")
    assert order.status == OrderStatus.ACCEPTED


def placed_order(store, order_service, user, item_id):
    cart = CartService(store, user.uid)
    cart.load()
    cart.add_item(make_item(item_id))
    return order_service.create_order_from_cart(cart, user)
