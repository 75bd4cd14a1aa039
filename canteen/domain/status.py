# canteen/domain/status.py
"""
Maszyna stanow zamowienia.

    pending -> accepted -> preparing -> ready -> delivered -> completed
    ready -> completed            (odbior przy ladzie, bez dostawy)
    pending -> rejected
    pending/accepted/preparing/ready -> cancelled

completed, rejected i cancelled sa terminalne.
"""
from typing import NamedTuple

from canteen.domain.errors import InvalidTransition
from canteen.domain.models import OrderStatus

_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.ACCEPTED, OrderStatus.REJECTED, OrderStatus.CANCELLED},
    OrderStatus.ACCEPTED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.DELIVERED, OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.REJECTED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATUSES = frozenset(s for s, targets in _VALID_TRANSITIONS.items() if not targets)


class Notification(NamedTuple):
    title: str
    body: str
    dedupe_tag: str


# statusy, o ktorych uzytkownik dostaje powiadomienie
_NOTIFICATION_TEXTS = {
    OrderStatus.ACCEPTED: (
        "Order Accepted!",
        "Your order #{ref} has been accepted and will be prepared soon.",
    ),
    OrderStatus.PREPARING: (
        "Order in Progress!",
        "Chefs are preparing your food for order #{ref}.",
    ),
    OrderStatus.READY: (
        "Order Ready for Pickup!",
        "Your order #{ref} is ready! Come and collect it.",
    ),
    OrderStatus.COMPLETED: (
        "Order Completed!",
        "Thank you for your order #{ref}! We hope you enjoyed it.",
    ),
    OrderStatus.REJECTED: (
        "Order Rejected",
        "Your order #{ref} has been rejected. Please contact support.",
    ),
}


def parse_status(value) -> OrderStatus | None:
    try:
        return OrderStatus(value)
    except ValueError:
        return None


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def allowed_transitions(status: OrderStatus) -> set[OrderStatus]:
    return set(_VALID_TRANSITIONS[status])


def validate_transition(current: OrderStatus, target) -> OrderStatus:
    """Zwraca docelowy status albo rzuca InvalidTransition."""
    target_status = parse_status(target)
    target_name = target_status.value if target_status else str(target)

    if target_status is None:
        raise InvalidTransition(current.value, target_name, "unknown status")

    if is_terminal(current):
        raise InvalidTransition(current.value, target_name, f"'{current.value}' is a final status")

    if target_status not in _VALID_TRANSITIONS[current]:
        raise InvalidTransition(current.value, target_name)

    return target_status


def notification_for(order_id: str, status: OrderStatus) -> Notification | None:
    texts = _NOTIFICATION_TEXTS.get(status)
    if texts is None:
        return None

    title, body = texts
    return Notification(title, body.format(ref=order_id[-8:]), order_id)
