# canteen/domain/events.py
from typing import Iterable, NamedTuple

from canteen.domain.models import Order, OrderStatus


class StatusChange(NamedTuple):
    order_id: str
    user_id: str
    previous: OrderStatus
    current: OrderStatus


def diff_order_snapshots(
    previous: Iterable[Order] | None,
    current: Iterable[Order],
) -> list[StatusChange]:
    """
    Porownuje dwa kolejne snapshoty listy zamowien z subskrypcji.

    Pusty (lub brak) poprzedni snapshot to baseline: nic nie emitujemy.
    Nowe zamowienia (nieobecne wczesniej) tez nie generuja zdarzen.
    Kolejnosc zdarzen = kolejnosc zamowien w nowym snapshocie.
    """
    before = {order.order_id: order.status for order in (previous or ())}
    if not before:
        return []

    changes = []
    for order in current:
        old_status = before.get(order.order_id)
        if old_status is not None and old_status != order.status:
            changes.append(StatusChange(order.order_id, order.user_id, old_status, order.status))

    return changes
