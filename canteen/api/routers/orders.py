# canteen/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends

from canteen.api.deps import (
    DOMAIN_ERRORS,
    get_lock_service,
    get_notification_sink,
    get_principal,
    get_store,
    require_principal,
    to_http_error,
)
from canteen.domain.models import Principal
from canteen.domain.schemas import CheckoutIn, OrderOut, StatusChangeIn
from canteen.repos.document_store import SqlDocumentStore
from canteen.services.cart_service import CartService
from canteen.services.lock_service import LockService
from canteen.services.notification_service import NotificationService
from canteen.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    store: SqlDocumentStore = Depends(get_store),
    sink: NotificationService = Depends(get_notification_sink),
    lock_service: LockService = Depends(get_lock_service),
) -> OrderService:
    return OrderService(store, sink, lock_service=lock_service)


@router.post("/", response_model=OrderOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    principal: Principal | None = Depends(get_principal),
    store: SqlDocumentStore = Depends(get_store),
    svc: OrderService = Depends(get_service),
):
    """
    Checkout: zamowienie z koszyka zalogowanego uzytkownika.
    Koszyk jest czyszczony dopiero po zapisaniu zamowienia.
    """
    cart_service = CartService(store, principal.uid if principal else None)
    try:
        loaded = cart_service.load()
        if loaded.warning:
            raise loaded.warning
        return svc.create_order_from_cart(cart_service, principal, payload.payment_method)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)


@router.get("/", response_model=List[OrderOut])
def list_my_orders(
    principal: Principal = Depends(require_principal),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.list_orders_for_user(principal)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)


@router.get("/canteen/{canteen_id}", response_model=List[OrderOut])
def list_canteen_orders(
    canteen_id: str,
    principal: Principal = Depends(require_principal),
    svc: OrderService = Depends(get_service),
):
    """Tablica zamowien stolowki dla obslugi, najnowsze na gorze."""
    try:
        return svc.list_orders_for_canteen(canteen_id, principal)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    principal: Principal = Depends(require_principal),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.get_order(order_id, principal)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)


@router.post("/{order_id}/status", response_model=OrderOut)
def change_status(
    order_id: str,
    payload: StatusChangeIn,
    principal: Principal = Depends(require_principal),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.change_status(order_id, payload.status, principal)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
