# canteen/api/routers/carts.py
from fastapi import APIRouter, Depends

from canteen.api.deps import DOMAIN_ERRORS, get_store, require_principal, to_http_error
from canteen.domain.models import Principal
from canteen.domain.schemas import CartOut, ItemIn, QuantityIn
from canteen.repos.document_store import SqlDocumentStore
from canteen.services.cart_service import CartResult, CartService
from canteen.services.menu_service import MenuService
from canteen.utils.settings import MAX_ITEM_QUANTITY

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(store: SqlDocumentStore, principal: Principal) -> CartService:
    svc = CartService(store, principal.uid)
    result = svc.load()
    if result.warning:
        # bez odczytu koszyka zapis nadpisalby go pustym stanem
        raise to_http_error(result.warning)
    return svc


def to_out(result: CartResult) -> CartOut:
    cart = result.cart
    return CartOut(
        user_id=cart.user_id,
        lines=cart.lines,
        total_price=cart.total_price(),
        total_items=cart.total_items(),
        warning=str(result.warning) if result.warning else None,
    )


@router.get("/me", response_model=CartOut)
def get_cart(
    principal: Principal = Depends(require_principal),
    store: SqlDocumentStore = Depends(get_store),
):
    svc = get_service(store, principal)
    return to_out(CartResult(svc.snapshot()))


@router.post("/me/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    principal: Principal = Depends(require_principal),
    store: SqlDocumentStore = Depends(get_store),
):
    svc = get_service(store, principal)
    try:
        item = MenuService(store).get_menu_item(payload.canteen_id, payload.item_id)
        existing = svc.cart.find(item.item_id)
        if existing and existing.quantity + payload.quantity > MAX_ITEM_QUANTITY:
            raise ValueError(f"At most {MAX_ITEM_QUANTITY} of one item per order")
        return to_out(svc.add_item(item, payload.quantity))
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)


@router.patch("/me/items/{item_id}", response_model=CartOut)
def update_quantity(
    item_id: str,
    payload: QuantityIn,
    principal: Principal = Depends(require_principal),
    store: SqlDocumentStore = Depends(get_store),
):
    svc = get_service(store, principal)
    return to_out(svc.update_quantity(item_id, payload.quantity))


@router.delete("/me/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: str,
    principal: Principal = Depends(require_principal),
    store: SqlDocumentStore = Depends(get_store),
):
    svc = get_service(store, principal)
    return to_out(svc.remove_item(item_id))


@router.delete("/me", response_model=CartOut)
def clear_cart(
    principal: Principal = Depends(require_principal),
    store: SqlDocumentStore = Depends(get_store),
):
    svc = get_service(store, principal)
    return to_out(svc.clear())
