# canteen/api/routers/canteens.py
from typing import List

from fastapi import APIRouter, Depends

from canteen.api.deps import DOMAIN_ERRORS, get_principal, get_store, to_http_error
from canteen.domain.models import Principal
from canteen.domain.schemas import CanteenCreate, CanteenOut, MenuItemCreate, MenuItemOut
from canteen.repos.document_store import SqlDocumentStore
from canteen.services.menu_service import MenuService

router = APIRouter(prefix="/canteens", tags=["canteens"])


@router.get("/", response_model=List[CanteenOut])
def list_canteens(store: SqlDocumentStore = Depends(get_store)):
    try:
        return MenuService(store).list_canteens()
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)


@router.post("/", response_model=CanteenOut, status_code=201)
def create_canteen(
    payload: CanteenCreate,
    principal: Principal | None = Depends(get_principal),
    store: SqlDocumentStore = Depends(get_store),
):
    try:
        return MenuService(store).create_canteen(payload, principal)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)


@router.get("/{canteen_id}/menu", response_model=List[MenuItemOut])
def list_menu(canteen_id: str, store: SqlDocumentStore = Depends(get_store)):
    try:
        return MenuService(store).list_menu(canteen_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)


@router.post("/{canteen_id}/menu", response_model=MenuItemOut, status_code=201)
def add_menu_item(
    canteen_id: str,
    payload: MenuItemCreate,
    principal: Principal | None = Depends(get_principal),
    store: SqlDocumentStore = Depends(get_store),
):
    try:
        return MenuService(store).add_menu_item(canteen_id, payload, principal)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)


@router.delete("/{canteen_id}/menu/{item_id}", status_code=204)
def remove_menu_item(
    canteen_id: str,
    item_id: str,
    principal: Principal | None = Depends(get_principal),
    store: SqlDocumentStore = Depends(get_store),
):
    try:
        MenuService(store).remove_menu_item(canteen_id, item_id, principal)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
