# canteen/services/menu_service.py
from typing import List

from canteen.domain.errors import NotFoundError, UnauthenticatedError
from canteen.domain.models import Canteen, MenuItem, Principal, Role
from canteen.domain.schemas import CanteenCreate, MenuItemCreate
from canteen.repos.canteen_repo import CanteenRepo
from canteen.repos.persistence import PersistenceService
from canteen.utils.logging import get_logger

logger = get_logger(__name__)


def _require_menu_manager(actor: Principal | None, canteen_id: str) -> None:
    if actor is None:
        raise UnauthenticatedError()
    if actor.is_admin:
        return
    if actor.role == Role.CANTEEN_STAFF and actor.canteen_id == canteen_id:
        return
    raise PermissionError("No permission to manage this canteen's menu")


class MenuService:
    def __init__(self, store: PersistenceService):
        self.repo = CanteenRepo(store)

    def list_canteens(self) -> List[Canteen]:
        return self.repo.list_active()

    def get_canteen(self, canteen_id: str) -> Canteen:
        canteen = self.repo.get_canteen(canteen_id)
        if not canteen or not canteen.is_active:
            raise NotFoundError(f"Canteen {canteen_id} not found")
        return canteen

    def list_menu(self, canteen_id: str) -> List[MenuItem]:
        return self.repo.list_menu(self.get_canteen(canteen_id))

    def get_menu_item(self, canteen_id: str, item_id: str) -> MenuItem:
        item = self.repo.get_menu_item(self.get_canteen(canteen_id), item_id)
        if not item or not item.is_available:
            raise NotFoundError(f"Menu item {item_id} not available")
        return item

    def create_canteen(self, payload: CanteenCreate, actor: Principal | None) -> Canteen:
        if actor is None:
            raise UnauthenticatedError()
        if not actor.is_admin:
            raise PermissionError("Only admins can register canteens")

        canteen_id = self.repo.create_canteen(payload.name, payload.location)
        logger.info(f"Canteen {canteen_id} ({payload.name}) registered by {actor.uid}")
        return self.get_canteen(canteen_id)

    def add_menu_item(self, canteen_id: str, payload: MenuItemCreate, actor: Principal | None) -> MenuItem:
        _require_menu_manager(actor, canteen_id)
        self.get_canteen(canteen_id)

        item_id = self.repo.add_menu_item(canteen_id, payload.model_dump(mode="json"))
        logger.info(f"Menu item {item_id} added to canteen {canteen_id}")
        return self.get_menu_item(canteen_id, item_id)

    def remove_menu_item(self, canteen_id: str, item_id: str, actor: Principal | None) -> None:
        # soft delete: pozycja znika z menu, stare zamowienia maja swoja kopie
        _require_menu_manager(actor, canteen_id)
        self.get_menu_item(canteen_id, item_id)
        self.repo.set_availability(canteen_id, item_id, False)
        logger.info(f"Menu item {item_id} of canteen {canteen_id} withdrawn")
