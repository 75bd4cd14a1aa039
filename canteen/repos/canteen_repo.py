# canteen/repos/canteen_repo.py
from typing import List

from canteen.domain.models import Canteen, MenuItem
from canteen.repos.persistence import Document, PersistenceService, Query

CANTEENS = "canteens"


def menu_collection(canteen_id: str) -> str:
    return f"{CANTEENS}/{canteen_id}/menuItems"


def _canteen(doc: Document) -> Canteen:
    return Canteen(
        canteen_id=doc["id"],
        name=doc["name"],
        location=doc.get("location", ""),
        is_active=doc.get("is_active", True),
    )


class CanteenRepo:
    def __init__(self, store: PersistenceService):
        self.store = store

    def get_canteen(self, canteen_id: str) -> Canteen | None:
        doc = self.store.get(CANTEENS, canteen_id)
        return _canteen(doc) if doc else None

    def list_active(self) -> List[Canteen]:
        docs = self.store.query(Query(CANTEENS).where("is_active", True).ordered("name"))
        return [_canteen(d) for d in docs]

    def create_canteen(self, name: str, location: str = "") -> str:
        ts = self.store.server_timestamp()
        return self.store.add(
            CANTEENS,
            {"name": name, "location": location, "is_active": True, "created_at": ts, "updated_at": ts},
        )

    def get_menu_item(self, canteen: Canteen, item_id: str) -> MenuItem | None:
        doc = self.store.get(menu_collection(canteen.canteen_id), item_id)
        return self._menu_item(canteen, doc) if doc else None

    def list_menu(self, canteen: Canteen) -> List[MenuItem]:
        query = Query(menu_collection(canteen.canteen_id)).where("is_available", True).ordered(
            "created_at", descending=True
        )
        return [self._menu_item(canteen, d) for d in self.store.query(query)]

    def add_menu_item(self, canteen_id: str, data: Document) -> str:
        ts = self.store.server_timestamp()
        return self.store.add(
            menu_collection(canteen_id),
            {**data, "is_available": True, "created_at": ts, "updated_at": ts},
        )

    def set_availability(self, canteen_id: str, item_id: str, available: bool) -> None:
        self.store.update(
            menu_collection(canteen_id),
            item_id,
            {"is_available": available, "updated_at": self.store.server_timestamp()},
        )

    @staticmethod
    def _menu_item(canteen: Canteen, doc: Document) -> MenuItem:
        return MenuItem(
            item_id=doc["id"],
            name=doc["name"],
            description=doc.get("description", ""),
            price=doc["price"],
            image_ref=doc.get("image_ref"),
            category=doc.get("category", ""),
            canteen_id=canteen.canteen_id,
            canteen_name=canteen.name,
            is_available=doc.get("is_available", True),
        )
