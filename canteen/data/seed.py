# canteen/data/seed.py
from decimal import Decimal

from canteen.data.database import SessionLocal
from canteen.repos.canteen_repo import CanteenRepo
from canteen.repos.document_store import SqlDocumentStore
from canteen.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_MENU = [
    {"name": "Masala Dosa", "description": "Crispy dosa with potato filling", "price": Decimal("60.00"), "category": "breakfast"},
    {"name": "Veg Thali", "description": "Rice, dal, two sabzis, roti", "price": Decimal("90.00"), "category": "meals"},
    {"name": "Cold Coffee", "description": "", "price": Decimal("40.00"), "category": "beverages"},
]


def seed(store=None):
    store = store or SqlDocumentStore(SessionLocal)
    repo = CanteenRepo(store)

    # not forcing: only seed if empty
    if repo.list_active():
        return

    canteen_id = repo.create_canteen("Main Canteen", "Central block")
    for item in DEMO_MENU:
        repo.add_menu_item(canteen_id, {**item, "price": str(item["price"])})

    logger.info(f"Seeded demo canteen {canteen_id} with {len(DEMO_MENU)} menu items")
