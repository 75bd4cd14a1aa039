# tests/test_seed.py
from canteen.data.seed import DEMO_MENU, seed
from canteen.services.menu_service import MenuService


def test_seed_creates_demo_canteen_once(store):
    seed(store)
    seed(store)

    canteens = MenuService(store).list_canteens()
    assert [c.name for c in canteens] == ["Main Canteen"]

    menu = MenuService(store).list_menu(canteens[0].canteen_id)
    assert sorted(i.name for i in menu) == sorted(i["name"] for i in DEMO_MENU)
    assert all(i.canteen_name == "Main Canteen" for i in menu)
