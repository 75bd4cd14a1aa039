# canteen/services/cart_service.py
from decimal import Decimal
from typing import NamedTuple

from canteen.domain.errors import PersistenceError
from canteen.domain.models import Cart, CartLine, MenuItem
from canteen.repos.cart_repo import CartRepo
from canteen.repos.persistence import PersistenceService
from canteen.utils.logging import get_logger

logger = get_logger(__name__)


class CartResult(NamedTuple):
    """Stan koszyka po operacji + ostrzezenie, jesli zapis sie nie udal."""

    cart: Cart
    warning: PersistenceError | None = None


class CartService:
    """
    Koszyk jednego uzytkownika.

    Stan w pamieci jest autorytatywny dla sesji: kazda komenda najpierw
    zmienia koszyk lokalnie, potem zapisuje caly koszyk do store.
    Nieudany zapis nie cofa zmiany, tylko wraca jako warning.
    Bez user_id (gosc) koszyk zyje tylko w pamieci.
    """

    def __init__(self, store: PersistenceService, user_id: str | None):
        self.repo = CartRepo(store)
        self.user_id = user_id
        self.cart = Cart(user_id=user_id)

    #query
    def load(self) -> CartResult:
        if not self.user_id:
            return CartResult(self.snapshot())

        try:
            self.cart = self.repo.load(self.user_id)
        except PersistenceError as e:
            logger.warning(f"Cannot load cart of user {self.user_id}, starting empty: {e}")
            return CartResult(self.snapshot(), e)

        return CartResult(self.snapshot())

    def snapshot(self) -> Cart:
        return self.cart.model_copy(deep=True)

    def get_total_price(self) -> Decimal:
        return self.cart.total_price()

    def get_total_items(self) -> int:
        return self.cart.total_items()

    #commands
    def add_item(self, item: MenuItem | CartLine, quantity: int = 1) -> CartResult:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        existing = self.cart.find(item.item_id)

        if existing:
            logger.info(
                f"Item {item.item_id} already in cart of {self.user_id}, "
                f"quantity {existing.quantity} -> {existing.quantity + quantity}"
            )
            existing.quantity += quantity
        else:
            if isinstance(item, CartLine):
                line = item.model_copy(update={"quantity": quantity})
            else:
                line = CartLine.from_menu_item(item, quantity)
            logger.info(f"Adding item {item.item_id} ({line.canteen_id}) to cart of {self.user_id}")
            self.cart.lines.append(line)

        return self._save()

    def remove_item(self, item_id: str) -> CartResult:
        before = len(self.cart.lines)
        self.cart.lines = [line for line in self.cart.lines if line.item_id != item_id]

        if len(self.cart.lines) == before:
            # brak pozycji: no-op, nic nie zapisujemy
            return CartResult(self.snapshot())

        logger.info(f"Removed item {item_id} from cart of {self.user_id}")
        return self._save()

    def update_quantity(self, item_id: str, quantity: int) -> CartResult:
        if quantity <= 0:
            return self.remove_item(item_id)

        line = self.cart.find(item_id)
        if line is None:
            return CartResult(self.snapshot())

        line.quantity = quantity
        return self._save()

    def clear(self) -> CartResult:
        self.cart.lines = []
        logger.info(f"Cart of {self.user_id} cleared")
        return self._save()

    def _save(self) -> CartResult:
        if not self.user_id:
            return CartResult(self.snapshot())

        try:
            self.repo.save(self.cart)
        except PersistenceError as e:
            logger.warning(f"Cart of user {self.user_id} not saved, keeping local state: {e}")
            return CartResult(self.snapshot(), e)

        return CartResult(self.snapshot())
