# canteen/repos/cart_repo.py
from canteen.domain.models import Cart, CartLine
from canteen.repos.persistence import PersistenceService

CART_DOC_ID = "items"


def cart_collection(user_id: str) -> str:
    return f"users/{user_id}/cart"


class CartRepo:
    """Koszyk uzytkownika trzymany jako jeden dokument users/{uid}/cart/items."""

    def __init__(self, store: PersistenceService):
        self.store = store

    def load(self, user_id: str) -> Cart:
        doc = self.store.get(cart_collection(user_id), CART_DOC_ID)
        if not doc:
            return Cart(user_id=user_id)

        lines = [CartLine.model_validate(raw) for raw in doc.get("items", [])]
        return Cart(user_id=user_id, lines=lines)

    def save(self, cart: Cart) -> None:
        self.store.put(
            cart_collection(cart.user_id),
            CART_DOC_ID,
            {
                "items": [line.model_dump(mode="json") for line in cart.lines],
                "updated_at": self.store.server_timestamp(),
            },
        )
