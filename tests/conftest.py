# tests/conftest.py
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "false")

from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from canteen.data.database import Base, make_engine
from canteen.data.models import DocumentModel  # noqa: F401
from canteen.domain.errors import PersistenceError
from canteen.domain.models import MenuItem, Order, OrderItem, OrderStatus, Principal, Role
from canteen.repos.document_store import SqlDocumentStore
from canteen.services.order_service import OrderService


class FakeSink:
    def __init__(self):
        self.calls = []

    def notify(self, title, body, dedupe_tag, user_id=None):
        self.calls.append({"title": title, "body": body, "tag": dedupe_tag, "user_id": user_id})


class FakeLock:
    def __init__(self):
        self.held = {}
        self.released = []

    def acquire_checkout_lock(self, user_id, token, ttl=30):
        if user_id in self.held:
            return False
        self.held[user_id] = token
        return True

    def release_checkout_lock(self, user_id, token):
        if self.held.get(user_id) == token:
            del self.held[user_id]
            self.released.append(user_id)
            return True
        return False


class FlakyStore:
    """Przepuszcza wywolania do prawdziwego store, wybrane operacje rzucaja PersistenceError."""

    def __init__(self, store, failing=()):
        self.store = store
        self.failing = set(failing)

    def _check(self, op):
        if op in self.failing:
            raise PersistenceError(op, RuntimeError("backend unavailable"))

    def get(self, collection, doc_id):
        self._check("get")
        return self.store.get(collection, doc_id)

    def put(self, collection, doc_id, data, merge=False):
        self._check("put")
        return self.store.put(collection, doc_id, data, merge)

    def add(self, collection, data):
        self._check("add")
        return self.store.add(collection, data)

    def update(self, collection, doc_id, partial):
        self._check("update")
        return self.store.update(collection, doc_id, partial)

    def query(self, query):
        self._check("query")
        return self.store.query(query)

    def subscribe(self, query, callback):
        self._check("subscribe")
        return self.store.subscribe(query, callback)

    def server_timestamp(self):
        return self.store.server_timestamp()


@pytest.fixture
def engine():
    eng = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    return SqlDocumentStore(sessionmaker(bind=engine, expire_on_commit=False))


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def order_service(store, sink):
    return OrderService(store, sink, tax_rate=Decimal("0.10"))


@pytest.fixture
def user():
    return Principal(uid="u1", email="student@campus.edu", display_name="Student One", role=Role.USER)


@pytest.fixture
def admin():
    return Principal(uid="admin1", email="admin@campus.edu", role=Role.ADMIN)


@pytest.fixture
def staff():
    return Principal(uid="staff1", email="staff@campus.edu", role=Role.CANTEEN_STAFF, canteen_id="C1")


def make_item(item_id="A", price="10.00", canteen_id="C1", canteen_name="North Canteen"):
    return MenuItem(
        item_id=item_id,
        name=f"Item {item_id}",
        description="",
        price=Decimal(price),
        category="meals",
        canteen_id=canteen_id,
        canteen_name=canteen_name,
    )


def make_order(order_id="o1", status=OrderStatus.PENDING, user_id="u1"):
    return Order(
        order_id=order_id,
        user_id=user_id,
        canteen_id="C1",
        canteen_name="North Canteen",
        items=(OrderItem(item_id="A", name="Item A", price=Decimal("10.00"), quantity=1),),
        subtotal=Decimal("10.00"),
        tax_amount=Decimal("1.00"),
        total=Decimal("11.00"),
        status=status,
    )
