# canteen/repos/persistence.py
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Protocol, Tuple

Document = Dict[str, Any]
SnapshotCallback = Callable[[List[Document]], None]
Unsubscribe = Callable[[], None]


class _ServerTimestamp:
    """Placeholder podmieniany przez store na czas zapisu."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Query:
    collection: str
    filters: Tuple[Tuple[str, Any], ...] = field(default_factory=tuple)
    order_by: str | None = None
    descending: bool = False

    def where(self, name: str, value: Any) -> "Query":
        return Query(self.collection, self.filters + ((name, value),), self.order_by, self.descending)

    def ordered(self, name: str, descending: bool = False) -> "Query":
        return Query(self.collection, self.filters, name, descending)

    def matches(self, doc: Document) -> bool:
        return all(doc.get(name) == value for name, value in self.filters)


class PersistenceService(Protocol):
    """
    Dokumentowy store z subskrypcjami na zywo.
    Dokumenty zwracane sa jako dict z kluczem "id".
    """

    def get(self, collection: str, doc_id: str) -> Document | None: ...

    def put(self, collection: str, doc_id: str, data: Document, merge: bool = False) -> None: ...

    def add(self, collection: str, data: Document) -> str: ...

    def update(self, collection: str, doc_id: str, partial: Document) -> None: ...

    def query(self, query: Query) -> List[Document]: ...

    def subscribe(self, query: Query, callback: SnapshotCallback) -> Unsubscribe: ...

    def server_timestamp(self) -> Any: ...
