# canteen/repos/document_store.py
import functools
import itertools
import threading
import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from canteen.data.models.document import DocumentModel
from canteen.domain.errors import NotFoundError, PersistenceError
from canteen.repos.persistence import (
    SERVER_TIMESTAMP,
    Document,
    Query,
    SnapshotCallback,
    Unsubscribe,
)
from canteen.utils.logging import get_logger
from canteen.utils.retry import db_retry

logger = get_logger(__name__)


def persistence_errors(operation: str):
    """Kazdy blad SQLAlchemy (po retry) wychodzi jako PersistenceError."""

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.error(f"Document store {operation} failed: {e}")
                raise PersistenceError(operation, e) from e

        return wrapper

    return decorator


def _resolve_timestamps(data: Document, now: datetime) -> Document:
    stamp = now.isoformat()
    return {k: (stamp if v is SERVER_TIMESTAMP else v) for k, v in data.items()}


def _as_document(row: DocumentModel) -> Document:
    return {"id": row.id, **row.data}


class SqlDocumentStore:
    """
    Implementacja PersistenceService na jednej tabeli `documents`.

    - kazda operacja ma wlasna sesje z session_factory
    - subskrypcje sa trzymane w procesie; po kazdym zapisie do kolekcji
      callbacki dostaja pelny, aktualny wynik zapytania (nie delty)
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._subscriptions = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def server_timestamp(self):
        return SERVER_TIMESTAMP

    # odczyt
    @persistence_errors("get")
    @db_retry()
    def get(self, collection: str, doc_id: str) -> Document | None:
        with self.session_factory() as db:
            row = db.get(DocumentModel, (collection, doc_id))
            return _as_document(row) if row else None

    @persistence_errors("query")
    @db_retry()
    def query(self, query: Query) -> List[Document]:
        with self.session_factory() as db:
            rows = db.execute(
                select(DocumentModel).where(DocumentModel.collection == query.collection)
            ).scalars().all()
            docs = [d for d in map(_as_document, rows) if query.matches(d)]

        if query.order_by:
            # dokumenty bez pola ida na koniec
            present = [d for d in docs if d.get(query.order_by) is not None]
            missing = [d for d in docs if d.get(query.order_by) is None]
            present.sort(key=lambda d: d[query.order_by], reverse=query.descending)
            docs = present + missing

        return docs

    # zapis
    def put(self, collection: str, doc_id: str, data: Document, merge: bool = False) -> None:
        self._put(collection, doc_id, data, merge)
        self._publish(collection)

    def add(self, collection: str, data: Document) -> str:
        doc_id = uuid.uuid4().hex
        self._insert(collection, doc_id, data)
        logger.info(f"Document {collection}/{doc_id} created")
        self._publish(collection)
        return doc_id

    def update(self, collection: str, doc_id: str, partial: Document) -> None:
        self._update(collection, doc_id, partial)
        self._publish(collection)

    @persistence_errors("put")
    @db_retry()
    def _put(self, collection, doc_id, data, merge):
        now = datetime.now(timezone.utc)
        data = _resolve_timestamps(data, now)

        with self.session_factory() as db:
            row = db.get(DocumentModel, (collection, doc_id))
            if row is None:
                db.add(DocumentModel(collection=collection, id=doc_id, data=data))
            else:
                # nowy dict, zeby SQLAlchemy wykryl zmiane w kolumnie JSON
                row.data = {**row.data, **data} if merge else data
            db.commit()

    @persistence_errors("add")
    @db_retry()
    def _insert(self, collection, doc_id, data):
        data = _resolve_timestamps(data, datetime.now(timezone.utc))

        with self.session_factory() as db:
            db.add(DocumentModel(collection=collection, id=doc_id, data=data))
            db.commit()

    @persistence_errors("update")
    @db_retry()
    def _update(self, collection, doc_id, partial):
        partial = _resolve_timestamps(partial, datetime.now(timezone.utc))

        with self.session_factory() as db:
            row = db.get(DocumentModel, (collection, doc_id))
            if row is None:
                raise NotFoundError(f"Document {collection}/{doc_id} does not exist")
            row.data = {**row.data, **partial}
            db.commit()

    # subskrypcje
    def subscribe(self, query: Query, callback: SnapshotCallback) -> Unsubscribe:
        with self._lock:
            token = next(self._tokens)
            self._subscriptions[token] = (query, callback)

        logger.info(f"Subscription {token} opened on {query.collection}")
        # pierwszy snapshot od razu, jak w Firestore onSnapshot
        self._deliver(token, query, callback)

        def unsubscribe():
            with self._lock:
                removed = self._subscriptions.pop(token, None)
            if removed:
                logger.info(f"Subscription {token} closed")

        return unsubscribe

    def _publish(self, collection: str):
        with self._lock:
            targets = [
                (token, query, callback)
                for token, (query, callback) in self._subscriptions.items()
                if query.collection == collection
            ]

        for token, query, callback in targets:
            self._deliver(token, query, callback)

    def _deliver(self, token, query, callback):
        try:
            snapshot = self.query(query)
        except PersistenceError as e:
            logger.error(f"Subscription {token}: cannot load snapshot: {e}")
            return

        try:
            callback(snapshot)
        except Exception:
            # blad w callbacku nie moze zepsuc zapisu, ktory go wywolal
            logger.exception(f"Subscription {token}: callback raised")
