# canteen/data/models/document.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, JSON, String

from canteen.data.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class DocumentModel(Base):
    """
    Jeden wiersz = jeden dokument w kolekcji (np. "orders",
    "users/u1/cart", "canteens/c1/menuItems").
    """

    __tablename__ = "documents"

    collection = Column(String(255), primary_key=True)
    id = Column(String(64), primary_key=True)

    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
