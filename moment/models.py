from sqlalchemy import JSON, Column, DateTime, String, UniqueConstraint
from sqlalchemy.sql import func

from .database import Base


class DocumentRecord(Base):
    """One schemaless document; `data` holds the document body without its id."""

    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "unique_key", name="uq_documents_unique_key"),)

    collection = Column(String(64), primary_key=True)
    id = Column(String(128), primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    # Value of the collection's unique field (e.g. Provider.uid); NULLs never collide
    unique_key = Column(String(255), nullable=True)
    stored_at = Column(DateTime(timezone=True), server_default=func.now())
