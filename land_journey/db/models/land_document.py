"""LandDocument model: append-only document ledger entries."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Uuid

from land_journey.db.base import Base


class LandDocument(Base):
    __tablename__ = "land_documents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    land_id = Column(Uuid, ForeignKey("user_lands.id", ondelete="CASCADE"), nullable=False, index=True)
    stage = Column(String(50), nullable=False)
    document_type = Column(String(50), nullable=False)

    name = Column(String(255), nullable=False)
    file_url = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    # NO updated_at -- documents are never edited, only added or removed
