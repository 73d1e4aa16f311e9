"""LandStageRecord model: execution state for one (land, stage) pair."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid

from land_journey.db.base import Base


class LandStageRecord(Base):
    __tablename__ = "land_stage_records"
    __table_args__ = (UniqueConstraint("land_id", "stage", name="uq_land_stage"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    land_id = Column(Uuid, ForeignKey("user_lands.id", ondelete="CASCADE"), nullable=False, index=True)
    stage = Column(String(50), nullable=False)
    status = Column(String(50), nullable=False)
    notes = Column(Text, nullable=True)

    # Marketplace service request and the professional assigned to it
    engagement_id = Column(String(255), nullable=True)
    professional_id = Column(String(255), nullable=True)

    completed_at = Column(DateTime(timezone=True), nullable=True)  # set iff status == COMPLETED

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
