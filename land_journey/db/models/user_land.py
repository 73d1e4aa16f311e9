"""UserLand model: a land owned by one user and its journey pointer."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB

from land_journey.db.base import Base
from land_journey.domain.stages import FIRST_STAGE


class UserLand(Base):
    __tablename__ = "user_lands"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True)
    # At most one land per marketplace transaction
    transaction_id = Column(String(255), nullable=True, unique=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    region = Column(String(255), nullable=True)
    district = Column(String(255), nullable=True)
    locality = Column(String(255), nullable=True)
    plot_number = Column(String(255), nullable=True)
    land_size = Column(Float, nullable=True)
    land_size_unit = Column(String(50), nullable=False, default="acres")
    gps_address = Column(String(255), nullable=True)
    # {"lat": float, "lng": float}
    coordinates = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)

    purchase_date = Column(DateTime(timezone=True), nullable=True)
    purchase_price = Column(Float, nullable=True)
    seller_name = Column(String(255), nullable=True)
    seller_contact = Column(String(255), nullable=True)

    # Only ever moved forward by LandJourneyService.set_stage_status
    current_stage = Column(String(50), nullable=False, default=FIRST_STAGE.value)
    journey_completed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
