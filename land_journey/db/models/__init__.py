"""Re-export all models so Base.metadata sees them."""

from land_journey.db.models.land_document import LandDocument
from land_journey.db.models.land_stage_record import LandStageRecord
from land_journey.db.models.user_land import UserLand

__all__ = [
    "LandDocument",
    "LandStageRecord",
    "UserLand",
]
