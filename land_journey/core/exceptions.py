class LandJourneyError(Exception):
    """Base exception for the land journey engine."""

    status_code = 500
    code = "land_journey_error"

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class NotFoundError(LandJourneyError):
    """Raised when a land, document, transaction or engagement does not exist."""

    status_code = 404
    code = "not_found"


class ForbiddenError(LandJourneyError):
    """Raised when the caller does not own the referenced resource."""

    status_code = 403
    code = "forbidden"


class InvalidTransitionError(LandJourneyError):
    """Raised when a stage beyond the next workable stage is touched."""

    status_code = 400
    code = "invalid_transition"


class InvalidStateError(LandJourneyError):
    """Raised when a business precondition does not hold."""

    status_code = 400
    code = "invalid_state"


class MarketplaceError(LandJourneyError):
    """Raised when the marketplace API fails or returns an unexpected response."""

    status_code = 502
    code = "marketplace_unavailable"
