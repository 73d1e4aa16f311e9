"""Marketplace Protocol: the engine's view of its external collaborators.

The land journey engine does not own transactions, service requests or
professional profiles. It reads them through this protocol:
- get_transaction: a transaction with its buyer, status and listing
- list_buyer_transactions: a buyer's transactions filtered by status
- get_engagement: a professional service request (client + assigned professional)
- list_professionals: available, licence-verified professionals of one role

Implementations:
- MarketplaceClient (marketplace_client.py): HTTP client for the marketplace API
- MarketplaceFake (marketplace_fake.py): in-memory test double
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from land_journey.domain.stages import ProfessionalRole

# Transaction statuses that count as a completed purchase
COMPLETED_TRANSACTION_STATUSES = frozenset({"RELEASED", "COMPLETED"})


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _parse_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


@dataclass
class ListingInfo:
    """Listing attributes copied onto a land registered from a transaction."""

    id: str
    title: str
    description: str | None = None
    region: str | None = None
    district: str | None = None
    town: str | None = None
    size_acres: float | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @classmethod
    def from_api(cls, data: dict) -> "ListingInfo":
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            description=data.get("description"),
            region=data.get("region"),
            district=data.get("district"),
            town=data.get("town"),
            size_acres=_parse_float(data.get("sizeAcres")),
            address=data.get("address"),
            latitude=_parse_float(data.get("latitude")),
            longitude=_parse_float(data.get("longitude")),
        )


@dataclass
class TransactionInfo:
    id: str
    buyer_id: str
    status: str
    completed_at: datetime | None = None
    agreed_price: float | None = None
    seller_name: str | None = None
    seller_phone: str | None = None
    listing: ListingInfo | None = None

    @property
    def is_completed(self) -> bool:
        return self.status in COMPLETED_TRANSACTION_STATUSES

    @classmethod
    def from_api(cls, data: dict) -> "TransactionInfo":
        seller = data.get("seller") or {}
        listing = data.get("listing")
        return cls(
            id=str(data["id"]),
            buyer_id=str(data["buyerId"]),
            status=data["status"],
            completed_at=_parse_datetime(data.get("completedAt")),
            agreed_price=_parse_float(data.get("agreedPriceGhs")),
            seller_name=seller.get("fullName"),
            seller_phone=seller.get("phone"),
            listing=ListingInfo.from_api(listing) if listing else None,
        )


@dataclass
class EngagementInfo:
    """A professional service request raised by a client."""

    id: str
    client_id: str
    professional_id: str | None = None
    status: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "EngagementInfo":
        professional_id = data.get("professionalId")
        return cls(
            id=str(data["id"]),
            client_id=str(data["clientId"]),
            professional_id=str(professional_id) if professional_id else None,
            status=data.get("status"),
        )


@dataclass
class ProfessionalInfo:
    id: str
    role: ProfessionalRole
    full_name: str
    title: str | None = None
    rating: float | None = None
    years_experience: int | None = None
    regions: list[str] = field(default_factory=list)
    is_available: bool = True
    license_verified: bool = True

    @classmethod
    def from_api(cls, data: dict) -> "ProfessionalInfo":
        user = data.get("user") or {}
        return cls(
            id=str(data["id"]),
            role=ProfessionalRole(data["type"]),
            full_name=user.get("fullName") or data.get("fullName") or "",
            title=data.get("title"),
            rating=_parse_float(data.get("rating")),
            years_experience=data.get("yearsExperience"),
            regions=list(data.get("regions") or []),
            is_available=bool(data.get("isAvailable", True)),
            license_verified=bool(data.get("licenseVerified", True)),
        )


@runtime_checkable
class Marketplace(Protocol):
    """Read-only access to marketplace data the engine depends on.

    Lookups by id return None when the marketplace has no such record.
    """

    async def get_transaction(self, transaction_id: str) -> TransactionInfo | None:
        ...

    async def list_buyer_transactions(
        self, buyer_id: str, statuses: frozenset[str] = COMPLETED_TRANSACTION_STATUSES
    ) -> list[TransactionInfo]:
        ...

    async def get_engagement(self, engagement_id: str) -> EngagementInfo | None:
        ...

    async def list_professionals(self, role: ProfessionalRole) -> list[ProfessionalInfo]:
        """Return available, licence-verified professionals ordered by rating (highest first)."""
        ...
