"""MarketplaceFake: in-memory test double for the Marketplace protocol.

Seed it with transactions, engagements and professionals; lookups behave like
the real API (None for unknown ids, directory filtered and rating-ordered).
"""

from land_journey.domain.stages import ProfessionalRole
from land_journey.integrations.marketplace import (
    COMPLETED_TRANSACTION_STATUSES,
    EngagementInfo,
    ProfessionalInfo,
    TransactionInfo,
)


class MarketplaceFake:
    def __init__(
        self,
        transactions: list[TransactionInfo] | None = None,
        engagements: list[EngagementInfo] | None = None,
        professionals: list[ProfessionalInfo] | None = None,
    ):
        self.transactions: dict[str, TransactionInfo] = {t.id: t for t in transactions or []}
        self.engagements: dict[str, EngagementInfo] = {e.id: e for e in engagements or []}
        self.professionals: list[ProfessionalInfo] = list(professionals or [])

    def add_transaction(self, transaction: TransactionInfo) -> TransactionInfo:
        self.transactions[transaction.id] = transaction
        return transaction

    def add_engagement(self, engagement: EngagementInfo) -> EngagementInfo:
        self.engagements[engagement.id] = engagement
        return engagement

    def add_professional(self, professional: ProfessionalInfo) -> ProfessionalInfo:
        self.professionals.append(professional)
        return professional

    async def get_transaction(self, transaction_id: str) -> TransactionInfo | None:
        return self.transactions.get(transaction_id)

    async def list_buyer_transactions(
        self, buyer_id: str, statuses: frozenset[str] = COMPLETED_TRANSACTION_STATUSES
    ) -> list[TransactionInfo]:
        return [
            t for t in self.transactions.values()
            if t.buyer_id == buyer_id and t.status in statuses
        ]

    async def get_engagement(self, engagement_id: str) -> EngagementInfo | None:
        return self.engagements.get(engagement_id)

    async def list_professionals(self, role: ProfessionalRole) -> list[ProfessionalInfo]:
        matches = [
            p for p in self.professionals
            if p.role == role and p.is_available and p.license_verified
        ]
        return sorted(matches, key=lambda p: p.rating or 0, reverse=True)
