"""LandJourneyService: orchestrates journey domain logic with database persistence.

This is the integration point where the pure stage catalog, journey assembly
and advancement functions meet SQLAlchemy models and the marketplace.
All journey mutations flow through this service.
"""

import uuid
from datetime import datetime, timezone

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from land_journey.core.exceptions import (
    ForbiddenError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
)
from land_journey.db.models.land_document import LandDocument
from land_journey.db.models.land_stage_record import LandStageRecord
from land_journey.db.models.user_land import UserLand
from land_journey.domain.advancement import evaluate_stage_update
from land_journey.domain.progress import build_journey, compute_progress
from land_journey.domain.stages import (
    FIRST_STAGE,
    STAGE_CATALOG,
    TOTAL_STAGES,
    DocumentType,
    JourneyStage,
    StageStatus,
    get_stage_definition,
    ordered_stages,
    stage_index,
)
from land_journey.integrations.marketplace import (
    Marketplace,
    ProfessionalInfo,
    TransactionInfo,
)
from land_journey.schemas.land_journey import (
    CreateLandRequest,
    JourneyStageResponse,
    LandDetailResponse,
    LandDocumentResponse,
    LandResponse,
    LandSummaryResponse,
    StageCatalogResponse,
    StageDefinitionResponse,
    StageRecordResponse,
    UpdateLandRequest,
)

logger = structlog.get_logger(__name__)

ALREADY_LINKED = "Land already exists for this transaction"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def get_catalog() -> StageCatalogResponse:
    """Return the ordered stage ids and the catalog entry for each."""
    return StageCatalogResponse(
        stages=list(ordered_stages()),
        config={
            stage: StageDefinitionResponse.from_definition(definition)
            for stage, definition in STAGE_CATALOG.items()
        },
    )


class LandJourneyService:
    """Service layer for the land acquisition journey.

    Every public mutation:
    - Checks existence first, then ownership (NotFoundError before ForbiddenError)
    - Validates completely before writing anything
    - Commits its writes as a single transaction
    """

    def __init__(self, session: AsyncSession, marketplace: Marketplace):
        """Initialize with dependency-injected collaborators.

        Args:
            session: SQLAlchemy async session (not global state)
            marketplace: Marketplace implementation for transactions,
                service requests and the professional directory
        """
        self.session = session
        self.marketplace = marketplace

    # ------------------------------------------------------------------
    # Loading helpers
    # ------------------------------------------------------------------

    async def _get_owned_land(
        self, land_id: uuid.UUID, user_id: str, for_update: bool = False
    ) -> UserLand:
        """Load a land and verify the caller owns it.

        With ``for_update`` the land row is locked for the rest of the
        transaction, so concurrent mutations of the same journey serialize.
        """
        query = select(UserLand).where(UserLand.id == land_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        land = result.scalar_one_or_none()

        if land is None:
            raise NotFoundError("Land not found")
        if land.user_id != user_id:
            raise ForbiddenError("You do not have access to this land")
        return land

    async def _get_stage_record(
        self, land_id: uuid.UUID, stage: JourneyStage
    ) -> LandStageRecord | None:
        result = await self.session.execute(
            select(LandStageRecord).where(
                LandStageRecord.land_id == land_id,
                LandStageRecord.stage == stage.value,
            )
        )
        return result.scalar_one_or_none()

    async def _upsert_stage_record(
        self, land_id: uuid.UUID, stage: JourneyStage, **values
    ) -> LandStageRecord:
        """Create or update the single record for (land, stage).

        Callers hold the land row lock, so the read-then-write cannot race
        with another writer on the same land.
        """
        record = await self._get_stage_record(land_id, stage)
        if record is None:
            record = LandStageRecord(land_id=land_id, stage=stage.value, **values)
            self.session.add(record)
        else:
            for key, value in values.items():
                setattr(record, key, value)
        await self.session.flush()
        return record

    def _seed_journey(self, land: UserLand, notes: str | None = None) -> None:
        """Mark the first stage completed: owning a land means it was acquired."""
        self.session.add(
            LandStageRecord(
                land_id=land.id,
                stage=FIRST_STAGE.value,
                status=StageStatus.COMPLETED.value,
                completed_at=_now(),
                notes=notes,
            )
        )

    async def _commit_new_land(self, land: UserLand, notes: str | None = None) -> UserLand:
        """Persist a new land with its seed record.

        A concurrent registration against the same transaction trips the
        unique constraint; that is reported as the same InvalidStateError as
        the up-front check.
        """
        transaction_id = land.transaction_id
        self.session.add(land)
        try:
            await self.session.flush()
            self._seed_journey(land, notes)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            if transaction_id:
                raise InvalidStateError(ALREADY_LINKED)
            raise

        logger.info(
            "land_registered",
            land_id=str(land.id),
            user_id=land.user_id,
            transaction_id=land.transaction_id,
        )
        return land

    async def _land_exists_for_transaction(self, transaction_id: str) -> bool:
        result = await self.session.execute(
            select(UserLand.id).where(UserLand.transaction_id == transaction_id)
        )
        return result.scalar_one_or_none() is not None

    async def _get_transaction_for_buyer(self, user_id: str, transaction_id: str) -> TransactionInfo:
        transaction = await self.marketplace.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError("Transaction not found")
        if transaction.buyer_id != user_id:
            raise ForbiddenError("This transaction does not belong to you")
        return transaction

    # ------------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------------

    async def get_journeys_for_owner(self, user_id: str) -> list[LandSummaryResponse]:
        """List the caller's lands, newest first, with progress.

        Args:
            user_id: Owner whose lands are listed

        Returns:
            One summary per land with its persisted stage records (oldest
            first) and documents (newest first)
        """
        result = await self.session.execute(
            select(UserLand).where(UserLand.user_id == user_id).order_by(UserLand.created_at.desc())
        )
        lands = result.scalars().all()
        if not lands:
            return []

        land_ids = [land.id for land in lands]
        records_by_land: dict[uuid.UUID, list[LandStageRecord]] = {land_id: [] for land_id in land_ids}
        documents_by_land: dict[uuid.UUID, list[LandDocument]] = {land_id: [] for land_id in land_ids}

        result = await self.session.execute(
            select(LandStageRecord)
            .where(LandStageRecord.land_id.in_(land_ids))
            .order_by(LandStageRecord.created_at)
        )
        for record in result.scalars().all():
            records_by_land[record.land_id].append(record)

        result = await self.session.execute(
            select(LandDocument)
            .where(LandDocument.land_id.in_(land_ids))
            .order_by(LandDocument.uploaded_at.desc())
        )
        for document in result.scalars().all():
            documents_by_land[document.land_id].append(document)

        summaries = []
        for land in lands:
            current_index = stage_index(land.current_stage)
            summaries.append(
                LandSummaryResponse(
                    **LandResponse.model_validate(land).model_dump(),
                    progress=compute_progress(current_index),
                    total_stages=TOTAL_STAGES,
                    current_stage_index=current_index,
                    stages=[StageRecordResponse.model_validate(r) for r in records_by_land[land.id]],
                    documents=[LandDocumentResponse.model_validate(d) for d in documents_by_land[land.id]],
                )
            )
        return summaries

    async def get_journey_detail(self, land_id: uuid.UUID, user_id: str) -> LandDetailResponse:
        """Assemble the full 16-stage journey for one land.

        Args:
            land_id: UUID of the land
            user_id: Caller, must own the land

        Returns:
            LandDetailResponse with one journey entry per stage

        Raises:
            NotFoundError: Land does not exist
            ForbiddenError: Caller does not own the land

        Read-only: stages without records get a synthesized status, nothing
        is written back.
        """
        land = await self._get_owned_land(land_id, user_id)

        result = await self.session.execute(
            select(LandStageRecord).where(LandStageRecord.land_id == land.id)
        )
        records = {JourneyStage(r.stage): r for r in result.scalars().all()}

        result = await self.session.execute(
            select(LandDocument)
            .where(LandDocument.land_id == land.id)
            .order_by(LandDocument.uploaded_at.desc())
        )
        documents = result.scalars().all()

        current_index = stage_index(land.current_stage)
        journey = [
            JourneyStageResponse(
                **StageDefinitionResponse.from_definition(view.definition).model_dump(),
                stage=view.stage,
                index=view.index,
                status=view.status,
                is_current_stage=view.is_current_stage,
                is_completed=view.is_completed,
                is_locked=view.is_locked,
                record=StageRecordResponse.model_validate(view.record) if view.record else None,
                documents=[LandDocumentResponse.model_validate(d) for d in view.documents],
            )
            for view in build_journey(land.current_stage, records, documents)
        ]

        return LandDetailResponse(
            **LandResponse.model_validate(land).model_dump(),
            progress=compute_progress(current_index),
            total_stages=TOTAL_STAGES,
            current_stage_index=current_index,
            journey=journey,
        )

    # ------------------------------------------------------------------
    # Land lifecycle
    # ------------------------------------------------------------------

    async def register_manually(self, user_id: str, request: CreateLandRequest) -> UserLand:
        """Register a land the user already owns.

        Args:
            user_id: Owner of the new land
            request: Land attributes, optionally linking a marketplace transaction

        Returns:
            The new UserLand at the first stage, seeded with a COMPLETED record

        Raises:
            NotFoundError: Linked transaction does not exist
            ForbiddenError: Linked transaction belongs to another buyer
            InvalidStateError: A land already exists for the linked transaction
        """
        if request.transaction_id:
            await self._get_transaction_for_buyer(user_id, request.transaction_id)
            if await self._land_exists_for_transaction(request.transaction_id):
                raise InvalidStateError(ALREADY_LINKED)

        land = UserLand(
            user_id=user_id,
            transaction_id=request.transaction_id,
            title=request.title,
            description=request.description,
            region=request.region,
            district=request.district,
            locality=request.locality,
            plot_number=request.plot_number,
            land_size=request.land_size,
            land_size_unit=request.land_size_unit or "acres",
            gps_address=request.gps_address,
            coordinates=request.coordinates.model_dump() if request.coordinates else None,
            purchase_date=request.purchase_date,
            purchase_price=request.purchase_price,
            seller_name=request.seller_name,
            seller_contact=request.seller_contact,
            current_stage=FIRST_STAGE.value,
        )
        return await self._commit_new_land(land)

    async def register_from_transaction(self, user_id: str, transaction_id: str) -> UserLand:
        """Register a land from a completed marketplace purchase.

        Copies location, size, price and seller details from the transaction
        and its listing.

        Raises:
            NotFoundError: Transaction does not exist
            ForbiddenError: Caller is not the transaction's buyer
            InvalidStateError: Transaction not completed, or already linked to a land
        """
        transaction = await self._get_transaction_for_buyer(user_id, transaction_id)

        if not transaction.is_completed:
            raise InvalidStateError("Transaction is not completed yet")

        if await self._land_exists_for_transaction(transaction_id):
            raise InvalidStateError(ALREADY_LINKED)

        listing = transaction.listing
        if listing is None:
            raise InvalidStateError("Transaction has no listing")

        coordinates = None
        if listing.latitude is not None and listing.longitude is not None:
            coordinates = {"lat": listing.latitude, "lng": listing.longitude}

        land = UserLand(
            user_id=user_id,
            transaction_id=transaction_id,
            title=listing.title,
            description=listing.description,
            region=listing.region,
            district=listing.district,
            locality=listing.town or listing.district,
            land_size=listing.size_acres,
            land_size_unit="acres",
            gps_address=listing.address,
            coordinates=coordinates,
            purchase_date=transaction.completed_at or _now(),
            purchase_price=transaction.agreed_price,
            seller_name=transaction.seller_name,
            seller_contact=transaction.seller_phone,
            current_stage=FIRST_STAGE.value,
        )
        notes = f"Purchased from {transaction.seller_name or 'seller'} via the marketplace"
        return await self._commit_new_land(land, notes=notes)

    async def update_land_attributes(
        self, land_id: uuid.UUID, user_id: str, request: UpdateLandRequest
    ) -> UserLand:
        """Apply a partial update to descriptive attributes.

        Only fields present in the request are written. The journey pointer
        is not an attribute and cannot be changed here.
        """
        land = await self._get_owned_land(land_id, user_id, for_update=True)

        for key, value in request.model_dump(exclude_unset=True).items():
            setattr(land, key, value)

        await self.session.commit()
        return land

    async def delete_land(self, land_id: uuid.UUID, user_id: str) -> None:
        """Hard-delete a land with its stage records and documents."""
        land = await self._get_owned_land(land_id, user_id, for_update=True)

        await self.session.execute(delete(LandStageRecord).where(LandStageRecord.land_id == land.id))
        await self.session.execute(delete(LandDocument).where(LandDocument.land_id == land.id))
        await self.session.delete(land)
        await self.session.commit()

        logger.info("land_deleted", land_id=str(land_id), user_id=user_id)

    # ------------------------------------------------------------------
    # Stage state machine
    # ------------------------------------------------------------------

    async def set_stage_status(
        self,
        land_id: uuid.UUID,
        stage: JourneyStage,
        user_id: str,
        status: StageStatus,
        notes: str | None = None,
        engagement_id: str | None = None,
    ) -> LandStageRecord:
        """Write a stage record and advance the journey when due.

        Args:
            land_id: UUID of the land
            stage: Stage whose record is written
            user_id: Caller, must own the land
            status: New status of the stage
            notes: Optional notes (omitted keeps existing notes)
            engagement_id: Optional service request link (omitted keeps the existing link)

        Returns:
            The created or updated LandStageRecord

        Raises:
            NotFoundError: Land does not exist
            ForbiddenError: Caller does not own the land
            InvalidTransitionError: Stage is beyond the next workable stage

        Completing exactly the current stage moves the pointer one stage
        forward; reaching the terminal stage stamps journey_completed_at.
        The record write and the pointer move commit together.
        """
        stage = JourneyStage(stage)
        status = StageStatus(status)

        land = await self._get_owned_land(land_id, user_id, for_update=True)
        previous_stage = JourneyStage(land.current_stage)

        outcome = evaluate_stage_update(previous_stage, stage, status)
        if not outcome.allowed:
            raise InvalidTransitionError(outcome.reason)

        now = _now()
        values: dict = {
            "status": status.value,
            "completed_at": now if status == StageStatus.COMPLETED else None,
        }
        if notes is not None:
            values["notes"] = notes
        if engagement_id is not None:
            values["engagement_id"] = engagement_id

        record = await self._upsert_stage_record(land.id, stage, **values)

        if outcome.new_current_stage is not None:
            land.current_stage = outcome.new_current_stage.value
            if outcome.journey_completed:
                land.journey_completed_at = now

        await self.session.commit()

        logger.info(
            "stage_status_updated",
            land_id=str(land.id),
            stage=stage.value,
            status=status.value,
        )
        if outcome.new_current_stage is not None:
            logger.info(
                "stage_advanced",
                land_id=str(land.id),
                from_stage=previous_stage.value,
                to_stage=outcome.new_current_stage.value,
            )
        if outcome.journey_completed:
            logger.info("journey_completed", land_id=str(land.id), user_id=user_id)

        return record

    # ------------------------------------------------------------------
    # Professional engagements
    # ------------------------------------------------------------------

    async def link_engagement(
        self,
        land_id: uuid.UUID,
        stage: JourneyStage,
        engagement_id: str,
        user_id: str,
    ) -> LandStageRecord:
        """Attach a professional service request to a stage.

        Sets the stage to PENDING_PROFESSIONAL and records the engagement's
        assigned professional. Never moves the journey pointer.

        Raises:
            NotFoundError: Land or engagement does not exist
            ForbiddenError: Caller owns neither the land nor the engagement
        """
        stage = JourneyStage(stage)
        land = await self._get_owned_land(land_id, user_id, for_update=True)

        engagement = await self.marketplace.get_engagement(engagement_id)
        if engagement is None:
            raise NotFoundError("Service request not found")
        if engagement.client_id != user_id:
            raise ForbiddenError("This service request does not belong to you")

        record = await self._upsert_stage_record(
            land.id,
            stage,
            status=StageStatus.PENDING_PROFESSIONAL.value,
            engagement_id=engagement.id,
            professional_id=engagement.professional_id,
            completed_at=None,
        )
        await self.session.commit()

        logger.info(
            "engagement_linked",
            land_id=str(land.id),
            stage=stage.value,
            engagement_id=engagement.id,
            professional_id=engagement.professional_id,
        )
        return record

    async def list_candidate_professionals(self, stage: JourneyStage) -> list[ProfessionalInfo]:
        """Return professionals whose role matches the stage's required role.

        Stages without a required role (administrative stages) return [].
        """
        role = get_stage_definition(stage).professional_role
        if role is None:
            return []
        return await self.marketplace.list_professionals(role)

    async def list_unlinked_transactions(self, user_id: str) -> list[TransactionInfo]:
        """Completed purchases by the caller that have no land yet, newest first."""
        transactions = await self.marketplace.list_buyer_transactions(user_id)
        transactions = [t for t in transactions if t.is_completed and t.buyer_id == user_id]
        if not transactions:
            return []

        result = await self.session.execute(
            select(UserLand.transaction_id).where(
                UserLand.transaction_id.in_([t.id for t in transactions])
            )
        )
        linked = set(result.scalars().all())

        unlinked = [t for t in transactions if t.id not in linked]
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(unlinked, key=lambda t: t.completed_at or epoch, reverse=True)

    # ------------------------------------------------------------------
    # Document ledger
    # ------------------------------------------------------------------

    async def add_document(
        self,
        land_id: uuid.UUID,
        user_id: str,
        stage: JourneyStage,
        document_type: DocumentType,
        name: str,
        file_url: str,
        file_size: int | None = None,
        mime_type: str | None = None,
        notes: str | None = None,
    ) -> LandDocument:
        """Append a document to a land's ledger under a stage.

        The document type is not checked against the stage's catalog lists;
        those lists are display hints.
        """
        land = await self._get_owned_land(land_id, user_id)

        document = LandDocument(
            land_id=land.id,
            stage=JourneyStage(stage).value,
            document_type=DocumentType(document_type).value,
            name=name,
            file_url=file_url,
            file_size=file_size,
            mime_type=mime_type,
            notes=notes,
        )
        self.session.add(document)
        await self.session.commit()

        logger.info(
            "document_added",
            land_id=str(land.id),
            document_id=str(document.id),
            stage=document.stage,
            document_type=document.document_type,
        )
        return document

    async def remove_document(self, land_id: uuid.UUID, document_id: uuid.UUID, user_id: str) -> None:
        """Remove a document; it must belong to the given land."""
        land = await self._get_owned_land(land_id, user_id)

        result = await self.session.execute(select(LandDocument).where(LandDocument.id == document_id))
        document = result.scalar_one_or_none()
        if document is None or document.land_id != land.id:
            raise NotFoundError("Document not found")

        await self.session.delete(document)
        await self.session.commit()

        logger.info("document_removed", land_id=str(land.id), document_id=str(document_id))
