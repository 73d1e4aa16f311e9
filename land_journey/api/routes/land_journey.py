"""Land journey API routes."""

import uuid

from fastapi import APIRouter, Depends, Response

from land_journey.core.auth import AuthUser, require_auth
from land_journey.db.base import get_session_factory
from land_journey.domain.stages import JourneyStage, get_stage_definition
from land_journey.integrations.marketplace import Marketplace
from land_journey.integrations.marketplace_client import MarketplaceClient
from land_journey.schemas.land_journey import (
    AddDocumentRequest,
    CreateLandRequest,
    LandDetailResponse,
    LandDocumentResponse,
    LandResponse,
    LandSummaryResponse,
    LinkEngagementRequest,
    ProfessionalResponse,
    StageCatalogResponse,
    StageProfessionalsResponse,
    StageRecordResponse,
    UnlinkedTransactionResponse,
    UpdateLandRequest,
    UpdateStageStatusRequest,
)
from land_journey.services.land_journey_service import LandJourneyService, get_catalog

router = APIRouter()


def get_marketplace() -> Marketplace:
    """Dependency that provides the Marketplace implementation.

    Override this dependency in tests via app.dependency_overrides.
    """
    return MarketplaceClient()


@router.get("/stages/config", response_model=StageCatalogResponse)
async def get_stages_config():
    """Stage catalog: ordered stage ids and each stage's metadata. Public."""
    return get_catalog()


@router.get("/stages/{stage}/professionals", response_model=StageProfessionalsResponse)
async def get_stage_professionals(
    stage: JourneyStage,
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Available, verified professionals for a stage, best rated first.

    Raises:
        HTTPException(502): Marketplace unavailable
    """
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        professionals = await service.list_candidate_professionals(stage)

    return StageProfessionalsResponse(
        stage=stage,
        professional_type=get_stage_definition(stage).professional_role,
        professionals=[ProfessionalResponse.model_validate(p) for p in professionals],
    )


@router.get("/my-lands", response_model=list[LandSummaryResponse])
async def get_my_lands(
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """All lands owned by the caller, newest first, with progress."""
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        return await service.get_journeys_for_owner(user.user_id)


@router.get("/unlinked-transactions", response_model=list[UnlinkedTransactionResponse])
async def get_unlinked_transactions(
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Completed purchases by the caller that have no land registered yet."""
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        transactions = await service.list_unlinked_transactions(user.user_id)
    return [UnlinkedTransactionResponse.model_validate(t) for t in transactions]


@router.post("/from-transaction/{transaction_id}", response_model=LandResponse, status_code=201)
async def create_land_from_transaction(
    transaction_id: str,
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Register a land from a completed marketplace purchase.

    Args:
        transaction_id: Marketplace transaction id
        user: Authenticated user from JWT
        marketplace: Marketplace instance (injected)

    Returns:
        The new land at the first stage

    Raises:
        HTTPException(404): Transaction not found
        HTTPException(403): Caller is not the buyer
        HTTPException(400): Transaction not completed or already linked
    """
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        return await service.register_from_transaction(user.user_id, transaction_id)


@router.post("/lands", response_model=LandResponse, status_code=201)
async def create_land(
    request: CreateLandRequest,
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Manually register a land the caller already owns.

    Raises:
        HTTPException(404): Linked transaction not found
        HTTPException(403): Linked transaction belongs to another buyer
        HTTPException(400): Linked transaction already has a land
    """
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        return await service.register_manually(user.user_id, request)


@router.get("/lands/{land_id}", response_model=LandDetailResponse)
async def get_land(
    land_id: uuid.UUID,
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Full 16-stage journey for one land.

    Raises:
        HTTPException(404): Land not found
        HTTPException(403): Land owned by another user
    """
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        return await service.get_journey_detail(land_id, user.user_id)


@router.patch("/lands/{land_id}", response_model=LandResponse)
async def update_land(
    land_id: uuid.UUID,
    request: UpdateLandRequest,
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Partially update descriptive land attributes."""
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        return await service.update_land_attributes(land_id, user.user_id, request)


@router.delete("/lands/{land_id}", status_code=204)
async def delete_land(
    land_id: uuid.UUID,
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Delete a land together with its stage records and documents."""
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        await service.delete_land(land_id, user.user_id)
    return Response(status_code=204)


@router.patch("/lands/{land_id}/stages/{stage}", response_model=StageRecordResponse)
async def update_stage_status(
    land_id: uuid.UUID,
    stage: JourneyStage,
    request: UpdateStageStatusRequest,
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Set a stage's status; completing the current stage advances the journey.

    Args:
        land_id: UUID of the land
        stage: Stage to update
        request: UpdateStageStatusRequest with status, notes and engagement_id
        user: Authenticated user from JWT
        marketplace: Marketplace instance (injected)

    Returns:
        The written stage record

    Raises:
        HTTPException(404): Land not found
        HTTPException(403): Land owned by another user
        HTTPException(400): Stage is locked
    """
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        return await service.set_stage_status(
            land_id,
            stage,
            user.user_id,
            request.status,
            notes=request.notes,
            engagement_id=request.engagement_id,
        )


@router.post("/lands/{land_id}/stages/{stage}/link-request", response_model=StageRecordResponse)
async def link_service_request(
    land_id: uuid.UUID,
    stage: JourneyStage,
    request: LinkEngagementRequest,
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Attach a professional service request to a stage.

    Raises:
        HTTPException(404): Land or service request not found
        HTTPException(403): Land or service request owned by another user
    """
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        return await service.link_engagement(land_id, stage, request.engagement_id, user.user_id)


@router.post("/lands/{land_id}/documents", response_model=LandDocumentResponse, status_code=201)
async def add_document(
    land_id: uuid.UUID,
    request: AddDocumentRequest,
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Attach a document to a land under a stage."""
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        return await service.add_document(land_id, user.user_id, **request.model_dump())


@router.delete("/lands/{land_id}/documents/{document_id}", status_code=204)
async def remove_document(
    land_id: uuid.UUID,
    document_id: uuid.UUID,
    user: AuthUser = Depends(require_auth),
    marketplace: Marketplace = Depends(get_marketplace),
):
    """Remove a document from a land."""
    async with get_session_factory()() as session:
        service = LandJourneyService(session, marketplace)
        await service.remove_document(land_id, document_id, user.user_id)
    return Response(status_code=204)
