"""Land journey Pydantic schemas for API requests and responses."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from land_journey.domain.stages import (
    DocumentType,
    JourneyStage,
    ProfessionalRole,
    StageDefinition,
    StageStatus,
)


class Coordinates(BaseModel):
    lat: float
    lng: float


class CostRangeResponse(BaseModel):
    min: int
    max: int


class StageDefinitionResponse(BaseModel):
    """Catalog metadata for one stage."""

    name: str
    description: str
    professional_type: ProfessionalRole | None = None
    required_documents: list[DocumentType] = Field(default_factory=list)
    output_documents: list[DocumentType] = Field(default_factory=list)
    estimated_days: int
    estimated_cost_ghs: CostRangeResponse | None = None

    @classmethod
    def from_definition(cls, definition: StageDefinition) -> "StageDefinitionResponse":
        cost = definition.estimated_cost
        return cls(
            name=definition.name,
            description=definition.description,
            professional_type=definition.professional_role,
            required_documents=list(definition.required_documents),
            output_documents=list(definition.output_documents),
            estimated_days=definition.estimated_days,
            estimated_cost_ghs=CostRangeResponse(min=cost.min, max=cost.max) if cost else None,
        )


class StageCatalogResponse(BaseModel):
    """Ordered stage ids plus catalog entries keyed by stage id."""

    stages: list[JourneyStage]
    config: dict[JourneyStage, StageDefinitionResponse]


class StageRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    land_id: uuid.UUID
    stage: JourneyStage
    status: StageStatus
    notes: str | None = None
    engagement_id: str | None = None
    professional_id: str | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class LandDocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    land_id: uuid.UUID
    stage: JourneyStage
    document_type: DocumentType
    name: str
    file_url: str
    file_size: int | None = None
    mime_type: str | None = None
    notes: str | None = None
    uploaded_at: datetime


class LandResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    transaction_id: str | None = None
    title: str
    description: str | None = None
    region: str | None = None
    district: str | None = None
    locality: str | None = None
    plot_number: str | None = None
    land_size: float | None = None
    land_size_unit: str
    gps_address: str | None = None
    coordinates: Coordinates | None = None
    purchase_date: datetime | None = None
    purchase_price: float | None = None
    seller_name: str | None = None
    seller_contact: str | None = None
    current_stage: JourneyStage
    journey_completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class LandSummaryResponse(LandResponse):
    """A land in the owner's list, with progress and its sparse records."""

    progress: int
    total_stages: int
    current_stage_index: int
    stages: list[StageRecordResponse] = Field(default_factory=list)
    documents: list[LandDocumentResponse] = Field(default_factory=list)


class JourneyStageResponse(StageDefinitionResponse):
    """One entry of the full journey: catalog data plus effective state."""

    stage: JourneyStage
    index: int
    status: StageStatus
    is_current_stage: bool
    is_completed: bool
    is_locked: bool
    record: StageRecordResponse | None = None
    documents: list[LandDocumentResponse] = Field(default_factory=list)


class LandDetailResponse(LandResponse):
    """Full journey view: always one entry per stage, in journey order."""

    progress: int
    total_stages: int
    current_stage_index: int
    journey: list[JourneyStageResponse]


class CreateLandRequest(BaseModel):
    """Manually register a land the user already owns."""

    title: str = Field(min_length=1, examples=["My Residential Plot at East Legon"])
    description: str | None = None
    region: str = Field(examples=["Greater Accra"])
    district: str = Field(examples=["Accra Metropolitan"])
    locality: str = Field(examples=["East Legon"])
    plot_number: str | None = Field(default=None, examples=["Plot 45, Block B"])
    land_size: float | None = Field(default=None, ge=0, examples=[0.5])
    land_size_unit: str = "acres"
    gps_address: str | None = Field(default=None, examples=["GA-123-4567"])
    coordinates: Coordinates | None = None
    purchase_date: datetime | None = None
    purchase_price: float | None = Field(default=None, ge=0, examples=[150000])
    seller_name: str | None = None
    seller_contact: str | None = None
    transaction_id: str | None = Field(
        default=None, min_length=1, description="Transaction ID if purchased on the marketplace"
    )


class UpdateLandRequest(BaseModel):
    """Partial update of descriptive land attributes. Never touches the journey."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    plot_number: str | None = None
    land_size: float | None = Field(default=None, ge=0)
    gps_address: str | None = None
    coordinates: Coordinates | None = None

    @field_validator("title")
    @classmethod
    def reject_null_title(cls, v: str | None) -> str:
        """A land always has a title: omit the field to keep it, never send null."""
        if v is None:
            raise ValueError("title cannot be null")
        return v


class UpdateStageStatusRequest(BaseModel):
    status: StageStatus
    notes: str | None = None
    engagement_id: str | None = Field(
        default=None, description="Service request ID if engaging a professional"
    )


class LinkEngagementRequest(BaseModel):
    engagement_id: str = Field(min_length=1)


class AddDocumentRequest(BaseModel):
    stage: JourneyStage
    document_type: DocumentType
    name: str = Field(min_length=1, examples=["Site Plan - Plot 45"])
    file_url: str = Field(min_length=1, examples=["https://storage.example.com/documents/site-plan.pdf"])
    file_size: int | None = Field(default=None, ge=0)
    mime_type: str | None = None
    notes: str | None = None


class ProfessionalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    role: ProfessionalRole
    full_name: str
    title: str | None = None
    rating: float | None = None
    years_experience: int | None = None
    regions: list[str] = Field(default_factory=list)


class StageProfessionalsResponse(BaseModel):
    """Candidate professionals for a stage. Empty for stages without a role."""

    stage: JourneyStage
    professional_type: ProfessionalRole | None = None
    professionals: list[ProfessionalResponse] = Field(default_factory=list)


class ListingSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    region: str | None = None
    district: str | None = None
    town: str | None = None
    size_acres: float | None = None


class UnlinkedTransactionResponse(BaseModel):
    """A completed purchase that has no land registered against it yet."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    status: str
    completed_at: datetime | None = None
    agreed_price: float | None = None
    seller_name: str | None = None
    seller_phone: str | None = None
    listing: ListingSummary | None = None
