"""Stage catalog: the fixed 16-stage land journey and its static metadata.

Pure domain logic with no external dependencies. The catalog is built once at
import time and never mutated.
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class JourneyStage(str, Enum):
    """Ordered milestones from acquisition to building permit.

    Definition order is the journey order.
    """

    LAND_ACQUIRED = "LAND_ACQUIRED"
    LAND_SEARCH = "LAND_SEARCH"
    SURVEY_SITE_PLAN = "SURVEY_SITE_PLAN"
    INDENTURE_PREPARATION = "INDENTURE_PREPARATION"
    STAMP_DUTY = "STAMP_DUTY"
    LAND_VALUATION = "LAND_VALUATION"
    TITLE_REGISTRATION = "TITLE_REGISTRATION"
    TITLE_CERTIFICATE = "TITLE_CERTIFICATE"
    ARCHITECTURAL_DESIGN = "ARCHITECTURAL_DESIGN"
    STRUCTURAL_DESIGN = "STRUCTURAL_DESIGN"
    DEVELOPMENT_PERMIT = "DEVELOPMENT_PERMIT"
    BUILDING_PERMIT_APPLICATION = "BUILDING_PERMIT_APPLICATION"
    SITE_INSPECTION = "SITE_INSPECTION"
    TECHNICAL_REVIEW = "TECHNICAL_REVIEW"
    BUILDING_PERMIT_ISSUED = "BUILDING_PERMIT_ISSUED"
    READY_TO_BUILD = "READY_TO_BUILD"


class StageStatus(str, Enum):
    """Execution status of a single (land, stage) record."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    PENDING_PROFESSIONAL = "PENDING_PROFESSIONAL"
    PENDING_DOCUMENTS = "PENDING_DOCUMENTS"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"


class ProfessionalRole(str, Enum):
    SURVEYOR = "SURVEYOR"
    LAWYER = "LAWYER"
    ARCHITECT = "ARCHITECT"
    ENGINEER = "ENGINEER"
    VALUER = "VALUER"
    PLANNER = "PLANNER"


class DocumentType(str, Enum):
    """Document classifiers accepted by the document ledger."""

    SALE_AGREEMENT = "SALE_AGREEMENT"
    PAYMENT_RECEIPT = "PAYMENT_RECEIPT"
    LAND_SEARCH_REPORT = "LAND_SEARCH_REPORT"
    SITE_PLAN = "SITE_PLAN"
    SURVEY_REPORT = "SURVEY_REPORT"
    INDENTURE = "INDENTURE"
    CERTIFIED_INDENTURE = "CERTIFIED_INDENTURE"
    STAMP_DUTY_RECEIPT = "STAMP_DUTY_RECEIPT"
    VALUATION_REPORT = "VALUATION_REPORT"
    TITLE_CERTIFICATE = "TITLE_CERTIFICATE"
    ARCHITECTURAL_DRAWINGS = "ARCHITECTURAL_DRAWINGS"
    STRUCTURAL_DRAWINGS = "STRUCTURAL_DRAWINGS"
    ELECTRICAL_DRAWINGS = "ELECTRICAL_DRAWINGS"
    PLUMBING_DRAWINGS = "PLUMBING_DRAWINGS"
    DEVELOPMENT_PERMIT = "DEVELOPMENT_PERMIT"
    BUILDING_PERMIT = "BUILDING_PERMIT"
    EPA_PERMIT = "EPA_PERMIT"
    FIRE_CERTIFICATE = "FIRE_CERTIFICATE"
    NATIONAL_ID = "NATIONAL_ID"
    PASSPORT = "PASSPORT"
    OTHER = "OTHER"


@dataclass(frozen=True)
class CostRange:
    """Estimated cost in GHS."""

    min: int
    max: int


@dataclass(frozen=True)
class StageDefinition:
    """Static catalog entry for one stage."""

    name: str
    description: str
    professional_role: ProfessionalRole | None
    required_documents: tuple[DocumentType, ...]
    output_documents: tuple[DocumentType, ...]
    estimated_days: int
    estimated_cost: CostRange | None = None


_D = DocumentType

STAGE_CATALOG: MappingProxyType[JourneyStage, StageDefinition] = MappingProxyType({
    JourneyStage.LAND_ACQUIRED: StageDefinition(
        name="Land Acquired",
        description="You have purchased or own the land",
        professional_role=None,
        required_documents=(),
        output_documents=(_D.SALE_AGREEMENT, _D.PAYMENT_RECEIPT),
        estimated_days=0,
    ),
    JourneyStage.LAND_SEARCH: StageDefinition(
        name="Land Search",
        description="Conduct a search at the Lands Commission to verify ownership and check for disputes",
        professional_role=ProfessionalRole.LAWYER,
        required_documents=(_D.SALE_AGREEMENT,),
        output_documents=(_D.LAND_SEARCH_REPORT,),
        estimated_days=7,
        estimated_cost=CostRange(1000, 1500),
    ),
    JourneyStage.SURVEY_SITE_PLAN: StageDefinition(
        name="Survey & Site Plan",
        description="Hire a licensed surveyor to verify boundaries and create an official site plan",
        professional_role=ProfessionalRole.SURVEYOR,
        required_documents=(_D.SALE_AGREEMENT,),
        output_documents=(_D.SITE_PLAN, _D.SURVEY_REPORT),
        estimated_days=7,
        estimated_cost=CostRange(1500, 3500),
    ),
    JourneyStage.INDENTURE_PREPARATION: StageDefinition(
        name="Indenture Preparation",
        description="Prepare or verify the indenture document with a licensed lawyer",
        professional_role=ProfessionalRole.LAWYER,
        required_documents=(_D.SITE_PLAN, _D.LAND_SEARCH_REPORT),
        output_documents=(_D.CERTIFIED_INDENTURE,),
        estimated_days=14,
        estimated_cost=CostRange(2000, 3500),
    ),
    JourneyStage.STAMP_DUTY: StageDefinition(
        name="Stamp Duty Payment",
        description="Pay stamp duty at the Lands Commission (0.5-1% of land value)",
        professional_role=ProfessionalRole.LAWYER,
        required_documents=(_D.CERTIFIED_INDENTURE,),
        output_documents=(_D.STAMP_DUTY_RECEIPT,),
        estimated_days=5,
        estimated_cost=CostRange(500, 5000),
    ),
    JourneyStage.LAND_VALUATION: StageDefinition(
        name="Land Valuation",
        description="Get the land professionally valued for registration purposes",
        professional_role=ProfessionalRole.VALUER,
        required_documents=(_D.SITE_PLAN,),
        output_documents=(_D.VALUATION_REPORT,),
        estimated_days=5,
        estimated_cost=CostRange(800, 1500),
    ),
    JourneyStage.TITLE_REGISTRATION: StageDefinition(
        name="Title Registration",
        description="Submit all documents to Lands Commission for title registration",
        professional_role=ProfessionalRole.LAWYER,
        required_documents=(
            _D.CERTIFIED_INDENTURE,
            _D.STAMP_DUTY_RECEIPT,
            _D.VALUATION_REPORT,
            _D.SITE_PLAN,
        ),
        output_documents=(),
        estimated_days=30,
        estimated_cost=CostRange(3000, 5000),
    ),
    JourneyStage.TITLE_CERTIFICATE: StageDefinition(
        name="Title Certificate",
        description="Receive your Land Title Certificate from the Lands Commission",
        professional_role=None,
        required_documents=(),
        output_documents=(_D.TITLE_CERTIFICATE,),
        estimated_days=30,
    ),
    JourneyStage.ARCHITECTURAL_DESIGN: StageDefinition(
        name="Architectural Design",
        description="Hire an architect to design your building plans",
        professional_role=ProfessionalRole.ARCHITECT,
        required_documents=(_D.SITE_PLAN,),
        output_documents=(_D.ARCHITECTURAL_DRAWINGS,),
        estimated_days=21,
        estimated_cost=CostRange(5000, 25000),
    ),
    JourneyStage.STRUCTURAL_DESIGN: StageDefinition(
        name="Structural Design",
        description="Hire a structural engineer to prepare structural drawings",
        professional_role=ProfessionalRole.ENGINEER,
        required_documents=(_D.ARCHITECTURAL_DRAWINGS,),
        output_documents=(_D.STRUCTURAL_DRAWINGS,),
        estimated_days=14,
        estimated_cost=CostRange(4000, 10000),
    ),
    JourneyStage.DEVELOPMENT_PERMIT: StageDefinition(
        name="Development Permit",
        description="Apply for development permit (required for larger projects)",
        professional_role=ProfessionalRole.PLANNER,
        required_documents=(_D.SITE_PLAN, _D.ARCHITECTURAL_DRAWINGS),
        output_documents=(_D.DEVELOPMENT_PERMIT,),
        estimated_days=14,
        estimated_cost=CostRange(2000, 3000),
    ),
    JourneyStage.BUILDING_PERMIT_APPLICATION: StageDefinition(
        name="Building Permit Application",
        description="Submit building permit application to the District Assembly",
        professional_role=ProfessionalRole.PLANNER,
        required_documents=(
            _D.SITE_PLAN,
            _D.ARCHITECTURAL_DRAWINGS,
            _D.STRUCTURAL_DRAWINGS,
            _D.TITLE_CERTIFICATE,
        ),
        output_documents=(),
        estimated_days=7,
        estimated_cost=CostRange(1500, 2500),
    ),
    JourneyStage.SITE_INSPECTION: StageDefinition(
        name="Site Inspection",
        description="Assembly officials inspect your site for compliance",
        professional_role=None,
        required_documents=(),
        output_documents=(),
        estimated_days=14,
    ),
    JourneyStage.TECHNICAL_REVIEW: StageDefinition(
        name="Technical Review",
        description="Technical committee reviews your building plans",
        professional_role=None,
        required_documents=(),
        output_documents=(),
        estimated_days=21,
    ),
    JourneyStage.BUILDING_PERMIT_ISSUED: StageDefinition(
        name="Building Permit Issued",
        description="Your building permit has been approved and issued",
        professional_role=None,
        required_documents=(),
        output_documents=(_D.BUILDING_PERMIT,),
        estimated_days=7,
    ),
    JourneyStage.READY_TO_BUILD: StageDefinition(
        name="Ready to Build",
        description="Congratulations! You have all permits and can start construction",
        professional_role=None,
        required_documents=(),
        output_documents=(),
        estimated_days=0,
    ),
})

STAGE_ORDER: tuple[JourneyStage, ...] = tuple(JourneyStage)
FIRST_STAGE = STAGE_ORDER[0]
TERMINAL_STAGE = STAGE_ORDER[-1]
TOTAL_STAGES = len(STAGE_ORDER)

_STAGE_POSITIONS: MappingProxyType[JourneyStage, int] = MappingProxyType(
    {stage: index for index, stage in enumerate(STAGE_ORDER)}
)


def ordered_stages() -> tuple[JourneyStage, ...]:
    """Return all stages in journey order."""
    return STAGE_ORDER


def get_stage_definition(stage: JourneyStage | str) -> StageDefinition:
    """Return the catalog entry for a stage.

    Accepts the enum member or its string value (as stored in the database).
    """
    return STAGE_CATALOG[JourneyStage(stage)]


def stage_index(stage: JourneyStage | str) -> int:
    """Return the zero-based position of a stage in the journey."""
    return _STAGE_POSITIONS[JourneyStage(stage)]


def next_stage(stage: JourneyStage | str) -> JourneyStage | None:
    """Return the stage after ``stage``, or None for the terminal stage."""
    index = stage_index(stage) + 1
    if index >= TOTAL_STAGES:
        return None
    return STAGE_ORDER[index]
