"""Deterministic journey view computation.

Pure functions with no external dependencies. Stage status for stages without
a persisted record is synthesized from the land's current-stage pointer; no
synthetic records are ever written back.
"""
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from land_journey.domain.stages import (
    TOTAL_STAGES,
    JourneyStage,
    StageDefinition,
    StageStatus,
    get_stage_definition,
    ordered_stages,
    stage_index,
)


@dataclass
class StageView:
    """One rendered entry of a land's journey."""

    stage: JourneyStage
    index: int
    definition: StageDefinition
    status: StageStatus
    is_current_stage: bool
    is_completed: bool
    is_locked: bool
    record: Any | None = None
    documents: list[Any] = field(default_factory=list)


def compute_progress(current_index: int, total_stages: int = TOTAL_STAGES) -> int:
    """Compute journey progress (0-100) from the current stage position.

    Position-based, not weighted by duration or cost. Rounds half up.
    """
    if total_stages <= 1:
        return 100
    return int(math.floor(current_index / (total_stages - 1) * 100 + 0.5))


def is_stage_locked(index: int, current_index: int) -> bool:
    """Only the current stage and the one after it are workable."""
    return index > current_index + 1


def resolve_stage_status(
    index: int,
    current_index: int,
    recorded_status: StageStatus | str | None,
) -> StageStatus:
    """Return the effective status for a stage.

    A persisted record is authoritative. Otherwise stages behind the pointer
    read as COMPLETED, the current stage as IN_PROGRESS, and the rest as
    NOT_STARTED.
    """
    if recorded_status is not None:
        return StageStatus(recorded_status)
    if index < current_index:
        return StageStatus.COMPLETED
    if index == current_index:
        return StageStatus.IN_PROGRESS
    return StageStatus.NOT_STARTED


def build_journey(
    current_stage: JourneyStage | str,
    records: Mapping[JourneyStage, Any],
    documents: Iterable[Any] = (),
) -> list[StageView]:
    """Assemble the full ordered journey for a land.

    Args:
        current_stage: The land's current-stage pointer
        records: Persisted stage records keyed by stage (sparse); each must
            expose a ``status`` attribute
        documents: Documents of the land; each must expose a ``stage``
            attribute. Input order is preserved within a stage.

    Returns:
        Exactly one StageView per stage, in journey order
    """
    current_index = stage_index(current_stage)

    documents_by_stage: dict[JourneyStage, list[Any]] = {stage: [] for stage in ordered_stages()}
    for document in documents:
        documents_by_stage[JourneyStage(document.stage)].append(document)

    journey: list[StageView] = []
    for index, stage in enumerate(ordered_stages()):
        record = records.get(stage)
        status = resolve_stage_status(
            index, current_index, record.status if record is not None else None
        )
        journey.append(
            StageView(
                stage=stage,
                index=index,
                definition=get_stage_definition(stage),
                status=status,
                is_current_stage=index == current_index,
                is_completed=status == StageStatus.COMPLETED,
                is_locked=is_stage_locked(index, current_index),
                record=record,
                documents=documents_by_stage[stage],
            )
        )
    return journey
