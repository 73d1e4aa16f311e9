"""Stage update validation and current-stage advancement.

Pure domain logic with no external dependencies.
"""
from dataclasses import dataclass

from land_journey.domain.stages import (
    TERMINAL_STAGE,
    JourneyStage,
    StageStatus,
    next_stage,
    stage_index,
)


@dataclass
class AdvancementResult:
    """Outcome of evaluating a stage status update."""

    allowed: bool
    reason: str = ""
    new_current_stage: JourneyStage | None = None
    journey_completed: bool = False


def evaluate_stage_update(
    current_stage: JourneyStage | str,
    target_stage: JourneyStage | str,
    status: StageStatus | str,
) -> AdvancementResult:
    """Decide whether a stage update is allowed and where the pointer moves.

    Pure function -- no side effects, no DB access.

    Args:
        current_stage: The land's current-stage pointer
        target_stage: Stage whose record is being written
        status: Requested status for the target stage

    Returns:
        AdvancementResult with allowed flag, reason, and new_current_stage set
        only when the pointer must move

    Rules:
        - Stages beyond current + 1 are locked, whatever the status
        - Completing exactly the current stage moves the pointer one forward
        - Any other write (earlier stage, next stage, non-completion) leaves
          the pointer where it is
        - Reaching the terminal stage marks the journey completed
    """
    current_index = stage_index(current_stage)
    target_index = stage_index(target_stage)

    if target_index > current_index + 1:
        return AdvancementResult(False, "Cannot update a future stage")

    if StageStatus(status) != StageStatus.COMPLETED or target_index != current_index:
        return AdvancementResult(True)

    following = next_stage(target_stage)
    if following is None:
        return AdvancementResult(True)

    return AdvancementResult(
        True,
        new_current_stage=following,
        journey_completed=following == TERMINAL_STAGE,
    )
