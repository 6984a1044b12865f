"""Events package."""

from lycan.events.game_events import (
    # Enums
    Phase,
    DeathCause,
    InvestigationKind,
    VictoryCondition,
    # Results
    DeathReason,
    InvestigationResult,
    ActionResult,
    VictoryResult,
    VoteResult,
)

__all__ = [
    # Enums
    "Phase",
    "DeathCause",
    "InvestigationKind",
    "VictoryCondition",
    # Results
    "DeathReason",
    "InvestigationResult",
    "ActionResult",
    "VictoryResult",
    "VoteResult",
]
