"""Pydantic schemas for engine input and output."""

from wishlist_planner.schemas.schedule import (
    AffordabilityResult,
    CashGenerationPlan,
    CashGenerationStep,
    FeasibleAffordability,
    InfeasibleAffordability,
    RoundSchedule,
    SaleCandidate,
    ScheduledTrade,
    ScheduleSummary,
    ScheduleWarning,
    WarningCode,
    WishlistScheduleResponse,
)
from wishlist_planner.schemas.wishlist import (
    CurrentTeam,
    RosterPlayer,
    ScheduleRequest,
    WishlistPlayer,
)

__all__ = [
    "AffordabilityResult",
    "CashGenerationPlan",
    "CashGenerationStep",
    "CurrentTeam",
    "FeasibleAffordability",
    "InfeasibleAffordability",
    "RosterPlayer",
    "RoundSchedule",
    "SaleCandidate",
    "ScheduleRequest",
    "ScheduleSummary",
    "ScheduleWarning",
    "ScheduledTrade",
    "WarningCode",
    "WishlistPlayer",
    "WishlistScheduleResponse",
]
