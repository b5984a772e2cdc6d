"""Pydantic schemas for schedule output."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import Field

from wishlist_planner.schemas.wishlist import CamelModel

Severity = Literal["info", "warning", "error"]
ConfidenceLabel = Literal["high", "medium", "low", "none"]


class FeasibleAffordability(CamelModel):
    """Remaining salary covers the projected price."""

    status: Literal["feasible"] = "feasible"
    confidence: int = Field(ge=0, le=100)
    label: ConfidenceLabel
    remaining_salary_after_trade: float
    breakdown: list[str] = Field(default_factory=list)

    @property
    def feasible(self) -> bool:
        return True


class InfeasibleAffordability(CamelModel):
    """Projected price exceeds the salary available."""

    status: Literal["infeasible"] = "infeasible"
    confidence: int = Field(ge=0, le=100)
    label: ConfidenceLabel
    remaining_salary_after_trade: float
    breakdown: list[str] = Field(default_factory=list)

    @property
    def feasible(self) -> bool:
        return False


AffordabilityResult = Annotated[
    Union[FeasibleAffordability, InfeasibleAffordability],
    Field(discriminator="status"),
]


class ScheduledTrade(CamelModel):
    player_id: int
    player_name: str
    position: str
    projected_price: float
    affordability: AffordabilityResult


class RoundSchedule(CamelModel):
    """Trades committed in one round plus the salary ledger around them."""

    round: int
    salary_available: float
    salary_remaining: float
    trades: list[ScheduledTrade] = Field(default_factory=list)

    @property
    def total_cost(self) -> float:
        return sum(t.projected_price for t in self.trades)


class SaleCandidate(CamelModel):
    player_id: int
    name: str
    sell_price: float


class CashGenerationStep(CamelModel):
    round: int
    action: str
    players_to_sell: list[SaleCandidate] = Field(default_factory=list)
    cash_generated: float = 0.0


class CashGenerationPlan(CamelModel):
    """Sell moves that fund the unscheduled part of the wishlist.

    ``shortfall`` is what the roster could not cover (0 when fully covered).
    """

    needed: float
    plan: list[CashGenerationStep] = Field(default_factory=list)
    shortfall: float = 0.0

    @property
    def total_generated(self) -> float:
        return sum(s.cash_generated for s in self.plan)

    @property
    def covered(self) -> bool:
        return self.shortfall <= 0


class WarningCode(str, Enum):
    """What a warning is about."""

    ENGINE_INVARIANT_VIOLATION = "engine_invariant_violation"
    DUPLICATE_TRADE = "duplicate_trade"
    INSUFFICIENT_ROSTER_VALUE = "insufficient_roster_value"
    UNAFFORDABLE = "unaffordable"
    LOW_CONFIDENCE = "low_confidence"
    HEAVY_SELL_ROUND = "heavy_sell_round"
    CASH_GENERATION_REQUIRED = "cash_generation_required"
    PROJECTION_UNAVAILABLE = "projection_unavailable"
    BUDGET_CONTENTION = "budget_contention"


class ScheduleWarning(CamelModel):
    round: int
    severity: Severity
    code: WarningCode
    issue: str
    suggestion: str | None = None


class ScheduleSummary(CamelModel):
    total_players: int
    feasible_trades: int
    infeasible_trades: int
    avg_confidence: int


class WishlistScheduleResponse(CamelModel):
    """Aggregate result of one schedule build."""

    schedule: list[RoundSchedule] = Field(default_factory=list)
    summary: ScheduleSummary
    cash_generation_plan: CashGenerationPlan | None = None
    warnings: list[ScheduleWarning] = Field(default_factory=list)
    unscheduled_player_ids: list[int] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        """Dump with camelCase keys, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def trade_for(self, player_id: int) -> tuple[int, ScheduledTrade] | None:
        """Return ``(round, trade)`` for a scheduled player, or None."""
        for rs in self.schedule:
            for t in rs.trades:
                if t.player_id == player_id:
                    return rs.round, t
        return None
