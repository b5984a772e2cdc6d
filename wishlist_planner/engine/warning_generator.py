"""Schedule inspection: turn conflicts and soft spots into warnings."""

from __future__ import annotations

from dataclasses import dataclass

from wishlist_planner.config import (
    CashConfig,
    ConfidenceConfig,
    ScheduleConfig,
    cash_cfg,
    confidence_cfg,
    schedule_cfg,
)
from wishlist_planner.logging_config import get_logger
from wishlist_planner.schemas.schedule import (
    CashGenerationPlan,
    RoundSchedule,
    ScheduleWarning,
    WarningCode,
)
from wishlist_planner.schemas.wishlist import WishlistPlayer
from wishlist_planner.utils.money import format_price

logger = get_logger(__name__)

_SEVERITY_ORDER = {"error": 0, "warning": 1, "info": 2}


@dataclass(frozen=True)
class Deferral:
    """A player committed later than the first round it was affordable alone."""

    player_name: str
    requested_round: int
    scheduled_round: int


class WarningGenerator:
    def __init__(
        self,
        schedule: ScheduleConfig = schedule_cfg,
        confidence: ConfidenceConfig = confidence_cfg,
        cash: CashConfig = cash_cfg,
    ):
        self.schedule_cfg = schedule
        self.confidence_cfg = confidence
        self.cash_cfg = cash

    def inspect(
        self,
        schedule: list[RoundSchedule],
        cash_plan: CashGenerationPlan | None = None,
        *,
        horizon_rounds: list[int] | None = None,
        unscheduled: list[WishlistPlayer] | None = None,
        deferrals: list[Deferral] | None = None,
        projection_gaps: dict[int, list[int]] | None = None,
        players: dict[int, WishlistPlayer] | None = None,
    ) -> list[ScheduleWarning]:
        """Collect warnings for an assembled schedule.

        Parameters
        ----------
        horizon_rounds:
            Rounds the schedule was built over; defaults to the rounds in
            *schedule*.
        unscheduled:
            Wishlist players that never got a trade.
        deferrals:
            Players pushed back by budget contention.
        projection_gaps:
            ``{player_id: [round, ...]}`` rounds with no projected price.
        players:
            ``{player_id: WishlistPlayer}`` for naming players in gap warnings.
        """
        rounds = horizon_rounds or [rs.round for rs in schedule]
        last_round = rounds[-1] if rounds else 0
        warnings: list[ScheduleWarning] = []

        warnings += self._ledger_checks(schedule)
        warnings += self._confidence_checks(schedule)
        if cash_plan is not None:
            warnings += self._cash_plan_checks(cash_plan, last_round)
        warnings += self._unscheduled_checks(unscheduled or [], cash_plan, last_round)
        warnings += self._projection_checks(projection_gaps or {}, players or {}, rounds)
        for d in deferrals or []:
            warnings.append(ScheduleWarning(
                round=d.scheduled_round,
                severity="info",
                code=WarningCode.BUDGET_CONTENTION,
                issue=(
                    f"{d.player_name} moved from round {d.requested_round} "
                    f"to round {d.scheduled_round} due to budget contention"
                ),
                suggestion="Generate extra cash earlier to bring this trade forward",
            ))

        warnings.sort(key=lambda w: (w.round, _SEVERITY_ORDER[w.severity]))
        return warnings

    # ── Errors ────────────────────────────────────────────────────────

    def _ledger_checks(self, schedule: list[RoundSchedule]) -> list[ScheduleWarning]:
        out: list[ScheduleWarning] = []
        tol = self.schedule_cfg.ledger_tolerance
        seen_round: dict[int, int] = {}

        for rs in schedule:
            if rs.total_cost > rs.salary_available + tol:
                logger.error(
                    "Engine invariant violated: round %d spends %.0f with %.0f available",
                    rs.round, rs.total_cost, rs.salary_available,
                )
                out.append(ScheduleWarning(
                    round=rs.round,
                    severity="error",
                    code=WarningCode.ENGINE_INVARIANT_VIOLATION,
                    issue=(
                        f"Round {rs.round} trades cost {format_price(rs.total_cost)} "
                        f"but only {format_price(rs.salary_available)} is available"
                    ),
                    suggestion="Report this schedule; the planner overspent the round",
                ))

            for t in rs.trades:
                if not t.affordability.feasible or t.affordability.remaining_salary_after_trade < -tol:
                    logger.error(
                        "Engine invariant violated: %s committed in round %d without funds",
                        t.player_name, rs.round,
                    )
                    out.append(ScheduleWarning(
                        round=rs.round,
                        severity="error",
                        code=WarningCode.ENGINE_INVARIANT_VIOLATION,
                        issue=f"{t.player_name} was scheduled without enough salary",
                    ))
                if t.player_id in seen_round:
                    first = seen_round[t.player_id]
                    out.append(ScheduleWarning(
                        round=rs.round,
                        severity="error",
                        code=WarningCode.DUPLICATE_TRADE,
                        issue=(
                            f"{t.player_name} is traded in more than once "
                            f"(rounds {first} and {rs.round})"
                        ),
                        suggestion="Drop the later trade",
                    ))
                else:
                    seen_round[t.player_id] = rs.round
        return out

    # ── Soft spots ────────────────────────────────────────────────────

    def _confidence_checks(self, schedule: list[RoundSchedule]) -> list[ScheduleWarning]:
        out = []
        threshold = self.confidence_cfg.low_confidence
        for rs in schedule:
            for t in rs.trades:
                if t.affordability.confidence < threshold:
                    out.append(ScheduleWarning(
                        round=rs.round,
                        severity="warning",
                        code=WarningCode.LOW_CONFIDENCE,
                        issue=(
                            f"Low confidence ({t.affordability.confidence}%) "
                            f"for {t.player_name}"
                        ),
                        suggestion="Keep a bigger salary buffer or wait for projections to firm up",
                    ))
        return out

    def _cash_plan_checks(
        self, cash_plan: CashGenerationPlan, last_round: int,
    ) -> list[ScheduleWarning]:
        out = []
        limit = self.cash_cfg.heavy_sell_threshold
        for step in cash_plan.plan:
            n = len(step.players_to_sell)
            if n > limit:
                out.append(ScheduleWarning(
                    round=step.round,
                    severity="warning",
                    code=WarningCode.HEAVY_SELL_ROUND,
                    issue=f"Cash plan sells {n} players in round {step.round}",
                    suggestion="Spread the sales over more rounds if trade limits allow",
                ))
        if not cash_plan.covered:
            round_ = cash_plan.plan[-1].round if cash_plan.plan else last_round
            out.append(ScheduleWarning(
                round=round_,
                severity="error",
                code=WarningCode.INSUFFICIENT_ROSTER_VALUE,
                issue=(
                    f"Selling every candidate still leaves "
                    f"{format_price(cash_plan.shortfall)} of "
                    f"{format_price(cash_plan.needed)} uncovered"
                ),
                suggestion="Remove a wishlist player or extend the horizon",
            ))
        return out

    def _unscheduled_checks(
        self,
        unscheduled: list[WishlistPlayer],
        cash_plan: CashGenerationPlan | None,
        last_round: int,
    ) -> list[ScheduleWarning]:
        out = []
        remedied = cash_plan is not None and cash_plan.covered and cash_plan.needed > 0
        for p in unscheduled:
            if remedied:
                out.append(ScheduleWarning(
                    round=last_round,
                    severity="warning",
                    code=WarningCode.CASH_GENERATION_REQUIRED,
                    issue=f"{p.name} is only affordable after generating cash",
                    suggestion="Follow the cash generation plan",
                ))
            else:
                out.append(ScheduleWarning(
                    round=last_round,
                    severity="error",
                    code=WarningCode.UNAFFORDABLE,
                    issue=f"{p.name} cannot be afforded within the planning horizon",
                    suggestion="Remove the player or free up more salary",
                ))
        return out

    def _projection_checks(
        self,
        projection_gaps: dict[int, list[int]],
        players: dict[int, WishlistPlayer],
        rounds: list[int],
    ) -> list[ScheduleWarning]:
        out = []
        horizon = set(rounds)
        for pid, gap_rounds in projection_gaps.items():
            if not gap_rounds:
                continue
            name = players[pid].name if pid in players else f"Player {pid}"
            if horizon and horizon.issubset(gap_rounds):
                out.append(ScheduleWarning(
                    round=min(gap_rounds),
                    severity="warning",
                    code=WarningCode.PROJECTION_UNAVAILABLE,
                    issue=f"No price projection for {name} in any planned round",
                    suggestion="Refresh projections and try again",
                ))
            else:
                listed = ", ".join(str(r) for r in sorted(gap_rounds))
                out.append(ScheduleWarning(
                    round=min(gap_rounds),
                    severity="info",
                    code=WarningCode.PROJECTION_UNAVAILABLE,
                    issue=f"No price projection for {name} in round(s) {listed}",
                ))
        return out
