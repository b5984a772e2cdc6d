"""Round-by-round wishlist scheduler.

Walks the planning horizon with a running salary ledger.  In each round every
pending wishlist player is checked against the salary entering the round; the
individually affordable ones are committed cheapest first (ties: higher
confidence, then lower player id) for as long as the ledger covers them.
Whatever is left after the last round defines the deficit handed to the cash
generation planner.

The engine is a pure function of its request and the projection table: no
state survives a ``build`` call.
"""

from __future__ import annotations

from pydantic import ValidationError

from wishlist_planner.config import (
    CashConfig,
    ConfidenceConfig,
    ScheduleConfig,
    cash_cfg,
    confidence_cfg,
    schedule_cfg,
)
from wishlist_planner.engine.affordability import AffordabilityCalculator
from wishlist_planner.engine.cash_generation import CashGenerationPlanner
from wishlist_planner.engine.confidence import ConfidenceScorer
from wishlist_planner.engine.projection import PriceProjection
from wishlist_planner.engine.warning_generator import Deferral, WarningGenerator
from wishlist_planner.errors import InvalidInput, ProjectionUnavailable
from wishlist_planner.logging_config import get_logger
from wishlist_planner.schemas.schedule import (
    CashGenerationPlan,
    RoundSchedule,
    ScheduledTrade,
    ScheduleSummary,
    WishlistScheduleResponse,
)
from wishlist_planner.schemas.wishlist import ScheduleRequest, WishlistPlayer

logger = get_logger(__name__)


def coerce_request(request: ScheduleRequest | dict) -> ScheduleRequest:
    """Validate a request payload, raising ``InvalidInput`` on bad input."""
    if isinstance(request, ScheduleRequest):
        return request
    if not isinstance(request, dict):
        raise InvalidInput("Schedule request must be an object")
    try:
        return ScheduleRequest.model_validate(request)
    except ValidationError as exc:
        details = [
            f"{'.'.join(str(part) for part in err['loc']) or 'request'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise InvalidInput("Invalid schedule request", details) from exc


class ScheduleEngine:
    """Builds a :class:`WishlistScheduleResponse` for one wishlist."""

    def __init__(
        self,
        projection: PriceProjection,
        *,
        schedule: ScheduleConfig = schedule_cfg,
        confidence: ConfidenceConfig = confidence_cfg,
        cash: CashConfig = cash_cfg,
        scorer: ConfidenceScorer | None = None,
        planner: CashGenerationPlanner | None = None,
        warning_generator: WarningGenerator | None = None,
    ):
        self.projection = projection
        self.schedule_cfg = schedule
        self.confidence_cfg = confidence
        self.scorer = scorer or ConfidenceScorer(confidence)
        self.planner = planner or CashGenerationPlanner(cash)
        self.warning_generator = warning_generator or WarningGenerator(
            schedule, confidence, cash,
        )

    def build(self, request: ScheduleRequest | dict) -> WishlistScheduleResponse:
        req = coerce_request(request)
        calc = AffordabilityCalculator(
            self.projection, self.scorer, req.bye_rounds, self.confidence_cfg,
        )
        rounds = req.rounds
        players = {p.player_id: p for p in req.wishlist}
        pending: dict[int, WishlistPlayer] = dict(players)

        ledger = float(req.remaining_salary)
        first_affordable: dict[int, int] = {}
        scheduled_round: dict[int, int] = {}
        gaps: dict[int, list[int]] = {}
        schedule: list[RoundSchedule] = []

        for rnd in rounds:
            salary_in = ledger

            # Pass 1: who is affordable on their own with this round's salary
            candidates: list[tuple[float, int, int]] = []
            for pid, player in pending.items():
                try:
                    price = calc.project(pid, rnd)
                except ProjectionUnavailable:
                    gaps.setdefault(pid, []).append(rnd)
                    continue
                result = calc.assess(player, rnd, salary_in, price)
                if result.feasible:
                    first_affordable.setdefault(pid, rnd)
                    candidates.append((price, -result.confidence, pid))

            # Pass 2: commit cheapest first against the running ledger
            candidates.sort()
            trades: list[ScheduledTrade] = []
            for price, _, pid in candidates:
                player = pending[pid]
                result = calc.assess(player, rnd, ledger, price)
                if not result.feasible:
                    continue
                trades.append(ScheduledTrade(
                    player_id=pid,
                    player_name=player.name,
                    position=player.position,
                    projected_price=price,
                    affordability=result,
                ))
                ledger -= price
                scheduled_round[pid] = rnd
                del pending[pid]

            schedule.append(RoundSchedule(
                round=rnd,
                salary_available=salary_in,
                salary_remaining=ledger,
                trades=trades,
            ))
            logger.debug(
                "Round %d: %d trade(s), ledger %.0f -> %.0f, %d pending",
                rnd, len(trades), salary_in, ledger, len(pending),
            )

        # Players with no projection anywhere can't be priced, let alone funded
        priced = [p for pid, p in pending.items() if len(gaps.get(pid, [])) < len(rounds)]

        cash_plan = self._plan_cash(calc, req, priced, ledger)

        deferrals = [
            Deferral(
                player_name=players[pid].name,
                requested_round=first_affordable[pid],
                scheduled_round=rnd,
            )
            for pid, rnd in scheduled_round.items()
            if rnd > first_affordable.get(pid, rnd)
        ]
        warnings = self.warning_generator.inspect(
            schedule,
            cash_plan,
            horizon_rounds=rounds,
            unscheduled=priced,
            deferrals=deferrals,
            projection_gaps=gaps,
            players=players,
        )

        return WishlistScheduleResponse(
            schedule=schedule,
            summary=self._summarize(req, schedule),
            cash_generation_plan=cash_plan,
            warnings=warnings,
            unscheduled_player_ids=list(pending),
        )

    def _plan_cash(
        self,
        calc: AffordabilityCalculator,
        req: ScheduleRequest,
        unscheduled: list[WishlistPlayer],
        final_ledger: float,
    ) -> CashGenerationPlan | None:
        """Plan sales covering the cheapest horizon price of every leftover player."""
        if not unscheduled:
            return None

        target_total = 0.0
        for player in unscheduled:
            prices = []
            for r in req.rounds:
                try:
                    prices.append(calc.project(player.player_id, r))
                except ProjectionUnavailable:
                    continue
            target_total += min(prices)

        deficit = target_total - final_ledger
        if deficit <= 0:
            return None

        logger.info(
            "%d wishlist player(s) unfunded, deficit %.0f", len(unscheduled), deficit,
        )
        return self.planner.plan(
            deficit,
            req.current_team.rookies,
            host_round=req.current_round,
            last_round=req.rounds[-1],
        )

    @staticmethod
    def _summarize(req: ScheduleRequest, schedule: list[RoundSchedule]) -> ScheduleSummary:
        confidences = [t.affordability.confidence for rs in schedule for t in rs.trades]
        avg = round(sum(confidences) / len(confidences)) if confidences else 0
        total = len(req.wishlist)
        return ScheduleSummary(
            total_players=total,
            feasible_trades=len(confidences),
            infeasible_trades=total - len(confidences),
            avg_confidence=avg,
        )
