"""Cash generation: which owned players to sell, and when, to fund the wishlist.

Sell order: ascending ``price_trend`` (falling players first), then higher
``sell_price``, then player id.  Sales per step come from
:class:`~wishlist_planner.config.CashConfig`.
"""

from __future__ import annotations

from wishlist_planner.config import CashConfig, cash_cfg
from wishlist_planner.logging_config import get_logger
from wishlist_planner.schemas.schedule import (
    CashGenerationPlan,
    CashGenerationStep,
    SaleCandidate,
)
from wishlist_planner.schemas.wishlist import RosterPlayer
from wishlist_planner.utils.money import format_price

logger = get_logger(__name__)


class CashGenerationPlanner:
    """Greedy sell planner, one step per round."""

    def __init__(self, cfg: CashConfig = cash_cfg):
        self.cfg = cfg

    def rank_candidates(self, sell_candidates: list[RosterPlayer]) -> list[RosterPlayer]:
        """Sellable players in sell order."""
        sellable = [p for p in sell_candidates if p.sell_price > 0]
        return sorted(
            sellable,
            key=lambda p: (p.price_trend, -p.sell_price, p.player_id),
        )

    def plan(
        self,
        deficit: float,
        sell_candidates: list[RosterPlayer],
        host_round: int,
        last_round: int | None = None,
    ) -> CashGenerationPlan:
        """Build sell steps from *host_round* until *deficit* is covered.

        Each step sells at most ``max_trades_per_round`` players.  Steps never
        go past *last_round* (unbounded when None).  If the roster runs out
        first, the plan keeps what was achievable and ``shortfall`` records
        the gap.
        """
        if deficit <= 0:
            return CashGenerationPlan(needed=0.0)

        ranked = self.rank_candidates(sell_candidates)
        cap = max(1, self.cfg.max_trades_per_round)

        steps: list[CashGenerationStep] = []
        generated = 0.0
        round_ = host_round
        idx = 0

        while generated < deficit and idx < len(ranked):
            if last_round is not None and round_ > last_round:
                break

            sold: list[SaleCandidate] = []
            step_cash = 0.0
            while len(sold) < cap and idx < len(ranked) and generated < deficit:
                p = ranked[idx]
                idx += 1
                sold.append(SaleCandidate(
                    player_id=p.player_id, name=p.name, sell_price=p.sell_price,
                ))
                step_cash += p.sell_price
                generated += p.sell_price

            steps.append(CashGenerationStep(
                round=round_,
                action=self._describe(sold, step_cash),
                players_to_sell=sold,
                cash_generated=step_cash,
            ))
            round_ += 1

        shortfall = max(deficit - generated, 0.0)
        if shortfall > 0:
            logger.info(
                "Cash plan short by %.0f (needed %.0f, roster yields %.0f)",
                shortfall, deficit, generated,
            )
        else:
            logger.info(
                "Cash plan covers %.0f in %d step(s)", deficit, len(steps),
            )

        return CashGenerationPlan(needed=deficit, plan=steps, shortfall=shortfall)

    @staticmethod
    def _describe(sold: list[SaleCandidate], cash: float) -> str:
        n = len(sold)
        noun = "player" if n == 1 else "players"
        return f"Sell {n} {noun} to raise {format_price(cash)}"
