"""Per-trade affordability: can the salary on hand cover a projected price?"""

from __future__ import annotations

import math
from typing import Mapping

from wishlist_planner.config import ConfidenceConfig, confidence_cfg
from wishlist_planner.engine.confidence import (
    AffordabilityAssessment,
    ConfidenceScorer,
    ScoringContext,
    margin_ratio,
)
from wishlist_planner.engine.projection import (
    PriceProjection,
    price_volatility,
    rounds_until_bye,
)
from wishlist_planner.errors import InvalidInput, ProjectionUnavailable
from wishlist_planner.schemas.schedule import (
    AffordabilityResult,
    FeasibleAffordability,
    InfeasibleAffordability,
)
from wishlist_planner.schemas.wishlist import WishlistPlayer
from wishlist_planner.utils.money import format_price, safe_float


class AffordabilityCalculator:
    """Evaluates one candidate trade in one round against the salary available.

    Parameters
    ----------
    projection:
        Resolved price projections.
    scorer:
        Confidence scorer; a default one built from *cfg* when omitted.
    bye_rounds:
        ``{team: [round, ...]}`` used for the bye-proximity signal.
    """

    def __init__(
        self,
        projection: PriceProjection,
        scorer: ConfidenceScorer | None = None,
        bye_rounds: Mapping[str, list[int]] | None = None,
        cfg: ConfidenceConfig = confidence_cfg,
    ):
        self.projection = projection
        self.cfg = cfg
        self.scorer = scorer or ConfidenceScorer(cfg)
        self.bye_rounds = dict(bye_rounds or {})

    def project(self, player_id: int, round_: int) -> float:
        """Projected price, or raise ``ProjectionUnavailable``."""
        price = safe_float(self.projection.project(player_id, round_), default=None)
        if price is None or price < 0:
            raise ProjectionUnavailable(player_id, round_)
        return price

    def evaluate(
        self,
        player: WishlistPlayer,
        round_: int,
        salary_available: float,
    ) -> AffordabilityResult:
        """Affordability of trading *player* in during *round_*."""
        if not math.isfinite(salary_available) or salary_available < 0:
            raise InvalidInput(
                "salary_available must be a finite amount >= 0",
                [f"salary_available={salary_available}"],
            )
        return self.assess(player, round_, salary_available, self.project(player.player_id, round_))

    def assess(
        self,
        player: WishlistPlayer,
        round_: int,
        salary_available: float,
        projected_price: float,
    ) -> AffordabilityResult:
        """Same as :meth:`evaluate` with the projected price already known."""
        remaining = salary_available - projected_price
        ratio = margin_ratio(remaining, salary_available)
        volatility = price_volatility(
            self.projection, player.player_id, round_, self.cfg.volatility_window,
        )
        until_bye = rounds_until_bye(self.bye_rounds.get(player.team, ()), round_)

        breakdown = self._breakdown(
            round_, projected_price, salary_available, remaining, ratio,
            volatility, until_bye,
        )
        assessment = AffordabilityAssessment(
            projected_price=projected_price,
            salary_available=salary_available,
            remaining_salary_after_trade=remaining,
            breakdown=tuple(breakdown),
        )
        context = ScoringContext(
            margin_ratio=ratio,
            rounds_until_bye=until_bye,
            price_volatility=volatility,
        )
        confidence = self.scorer.score(assessment, context)

        cls = FeasibleAffordability if assessment.feasible else InfeasibleAffordability
        return cls(
            confidence=confidence,
            label=self.scorer.label(confidence),
            remaining_salary_after_trade=remaining,
            breakdown=breakdown,
        )

    def _breakdown(
        self,
        round_: int,
        projected_price: float,
        salary_available: float,
        remaining: float,
        ratio: float,
        volatility: float,
        until_bye: int | None,
    ) -> list[str]:
        lines = [
            f"Projected price {format_price(projected_price)} in round {round_}",
            f"Salary available {format_price(salary_available)}",
        ]
        if remaining >= 0:
            lines.append(f"Margin {format_price(remaining)} ({ratio:.0%} of available salary)")
        else:
            lines.append(f"Short by {format_price(-remaining)}")

        if volatility > self.cfg.volatility_threshold:
            lines.append(
                f"Price swung {volatility:.0%} over the last "
                f"{self.cfg.volatility_window} rounds"
            )
        if until_bye is not None and until_bye <= self.cfg.bye_window:
            if until_bye == 0:
                lines.append("Bye this round: scoring data uncertain")
            else:
                plural = "s" if until_bye != 1 else ""
                lines.append(f"Bye in {until_bye} round{plural}: scoring data uncertain")
        return lines
