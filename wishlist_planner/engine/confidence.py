"""Confidence scoring for affordability results.

Score curve (all knobs in :class:`~wishlist_planner.config.ConfidenceConfig`):

* infeasible -> 0
* margin ratio >= ``full_margin_ratio`` -> base 100, otherwise linear decay
  from 100 down to 0 as the margin approaches 0
* minus ``bye_penalty`` when the target has a bye within ``bye_window`` rounds
* minus ``volatility_penalty`` when the price swung more than
  ``volatility_threshold`` over the last ``volatility_window`` rounds
* total penalty capped at ``max_penalty``, result clamped to [0, 100] and
  floored, so ties land on the lower score

The score is advisory.  It never changes feasibility.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from wishlist_planner.config import ConfidenceConfig, confidence_cfg


@dataclass(frozen=True)
class AffordabilityAssessment:
    """An affordability result before a confidence score is attached."""

    projected_price: float
    salary_available: float
    remaining_salary_after_trade: float
    breakdown: tuple[str, ...] = field(default_factory=tuple)

    @property
    def feasible(self) -> bool:
        return self.remaining_salary_after_trade >= 0


@dataclass(frozen=True)
class ScoringContext:
    margin_ratio: float
    rounds_until_bye: int | None = None
    price_volatility: float = 0.0


def margin_ratio(remaining: float, salary_available: float) -> float:
    """Share of the available salary left after the trade."""
    if salary_available <= 0:
        # Nothing to spend: only a free trade keeps a (full) margin
        return 1.0 if remaining >= 0 else -1.0
    return remaining / salary_available


class ConfidenceScorer:
    """Turns an affordability assessment into a 0-100 confidence score."""

    def __init__(self, cfg: ConfidenceConfig = confidence_cfg):
        self.cfg = cfg

    def score(self, assessment: AffordabilityAssessment, context: ScoringContext) -> int:
        if not assessment.feasible:
            return 0

        cfg = self.cfg
        ratio = max(context.margin_ratio, 0.0)
        if ratio >= cfg.full_margin_ratio:
            base = 100.0
        else:
            base = 100.0 * ratio / cfg.full_margin_ratio

        score = base - self.penalty(context)
        score = min(max(score, 0.0), 100.0)
        # Round away float noise before flooring (0.15 / 0.15 must stay 100)
        return int(math.floor(round(score, 6)))

    def penalty(self, context: ScoringContext) -> float:
        cfg = self.cfg
        penalty = 0.0
        if context.rounds_until_bye is not None and context.rounds_until_bye <= cfg.bye_window:
            penalty += cfg.bye_penalty
        if context.price_volatility > cfg.volatility_threshold:
            penalty += cfg.volatility_penalty
        return min(penalty, cfg.max_penalty)

    def label(self, score: int) -> str:
        if score >= self.cfg.high_label:
            return "high"
        if score >= self.cfg.medium_label:
            return "medium"
        if score > 0:
            return "low"
        return "none"
