"""Engine layer: affordability, confidence scoring, cash generation,
warning generation and the round-by-round schedule engine.

Re-exports the main classes for convenience::

    from wishlist_planner.engine import ScheduleEngine, ProjectionTable
"""

from wishlist_planner.engine.affordability import AffordabilityCalculator
from wishlist_planner.engine.cash_generation import CashGenerationPlanner
from wishlist_planner.engine.confidence import (
    AffordabilityAssessment,
    ConfidenceScorer,
    ScoringContext,
)
from wishlist_planner.engine.projection import (
    PriceProjection,
    ProjectionTable,
    price_volatility,
    rounds_until_bye,
)
from wishlist_planner.engine.scheduler import ScheduleEngine, coerce_request
from wishlist_planner.engine.warning_generator import Deferral, WarningGenerator

__all__ = [
    # Classes
    "AffordabilityCalculator",
    "AffordabilityAssessment",
    "CashGenerationPlanner",
    "ConfidenceScorer",
    "Deferral",
    "PriceProjection",
    "ProjectionTable",
    "ScheduleEngine",
    "ScoringContext",
    "WarningGenerator",
    # Functions
    "coerce_request",
    "price_volatility",
    "rounds_until_bye",
]
