"""Exceptions raised by the planner.

Only ``InvalidInput`` escapes a schedule build.  ``ProjectionUnavailable`` is
raised by the affordability calculator and absorbed by the engine, which turns
it into a warning for the affected player/round.
"""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for planner errors."""


class InvalidInput(PlannerError):
    """Malformed wishlist, roster or budget payload."""

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.details = details or []


class ProjectionUnavailable(PlannerError):
    """No projected price exists for a player in a given round."""

    def __init__(self, player_id: int, round_: int):
        super().__init__(f"No price projection for player {player_id} in round {round_}")
        self.player_id = player_id
        self.round = round_
