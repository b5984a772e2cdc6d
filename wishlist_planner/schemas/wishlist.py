"""Pydantic schemas for the engine's inputs: wishlist, roster and request."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from wishlist_planner.config import schedule_cfg


class CamelModel(BaseModel):
    """Frozen model that reads and writes camelCase JSON keys.

    Floats must be finite: JSON such as ``1e999`` is rejected, not read as inf.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )


class WishlistPlayer(CamelModel):
    """A player the user wants to trade in."""

    player_id: int
    name: str
    position: str
    team: str
    current_price: float = Field(ge=0)
    added_at: str | None = None

    @field_validator("team", mode="before")
    @classmethod
    def _team_as_text(cls, v):
        # Some feeds send numeric team ids
        return str(v) if isinstance(v, int) else v


class RosterPlayer(CamelModel):
    """An owned player that could be sold to raise cash."""

    player_id: int
    name: str
    position: str
    sell_price: float = Field(ge=0)
    price_trend: float = 0.0  # Projected price change per round (negative = falling)


class CurrentTeam(CamelModel):
    rookies: list[RosterPlayer] = Field(default_factory=list)


class ScheduleRequest(CamelModel):
    """Everything one schedule build needs apart from the projections."""

    wishlist: list[WishlistPlayer] = Field(max_length=schedule_cfg.max_wishlist_size)
    current_team: CurrentTeam = Field(default_factory=CurrentTeam)
    remaining_salary: float = Field(ge=0)
    current_round: int = Field(ge=1)
    horizon: int = Field(
        default=schedule_cfg.default_horizon, ge=1, le=schedule_cfg.max_horizon,
    )
    bye_rounds: dict[str, list[int]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_unique_players(self) -> "ScheduleRequest":
        seen: set[int] = set()
        for p in self.wishlist:
            if p.player_id in seen:
                raise ValueError(f"Player {p.player_id} appears twice in the wishlist")
            seen.add(p.player_id)
        owned: set[int] = set()
        for p in self.current_team.rookies:
            if p.player_id in owned:
                raise ValueError(f"Player {p.player_id} appears twice in the current team")
            owned.add(p.player_id)
        return self

    @property
    def rounds(self) -> list[int]:
        """Rounds covered by the planning horizon."""
        return list(range(self.current_round, self.current_round + self.horizon))
