"""Price projections as seen by the engine.

The engine never talks to the pricing service itself.  Callers resolve the
projections first (see :mod:`wishlist_planner.data.pricing_api`) and hand the
engine anything that satisfies :class:`PriceProjection`; usually a
:class:`ProjectionTable`.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Protocol

import pandas as pd

from wishlist_planner.logging_config import get_logger
from wishlist_planner.utils.money import safe_float

logger = get_logger(__name__)

_COLUMNS = ["player_id", "round", "price"]


class PriceProjection(Protocol):
    def project(self, player_id: int, round_: int) -> float | None:
        """Projected price of *player_id* in *round_*, or None if unknown."""


class ProjectionTable:
    """Already-resolved projections, one price per (player_id, round).

    Backed by a DataFrame with columns ``player_id``, ``round``, ``price``.
    NaN, infinite, negative or missing prices read back as ``None``.
    """

    def __init__(self, df: pd.DataFrame | None = None):
        if df is None:
            df = pd.DataFrame(columns=_COLUMNS)
        missing = [c for c in _COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Projection frame missing columns: {missing}")

        df = df[_COLUMNS].copy()
        df["player_id"] = pd.to_numeric(df["player_id"], errors="coerce")
        df["round"] = pd.to_numeric(df["round"], errors="coerce")
        df["price"] = pd.to_numeric(df["price"], errors="coerce")
        df = df.dropna(subset=["player_id", "round"])
        df = df.astype({"player_id": int, "round": int})
        # Last write wins for duplicate (player, round) rows
        df = df.drop_duplicates(subset=["player_id", "round"], keep="last")
        negative = df["price"] < 0
        if negative.any():
            logger.warning(
                "Treating %d negative projected price(s) as missing for player(s) %s",
                int(negative.sum()), sorted(df.loc[negative, "player_id"].unique().tolist()),
            )
            df["price"] = df["price"].mask(negative)
        self._df = df.sort_values(["player_id", "round"]).reset_index(drop=True)

        self._prices: dict[tuple[int, int], float | None] = {
            (int(r.player_id), int(r.round)): safe_float(r.price, default=None)
            for r in self._df.itertuples(index=False)
        }

    # ── Constructors ─────────────────────────────────────────────────

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "ProjectionTable":
        """Build from ``[{player_id, round, price}, ...]``."""
        return cls(pd.DataFrame(list(records), columns=_COLUMNS))

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> "ProjectionTable":
        """Build from ``{player_id: {round: price}}`` (keys may be strings)."""
        rows = []
        for pid, by_round in mapping.items():
            if not isinstance(by_round, Mapping):
                raise ValueError(f"Projections for player {pid} must be a round->price mapping")
            for rnd, price in by_round.items():
                rows.append({"player_id": pid, "round": rnd, "price": price})
        return cls(pd.DataFrame(rows, columns=_COLUMNS))

    # ── Lookup ───────────────────────────────────────────────────────

    def project(self, player_id: int, round_: int) -> float | None:
        return self._prices.get((int(player_id), int(round_)))

    @property
    def frame(self) -> pd.DataFrame:
        return self._df.copy()

    @property
    def player_ids(self) -> set[int]:
        return set(self._df["player_id"].tolist())

    def __len__(self) -> int:
        return len(self._df)


# ---------------------------------------------------------------------------
# Context signals derived from projections
# ---------------------------------------------------------------------------

def price_volatility(
    projection: PriceProjection,
    player_id: int,
    round_: int,
    window: int,
) -> float:
    """Relative price swing over the *window* rounds leading up to *round_*.

    Returns ``(max - min) / min`` over the known prices in
    ``round_ - window .. round_``; 0.0 when fewer than two prices are known.
    """
    prices = []
    for r in range(round_ - window, round_ + 1):
        p = projection.project(player_id, r)
        if p is not None:
            prices.append(p)
    if len(prices) < 2:
        return 0.0
    lo = min(prices)
    if lo <= 0:
        return 0.0
    return (max(prices) - lo) / lo


def rounds_until_bye(bye_rounds: Iterable[int], round_: int) -> int | None:
    """Rounds from *round_* to the next bye (0 = bye this round), or None."""
    upcoming = [b - round_ for b in bye_rounds if b >= round_]
    return min(upcoming) if upcoming else None
