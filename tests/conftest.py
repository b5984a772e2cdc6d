"""Shared test fixtures for the wishlist planner."""

import pytest


def make_player(player_id, name=None, position="MID", team="CAR", current_price=500_000):
    from wishlist_planner.schemas import WishlistPlayer

    return WishlistPlayer(
        player_id=player_id,
        name=name or f"Player {player_id}",
        position=position,
        team=team,
        current_price=current_price,
    )


def make_rookie(player_id, sell_price, price_trend=0.0, name=None, position="DEF"):
    from wishlist_planner.schemas import RosterPlayer

    return RosterPlayer(
        player_id=player_id,
        name=name or f"Rookie {player_id}",
        position=position,
        sell_price=sell_price,
        price_trend=price_trend,
    )


class DictOracle:
    """Projection oracle over ``{(player_id, round): price}``; None when absent."""

    def __init__(self, prices):
        self.prices = dict(prices)
        self.calls = 0

    def project(self, player_id, round_):
        self.calls += 1
        return self.prices.get((player_id, round_))


@pytest.fixture
def player_factory():
    return make_player


@pytest.fixture
def rookie_factory():
    return make_rookie


@pytest.fixture
def projection_table():
    """Build a ProjectionTable from ``{player_id: {round: price}}``."""
    from wishlist_planner.engine import ProjectionTable

    def _build(mapping):
        return ProjectionTable.from_mapping(mapping)

    return _build


@pytest.fixture
def wishlist():
    """Three targets at different price points."""
    return [
        make_player(101, "Cheap Mid", "MID", "CAR", 200_000),
        make_player(102, "Mid Fwd", "FWD", "GEE", 250_000),
        make_player(103, "Premium Ruck", "RUC", "COL", 300_000),
    ]


@pytest.fixture
def wishlist_projections():
    """Flat projections for the ``wishlist`` fixture over rounds 6-11."""
    return {
        101: {r: 200_000 for r in range(6, 12)},
        102: {r: 250_000 for r in range(6, 12)},
        103: {r: 300_000 for r in range(6, 12)},
    }


@pytest.fixture
def roster():
    """Owned rookies available to sell."""
    return [
        make_rookie(201, 150_000, price_trend=0.0, name="Steady Back"),
        make_rookie(202, 100_000, price_trend=0.0, name="Cheap Wing"),
        make_rookie(203, 120_000, price_trend=-8_000, name="Falling Forward"),
    ]
