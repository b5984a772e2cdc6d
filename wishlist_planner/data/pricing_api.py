"""Pricing service client: player catalog, price projections and bye rounds.

The catalog and bye calendar use a 6-hour file cache.  Projections use a
30-minute file cache whose key includes the requested rounds, and are fetched
per player in a thread pool before the engine runs.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed

import requests

from wishlist_planner.config import cache_cfg, confidence_cfg, data_cfg
from wishlist_planner.data.cache import cached_json
from wishlist_planner.engine.projection import ProjectionTable
from wishlist_planner.logging_config import get_logger

logger = get_logger(__name__)

_REQUEST_TIMEOUT = data_cfg.request_timeout


def _api_base() -> str:
    return data_cfg.pricing_api_base.rstrip("/")


# ── Low-level HTTP ──────────────────────────────────────────────────────

def _fetch_url(url: str, params: dict | None = None, timeout: int = _REQUEST_TIMEOUT) -> requests.Response:
    """GET *url*, raise on HTTP errors."""
    resp = requests.get(url, params=params, timeout=timeout)
    resp.raise_for_status()
    return resp


def _cached_fetch(
    name: str,
    url: str,
    max_age: int,
    params: dict | None = None,
    force: bool = False,
):
    """Fetch JSON through the file cache, falling back to stale data on failure."""
    def fetch():
        logger.info("Fetching %s", url)
        return _fetch_url(url, params=params).json()

    return cached_json(
        name, fetch, max_age=max_age, force=force,
        recover_from=(requests.RequestException, ValueError),
    )


# ── Catalog / byes ──────────────────────────────────────────────────────

def fetch_player_catalog(force: bool = False) -> list[dict]:
    """All players known to the pricing service.

    Each row has ``playerId, name, position, team, currentPrice``.
    """
    data = _cached_fetch(
        "pricing_players.json", f"{_api_base()}/players",
        max_age=cache_cfg.player_catalog, force=force,
    )
    if isinstance(data, dict):
        data = data.get("players", [])
    return list(data)


def fetch_bye_rounds(force: bool = False) -> dict[str, list[int]]:
    """``{team: [round, ...]}`` bye calendar."""
    data = _cached_fetch(
        "pricing_byes.json", f"{_api_base()}/byes",
        max_age=cache_cfg.player_catalog, force=force,
    )
    if not isinstance(data, dict):
        return {}
    return {str(team): [int(r) for r in rounds] for team, rounds in data.items()}


# ── Projections ─────────────────────────────────────────────────────────

def fetch_player_projections(
    player_id: int,
    first_round: int,
    last_round: int,
    force: bool = False,
) -> list[dict]:
    """Projected prices for one player, as ``[{player_id, round, price}]``."""
    data = _cached_fetch(
        f"pricing_projections_{player_id}_r{first_round}-{last_round}.json",
        f"{_api_base()}/players/{player_id}/projections",
        max_age=cache_cfg.projections,
        params={"from": first_round, "to": last_round},
        force=force,
    )
    if isinstance(data, dict):
        data = data.get("projections", [])
    return [
        {"player_id": player_id, "round": row.get("round"), "price": row.get("price")}
        for row in data
    ]


def fetch_projection_table(
    player_ids: list[int],
    first_round: int,
    last_round: int,
    lookback: int = confidence_cfg.volatility_window,
    force: bool = False,
) -> ProjectionTable:
    """Resolve projections for every player into a :class:`ProjectionTable`.

    Rounds before *first_round* (``lookback`` of them) are included so the
    volatility signal has history to work with.  A player whose fetch fails
    is left out, and the engine reports it as unprojectable; if every fetch
    fails the last error is raised.
    """
    if not player_ids:
        return ProjectionTable()

    start = max(1, first_round - lookback)
    rows: list[dict] = []
    last_exc: Exception | None = None
    failures = 0

    with ThreadPoolExecutor(max_workers=data_cfg.max_workers) as pool:
        futures = {
            pool.submit(fetch_player_projections, pid, start, last_round, force): pid
            for pid in player_ids
        }
        for fut in as_completed(futures):
            pid = futures[fut]
            try:
                rows.extend(fut.result())
            except requests.RequestException as exc:
                failures += 1
                last_exc = exc
                logger.warning("Projections for player %s unavailable: %s", pid, exc)

    if failures == len(player_ids) and last_exc is not None:
        raise last_exc

    # as_completed order is arbitrary; the table sorts by (player, round)
    return ProjectionTable.from_records(rows)
