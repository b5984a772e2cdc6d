"""Shared helpers for API blueprints: turn request bodies into engine inputs."""

from __future__ import annotations

import requests
from pydantic import TypeAdapter, ValidationError

from wishlist_planner.data.pricing_api import (
    fetch_bye_rounds,
    fetch_player_catalog,
    fetch_projection_table,
)
from wishlist_planner.engine.projection import ProjectionTable
from wishlist_planner.engine.scheduler import coerce_request
from wishlist_planner.errors import InvalidInput
from wishlist_planner.logging_config import get_logger
from wishlist_planner.schemas.wishlist import ScheduleRequest

log = get_logger(__name__)

# Request keys passed straight through to ScheduleRequest validation
_PASSTHROUGH_KEYS = ("remainingSalary", "currentRound", "horizon", "byeRounds")

# Same shape ScheduleRequest.bye_rounds accepts
_BYE_ROUNDS = TypeAdapter(dict[str, list[int]])


def parse_player_ids(body: dict) -> list[int]:
    """Extract and validate ``playerIds``."""
    raw = body.get("playerIds")
    if not isinstance(raw, list):
        raise InvalidInput("playerIds must be a list of integers.")
    ids: list[int] = []
    for v in raw:
        if isinstance(v, bool) or not isinstance(v, (int, str)):
            raise InvalidInput("playerIds must be a list of integers.", [f"bad id: {v!r}"])
        try:
            ids.append(int(v))
        except ValueError:
            raise InvalidInput("playerIds must be a list of integers.", [f"bad id: {v!r}"])
    return ids


def resolve_wishlist(body: dict) -> list[dict]:
    """Wishlist objects from the body, or looked up in the pricing catalog."""
    if "wishlist" in body:
        wishlist = body["wishlist"]
        if not isinstance(wishlist, list):
            raise InvalidInput("wishlist must be a list of players.")
        return wishlist

    player_ids = parse_player_ids(body)
    catalog = {int(p["playerId"]): p for p in fetch_player_catalog() if "playerId" in p}
    unknown = [pid for pid in player_ids if pid not in catalog]
    if unknown:
        raise InvalidInput(
            "Unknown player ids.", [f"player {pid} not in catalog" for pid in unknown],
        )
    return [
        {
            "playerId": pid,
            "name": catalog[pid].get("name", f"Player {pid}"),
            "position": catalog[pid].get("position", ""),
            "team": catalog[pid].get("team", ""),
            "currentPrice": catalog[pid].get("currentPrice", 0),
        }
        for pid in player_ids
    ]


def resolve_projection(
    body: dict, player_ids: list[int], first_round: int, last_round: int,
) -> ProjectionTable:
    """Inline ``projections`` win; otherwise fetch them from the pricing service."""
    inline = body.get("projections")
    if inline is not None:
        if not isinstance(inline, dict):
            raise InvalidInput("projections must map playerId -> {round: price}.")
        try:
            return ProjectionTable.from_mapping(inline)
        except (TypeError, ValueError) as exc:
            raise InvalidInput("projections could not be read.", [str(exc)]) from exc

    return fetch_projection_table(player_ids, first_round, last_round)


def resolve_bye_rounds(body: dict) -> dict[str, list[int]] | None:
    """Bye calendar from the body, else from the pricing service.

    None when the body has none and the service is unreachable.
    """
    if "byeRounds" in body:
        try:
            return _BYE_ROUNDS.validate_python(body["byeRounds"])
        except ValidationError as exc:
            raise InvalidInput(
                "byeRounds must map team -> [round, ...].",
                [
                    f"byeRounds.{'.'.join(str(p) for p in e['loc'])}: {e['msg']}"
                    for e in exc.errors()
                ],
            ) from exc
    try:
        return fetch_bye_rounds()
    except requests.RequestException as exc:
        # Byes only feed the confidence penalty
        log.warning("Bye calendar unavailable: %s", exc)
        return None


def build_schedule_inputs(body: dict) -> tuple[ScheduleRequest, ProjectionTable]:
    """Validated request plus resolved projections for a schedule call."""
    payload = {
        "wishlist": resolve_wishlist(body),
        "currentTeam": body.get("currentTeam") or {},
    }
    for key in _PASSTHROUGH_KEYS:
        if key in body:
            payload[key] = body[key]

    req = coerce_request(payload)
    if "byeRounds" not in body:
        byes = resolve_bye_rounds(body)
        if byes is not None:
            req = req.model_copy(update={"bye_rounds": byes})

    rounds = req.rounds
    projection = resolve_projection(
        body, [p.player_id for p in req.wishlist], rounds[0], rounds[-1],
    )
    return req, projection
