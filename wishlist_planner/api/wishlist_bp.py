"""Wishlist blueprint: trade schedule, single-trade affordability, status."""

import math

import requests
from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from wishlist_planner import __version__
from wishlist_planner.api.helpers import (
    build_schedule_inputs,
    resolve_bye_rounds,
    resolve_projection,
)
from wishlist_planner.config import cash_cfg, confidence_cfg, schedule_cfg
from wishlist_planner.engine.affordability import AffordabilityCalculator
from wishlist_planner.engine.scheduler import ScheduleEngine
from wishlist_planner.errors import InvalidInput, ProjectionUnavailable
from wishlist_planner.logging_config import get_logger
from wishlist_planner.schemas.wishlist import WishlistPlayer
from wishlist_planner.utils.money import scrub_nan

log = get_logger(__name__)

wishlist_bp = Blueprint("wishlist", __name__)


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise InvalidInput("A JSON object body is required.")
    return body


# ---------------------------------------------------------------------------
# Trade schedule
# ---------------------------------------------------------------------------

@wishlist_bp.route("/wishlist/schedule", methods=["POST"])
def api_wishlist_schedule():
    """Build the trade schedule for a wishlist."""
    body = _json_body()
    try:
        req, projection = build_schedule_inputs(body)
    except requests.RequestException as exc:
        log.warning("Pricing service unavailable: %s", exc)
        return jsonify({"error": "Pricing service unavailable."}), 503

    result = ScheduleEngine(projection).build(req)
    log.info(
        "Scheduled %d/%d wishlist player(s) from round %d",
        result.summary.feasible_trades, result.summary.total_players, req.current_round,
    )
    return jsonify(scrub_nan(result.to_json_dict()))


# ---------------------------------------------------------------------------
# Single-trade affordability
# ---------------------------------------------------------------------------

@wishlist_bp.route("/wishlist/affordability", methods=["POST"])
def api_wishlist_affordability():
    """Affordability of one player in one round."""
    body = _json_body()
    try:
        player = WishlistPlayer.model_validate(body.get("player") or {})
    except ValidationError as exc:
        raise InvalidInput(
            "player is invalid.", [e["msg"] for e in exc.errors()],
        ) from exc

    try:
        round_ = int(body["round"])
        salary = float(body["salaryAvailable"])
    except (KeyError, TypeError, ValueError, OverflowError):
        raise InvalidInput("round and salaryAvailable are required numbers.") from None
    if not math.isfinite(salary) or salary < 0:
        raise InvalidInput(
            "salaryAvailable must be a finite amount >= 0.",
            [f"salaryAvailable: {body['salaryAvailable']!r}"],
        )

    try:
        table = resolve_projection(body, [player.player_id], round_, round_)
    except requests.RequestException as exc:
        log.warning("Pricing service unavailable: %s", exc)
        return jsonify({"error": "Pricing service unavailable."}), 503

    byes = resolve_bye_rounds(body) or {}
    calc = AffordabilityCalculator(table, bye_rounds=byes)
    try:
        result = calc.evaluate(player, round_, salary)
    except ProjectionUnavailable as exc:
        return jsonify({"error": str(exc)}), 404

    return jsonify({
        "playerId": player.player_id,
        "round": round_,
        "projectedPrice": calc.project(player.player_id, round_),
        "affordability": result.model_dump(mode="json", by_alias=True),
    })


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------

@wishlist_bp.route("/status")
def api_status():
    return jsonify({
        "status": "ok",
        "version": __version__,
        "defaultHorizon": schedule_cfg.default_horizon,
        "maxTradesPerRound": cash_cfg.max_trades_per_round,
        "lowConfidence": confidence_cfg.low_confidence,
    })
