#!/usr/bin/env python3
"""Plan a wishlist from a JSON file and print the trade schedule.

The file holds the same body the ``/api/wishlist/schedule`` endpoint takes,
with full ``wishlist`` objects and inline ``projections``::

    {
      "wishlist": [{"playerId": 1, "name": "...", "position": "MID",
                    "team": "CAR", "currentPrice": 700000}],
      "currentTeam": {"rookies": [...]},
      "remainingSalary": 750000,
      "currentRound": 6,
      "projections": {"1": {"6": 700000, "7": 720000}}
    }

Usage:
    python scripts/plan_wishlist.py request.json [--horizon 4] [--json]
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from wishlist_planner.engine import ProjectionTable, ScheduleEngine
from wishlist_planner.errors import InvalidInput
from wishlist_planner.logging_config import setup_logging
from wishlist_planner.schemas import WishlistScheduleResponse
from wishlist_planner.utils.money import format_price


def render(result: WishlistScheduleResponse) -> str:
    """Plain-text rendering of a schedule."""
    lines = []
    s = result.summary
    lines.append(
        f"{s.feasible_trades}/{s.total_players} scheduled, "
        f"{s.infeasible_trades} infeasible, avg confidence {s.avg_confidence}%"
    )
    for rs in result.schedule:
        lines.append(
            f"\nRound {rs.round}: {format_price(rs.salary_available)} -> "
            f"{format_price(rs.salary_remaining)}"
        )
        for t in rs.trades:
            a = t.affordability
            lines.append(
                f"  + {t.player_name:<24} {t.position:<4} "
                f"{format_price(t.projected_price):>8}  {a.confidence:>3}% ({a.label})"
            )

    plan = result.cash_generation_plan
    if plan is not None:
        lines.append(f"\nCash generation: need {format_price(plan.needed)}")
        for step in plan.plan:
            lines.append(f"  R{step.round}: {step.action}")
            for p in step.players_to_sell:
                lines.append(f"    - sell {p.name} ({format_price(p.sell_price)})")
        if not plan.covered:
            lines.append(f"  Shortfall: {format_price(plan.shortfall)}")

    if result.warnings:
        lines.append("\nWarnings:")
        for w in result.warnings:
            lines.append(f"  [{w.severity.upper()}] R{w.round} {w.issue}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("request", type=Path, help="JSON request file")
    parser.add_argument("--horizon", type=int, default=None, help="Rounds to plan")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON response")
    args = parser.parse_args(argv)

    setup_logging(stream=sys.stderr if args.json else None)

    try:
        body = json.loads(args.request.read_text(encoding="utf-8"))
    except OSError as exc:
        print(f"Cannot read request file: {exc}", file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"Request file is not valid JSON: {exc}", file=sys.stderr)
        return 2

    try:
        if not isinstance(body, dict):
            raise InvalidInput("Request file must hold a JSON object")
        projections = body.pop("projections", {})
        if not isinstance(projections, dict):
            raise ValueError("projections must map playerId -> {round: price}")
        if args.horizon is not None:
            body["horizon"] = args.horizon
        table = ProjectionTable.from_mapping(projections)
        result = ScheduleEngine(table).build(body)
    except InvalidInput as exc:
        print(f"Invalid request: {exc}", file=sys.stderr)
        for d in exc.details:
            print(f"  {d}", file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"Invalid projections: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(result.to_json_dict(), indent=2))
    else:
        print(render(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
