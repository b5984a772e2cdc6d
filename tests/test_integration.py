"""Integration tests for the Flask API."""

import json

import pytest
import requests


# ---------------------------------------------------------------------------
# Flask app tests
# ---------------------------------------------------------------------------

@pytest.fixture
def app():
    from wishlist_planner.api import create_app
    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def schedule_body():
    """Self-contained schedule request: full wishlist and inline projections."""
    return {
        "wishlist": [
            {"playerId": 1, "name": "Big Mid", "position": "MID", "team": "CAR",
             "currentPrice": 700_000, "addedAt": "2026-10-01T10:00:00Z"},
            {"playerId": 2, "name": "Value Fwd", "position": "FWD", "team": "GEE",
             "currentPrice": 500_000},
        ],
        "currentTeam": {"rookies": [
            {"playerId": 50, "name": "Rookie Back", "position": "DEF",
             "sellPrice": 300_000, "priceTrend": -10_000},
        ]},
        "remainingSalary": 850_000,
        "currentRound": 6,
        "horizon": 2,
        "byeRounds": {},
        "projections": {
            "1": {"6": 700_000, "7": 720_000},
            "2": {"6": 500_000, "7": 510_000},
        },
    }


def test_app_creates(app):
    """App factory creates without errors."""
    assert app is not None


def test_api_routes_exist(app):
    """All expected API routes are registered."""
    rules = {r.rule for r in app.url_map.iter_rules()}
    for route in ["/api/wishlist/schedule", "/api/wishlist/affordability", "/api/status"]:
        assert route in rules, f"Missing route: {route}"


def test_status(client):
    resp = client.get("/api/status")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["status"] == "ok"
    assert data["defaultHorizon"] == 6
    assert resp.headers["Cache-Control"] == "no-store"


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Not found"}


# ---------------------------------------------------------------------------
# /api/wishlist/schedule
# ---------------------------------------------------------------------------

class TestScheduleEndpoint:

    def test_inline_schedule(self, client, schedule_body):
        resp = client.post("/api/wishlist/schedule", json=schedule_body)
        assert resp.status_code == 200
        data = resp.get_json()

        assert data["summary"]["totalPlayers"] == 2
        assert data["summary"]["feasibleTrades"] == 1
        [round6, round7] = data["schedule"]
        assert [t["playerId"] for t in round6["trades"]] == [2]
        assert round6["salaryAvailable"] == 850_000
        assert round6["salaryRemaining"] == 350_000
        assert round7["trades"] == []

        plan = data["cashGenerationPlan"]
        assert plan["needed"] == 350_000
        assert plan["plan"][0]["playersToSell"][0]["name"] == "Rookie Back"
        assert plan["shortfall"] == 50_000
        assert data["unscheduledPlayerIds"] == [1]

    def test_missing_body_is_400(self, client):
        resp = client.post("/api/wishlist/schedule", data="not json",
                           content_type="text/plain")
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_invalid_salary_is_400(self, client, schedule_body):
        schedule_body["remainingSalary"] = -5
        resp = client.post("/api/wishlist/schedule", json=schedule_body)
        assert resp.status_code == 400
        data = resp.get_json()
        assert data["error"] == "Invalid schedule request"
        assert any("remainingSalary" in d for d in data["details"])

    def test_overflowing_salary_is_400(self, client, schedule_body):
        raw = json.dumps(schedule_body).replace("850000", "1e999")
        resp = client.post("/api/wishlist/schedule", data=raw,
                           content_type="application/json")
        assert resp.status_code == 400
        assert any("remainingSalary" in d for d in resp.get_json()["details"])

    def test_negative_projection_not_scheduled(self, client, schedule_body):
        schedule_body["projections"]["2"] = {"6": -500_000, "7": -500_000}
        resp = client.post("/api/wishlist/schedule", json=schedule_body)
        assert resp.status_code == 200
        data = resp.get_json()
        [round6, round7] = data["schedule"]
        assert [t["playerId"] for t in round6["trades"]] == [1]
        assert round6["salaryRemaining"] == 150_000
        assert round7["salaryRemaining"] == 150_000
        assert data["unscheduledPlayerIds"] == [2]

    def test_bad_projection_shape_is_400(self, client, schedule_body):
        schedule_body["projections"] = {"1": [700_000]}
        resp = client.post("/api/wishlist/schedule", json=schedule_body)
        assert resp.status_code == 400

    def test_player_ids_resolved_from_catalog(self, client, monkeypatch):
        from wishlist_planner.api import helpers
        from wishlist_planner.engine import ProjectionTable

        catalog = [
            {"playerId": 1, "name": "Big Mid", "position": "MID", "team": "CAR",
             "currentPrice": 700_000},
        ]
        seen = {}

        def fake_table(player_ids, first_round, last_round):
            seen["args"] = (player_ids, first_round, last_round)
            return ProjectionTable.from_mapping({1: {6: 700_000}})

        monkeypatch.setattr(helpers, "fetch_player_catalog", lambda: catalog)
        monkeypatch.setattr(helpers, "fetch_projection_table", fake_table)
        monkeypatch.setattr(helpers, "fetch_bye_rounds", lambda: {"CAR": [6]})

        resp = client.post("/api/wishlist/schedule", json={
            "playerIds": [1],
            "currentRound": 6,
            "remainingSalary": 2_000_000,
            "currentTeam": {"rookies": []},
            "horizon": 1,
        })
        assert resp.status_code == 200
        assert seen["args"] == ([1], 6, 6)
        trade = resp.get_json()["schedule"][0]["trades"][0]
        assert trade["playerName"] == "Big Mid"
        # Bye this round costs 10 points
        assert trade["affordability"]["confidence"] == 90

    def test_unknown_player_id_is_400(self, client, monkeypatch):
        from wishlist_planner.api import helpers

        monkeypatch.setattr(helpers, "fetch_player_catalog", lambda: [])
        resp = client.post("/api/wishlist/schedule", json={
            "playerIds": [99], "currentRound": 6, "remainingSalary": 100,
        })
        assert resp.status_code == 400
        assert resp.get_json()["details"] == ["player 99 not in catalog"]

    def test_pricing_service_down_is_503(self, client, monkeypatch, schedule_body):
        from wishlist_planner.api import helpers

        def boom(*args, **kwargs):
            raise requests.ConnectionError("refused")

        del schedule_body["projections"]
        monkeypatch.setattr(helpers, "fetch_projection_table", boom)
        resp = client.post("/api/wishlist/schedule", json=schedule_body)
        assert resp.status_code == 503

    def test_bye_calendar_failure_is_tolerated(self, client, monkeypatch, schedule_body):
        from wishlist_planner.api import helpers

        def boom():
            raise requests.Timeout("slow")

        del schedule_body["byeRounds"]
        monkeypatch.setattr(helpers, "fetch_bye_rounds", boom)
        resp = client.post("/api/wishlist/schedule", json=schedule_body)
        assert resp.status_code == 200


# ---------------------------------------------------------------------------
# /api/wishlist/affordability
# ---------------------------------------------------------------------------

class TestAffordabilityEndpoint:

    @pytest.fixture
    def body(self):
        return {
            "player": {"playerId": 1, "name": "Big Mid", "position": "MID",
                       "team": "CAR", "currentPrice": 700_000},
            "round": 6,
            "salaryAvailable": 750_000,
            "byeRounds": {},
            "projections": {"1": {"6": 700_000}},
        }

    def test_evaluates_single_trade(self, client, body):
        resp = client.post("/api/wishlist/affordability", json=body)
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["projectedPrice"] == 700_000
        assert data["affordability"]["status"] == "feasible"
        assert data["affordability"]["remainingSalaryAfterTrade"] == 50_000
        assert data["affordability"]["confidence"] == 44

    def test_missing_projection_is_404(self, client, body):
        body["round"] = 9
        resp = client.post("/api/wishlist/affordability", json=body)
        assert resp.status_code == 404

    def test_negative_salary_is_400(self, client, body):
        body["salaryAvailable"] = -1
        resp = client.post("/api/wishlist/affordability", json=body)
        assert resp.status_code == 400

    def test_bad_player_is_400(self, client, body):
        body["player"] = {"name": "No Id"}
        resp = client.post("/api/wishlist/affordability", json=body)
        assert resp.status_code == 400

    def test_malformed_bye_rounds_is_400(self, client, body):
        body["byeRounds"] = {"CAR": 7}
        resp = client.post("/api/wishlist/affordability", json=body)
        assert resp.status_code == 400
        assert resp.get_json()["details"][0].startswith("byeRounds.CAR")

    def test_overflowing_salary_is_400(self, client, body):
        raw = json.dumps(body).replace("750000", "1e999")
        resp = client.post("/api/wishlist/affordability", data=raw,
                           content_type="application/json")
        assert resp.status_code == 400

    def test_infinite_player_price_is_400(self, client, body):
        raw = json.dumps(body).replace('"currentPrice": 700000', '"currentPrice": 1e999')
        resp = client.post("/api/wishlist/affordability", data=raw,
                           content_type="application/json")
        assert resp.status_code == 400

    def test_negative_projection_is_404(self, client, body):
        body["projections"] = {"1": {"6": -700_000}}
        resp = client.post("/api/wishlist/affordability", json=body)
        assert resp.status_code == 404

    def test_fetches_projections_when_not_inline(self, client, body, monkeypatch):
        from wishlist_planner.api import helpers
        from wishlist_planner.engine import ProjectionTable

        seen = {}

        def fake_table(player_ids, first_round, last_round):
            seen["args"] = (player_ids, first_round, last_round)
            return ProjectionTable.from_mapping({1: {6: 600_000}})

        monkeypatch.setattr(helpers, "fetch_projection_table", fake_table)
        monkeypatch.setattr(helpers, "fetch_bye_rounds", lambda: {"CAR": [7]})
        del body["projections"]
        del body["byeRounds"]

        resp = client.post("/api/wishlist/affordability", json=body)
        assert resp.status_code == 200
        assert seen["args"] == ([1], 6, 6)
        data = resp.get_json()
        assert data["projectedPrice"] == 600_000
        # 150k margin of 750k is full confidence, minus the bye next round
        assert data["affordability"]["confidence"] == 90
        assert data["affordability"]["label"] == "high"
