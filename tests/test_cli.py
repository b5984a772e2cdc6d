"""Tests for scripts/plan_wishlist.py."""

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "plan_wishlist.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("plan_wishlist", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def request_file(tmp_path):
    body = {
        "wishlist": [
            {"playerId": 1, "name": "Big Mid", "position": "MID", "team": "CAR",
             "currentPrice": 700_000},
        ],
        "currentTeam": {"rookies": [
            {"playerId": 50, "name": "Rookie Back", "position": "DEF",
             "sellPrice": 300_000},
        ]},
        "remainingSalary": 500_000,
        "currentRound": 6,
        "horizon": 1,
        "projections": {"1": {"6": 700_000}},
    }
    path = tmp_path / "request.json"
    path.write_text(json.dumps(body), encoding="utf-8")
    return path


def test_text_output(cli, request_file, capsys):
    assert cli.main([str(request_file)]) == 0
    out = capsys.readouterr().out
    assert "0/1 scheduled" in out
    assert "Round 6: $500k -> $500k" in out
    assert "Cash generation: need $200k" in out
    assert "sell Rookie Back ($300k)" in out


def test_json_output(cli, request_file, capsys):
    assert cli.main([str(request_file), "--json"]) == 0
    out = capsys.readouterr().out
    data = json.loads(out[out.index("{\n"):])
    assert data["unscheduledPlayerIds"] == [1]
    assert data["cashGenerationPlan"]["needed"] == 200_000


def test_horizon_override(cli, request_file, capsys):
    assert cli.main([str(request_file), "--horizon", "3", "--json"]) == 0
    out = capsys.readouterr().out
    data = json.loads(out[out.index("{\n"):])
    assert [rs["round"] for rs in data["schedule"]] == [6, 7, 8]


def test_invalid_request_exits_2(cli, tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"wishlist": [], "remainingSalary": -1,
                                "currentRound": 6}), encoding="utf-8")
    assert cli.main([str(path)]) == 2
    assert "Invalid request" in capsys.readouterr().err


@pytest.mark.parametrize("content", [
    "{not json",
    "[1, 2, 3]",
    '{"wishlist": [], "remainingSalary": 1, "currentRound": 6, "projections": [1]}',
])
def test_unreadable_request_exits_2(cli, tmp_path, capsys, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    assert cli.main([str(path)]) == 2
    assert capsys.readouterr().err


def test_missing_file_exits_2(cli, tmp_path, capsys):
    assert cli.main([str(tmp_path / "nope.json")]) == 2
    assert "Cannot read request file" in capsys.readouterr().err


def test_infinite_salary_exits_2(cli, request_file, capsys):
    raw = request_file.read_text(encoding="utf-8").replace("500000", "1e999")
    request_file.write_text(raw, encoding="utf-8")
    assert cli.main([str(request_file)]) == 2
    assert "remainingSalary" in capsys.readouterr().err
